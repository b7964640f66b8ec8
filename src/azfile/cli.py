import functools
import os
import signal

import click
import zrlog

from azfile.boot import init_azfile
from azfile.exc import AzFileError
from azfile.util import ThreadingHaltFlag
from azfile.storage import StorageController, ObjectMode


def _storage(work_dir=None):
    halt_flag = ThreadingHaltFlag()

    def _halt(sig_num, frame):
        zrlog.get_logger("azfile.cli").info(f"Signal {sig_num} caught, halting")
        halt_flag.halt()

    signal.signal(signal.SIGINT, _halt)
    return StorageController().get_storage(work_dir, halt_flag=halt_flag)


def _report_errors(cb):

    @functools.wraps(cb)
    def _inner(*args, **kwargs):
        try:
            return cb(*args, **kwargs)
        except AzFileError as ex:
            raise click.ClickException(f"{ex.__class__.__name__}: {str(ex)}") from ex

    return _inner


def _mode(is_dir: bool):
    return ObjectMode.DIR if is_dir else None


@click.group
@click.option("--work-dir", default=None, help="Working directory on the share")
@click.pass_context
def main(ctx, work_dir):
    init_azfile("cli")
    ctx.obj = {"work_dir": work_dir}


@main.command
@click.argument("path", default="")
@click.pass_context
@_report_errors
def ls(ctx, path):
    for obj in _storage(ctx.obj["work_dir"]).list(path):
        kind = "d" if obj.is_dir() else "-"
        size = "" if obj.content_length is None else str(obj.content_length)
        modified = "" if obj.last_modified is None else obj.last_modified.isoformat()
        click.echo(f"{kind} {size: >12} {modified: <25} {obj.path}")


@main.command
@click.argument("path")
@click.option("--dir", "is_dir", is_flag=True, default=False)
@click.pass_context
@_report_errors
def stat(ctx, path, is_dir):
    obj = _storage(ctx.obj["work_dir"]).stat(path, object_mode=_mode(is_dir))
    click.echo(f"id: {obj.id}")
    click.echo(f"mode: {'dir' if obj.is_dir() else 'file'}")
    for name in ("content_length", "last_modified", "etag", "content_type", "content_md5", "server_encrypted"):
        value = getattr(obj, name)
        if value is not None:
            click.echo(f"{name}: {value}")


@main.command
@click.argument("path")
@click.pass_context
@_report_errors
def mkdir(ctx, path):
    obj = _storage(ctx.obj["work_dir"]).create_dir(path)
    click.echo(f"{obj.id} {'exists' if obj.populated else 'created'}")


@main.command
@click.argument("path")
@click.option("--dir", "is_dir", is_flag=True, default=False)
@click.pass_context
@_report_errors
def rm(ctx, path, is_dir):
    _storage(ctx.obj["work_dir"]).delete(path, object_mode=_mode(is_dir))


@main.command
@click.argument("path")
@click.argument("target", type=click.File("wb"))
@click.option("--offset", default=None, type=int)
@click.option("--size", default=None, type=int)
@click.pass_context
@_report_errors
def get(ctx, path, target, offset, size):
    n = _storage(ctx.obj["work_dir"]).read(path, target, offset=offset, size=size)
    click.echo(f"{n} bytes read", err=True)


@main.command
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.argument("path")
@click.option("--content-type", default=None)
@click.option("--md5", "content_md5", default=None, help="Base64 MD5 of the content")
@click.pass_context
@_report_errors
def put(ctx, source, path, content_type, content_md5):
    size = os.path.getsize(source)
    with open(source, "rb") as src:
        n = _storage(ctx.obj["work_dir"]).write(path, src, size, content_type=content_type, content_md5=content_md5)
    click.echo(f"{n} bytes written", err=True)
