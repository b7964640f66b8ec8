from __future__ import annotations
import base64
import binascii
import typing as t

import zrlog

from azfile.exc import InvalidInputError
from azfile.util import HaltFlag, Readable, Writable
from .backend import ShareBackend, split_prefix
from .base import StorageObject, StorageMeta, ObjectMode, ObjectNotExistError, ObjectExistsError
from .iowrap import CallbackReader, HaltableReader, LimitedReader, IoCallback
from .iterator import ObjectIterator, ObjectPage, PageStatus, DEFAULT_PAGE_SIZE
from .mapper import format_object, ObjectKind
from .paths import PathResolver


class AzureFileStorage:
    """Object-style access to the directories and files of an Azure file share.

        Paths given to each operation are relative to the working directory. The
        ``object_mode`` hint selects between the directory and file variant of
        stat() and delete(); without it the path is treated as a file.
    """

    def __init__(self, backend: ShareBackend, work_dir: str = "/", halt_flag: t.Optional[HaltFlag] = None):
        self._backend = backend
        self._resolver = PathResolver(work_dir)
        self._halt_flag = halt_flag
        self._log = zrlog.get_logger("azfile.storage")

    def __str__(self):
        return f"AzureFileStorage {{Name: {self._backend.share_name}, WorkDir: {self._resolver.work_dir}}}"

    @property
    def work_dir(self) -> str:
        return self._resolver.work_dir

    def metadata(self) -> StorageMeta:
        return StorageMeta(self._backend.share_name, self._resolver.work_dir)

    def create(self, path: str, object_mode: t.Optional[ObjectMode] = None) -> StorageObject:
        """Describe an object without touching the share."""
        mode = ObjectMode.DIR if _is_dir(object_mode) else ObjectMode.READ
        return StorageObject.identity(self._resolver.abs_path(path), path, mode)

    def create_dir(self, path: str) -> StorageObject:
        """Make sure a directory exists.

            If the directory is already present, its metadata is returned instead
            of an error.
        """
        rp = self._resolver.abs_path(path)
        try:
            properties = self._backend.get_directory_properties(rp)
        except ObjectNotExistError:
            self._log.debug(f"Directory [{rp}] not found, creating it")
            try:
                self._backend.create_directory(rp)
                return StorageObject.identity(rp, path, ObjectMode.DIR)
            except ObjectExistsError:
                self._log.debug(f"Directory [{rp}] was created concurrently")
            properties = self._backend.get_directory_properties(rp)
        obj = StorageObject.with_metadata(rp, path, ObjectMode.DIR)
        obj.last_modified = properties.last_modified
        return obj

    def delete(self, path: str, object_mode: t.Optional[ObjectMode] = None):
        """Remove a directory or file; removing something that is already gone succeeds."""
        rp = self._resolver.abs_path(path)
        try:
            if _is_dir(object_mode):
                self._backend.delete_directory(rp)
            else:
                self._backend.delete_file(rp)
        except ObjectNotExistError:
            self._log.debug(f"[{rp}] already absent, nothing to delete")

    def stat(self, path: str, object_mode: t.Optional[ObjectMode] = None) -> StorageObject:
        rp = self._resolver.abs_path(path)
        if _is_dir(object_mode):
            return format_object(ObjectKind.DIRECTORY, self._backend.get_directory_properties(rp), rp, path)
        return format_object(ObjectKind.FILE, self._backend.get_file_properties(rp), rp, path)

    def list(self, path: str, halt_flag: t.Optional[HaltFlag] = None) -> ObjectIterator:
        """Lazily list the entries under ``path``.

            Nothing is fetched until the iterator is consumed. Within each page,
            directories are returned before files.
        """
        status = PageStatus(self._resolver.abs_path(path), max_results=DEFAULT_PAGE_SIZE)
        return ObjectIterator(self._next_object_page, status, halt_flag or self._halt_flag)

    def _next_object_page(self, page: ObjectPage):
        status = page.status
        segment = self._backend.list_segment(status.prefix, status.marker, status.max_results)
        directory, _ = split_prefix(status.prefix)
        for item in segment.directory_items:
            page.data.append(self._format_listed(ObjectKind.DIRECTORY, directory, item))
        for item in segment.file_items:
            page.data.append(self._format_listed(ObjectKind.FILE, directory, item))
        if not segment.not_done():
            page.done = True
            return
        status.marker = segment.next_marker

    def _format_listed(self, kind: ObjectKind, directory: str, item) -> StorageObject:
        rp = f"{directory}/{item.name}" if directory else item.name
        return format_object(kind, item, rp, self._resolver.rel_path(rp))

    def read(self,
             path: str,
             writer: Writable,
             offset: t.Optional[int] = None,
             size: t.Optional[int] = None,
             io_callback: t.Optional[IoCallback] = None,
             halt_flag: t.Optional[HaltFlag] = None) -> int:
        """Copy the range [offset, offset + size) of a file into ``writer``.

            The whole file is read when no range is given. Returns the number of
            bytes written.
        """
        rp = self._resolver.abs_path(path)
        if (offset is not None and offset < 0) or (size is not None and size < 0):
            raise InvalidInputError(f"Invalid range for [{rp}]: offset={offset}, size={size}", 1001)
        if size == 0:
            return 0
        halt_flag = halt_flag or self._halt_flag
        stream = self._backend.download(rp, offset or 0, size)
        written = 0
        try:
            for chunk in HaltFlag.iterate(stream.chunks(), halt_flag):
                writer.write(chunk)
                written += len(chunk)
                if io_callback is not None:
                    io_callback(len(chunk))
        finally:
            stream.close()
        self._log.debug(f"Read {written} bytes from [{rp}]")
        return written

    def write(self,
              path: str,
              reader: Readable,
              size: int,
              content_type: t.Optional[str] = None,
              content_md5: t.Optional[str] = None,
              io_callback: t.Optional[IoCallback] = None,
              halt_flag: t.Optional[HaltFlag] = None) -> int:
        """Replace the file at ``path`` with ``size`` bytes from ``reader``.

            The file is first created at its final size, then its content is
            uploaded as a single range. A supplied MD5 is sent along with the range
            and the service rejects content that does not match it. If the upload
            fails the file is left in place with its initial (empty) content; it
            is not removed. An empty file is created without any upload.
        """
        rp = self._resolver.abs_path(path)
        expected_md5 = _decode_md5(content_md5) if content_md5 is not None else None
        halt_flag = halt_flag or self._halt_flag
        body = reader
        if halt_flag is not None:
            body = HaltableReader(body, halt_flag)
        if io_callback is not None:
            body = CallbackReader(body, io_callback)
        self._backend.create_file(rp, size, content_type)
        if size == 0:
            self._log.debug(f"Created empty file [{rp}]")
            return 0
        try:
            self._backend.upload_range(rp, LimitedReader(body, size), offset=0, length=size, content_md5=expected_md5)
        except BaseException:
            self._log.warning(f"Upload to [{rp}] failed after the file was initialized, content may be incomplete")
            raise
        self._log.debug(f"Wrote {size} bytes to [{rp}]")
        return size


def _is_dir(object_mode: t.Optional[ObjectMode]) -> bool:
    return object_mode is not None and object_mode.is_dir()


def _decode_md5(content_md5: str) -> bytes:
    try:
        return base64.b64decode(content_md5, validate=True)
    except (binascii.Error, ValueError) as ex:
        raise InvalidInputError(f"Content MD5 [{content_md5}] is not valid base64", 1000) from ex
