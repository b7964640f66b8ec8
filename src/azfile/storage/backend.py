"""Thin adapter over the Azure Files SDK.

    ShareBackend narrows a ShareClient down to the handful of calls the storage
    layer needs, and converts every Azure error into a StorageError subclass so
    that callers never have to import azure.core to handle errors.
"""
from __future__ import annotations
import functools
import typing as t

import requests
import urllib3.exceptions
import azure.core.exceptions as ace
from azure.storage.fileshare import ShareClient, ContentSettings, DirectoryProperties, FileProperties
import zrlog

from .base import StorageError, ObjectNotExistError, PermissionDeniedError, ObjectExistsError, ResourceReleaseError, \
    ChecksumMismatchError


LIST_INCLUDE = ["timestamps", "Etag"]


def wrap_azure_errors(cb):

    @functools.wraps(cb)
    def _inner(*args, **kwargs):
        try:
            return cb(*args, **kwargs)
        except ace.ResourceNotFoundError as ex:
            raise ObjectNotExistError(f"Azure: Resource not found error: {ex.__class__.__name__}: {str(ex)}") from ex
        except ace.ClientAuthenticationError as ex:
            raise PermissionDeniedError(f"Azure: Client authentication error: {ex.__class__.__name__}: {str(ex)}") from ex
        except ace.ResourceExistsError as ex:
            raise ObjectExistsError(f"Azure: Resource already exists error: {ex.__class__.__name__}: {str(ex)}") from ex
        except ace.AzureError as ex:
            if getattr(ex, "error_code", None) == "Md5Mismatch":
                raise ChecksumMismatchError(f"Azure: Content MD5 mismatch: {ex.__class__.__name__}: {str(ex)}") from ex
            if ex.inner_exception is not None:
                if isinstance(ex.inner_exception, urllib3.exceptions.ConnectTimeoutError):
                    raise StorageError(f"Azure: Connection timeout error: {ex.__class__.__name__}: {str(ex)}", 2001, True) from ex
                elif isinstance(ex.inner_exception, requests.ConnectionError):
                    raise StorageError(f"Azure: Connection error: {ex.__class__.__name__}: {str(ex)}", 2002, True) from ex
            raise StorageError(f"Azure: {ex.__class__.__name__}: {str(ex)}", 2000) from ex

    return _inner


def split_prefix(prefix: str) -> tuple[str, str]:
    """Split a listing prefix into the directory to list and the name filter."""
    if prefix.endswith("/") or prefix == "":
        return prefix.strip("/"), ""
    directory, _, name_prefix = prefix.lstrip("/").rpartition("/")
    return directory, name_prefix


class ListSegment:
    """One page of a directory listing, split by item type."""

    def __init__(self,
                 directory_items: t.Optional[list] = None,
                 file_items: t.Optional[list] = None,
                 next_marker: t.Optional[str] = None):
        self.directory_items = directory_items or []
        self.file_items = file_items or []
        self.next_marker = next_marker or None

    def not_done(self) -> bool:
        return self.next_marker is not None


class DownloadStream:
    """Chunked body of a download that must be closed once consumed."""

    def __init__(self, downloader, length: t.Optional[int] = None):
        self._downloader = downloader
        self._chunks = self._iterate()
        self._closed = False
        self.length = length

    def _iterate(self) -> t.Iterator[bytes]:
        yield from self._downloader.chunks()

    def chunks(self) -> t.Iterator[bytes]:
        while True:
            try:
                chunk = self._next_chunk()
            except StopIteration:
                return
            yield chunk

    @wrap_azure_errors
    def _next_chunk(self) -> bytes:
        return next(self._chunks)

    def close(self):
        if self._closed:
            return
        self._closed = True
        try:
            self._chunks.close()
        except Exception as ex:
            raise ResourceReleaseError(f"Could not close download stream: {ex.__class__.__name__}: {str(ex)}") from ex
        finally:
            self._downloader = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class ShareBackend:
    """Directory and file operations against one Azure file share.

        All paths are absolute share paths without a leading slash; the empty
        string is the share root.
    """

    def __init__(self, share_client: ShareClient):
        self._share = share_client
        self._log = zrlog.get_logger("azfile.backend")

    @property
    def share_name(self) -> str:
        return self._share.share_name

    def _directory(self, path: str):
        return self._share.get_directory_client(path.strip("/"))

    def _file(self, path: str):
        return self._share.get_file_client(path.strip("/"))

    @wrap_azure_errors
    def get_directory_properties(self, path: str) -> DirectoryProperties:
        return self._directory(path).get_directory_properties()

    @wrap_azure_errors
    def get_file_properties(self, path: str) -> FileProperties:
        return self._file(path).get_file_properties()

    @wrap_azure_errors
    def create_directory(self, path: str):
        return self._directory(path).create_directory()

    @wrap_azure_errors
    def create_file(self, path: str, size: int, content_type: t.Optional[str] = None):
        kwargs = {}
        if content_type:
            kwargs["content_settings"] = ContentSettings(content_type=content_type)
        return self._file(path).create_file(size, **kwargs)

    @wrap_azure_errors
    def delete_directory(self, path: str):
        return self._directory(path).delete_directory()

    @wrap_azure_errors
    def delete_file(self, path: str):
        return self._file(path).delete_file()

    @wrap_azure_errors
    def download(self, path: str, offset: int = 0, length: t.Optional[int] = None) -> DownloadStream:
        downloader = self._file(path).download_file(offset=offset, length=length)
        return DownloadStream(downloader, getattr(downloader, "size", None))

    @wrap_azure_errors
    def upload_range(self, path: str, body, offset: int, length: int, content_md5: t.Optional[bytes] = None):
        kwargs = {}
        if content_md5 is not None:
            kwargs["content_md5"] = content_md5
        return self._file(path).upload_range(body, offset=offset, length=length, **kwargs)

    @wrap_azure_errors
    def list_segment(self, prefix: str, marker: t.Optional[str], max_results: int) -> ListSegment:
        """Fetch one page of the listing under ``prefix``.

            The prefix is split at its last slash: the part before is the directory
            to list and the part after filters entry names. ``a/b/`` lists all of
            ``a/b`` while ``a/b/c`` lists entries in ``a/b`` starting with ``c``.
        """
        directory, name_prefix = split_prefix(prefix)
        self._log.debug(f"Listing [{directory}] with name prefix [{name_prefix}] from marker [{marker}]")
        items = self._directory(directory).list_directories_and_files(
            name_starts_with=name_prefix or None,
            include=LIST_INCLUDE,
            results_per_page=max_results,
        )
        pages = items.by_page(continuation_token=marker)
        segment = ListSegment()
        try:
            page = next(pages)
        except StopIteration:
            return segment
        for item in page:
            if getattr(item, "is_directory", False):
                segment.directory_items.append(item)
            else:
                segment.file_items.append(item)
        segment.next_marker = pages.continuation_token or None
        return segment
