import datetime
import hashlib
import types
import typing as t

from azfile.storage.backend import DownloadStream, ListSegment, split_prefix
from azfile.storage.base import ObjectNotExistError, ChecksumMismatchError


def utc(*args) -> datetime.datetime:
    return datetime.datetime(*args, tzinfo=datetime.timezone.utc)


def dir_properties(name: str = "", last_modified=None, etag=None, server_encrypted=None):
    return types.SimpleNamespace(
        name=name,
        is_directory=True,
        last_modified=last_modified,
        etag=etag,
        server_encrypted=server_encrypted,
    )


def file_properties(name: str = "", size: int = 0, last_modified=None, etag=None, server_encrypted=None,
                    content_type=None, content_md5=None):
    return types.SimpleNamespace(
        name=name,
        is_directory=False,
        size=size,
        last_modified=last_modified,
        etag=etag,
        server_encrypted=server_encrypted,
        content_settings=types.SimpleNamespace(content_type=content_type, content_md5=content_md5),
    )


class FakeDownloader:

    def __init__(self, data: bytes, chunk_size: int):
        self._data = data
        self._chunk_size = chunk_size
        self.size = len(data)

    def chunks(self):
        for i in range(0, len(self._data), self._chunk_size):
            yield self._data[i:i + self._chunk_size]


class FakeShareBackend:
    """In-memory share with the same interface as ShareBackend."""

    def __init__(self, page_size: t.Optional[int] = None, chunk_size: int = 4):
        self.share_name = "testshare"
        self.directories: dict[str, types.SimpleNamespace] = {"": dir_properties()}
        self.files: dict[str, bytes] = {}
        self.file_props: dict[str, types.SimpleNamespace] = {}
        self.calls: list[tuple] = []
        self.page_size = page_size
        self.chunk_size = chunk_size
        self.list_error: t.Optional[Exception] = None
        self.upload_error: t.Optional[Exception] = None
        self.upload_md5s: list = []
        self._clock = 0

    def _now(self):
        self._clock += 1
        return utc(2024, 1, 1, 0, 0, self._clock)

    def _parent(self, path: str) -> str:
        return path.rpartition("/")[0]

    def add_directory(self, path: str, **kwargs):
        kwargs.setdefault("last_modified", self._now())
        self.directories[path] = dir_properties(path.rpartition("/")[2], **kwargs)

    def add_file(self, path: str, data: bytes = b"", **kwargs):
        kwargs.setdefault("last_modified", self._now())
        self.files[path] = data
        self.file_props[path] = file_properties(path.rpartition("/")[2], size=len(data), **kwargs)

    def get_directory_properties(self, path: str):
        self.calls.append(("get_directory_properties", path))
        if path not in self.directories:
            raise ObjectNotExistError(f"Directory [{path}] not found")
        return self.directories[path]

    def get_file_properties(self, path: str):
        self.calls.append(("get_file_properties", path))
        if path not in self.file_props:
            raise ObjectNotExistError(f"File [{path}] not found")
        return self.file_props[path]

    def create_directory(self, path: str):
        self.calls.append(("create_directory", path))
        self.add_directory(path, etag='"0x1"')

    def create_file(self, path: str, size: int, content_type: t.Optional[str] = None):
        self.calls.append(("create_file", path, size, content_type))
        if self._parent(path) not in self.directories:
            raise ObjectNotExistError(f"Parent of [{path}] not found")
        self.add_file(path, b"\x00" * size, content_type=content_type)

    def delete_directory(self, path: str):
        self.calls.append(("delete_directory", path))
        if path not in self.directories:
            raise ObjectNotExistError(f"Directory [{path}] not found")
        del self.directories[path]

    def delete_file(self, path: str):
        self.calls.append(("delete_file", path))
        if path not in self.files:
            raise ObjectNotExistError(f"File [{path}] not found")
        del self.files[path]
        del self.file_props[path]

    def download(self, path: str, offset: int = 0, length: t.Optional[int] = None) -> DownloadStream:
        self.calls.append(("download", path, offset, length))
        if path not in self.files:
            raise ObjectNotExistError(f"File [{path}] not found")
        data = self.files[path]
        end = len(data) if length is None else offset + length
        return DownloadStream(FakeDownloader(data[offset:end], self.chunk_size), end - offset)

    def upload_range(self, path: str, body, offset: int, length: int, content_md5: t.Optional[bytes] = None):
        self.calls.append(("upload_range", path, offset, length))
        self.upload_md5s.append(content_md5)
        if self.upload_error is not None:
            raise self.upload_error
        data = bytearray(self.files[path])
        content = b""
        chunk = body.read(3)
        while chunk:
            content += chunk
            chunk = body.read(3)
        if content_md5 is not None and hashlib.md5(content).digest() != content_md5:
            raise ChecksumMismatchError(f"Content of [{path}] does not match the supplied MD5 checksum")
        data[offset:offset + len(content)] = content
        self.files[path] = bytes(data)

    def list_segment(self, prefix: str, marker: t.Optional[str], max_results: int) -> ListSegment:
        self.calls.append(("list_segment", prefix, marker, max_results))
        if self.list_error is not None:
            raise self.list_error
        directory, name_prefix = split_prefix(prefix)
        if directory not in self.directories:
            raise ObjectNotExistError(f"Directory [{directory}] not found")
        entries = []
        for path, props in self.directories.items():
            if path and self._parent(path) == directory and props.name.startswith(name_prefix):
                entries.append((props.name, props))
        for path, props in self.file_props.items():
            if self._parent(path) == directory and props.name.startswith(name_prefix):
                entries.append((props.name, props))
        entries.sort(key=lambda x: x[0])
        page_size = self.page_size or max_results
        start = int(marker) if marker else 0
        page = entries[start:start + page_size]
        next_start = start + page_size
        return ListSegment(
            [p for _, p in page if p.is_directory],
            [p for _, p in page if not p.is_directory],
            str(next_start) if next_start < len(entries) else None
        )
