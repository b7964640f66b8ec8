from __future__ import annotations
import datetime
import enum
import typing as t

from azfile.exc import AzFileError


class StorageError(AzFileError):
    """Error class specifically for storage errors."""

    def __init__(self, msg, code, is_recoverable: bool = False):
        super().__init__(msg, "STORAGE", code, is_recoverable=is_recoverable)


class ObjectNotExistError(StorageError):
    """The target directory or file does not exist on the share."""

    def __init__(self, msg, code: int = 2004, is_recoverable: bool = True):
        super().__init__(msg, code, is_recoverable)


class PermissionDeniedError(StorageError):

    def __init__(self, msg, code: int = 2003, is_recoverable: bool = False):
        super().__init__(msg, code, is_recoverable)


class ObjectExistsError(StorageError):

    def __init__(self, msg, code: int = 2005, is_recoverable: bool = False):
        super().__init__(msg, code, is_recoverable)


class ResourceReleaseError(StorageError):
    """Raised when a stream could not be released after a transfer."""

    def __init__(self, msg, code: int = 3000, is_recoverable: bool = False):
        super().__init__(msg, code, is_recoverable)


class ChecksumMismatchError(StorageError):

    def __init__(self, msg, code: int = 3001, is_recoverable: bool = True):
        super().__init__(msg, code, is_recoverable)


class ObjectMode(enum.Flag):
    """Structural and content flags of a storage object."""

    READ = enum.auto()
    DIR = enum.auto()

    def is_dir(self) -> bool:
        return bool(self & ObjectMode.DIR)

    def is_read(self) -> bool:
        return bool(self & ObjectMode.READ)


class ObjectSystemMetadata:
    """Backend-specific metadata that the share tracks for an object."""

    def __init__(self, server_encrypted: t.Optional[bool] = None):
        self.server_encrypted = server_encrypted

    def __eq__(self, other):
        if not isinstance(other, ObjectSystemMetadata):
            return NotImplemented
        return self.server_encrypted == other.server_encrypted

    def __repr__(self):
        return f"ObjectSystemMetadata(server_encrypted={self.server_encrypted!r})"


class StorageObject:
    """Uniform description of a directory or file on the share.

        Only the identity (id, path and mode) is guaranteed. Every metadata field
        defaults to None and is only set when the backend supplied a usable value,
        so None always means "not known" rather than an empty or zero value.

        Objects built by :meth:`identity` (e.g. from a declarative create) have
        ``populated`` set to False; objects built from fetched metadata via
        :meth:`with_metadata` have it set to True.
    """

    def __init__(self,
                 object_id: str,
                 path: str,
                 mode: ObjectMode,
                 populated: bool = False):
        self.id = object_id
        self.path = path
        self.mode = mode
        self.populated = populated
        self.content_length: t.Optional[int] = None
        self.last_modified: t.Optional[datetime.datetime] = None
        self.etag: t.Optional[str] = None
        self.content_type: t.Optional[str] = None
        self.content_md5: t.Optional[str] = None
        self.system_metadata: t.Optional[ObjectSystemMetadata] = None

    @classmethod
    def identity(cls, object_id: str, path: str, mode: ObjectMode) -> StorageObject:
        return cls(object_id, path, mode, populated=False)

    @classmethod
    def with_metadata(cls, object_id: str, path: str, mode: ObjectMode) -> StorageObject:
        return cls(object_id, path, mode, populated=True)

    def is_dir(self) -> bool:
        return self.mode.is_dir()

    @property
    def server_encrypted(self) -> t.Optional[bool]:
        if self.system_metadata is None:
            return None
        return self.system_metadata.server_encrypted

    def __repr__(self):
        return f"StorageObject(id={self.id!r}, path={self.path!r}, mode={self.mode!r}, populated={self.populated})"


class StorageMeta:
    """Describes the storage itself."""

    def __init__(self, name: str, work_dir: str):
        self.name = name
        self.work_dir = work_dir

    def __repr__(self):
        return f"StorageMeta(name={self.name!r}, work_dir={self.work_dir!r})"
