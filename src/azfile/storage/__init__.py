"""
    Object-style access to an Azure Files share.

    Directories and files on the share are both exposed as StorageObject
    instances, with the same set of verbs regardless of which one they are:
    create, create_dir, stat, read, write, delete and list. Callers that have
    a configuration file should use the StorageController to obtain an
    AzureFileStorage; tests and embedders can build one directly from a
    ShareBackend.

    A few conventions to keep in mind:

    - Paths are relative to the configured working directory and never need a
      leading slash. When listing, a trailing slash lists the contents of that
      directory while a path without one lists the entries whose name starts
      with the last path component.

    - Azure Files keeps directories and files in separate namespaces of
      operations, so stat() and delete() need to be told when the target is a
      directory (object_mode=ObjectMode.DIR). Otherwise the path is assumed to
      be a file.

    - delete() and create_dir() are idempotent: deleting something that is
      missing and creating a directory that exists both succeed. stat() and
      read() raise ObjectNotExistError for missing targets.
"""
from .core import StorageController
from .azure_files import AzureFileStorage
from .backend import ShareBackend
from .base import (
    StorageError,
    ObjectNotExistError,
    PermissionDeniedError,
    ObjectExistsError,
    ResourceReleaseError,
    ChecksumMismatchError,
    ObjectMode,
    ObjectSystemMetadata,
    StorageObject,
    StorageMeta,
)
from .iterator import ObjectIterator
