import base64
import enum
import typing as t

from azfile.util import parse_bool
from .base import StorageObject, ObjectMode, ObjectSystemMetadata


class ObjectKind(enum.Enum):

    DIRECTORY = "directory"
    FILE = "file"


def format_object(kind: ObjectKind, properties, object_id: str, path: str) -> StorageObject:
    """Build a populated StorageObject from directory or file properties.

        ``properties`` may be the result of a properties call or an item from a
        listing; listing items carry fewer fields, so every attribute is optional
        here. Fields the backend left empty stay None.
    """
    if kind == ObjectKind.DIRECTORY:
        obj = StorageObject.with_metadata(object_id, path, ObjectMode.DIR)
    else:
        obj = StorageObject.with_metadata(object_id, path, ObjectMode.READ)
        obj.content_length = getattr(properties, "size", None)
        content_settings = getattr(properties, "content_settings", None)
        if content_settings is not None:
            obj.content_type = content_settings.content_type or None
            obj.content_md5 = _encode_md5(content_settings.content_md5)
    obj.last_modified = getattr(properties, "last_modified", None)
    etag = getattr(properties, "etag", None)
    if etag:
        obj.etag = str(etag)
    obj.system_metadata = ObjectSystemMetadata(parse_bool(getattr(properties, "server_encrypted", None)))
    return obj


def _encode_md5(digest: t.Optional[t.Union[bytes, bytearray]]) -> t.Optional[str]:
    if not digest:
        return None
    return base64.b64encode(bytes(digest)).decode("ascii")
