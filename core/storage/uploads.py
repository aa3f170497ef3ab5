"""
Image Uploads - Base64 Data URL Passthrough to Object Storage

The dashboard posts images as base64 data URLs. They are decoded, given a
unique name under ``properties/`` and stored unchanged.
"""

from __future__ import annotations

import base64
import binascii
import re
import secrets
import string
import time
from typing import Final, Optional

from core.storage.base import ObjectStorage


# Maximum decoded size (10MB)
MAX_UPLOAD_BYTES: Final[int] = 10 * 1024 * 1024

UPLOAD_PREFIX: Final[str] = "properties"

CONTENT_TYPES: Final[dict[str, str]] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
}
DEFAULT_EXTENSION: Final[str] = "jpg"
DEFAULT_CONTENT_TYPE: Final[str] = "image/jpeg"

_DATA_URL_PREFIX: Final = re.compile(r"^data:image/\w+;base64,")
_SUFFIX_ALPHABET: Final[str] = string.ascii_lowercase + string.digits


class UploadError(ValueError):
    """The upload body cannot be stored."""


def file_extension(file_name: str) -> str:
    """Lowercased extension, ``jpg`` when there is none."""
    if "." not in file_name:
        return DEFAULT_EXTENSION
    ext = file_name.rsplit(".", 1)[-1].lower()
    return ext if ext.isalnum() else DEFAULT_EXTENSION


def content_type_for(file_name: str) -> str:
    return CONTENT_TYPES.get(file_extension(file_name), DEFAULT_CONTENT_TYPE)


def decode_data_url(data: str) -> bytes:
    """
    Decode a base64 image, with or without its ``data:image/...`` prefix.

    Raises:
        UploadError: If the payload is not valid base64, empty, or too large
    """
    encoded = _DATA_URL_PREFIX.sub("", data.strip(), count=1)
    try:
        content = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UploadError(f"Invalid base64 image data: {e}") from e

    if not content:
        raise UploadError("Image data is empty")
    if len(content) > MAX_UPLOAD_BYTES:
        raise UploadError(f"Image exceeds {MAX_UPLOAD_BYTES} bytes")
    return content


def build_object_path(file_name: str, now_ms: Optional[int] = None) -> str:
    """``properties/<epoch ms>-<6 random chars>.<ext>``"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"{UPLOAD_PREFIX}/{now_ms}-{suffix}.{file_extension(file_name)}"


def store_image(storage: ObjectStorage, data: str, file_name: str) -> str:
    """
    Decode and store an uploaded image.

    Returns:
        Public URL of the stored object

    Raises:
        UploadError: On an unusable payload
        StoreError: If the storage backend fails
    """
    content = decode_data_url(data)
    path = build_object_path(file_name)
    storage.upload(path, content, content_type_for(file_name))
    return storage.public_url(path)
