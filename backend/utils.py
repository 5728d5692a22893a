import base64
import binascii
import time
import uuid
from typing import Optional

from .errors import InvalidImageError

DEFAULT_MIME_TYPE = "image/png"
DOWNLOAD_PREFIX = "styleshift-edit"

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
    "image/heif": "heif",
}


def encode(data: bytes, mime_type: str) -> str:
    """
    bytes -> "data:<mime>;base64,<body>"
    """
    body = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{body}"


def strip_encoding_prefix(data_url: str) -> str:
    """
    Everything after the first comma. No validation: input without a comma
    gives back an empty string.
    """
    return data_url.partition(",")[2]


def decode(base64_body: str, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """
    Wrap a bare base64 body (as returned by Gemini) back into a data URL.
    """
    return f"data:{mime_type};base64,{base64_body}"


def data_url_to_bytes(data_url: str) -> bytes:
    return base64.b64decode(strip_encoding_prefix(data_url))


def b64decode_upload(value: str) -> bytes:
    """
    Decode an uploaded image body. Accepts a bare base64 string or a data URL.
    """
    if value.startswith("data:"):
        value = strip_encoding_prefix(value)
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError(f"Image data is not valid base64: {e}") from e


def is_image_mime_type(mime_type: Optional[str]) -> bool:
    return bool(mime_type) and mime_type.strip().lower().startswith("image/")


def extension_for_mime_type(mime_type: str) -> str:
    mime = (mime_type or "").strip().lower()
    if mime in _EXTENSIONS:
        return _EXTENSIONS[mime]
    # image/bmp -> bmp, anything odder -> png
    if mime.startswith("image/") and mime[6:].isalnum():
        return mime[6:]
    return "png"


def download_filename(mime_type: str = DEFAULT_MIME_TYPE, timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = get_timestamp_ms()
    return f"{DOWNLOAD_PREFIX}-{timestamp_ms}.{extension_for_mime_type(mime_type)}"


def gen_session_id() -> str:
    return str(uuid.uuid4())


def get_timestamp_ms() -> int:
    return int(time.time() * 1000)
