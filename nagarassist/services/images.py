from __future__ import annotations
import base64

CHAT_ATTACHMENT_MAX_BYTES = 5 * 1024 * 1024
PROFILE_IMAGE_MAX_BYTES = 2 * 1024 * 1024


class ImageRejected(ValueError):
    pass


def encode_image(data: bytes, content_type: str, max_bytes: int = CHAT_ATTACHMENT_MAX_BYTES) -> str:
    """Return ``data`` as a data URL after the type and size checks."""
    if not content_type or not content_type.startswith("image/"):
        raise ImageRejected("Please select an image file.")
    if len(data) > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise ImageRejected(f"File size should be less than {limit_mb}MB.")
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def decode_upload(data_b64: str, content_type: str, max_bytes: int = CHAT_ATTACHMENT_MAX_BYTES) -> str:
    """Validate a base64 upload as sent by API clients and re-encode it."""
    try:
        raw = base64.b64decode(data_b64, validate=True)
    except ValueError as e:
        raise ImageRejected("Attachment is not valid base64") from e
    return encode_image(raw, content_type, max_bytes)
