"""Tests for image attachment ingestion."""
import base64

import pytest

from nagarassist.services.images import (
    CHAT_ATTACHMENT_MAX_BYTES,
    PROFILE_IMAGE_MAX_BYTES,
    ImageRejected,
    decode_upload,
    encode_image,
)


def test_encode_image_returns_data_url():
    assert encode_image(b"abc", "image/png") == "data:image/png;base64,YWJj"


def test_non_image_is_rejected():
    with pytest.raises(ImageRejected):
        encode_image(b"%PDF", "application/pdf")


def test_size_ceilings():
    encode_image(b"x" * CHAT_ATTACHMENT_MAX_BYTES, "image/jpeg")
    with pytest.raises(ImageRejected, match="5MB"):
        encode_image(b"x" * (CHAT_ATTACHMENT_MAX_BYTES + 1), "image/jpeg")
    with pytest.raises(ImageRejected, match="2MB"):
        encode_image(b"x" * (PROFILE_IMAGE_MAX_BYTES + 1), "image/jpeg", PROFILE_IMAGE_MAX_BYTES)


def test_decode_upload():
    payload = base64.b64encode(b"abc").decode("ascii")
    assert decode_upload(payload, "image/gif") == "data:image/gif;base64,YWJj"
    with pytest.raises(ImageRejected):
        decode_upload("not base64!!", "image/gif")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
