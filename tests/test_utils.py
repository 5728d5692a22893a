import base64

import pytest

from backend.errors import InvalidImageError
from backend.utils import (
    b64decode_upload,
    data_url_to_bytes,
    decode,
    download_filename,
    encode,
    extension_for_mime_type,
    is_image_mime_type,
    strip_encoding_prefix,
)


class TestCodec:

    @pytest.mark.parametrize("data", [b"", b"\x00\x01\x02", b"\x89PNG\r\n\x1a\n" * 50])
    def test_strip_recovers_base64_of_encoded_bytes(self, data):
        assert strip_encoding_prefix(encode(data, "image/png")) == base64.b64encode(data).decode()

    def test_encode_embeds_mime_type(self):
        assert encode(b"abc", "image/jpeg") == "data:image/jpeg;base64,YWJj"

    def test_strip_splits_on_first_comma_only(self):
        assert strip_encoding_prefix("data:image/png;base64,AAA,BBB") == "AAA,BBB"

    def test_strip_without_comma_is_empty(self):
        assert strip_encoding_prefix("not-a-data-url") == ""

    def test_decode_defaults_to_png(self):
        assert decode("YWJj") == "data:image/png;base64,YWJj"
        assert decode("YWJj", "image/webp") == "data:image/webp;base64,YWJj"

    def test_data_url_to_bytes(self):
        assert data_url_to_bytes(encode(b"hello", "image/gif")) == b"hello"


class TestUploadDecoding:

    def test_accepts_bare_base64(self):
        assert b64decode_upload("YWJj") == b"abc"

    def test_accepts_data_url(self):
        assert b64decode_upload("data:image/png;base64,YWJj") == b"abc"

    def test_rejects_garbage(self):
        with pytest.raises(InvalidImageError):
            b64decode_upload("not base64!!")


class TestMimeHelpers:

    @pytest.mark.parametrize("mime", ["image/png", "image/jpeg", "IMAGE/WEBP", "image/heic"])
    def test_image_mime_types(self, mime):
        assert is_image_mime_type(mime)

    @pytest.mark.parametrize("mime", ["", None, "text/plain", "application/pdf", "video/mp4", "imagepng"])
    def test_non_image_mime_types(self, mime):
        assert not is_image_mime_type(mime)

    def test_extensions(self):
        assert extension_for_mime_type("image/jpeg") == "jpg"
        assert extension_for_mime_type("image/bmp") == "bmp"
        assert extension_for_mime_type("image/svg+xml") == "png"
        assert extension_for_mime_type("") == "png"

    def test_download_filename(self):
        assert download_filename("image/png", 1700000000000) == "styleshift-edit-1700000000000.png"
        assert download_filename("image/webp", 42) == "styleshift-edit-42.webp"

    def test_download_filename_uses_current_time(self):
        name = download_filename()
        assert name.startswith("styleshift-edit-")
        assert name.endswith(".png")
        assert name[len("styleshift-edit-"):-4].isdigit()
