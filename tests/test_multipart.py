"""
Unit tests for multipart form assembly.
"""

import io
from unittest.mock import patch

import pytest

from cloudinary_client import (
    Credentials,
    FileStream,
    MultipartForm,
    PartConstructionError,
    build_form_data,
    build_signature
)


class TestBuildFormData:
    """Test signed form construction."""

    TIMESTAMP = 1700000000000

    @pytest.fixture
    def credentials(self):
        return Credentials("demo", 123456, "abc")

    def test_field_order(self, credentials):
        """Test that scaffolding fields come first and caller fields follow sorted."""
        form = build_form_data(
            credentials,
            {"tags": "a,b", "public_id": "x", "resource_type": "image"},
            timestamp=self.TIMESTAMP,
        )

        assert form.field_names() == [
            "api_key", "timestamp", "resource_type", "signature", "public_id", "tags"
        ]

    def test_scaffolding_values(self, credentials):
        """Test api_key and timestamp values."""
        form = build_form_data(credentials, {}, timestamp=self.TIMESTAMP)

        assert form.get("api_key") == "123456"
        assert form.get("timestamp") == "1700000000000"
        assert form.get("resource_type") is None

    def test_signature_excludes_resource_type(self, credentials):
        """Test that resource_type travels unsigned."""
        form = build_form_data(
            credentials, {"public_id": "x", "resource_type": "image"}, timestamp=self.TIMESTAMP
        )

        assert form.get("signature") == "f94526a3b92d4bafb78a6e968901b03b365e606a"
        assert form.get("resource_type") == "image"

    def test_caller_params_not_mutated(self, credentials):
        """Test that the caller's mapping is left untouched."""
        params = {"public_id": "x", "resource_type": "image"}
        build_form_data(credentials, params, timestamp=self.TIMESTAMP)

        assert params == {"public_id": "x", "resource_type": "image"}

    def test_timestamp_shared_with_signature(self, credentials):
        """Test that the default timestamp is captured once for field and signature."""
        with patch("cloudinary_client.multipart.current_timestamp", side_effect=[1700000000000, 1800000000000]):
            form = build_form_data(credentials, {"public_id": "x"})

        timestamp = form.get("timestamp")
        assert timestamp == "1700000000000"
        assert form.get("signature") == build_signature({"public_id": "x"}, timestamp, "abc")

    def test_reserved_caller_fields_dropped(self, credentials):
        """Test that caller-supplied api_key or signature do not override scaffolding."""
        form = build_form_data(
            credentials, {"public_id": "x", "signature": "forged", "api_key": "999"},
            timestamp=self.TIMESTAMP,
        )

        assert form.field_names().count("signature") == 1
        assert form.field_names().count("api_key") == 1
        assert form.get("signature") == "f94526a3b92d4bafb78a6e968901b03b365e606a"
        assert form.get("api_key") == "123456"

    def test_secret_not_in_body(self, credentials):
        """Test that the secret is never sent."""
        credentials = Credentials("demo", 1, "very-secret-value")
        form = build_form_data(credentials, {"public_id": "x"}, timestamp=self.TIMESTAMP)

        assert b"very-secret-value" not in b"".join(form)

    def test_file_part(self, credentials):
        """Test that a file part is attached as 'file' with image/* content type."""
        stream = FileStream(io.BytesIO(b"\x89PNG data"), "photo.png")
        form = build_form_data(credentials, {}, timestamp=self.TIMESTAMP, file_part=stream)

        body = b"".join(form)

        assert b'Content-Disposition: form-data; name="file"; filename="photo.png"\r\n' in body
        assert b"Content-Type: image/*\r\n\r\n\x89PNG data\r\n" in body

    def test_consumed_stream_rejected(self, credentials):
        """Test that an already consumed stream cannot be attached."""
        stream = FileStream(io.BytesIO(b"data"), "photo.png")
        list(stream)

        with pytest.raises(PartConstructionError):
            build_form_data(credentials, {}, timestamp=self.TIMESTAMP, file_part=stream)


class TestMultipartForm:
    """Test multipart body encoding."""

    def test_content_type(self):
        """Test content type carries the boundary."""
        form = MultipartForm(boundary="xyz")

        assert form.content_type == "multipart/form-data; boundary=xyz"

    def test_random_boundary(self):
        """Test that each form gets its own boundary."""
        assert MultipartForm().boundary != MultipartForm().boundary

    def test_encode_fields(self):
        """Test encoding of text fields."""
        form = MultipartForm(boundary="xyz").text("a", "1").text("b", "two")

        assert b"".join(form) == (
            b'--xyz\r\nContent-Disposition: form-data; name="a"\r\n\r\n1\r\n'
            b'--xyz\r\nContent-Disposition: form-data; name="b"\r\n\r\ntwo\r\n'
            b'--xyz--\r\n'
        )

    def test_encode_file(self):
        """Test encoding of a file part after the text fields."""
        form = MultipartForm(boundary="xyz").text("a", "1")
        form.part("file", FileStream(io.BytesIO(b"abcdef"), "f.jpg", chunk_size=2))

        assert b"".join(form) == (
            b'--xyz\r\nContent-Disposition: form-data; name="a"\r\n\r\n1\r\n'
            b'--xyz\r\nContent-Disposition: form-data; name="file"; filename="f.jpg"\r\n'
            b'Content-Type: image/*\r\n\r\n'
            b'abcdef\r\n'
            b'--xyz--\r\n'
        )

    def test_file_streamed_in_chunks(self):
        """Test that file content is yielded chunk by chunk."""
        form = MultipartForm(boundary="xyz")
        form.part("file", FileStream(io.BytesIO(b"abcdef"), "f.jpg", chunk_size=2))

        chunks = list(form)

        assert b"ab" in chunks
        assert b"cd" in chunks
        assert b"ef" in chunks

    def test_second_file_part_rejected(self):
        """Test that only one file part is allowed."""
        form = MultipartForm()
        form.part("file", FileStream(io.BytesIO(b"a"), "a.jpg"))

        with pytest.raises(PartConstructionError):
            form.part("file", FileStream(io.BytesIO(b"b"), "b.jpg"))

    def test_non_stream_part_rejected(self):
        """Test that raw handles must be wrapped first."""
        with pytest.raises(PartConstructionError):
            MultipartForm().part("file", io.BytesIO(b"a"))

    def test_form_with_file_sent_once(self):
        """Test that a form carrying a file cannot be rendered twice."""
        form = MultipartForm()
        form.part("file", FileStream(io.BytesIO(b"a"), "a.jpg"))
        list(form)

        with pytest.raises(PartConstructionError):
            list(form)

    def test_filename_line_breaks_escaped(self):
        """Test that a filename cannot inject header lines."""
        form = MultipartForm(boundary="xyz")
        form.part("file", FileStream(io.BytesIO(b"a"), 'x.jpg\r\nContent-Type: text/html"'))

        body = b"".join(form)

        assert b'filename="x.jpg%0D%0AContent-Type: text/html%22"\r\n' in body
        assert b"\r\nContent-Type: text/html" not in body

    @pytest.mark.parametrize("name", ['a"b', "a\r\nX-Injected: 1", "a\nb", "a\rb"])
    def test_field_name_header_characters_rejected(self, name):
        """Test that field names with quotes or line breaks are rejected."""
        with pytest.raises(PartConstructionError):
            MultipartForm().text(name, "value")

    def test_part_name_header_characters_rejected(self):
        """Test that part names and content types are checked too."""
        with pytest.raises(PartConstructionError):
            MultipartForm().part('fi"le', FileStream(io.BytesIO(b"a"), "a.jpg"))

        with pytest.raises(PartConstructionError):
            MultipartForm().part("file", FileStream(io.BytesIO(b"a"), "a.jpg"), "image/*\r\nX: 1")

    def test_option_key_with_line_break_rejected(self):
        """Test that build_form_data rejects a caller key that would break the header."""
        with pytest.raises(PartConstructionError):
            build_form_data(
                Credentials("demo", 1, "abc"), {"context\r\nX-Injected": "1"}, timestamp=1
            )
