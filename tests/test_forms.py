"""Tests for trellis.http.forms — write-flow body decoding."""

import json

import pytest

from trellis.http.forms import decode_form_body

BOUNDARY = "----trellisboundary"
MULTIPART = f"multipart/form-data; boundary={BOUNDARY}"


def _multipart(*parts: str) -> bytes:
    body = "".join(f"--{BOUNDARY}\r\n{part}\r\n" for part in parts)
    return (body + f"--{BOUNDARY}--\r\n").encode("utf-8")


class TestJSON:
    def test_object(self) -> None:
        body = json.dumps({"name": "Ada", "age": 36}).encode()
        assert decode_form_body(body, "application/json") == {"name": "Ada", "age": 36}

    def test_content_type_with_charset(self) -> None:
        assert decode_form_body(b'{"a": 1}', "application/json; charset=utf-8") == {"a": 1}

    @pytest.mark.parametrize("body", [b"[1, 2]", b'"text"', b"", b"{broken"])
    def test_non_object_or_malformed(self, body: bytes) -> None:
        assert decode_form_body(body, "application/json") == {}

    def test_deeply_nested_json_is_empty(self) -> None:
        body = b'{"a": ' + b"[" * 200_000 + b"]" * 200_000 + b"}"
        assert decode_form_body(body, "application/json") == {}


class TestURLEncoded:
    CT = "application/x-www-form-urlencoded"

    def test_pairs(self) -> None:
        assert decode_form_body(b"name=Ada&city=London", self.CT) == {"name": "Ada", "city": "London"}

    def test_last_value_wins(self) -> None:
        assert decode_form_body(b"tag=a&tag=b", self.CT) == {"tag": "b"}

    def test_percent_decoding_and_blank_values(self) -> None:
        assert decode_form_body(b"q=hello+world%21&empty=", self.CT) == {
            "q": "hello world!",
            "empty": "",
        }

    def test_invalid_utf8(self) -> None:
        assert decode_form_body(b"\xff\xfe=1", self.CT) == {}


class TestMultipart:
    def test_text_fields(self) -> None:
        body = _multipart(
            'Content-Disposition: form-data; name="name"\r\n\r\nAda',
            'Content-Disposition: form-data; name="city"\r\n\r\nLondon',
        )
        assert decode_form_body(body, MULTIPART) == {"name": "Ada", "city": "London"}

    def test_file_field_keeps_metadata_only(self) -> None:
        body = _multipart(
            'Content-Disposition: form-data; name="title"\r\n\r\nReport',
            'Content-Disposition: form-data; name="doc"; filename="report.pdf"\r\n'
            "Content-Type: application/pdf\r\n\r\n%PDF-1.4 binary",
        )
        assert decode_form_body(body, MULTIPART) == {
            "title": "Report",
            "doc": {"filename": "report.pdf", "type": "application/pdf"},
        }

    def test_missing_boundary(self) -> None:
        assert decode_form_body(b"anything", "multipart/form-data") == {}


class TestUnsupported:
    @pytest.mark.parametrize("content_type", [None, "", "text/plain", "application/xml"])
    def test_returns_empty(self, content_type) -> None:
        assert decode_form_body(b"name=Ada", content_type) == {}
