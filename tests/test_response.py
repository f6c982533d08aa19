"""Tests for trellis.http.response — Response and helpers."""

import datetime

from trellis.http.response import JSON, TEXT, Response, json_response, text_response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response("hi")
        assert response.status == 200
        assert "text/html" in response.content_type

    def test_chaining_returns_new_instances(self) -> None:
        base = Response("hi")
        changed = base.with_status(201).with_header("X-A", "1").with_headers({"X-B": "2"})
        assert base.status == 200
        assert base.headers == ()
        assert changed.status == 201
        assert changed.headers == (("X-A", "1"), ("X-B", "2"))

    def test_body_conversions(self) -> None:
        assert Response("é").body_bytes == "é".encode()
        assert Response(b"abc").text == "abc"


class TestHelpers:
    def test_text_response(self) -> None:
        response = text_response("Page not found", status=404)
        assert response.status == 404
        assert response.content_type == TEXT

    def test_json_response(self) -> None:
        response = json_response({"a": [1, 2]})
        assert response.content_type == JSON
        assert response.json() == {"a": [1, 2]}

    def test_json_stringifies_unknown_values(self) -> None:
        data = {"blob": b"raw", "day": datetime.date(2024, 1, 2), "tags": {"x"}}
        assert json_response(data).json() == {"blob": "raw", "day": "2024-01-02", "tags": ["x"]}
