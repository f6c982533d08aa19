"""Tests for static file serving middleware."""

import pytest

from trellis.app import App
from trellis.middleware.static import StaticFiles
from trellis.testing import RecordingSink, TestClient


@pytest.fixture
def app(config) -> App:
    return App(config, log=RecordingSink())


class TestStaticFileServing:
    async def test_serves_file(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/css/site.css")
        assert response.status == 200
        assert "text/css" in response.content_type
        assert response.text == "body { margin: 0; }"
        assert ("cache-control", "public, max-age=3600") in response.headers

    async def test_missing_file(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/nope.js")
        assert response.status == 404
        assert response.text == "Static file not found"

    async def test_directory_is_not_served(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/css")
        assert response.status == 404

    async def test_traversal_refused(self, app, site) -> None:
        (site / "secret.txt").write_text("top secret")
        async with TestClient(app) as client:
            response = await client.get("/static/../secret.txt")
            encoded = await client.get("/static/%2e%2e/secret.txt")
        assert response.status == 404
        assert "top secret" not in response.text
        assert encoded.status == 404

    async def test_head_has_no_body(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.head("/static/css/site.css")
        assert response.status == 200
        assert response.body == b""

    async def test_post_falls_through_to_pages(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.post("/static/css/site.css", data={})
        assert response.text == "Page not found"

    async def test_prefix_must_be_followed_by_slash(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/staticky")
        assert response.text == "Page not found"


class TestStaticFilesUnit:
    def test_prefix_normalized(self, tmp_path) -> None:
        assert StaticFiles(tmp_path, prefix="assets/").prefix == "/assets"

    def test_matches(self, tmp_path) -> None:
        static = StaticFiles(tmp_path)
        assert static.matches("/static/a.css")
        assert not static.matches("/static")
        assert not static.matches("/other/a.css")
