"""Shared fixtures: a small page tree with layouts and static files."""

from pathlib import Path

import pytest

from trellis.config import AppConfig

LAYOUT = "<html><head><title>{{ title }}</title></head><body>{{ body }}</body></html>"


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.fixture
def write():
    """Helper that writes a file below a root, creating parents."""
    return _write


@pytest.fixture
def site(tmp_path) -> Path:
    """A site root holding pages/, templates/ and static/."""
    _write(tmp_path, "templates/layouts/layout.html", LAYOUT)
    _write(tmp_path, "templates/partials/footer.html", "<footer>{{ site_name }}</footer>")
    _write(tmp_path, "static/css/site.css", "body { margin: 0; }")

    _write(tmp_path, "pages/index.html", "<h1>Welcome</h1>")
    _write(tmp_path, "pages/about/index.html", "<h1>{{ heading }}</h1>{% include 'footer.html' %}")
    _write(tmp_path, "pages/about/get.yaml", "heading: About us\nsite_name: Trellis\n")
    _write(tmp_path, "pages/users/[id]/index.html", "<p>User {{ params.id }} ({{ query.tab }})</p>")
    _write(tmp_path, "pages/users/[id]/get.yaml", "tab_default: none\n")
    _write(tmp_path, "pages/users/me/index.html", "<p>It's you</p>")
    _write(
        tmp_path,
        "pages/raw/index.html",
        "<!DOCTYPE html>\n<html><body>{{ not_rendered }}</body></html>",
    )
    _write(tmp_path, "pages/contact/index.html", "<form method=post></form>")
    _write(
        tmp_path,
        "pages/contact/post.yaml",
        "received: true\nfrom: '{{ formData.name }}'\n",
    )
    return tmp_path


@pytest.fixture
def config(site) -> AppConfig:
    return AppConfig(
        pages_dir=site / "pages",
        layout_dir=site / "templates" / "layouts",
        partial_dir=site / "templates" / "partials",
        static_dir=site / "static",
    )
