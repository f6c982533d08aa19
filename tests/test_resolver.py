"""Tests for trellis.pages.resolver — directory-to-page resolution."""

import pytest

from trellis.pages.resolver import PathResolver, split_path


def _page(root, *parts: str) -> None:
    directory = root.joinpath(*parts)
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "index.html").write_text(f"<p>{'/'.join(parts) or 'home'}</p>")


@pytest.fixture
def pages(tmp_path):
    root = tmp_path / "pages"
    root.mkdir()
    _page(root)
    _page(root, "about")
    _page(root, "[id]")
    _page(root, "users", "[id]")
    _page(root, "users", "me")
    _page(root, "test", "[id1]", "x", "[id2]")
    return root


# =============================================================================
# Path splitting
# =============================================================================


class TestSplitPath:
    def test_strips_slashes_and_empty_segments(self) -> None:
        assert split_path("/users//42/") == ["users", "42"]

    def test_root(self) -> None:
        assert split_path("/") == []
        assert split_path("") == []

    @pytest.mark.parametrize(
        "path", ["/../etc", "/a/./b", "/a\\b", "/a\x00b", "/.drafts", "/a/.git/b"]
    )
    def test_rejects_unsafe_segments(self, path: str) -> None:
        assert split_path(path) is None


# =============================================================================
# Resolution
# =============================================================================


class TestResolve:
    def test_root_page(self, pages) -> None:
        match = PathResolver(pages).resolve("/")
        assert match is not None
        assert match.content_path == pages.resolve() / "index.html"
        assert match.params == {}

    def test_literal_page(self, pages) -> None:
        match = PathResolver(pages).resolve("/about")
        assert match is not None
        assert match.content_path.parent.name == "about"
        assert match.params == {}

    def test_single_parameter(self, pages) -> None:
        match = PathResolver(pages).resolve("42")
        assert match is not None
        assert match.params == {"id": "42"}

    def test_nested_parameters(self, pages) -> None:
        match = PathResolver(pages).resolve("test/456/x/789")
        assert match is not None
        assert match.params == {"id1": "456", "id2": "789"}
        assert list(match.params) == ["id1", "id2"]

    def test_exact_match_wins_over_parameter(self, pages) -> None:
        match = PathResolver(pages).resolve("/users/me")
        assert match is not None
        assert match.content_path.parent.name == "me"
        assert match.params == {}

    def test_parameter_used_when_no_literal(self, pages) -> None:
        match = PathResolver(pages).resolve("/users/7")
        assert match is not None
        assert match.params == {"id": "7"}

    def test_not_found(self, pages) -> None:
        assert PathResolver(pages).resolve("/nope/deeper/still") is None

    def test_directory_without_content_file_is_not_a_page(self, pages) -> None:
        (pages / "empty").mkdir()
        # "empty" is literal but not a page; [id] catches it instead.
        match = PathResolver(pages).resolve("/empty")
        assert match is not None
        assert match.params == {"id": "empty"}

    def test_backtracks_from_literal_branch(self, tmp_path) -> None:
        root = tmp_path / "pages"
        (root / "a" / "b").mkdir(parents=True)  # literal branch dead-ends
        _page(root, "[x]", "b")
        match = PathResolver(root).resolve("/a/b")
        assert match is not None
        assert match.params == {"x": "a"}

    def test_lexicographic_tie_break(self, tmp_path) -> None:
        root = tmp_path / "pages"
        _page(root, "[zeta]")
        _page(root, "[alpha]")
        match = PathResolver(root).resolve("/value")
        assert match is not None
        assert match.params == {"alpha": "value"}

    def test_hidden_page_is_not_found(self, pages) -> None:
        _page(pages, ".drafts")
        _page(pages, ".drafts", "[id]")
        resolver = PathResolver(pages)
        assert resolver.resolve("/.drafts") is None
        assert resolver.resolve("/.drafts/42") is None

    def test_parent_reference_is_not_found(self, pages) -> None:
        assert PathResolver(pages / "users").resolve("/../about") is None

    def test_symlink_outside_root_is_not_found(self, tmp_path, pages) -> None:
        outside = tmp_path / "outside"
        _page(outside)
        (pages / "escape").symlink_to(outside, target_is_directory=True)
        match = PathResolver(pages).resolve("/escape")
        # The symlinked directory is rejected; the [id] page catches the segment.
        assert match is not None
        assert match.params == {"id": "escape"}

    def test_custom_content_file(self, tmp_path) -> None:
        root = tmp_path / "pages"
        (root / "docs").mkdir(parents=True)
        (root / "docs" / "page.html").write_text("docs")
        assert PathResolver(root).resolve("/docs") is None
        assert PathResolver(root, content_file="page.html").resolve("/docs") is not None


class TestIdempotence:
    @pytest.mark.parametrize("cache", [False, True])
    def test_same_path_twice(self, pages, cache: bool) -> None:
        resolver = PathResolver(pages, cache=cache)
        first = resolver.resolve("/test/1/x/2")
        second = resolver.resolve("/test/1/x/2")
        assert first is not None
        assert first == second

    def test_cache_keeps_listing(self, pages) -> None:
        resolver = PathResolver(pages, cache=True)
        assert resolver.resolve("/users/9") is not None
        _page(pages, "users", "9")
        # Listing and page checks are memoized; the new literal page is not seen.
        assert resolver.resolve("/users/9").params == {"id": "9"}
        assert PathResolver(pages).resolve("/users/9").params == {}

    def test_cache_stays_bounded_on_misses(self, pages) -> None:
        resolver = PathResolver(pages, cache=True)
        for i in range(5000):
            resolver.resolve(f"/users/7/nope-{i}")
            resolver.resolve(f"/nope-{i}/deeper")
        # Only directories that exist in the tree are remembered.
        assert len(resolver._page_cache) < 20
        assert len(resolver._children_cache) < 20
