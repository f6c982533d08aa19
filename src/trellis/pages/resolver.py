"""Path-to-page resolution for the pages/ directory.

Each directory under the page root is a route; it is a *page* when it
holds the content file (``index.html`` by default).  Directory names
wrapped in ``[brackets]`` are parameter segments: the URL segment they
match is captured under the bracketed name.

Resolution order:

1. Exact match — every segment is a literal directory and the last one
   holds a content file.  Exact matches always win, with no parameters.
2. Depth-first search — at each level, try the literal directory named
   like the segment, then every ``[param]`` directory in lexicographic
   order, binding the segment.  The first branch that ends on a page
   wins; dead ends backtrack.

Segments that could escape the root (``..``, ``.``, backslashes, NUL)
resolve to nothing, as do hidden (dot-prefixed) segments.  Every
candidate directory is checked to still lie inside the root after
symlink resolution.

Layout::

    pages/
      index.html            # /
      about/index.html      # /about
      users/
        [id]/
          index.html        # /users/42        -> {"id": "42"}
          get.yaml
          post.yaml
"""

import re
from pathlib import Path

from trellis.pages.types import PageMatch

# Regex matching [param] directory names
_PARAM_DIR_RE = re.compile(r"^\[([^\[\]]+)\]$")

def split_path(path: str) -> list[str] | None:
    """Split a URL path into segments, or ``None`` if it may not be resolved.

    Leading and trailing slashes are ignored and empty segments dropped,
    so ``"/users//42/"`` becomes ``["users", "42"]``.
    """
    segments = [segment for segment in path.strip("/").split("/") if segment]
    for segment in segments:
        if segment.startswith(".") or "\\" in segment or "\x00" in segment:
            return None
    return segments


class PathResolver:
    """Resolve URL paths to page directories.

    With ``cache=True`` directory listings and content-file checks are
    memoized for the resolver's lifetime.  Results are identical as long
    as the page tree does not change underneath it.

    Usage::

        resolver = PathResolver("pages")
        match = resolver.resolve("/users/42")
        if match is not None:
            match.params  # {"id": "42"}
    """

    __slots__ = ("_cache", "_children_cache", "_content_file", "_page_cache", "_root")

    def __init__(
        self,
        root: str | Path,
        *,
        content_file: str = "index.html",
        cache: bool = False,
    ) -> None:
        self._root = Path(root).resolve()
        self._content_file = content_file
        self._cache = cache
        self._children_cache: dict[Path, tuple[frozenset[str], tuple[tuple[str, str], ...]]] = {}
        self._page_cache: dict[Path, bool] = {}

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> PageMatch | None:
        """Resolve *path* to a page, or ``None`` when no page matches."""
        segments = split_path(path)
        if segments is None:
            return None

        exact = self._root.joinpath(*segments)
        if self._is_page(exact):
            return PageMatch(content_path=exact / self._content_file, params={})

        return self._search(self._root, segments, {})

    def _search(
        self,
        directory: Path,
        segments: list[str],
        params: dict[str, str],
    ) -> PageMatch | None:
        """Depth-first search below *directory*, binding parameters on the way."""
        if not segments:
            if self._is_page(directory):
                return PageMatch(content_path=directory / self._content_file, params=params)
            return None

        segment, remaining = segments[0], segments[1:]
        literals, param_dirs = self._children(directory)

        if segment in literals:
            found = self._search(directory / segment, remaining, params)
            if found is not None:
                return found

        for dir_name, param_name in param_dirs:
            found = self._search(directory / dir_name, remaining, {**params, param_name: segment})
            if found is not None:
                return found

        return None

    def _children(
        self, directory: Path
    ) -> tuple[frozenset[str], tuple[tuple[str, str], ...]]:
        """Literal subdirectory names and ``(dir_name, param_name)`` pairs.

        Hidden directories are skipped.  Parameter directories come back
        sorted by directory name so ties resolve the same way everywhere.
        """
        if self._cache and directory in self._children_cache:
            return self._children_cache[directory]

        literals: set[str] = set()
        params: list[tuple[str, str]] = []
        if self._within_root(directory):
            try:
                entries = sorted(directory.iterdir())
            except OSError:
                entries = []
            for item in entries:
                if item.name.startswith(".") or not item.is_dir():
                    continue
                literals.add(item.name)
                param_match = _PARAM_DIR_RE.match(item.name)
                if param_match:
                    params.append((item.name, param_match.group(1)))

        result = (frozenset(literals), tuple(params))
        if self._cache:
            self._children_cache[directory] = result
        return result

    def _is_page(self, directory: Path) -> bool:
        if self._cache and directory in self._page_cache:
            return self._page_cache[directory]
        result = self._within_root(directory) and (directory / self._content_file).is_file()
        # Only existing directories are remembered, so misses cannot grow the cache.
        if self._cache and (result or directory.is_dir()):
            self._page_cache[directory] = result
        return result

    def _within_root(self, directory: Path) -> bool:
        try:
            return directory.resolve().is_relative_to(self._root)
        except OSError:
            return False
