"""Async page discovery and file loading.

Wraps the synchronous :class:`PathResolver` in a worker thread and reads
content and config documents through ``anyio.Path`` so a request task
only suspends, never blocks, on the filesystem.
"""

from dataclasses import dataclass
from pathlib import Path

import anyio
import anyio.to_thread

from trellis.log import LogSink
from trellis.pages.resolver import PathResolver
from trellis.pages.types import PageMatch


@dataclass(frozen=True, slots=True)
class PageSource:
    """A resolved page with its content body and optional read-config text."""

    match: PageMatch
    content: str
    read_config: str | None


class PageLoader:
    """Find pages and load the files that belong to them.

    Args:
        resolver: Path resolver over the page root.
        read_config_file: File name of the read-config document.
        write_config_file: File name of the write-config document.
        log: Sink for resolution and loading decisions.
    """

    __slots__ = ("_log", "_read_config_file", "_resolver", "_write_config_file")

    def __init__(
        self,
        resolver: PathResolver,
        *,
        read_config_file: str = "get.yaml",
        write_config_file: str = "post.yaml",
        log: LogSink,
    ) -> None:
        self._resolver = resolver
        self._read_config_file = read_config_file
        self._write_config_file = write_config_file
        self._log = log

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    async def find(self, path: str) -> PageMatch | None:
        """Resolve *path*, logging the outcome."""
        self._log("info", f"Fetching page for path: {path}", {"path": path})
        match = await anyio.to_thread.run_sync(self._resolver.resolve, path)
        if match is None:
            self._log("warn", f"Page not found for path: {path}", {"path": path})
            return None
        self._log(
            "info",
            "Found page with parameters",
            {"pagePath": str(match.content_path), "params": match.params},
        )
        return match

    async def load(self, match: PageMatch) -> PageSource:
        """Read the content body and the read-config document, if any.

        Raises:
            OSError: If the content file cannot be read.
        """
        content = await anyio.Path(match.content_path).read_text(encoding="utf-8")
        self._log("info", "Loaded page content", {"contentLength": len(content)})

        config_path = match.directory / self._read_config_file
        read_config = await _read_optional(config_path)
        if read_config is None:
            self._log("info", "No YAML data found", {})
        else:
            self._log("info", "Found YAML data", {"yamlPath": str(config_path)})
        return PageSource(match=match, content=content, read_config=read_config)

    async def write_allowed(self, match: PageMatch) -> bool:
        """A page accepts writes only if its own directory holds a write-config."""
        return await anyio.Path(match.directory / self._write_config_file).is_file()

    async def load_write_config(self, match: PageMatch) -> str | None:
        """Read the write-config document, or ``None`` if it cannot be read."""
        return await _read_optional(match.directory / self._write_config_file)


async def _read_optional(path: Path) -> str | None:
    try:
        return await anyio.Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
