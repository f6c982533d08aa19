"""Static file serving middleware.

Serves files from a directory for URLs under a prefix (``/static`` by
default).  A miss under the prefix is answered with 404 here; it never
falls through to page resolution.  Paths outside the prefix, and writes,
go to the next handler.
"""

import mimetypes
from pathlib import Path

import anyio

from trellis.http.request import Request
from trellis.http.response import Response, text_response
from trellis.middleware.protocol import Next

NOT_FOUND_BODY = "Static file not found"


class StaticFiles:
    """Middleware that serves static files from a directory.

    Security: resolves symlinks and verifies the final path is within the
    configured directory; anything that escapes is reported as missing.

    Usage::

        app.add_middleware(StaticFiles(directory="./static", prefix="/static"))
    """

    __slots__ = ("_cache_control", "_directory", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._cache_control = cache_control
        self._prefix = "/" + prefix.strip("/")

    @property
    def prefix(self) -> str:
        return self._prefix

    def matches(self, path: str) -> bool:
        """True if *path* lies under the static prefix."""
        return path.startswith(self._prefix + "/")

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve a static file or fall through."""
        if request.method not in ("GET", "HEAD") or not self.matches(request.path):
            return await next(request)

        relative = request.path[len(self._prefix) :].lstrip("/")
        file_path = self._locate(relative)
        if file_path is None or not await anyio.Path(file_path).is_file():
            return text_response(NOT_FOUND_BODY, status=404)

        return await self._serve_file(file_path)

    def _locate(self, relative: str) -> Path | None:
        """Map a URL remainder to a file path, or ``None`` if it escapes."""
        if not relative or "\x00" in relative or "\\" in relative:
            return None
        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory):
            return None
        return file_path

    async def _serve_file(self, file_path: Path) -> Response:
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        body = await anyio.Path(file_path).read_bytes()

        return (
            Response(body=body, content_type=content_type)
            .with_header("Content-Length", str(len(body)))
            .with_header("Cache-Control", self._cache_control)
        )
