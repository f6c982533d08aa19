"""Directory-defined pages: resolution, loading, rendering."""

from trellis.pages.loader import PageLoader, PageSource
from trellis.pages.renderer import PageRenderer, create_environment
from trellis.pages.resolver import PathResolver
from trellis.pages.types import READ_KEY, WRITE_KEY, PageMatch, RequestContext

__all__ = [
    "READ_KEY",
    "WRITE_KEY",
    "PageLoader",
    "PageMatch",
    "PageRenderer",
    "PageSource",
    "PathResolver",
    "RequestContext",
    "create_environment",
]
