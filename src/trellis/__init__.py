"""Trellis: web pages from directories, page data from YAML.

Each page is a directory holding a content template and optional
``get.yaml`` / ``post.yaml`` documents.  Documents declare the data a
page needs as operations (HTTP requests, SQL queries) that run on every
request and merge into the template data.

Basic usage::

    from trellis import App, AppConfig

    app = App(AppConfig(pages_dir="pages", database_url="sqlite:///app.db"))
    app.run()

Page tree::

    pages/
      index.html
      users/
        [id]/
          index.html      <h1>{{ user.name }}</h1>
          get.yaml        fetch_data: {type: sqlite, key: user, ...}
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Database",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Operation",
    "Request",
    "RequestContext",
    "Response",
    "StrategyError",
    "TrellisError",
    "strategy",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import trellis`` fast while providing a clean top-level API.
    """
    if name == "App":
        from trellis.app import App

        return App

    if name == "AppConfig":
        from trellis.config import AppConfig

        return AppConfig

    if name == "Database":
        from trellis.data import Database

        return Database

    if name == "Request":
        from trellis.http.request import Request

        return Request

    if name == "Response":
        from trellis.http.response import Response

        return Response

    if name == "RequestContext":
        from trellis.pages.types import RequestContext

        return RequestContext

    if name in ("Operation", "strategy"):
        from trellis.strategies import base as _base

        return getattr(_base, name)

    if name in ("Middleware", "Next"):
        from trellis.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "StrategyError",
        "TrellisError",
    ):
        from trellis import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
