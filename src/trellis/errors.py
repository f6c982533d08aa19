"""Trellis exception hierarchy.

Shared across the resolver, pipeline, strategies, and server so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class TrellisError(Exception):
    """Base for all trellis-specific errors."""


class ConfigurationError(TrellisError):
    """Raised when app configuration is invalid.

    Typically caught during ``App._freeze()`` at startup.
    """


class StrategyError(TrellisError):
    """Raised by a strategy when an operation cannot produce a result.

    The dispatcher catches it (like any other handler failure), logs the
    message, and omits the operation's key from the merged data.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(TrellisError):
    """An error that maps directly to an HTTP status code.

    Raised by the orchestrator. The ASGI handler catches these and turns
    them into a plain-text response carrying ``detail`` as the body.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no page directory matched the request path."""

    def __init__(self, detail: str = "Page not found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — the page exists but does not accept this method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "Method not allowed") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", allow_value),),
        )
