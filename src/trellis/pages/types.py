"""Data models for directory-defined pages.

Immutable frozen dataclasses produced once per request by the resolver
and the orchestrator.  Nothing here is persisted.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Reserved top-level document keys
READ_KEY = "fetch_data"
WRITE_KEY = "send_data"


@dataclass(frozen=True, slots=True)
class PageMatch:
    """A resolved page and the parameters bound along the way.

    Attributes:
        content_path: Path to the page's content file.
        params: Bound parameter values, outermost directory first.
    """

    content_path: Path
    params: dict[str, str] = field(default_factory=dict)

    @property
    def directory(self) -> Path:
        """The page directory; config documents live next to the content file."""
        return self.content_path.parent


@dataclass(frozen=True, slots=True)
class RequestContext:
    """The per-request values available to expansion and strategies.

    ``form_data`` is only set on the write flow.  ``as_dict()`` produces
    the wire shape used in documents and responses, where form data is
    spelled ``formData``::

        {"params": {...}, "query": {...}, "formData": {...}}
    """

    params: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    form_data: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"params": dict(self.params), "query": dict(self.query)}
        if self.form_data is not None:
            data["formData"] = dict(self.form_data)
        return data
