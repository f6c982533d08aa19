"""Page rendering with kida.

A page's content body is itself a kida template, rendered against the
merged pipeline data.  The result is then wrapped in the configured
layout template, which receives ``title``, ``body`` and the same data.

Content that already is a complete HTML document (it starts with a
doctype) bypasses templating entirely.

Layouts are looked up in ``layout_dir``; ``{% include %}`` inside pages
and layouts resolves against ``partial_dir`` as well.  The environment
is created once at app freeze and caches compiled templates for the
process lifetime.
"""

from typing import Any

from kida import ChoiceLoader, Environment, FileSystemLoader
from kida.utils.html import Markup

from trellis.config import AppConfig

FULL_DOCUMENT_MARKER = "<!doctype html"


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment from app configuration.

    Called once during ``App._freeze()``. The returned environment
    is shared by every request.
    """
    loader = ChoiceLoader(
        [
            FileSystemLoader(str(config.layout_dir)),
            FileSystemLoader(str(config.partial_dir)),
        ]
    )
    return Environment(
        loader=loader,
        autoescape=config.autoescape,
        auto_reload=config.debug,
    )


def is_full_document(content: str) -> bool:
    """True if *content* is a self-contained HTML document."""
    return content.lstrip().lower().startswith(FULL_DOCUMENT_MARKER)


def page_title(path: str) -> str:
    """Default layout title: the request path with its first letter upper-cased."""
    path = path.lstrip("/")
    if not path:
        return "Home"
    return path[0].upper() + path[1:]


class PageRenderer:
    """Render page bodies and wrap them in the layout.

    Args:
        env: The shared kida environment.
        layout: Layout template name, or ``None`` to return bodies unwrapped.
    """

    __slots__ = ("_env", "_layout")

    def __init__(self, env: Environment, *, layout: str | None = "layout.html") -> None:
        self._env = env
        self._layout = layout

    def render(self, content: str, data: dict[str, Any], *, title: str) -> str:
        """Render *content* against *data*, then wrap it in the layout.

        Pipeline data wins over ``title`` and ``body`` on key collision,
        so a document can set its own ``title``.
        """
        body = self._env.from_string(content).render(data)
        if self._layout is None:
            return body

        template = self._env.get_template(self._layout)
        return template.render({"title": title, "body": Markup(body), **data})
