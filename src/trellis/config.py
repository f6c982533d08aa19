"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

from trellis.errors import ConfigurationError

_LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
_LOG_FORMATS = frozenset({"json", "text"})


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(pages_dir="site/pages", database_url="sqlite:///app.db")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Page tree
    pages_dir: str | Path = "pages"
    content_file: str = "index.html"
    read_config_file: str = "get.yaml"
    write_config_file: str = "post.yaml"
    cache_pages: bool = False  # Memoize directory listings for the process lifetime

    # Templates
    layout_dir: str | Path = "templates/layouts"
    partial_dir: str | Path = "templates/partials"
    layout: str | None = "layout.html"  # None serves rendered bodies without a layout
    autoescape: bool = True

    # Static files
    static_dir: str | Path | None = "static"
    static_url: str = "/static"

    # Data (sqlite strategy); None leaves the strategy unregistered
    database_url: str | None = None

    # Logging
    log_level: str = "info"
    log_format: str = "json"

    def validate(self) -> None:
        """Raise ``ConfigurationError`` for values that cannot work together."""
        if not self.content_file or "/" in self.content_file:
            msg = f"content_file must be a bare file name, got {self.content_file!r}"
            raise ConfigurationError(msg)
        for name in ("read_config_file", "write_config_file"):
            value = getattr(self, name)
            if not value or "/" in value:
                msg = f"{name} must be a bare file name, got {value!r}"
                raise ConfigurationError(msg)
        if self.read_config_file == self.write_config_file:
            msg = "read_config_file and write_config_file must differ"
            raise ConfigurationError(msg)
        if not self.static_url.startswith("/"):
            msg = f"static_url must start with '/', got {self.static_url!r}"
            raise ConfigurationError(msg)
        if self.log_level not in _LOG_LEVELS:
            msg = f"log_level must be one of {sorted(_LOG_LEVELS)}, got {self.log_level!r}"
            raise ConfigurationError(msg)
        if self.log_format not in _LOG_FORMATS:
            msg = f"log_format must be one of {sorted(_LOG_FORMATS)}, got {self.log_format!r}"
            raise ConfigurationError(msg)
