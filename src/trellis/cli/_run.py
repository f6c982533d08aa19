"""``trellis run``: build an App from flags and serve it with pounce."""

import argparse
import sys

from trellis.app import App
from trellis.config import AppConfig
from trellis.errors import ConfigurationError
from trellis.log import configure_logging


def build_config(args: argparse.Namespace) -> AppConfig:
    """Translate parsed ``run`` flags into an AppConfig."""
    defaults = AppConfig()
    return AppConfig(
        host=args.host or defaults.host,
        port=args.port or defaults.port,
        debug=args.debug,
        pages_dir=args.pages,
        static_dir=args.static,
        database_url=args.database,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def run_server(args: argparse.Namespace) -> None:
    """Configure logging, then start the server.

    Configuration problems exit with status 1 before anything binds.
    """
    config = build_config(args)
    configure_logging(config.log_level, config.log_format)

    app = App(config)
    try:
        app.run()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
