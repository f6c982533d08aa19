"""Trellis CLI: serve a page tree, inspect path resolution.

Entry point registered as ``trellis`` in ``pyproject.toml``::

    [project.scripts]
    trellis = "trellis.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``trellis`` command."""
    parser = argparse.ArgumentParser(
        prog="trellis",
        description="Trellis: pages from directories, data from YAML.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- trellis run ------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve a page tree")
    run_parser.add_argument("--pages", default="pages", help="Page root directory")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--database",
        default=None,
        help="SQLite URL for the sqlite strategy (e.g. sqlite:///app.db)",
    )
    run_parser.add_argument("--static", default="static", help="Static file directory")
    run_parser.add_argument(
        "--log-level",
        default="info",
        choices=("debug", "info", "warning", "error"),
        help="Minimum log level",
    )
    run_parser.add_argument(
        "--log-format",
        default="json",
        choices=("json", "text"),
        help="Log line format",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Reload templates and code on change",
    )

    # -- trellis resolve --------------------------------------------------
    resolve_parser = subparsers.add_parser("resolve", help="Show which page serves a path")
    resolve_parser.add_argument("path", help="Request path (e.g. /users/42)")
    resolve_parser.add_argument("--pages", default="pages", help="Page root directory")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from trellis.cli._run import run_server

        run_server(args)
    elif args.command == "resolve":
        from trellis.cli._resolve import run_resolve

        run_resolve(args)
