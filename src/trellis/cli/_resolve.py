"""``trellis resolve``: print the page a request path resolves to."""

import argparse
import json
import sys

from trellis.pages.resolver import PathResolver


def run_resolve(args: argparse.Namespace) -> None:
    """Resolve ``args.path`` under ``args.pages`` and print the match.

    Prints the content file and the bound parameters as JSON.  Exits
    with status 1 when no page matches.
    """
    resolver = PathResolver(args.pages)
    match = resolver.resolve(args.path)
    if match is None:
        print(f"No page for {args.path}", file=sys.stderr)
        raise SystemExit(1)

    print(match.content_path)
    print(json.dumps(match.params))
