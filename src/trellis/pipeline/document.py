"""Parsing page documents and extracting their operations.

A page document is a YAML mapping.  One top-level key is reserved for
operations (``fetch_data`` on reads, ``send_data`` on writes) and holds
either a single operation or a list of them::

    title: Profile
    fetch_data:
      - type: sqlite
        key: user
        sql: SELECT * FROM users WHERE id = ?
        parameters: [42]
        return_one: true
      - type: request
        key: repos
        url: https://api.example.com/users/42/repos
"""

from collections.abc import Mapping
from typing import Any

import yaml

from trellis.errors import TrellisError
from trellis.log import LogSink
from trellis.strategies.base import Operation


class DocumentError(TrellisError):
    """Raised when a document cannot be parsed into a mapping."""


def parse_document(text: str) -> dict[str, Any]:
    """Parse expanded document text.

    An empty document parses to ``{}``.

    Raises:
        DocumentError: On YAML syntax errors, or when the top level is
            not a mapping.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DocumentError(str(exc)) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Document must be a mapping, got {type(data).__name__}"
        raise DocumentError(msg)
    return {str(key): value for key, value in data.items()}


def extract_operations(
    document: Mapping[str, Any],
    reserved_key: str,
    *,
    log: LogSink,
) -> tuple[dict[str, Any], list[Operation]]:
    """Split *document* into its plain fields and its declared operations.

    The reserved key never survives into the returned fields, whatever
    its value.  Operations keep their declared order.

    Returns:
        ``(fields_without_reserved_key, operations)``
    """
    fields = {key: value for key, value in document.items() if key != reserved_key}
    declared = document.get(reserved_key)

    if declared is None:
        return fields, []
    if isinstance(declared, Mapping):
        return fields, [Operation.from_mapping(declared)]
    if isinstance(declared, list):
        operations: list[Operation] = []
        for index, entry in enumerate(declared):
            if not isinstance(entry, Mapping):
                log(
                    "warn",
                    f"Skipping {reserved_key} entry that is not a mapping",
                    {"index": index, "entry": repr(entry)},
                )
                continue
            operations.append(Operation.from_mapping(entry))
        return fields, operations

    log(
        "warn",
        f"Ignoring {reserved_key}: expected a mapping or a list",
        {"value": repr(declared)},
    )
    return fields, []
