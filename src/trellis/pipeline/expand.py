"""Reference expansion for page documents.

Before a document is parsed, ``{{ dotted.path }}`` references in its raw
text are replaced with values from the request context::

    title: "User {{ params.id }}"          ->  title: "User 42"
    search: {{ query.q }}                  ->  search: kittens
    echo: {{{ formData.comment }}}         ->  echo: hello

Triple braces are accepted as a synonym; neither form HTML-escapes the
value.  Expansion is plain text substitution; it never fails.  A
reference that does not resolve becomes the empty string.

Rendering of looked-up values:

- ``None`` -> empty string
- booleans -> ``true`` / ``false``
- mappings and lists -> JSON (which is valid YAML flow syntax)
- anything else -> ``str(value)``
"""

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any

_REFERENCE_RE = re.compile(r"\{\{\{?\s*([A-Za-z_][\w-]*(?:\.[\w-]+)*)\s*\}?\}\}")


def lookup(data: Mapping[str, Any], dotted: str) -> Any:
    """Follow a dotted path through mappings and sequences.

    Returns ``None`` when any step is missing.
    """
    current: Any = data
    for part in dotted.split("."):
        if isinstance(current, Mapping):
            if part not in current:
                return None
            current = current[part]
        elif isinstance(current, Sequence) and not isinstance(current, str) and part.isdigit():
            index = int(part)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


def render_value(value: Any) -> str:
    """Render a looked-up value as document text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, default=str)
    return str(value)


def expand_text(text: str, data: Mapping[str, Any]) -> str:
    """Replace every reference in *text* with its value from *data*."""
    return _REFERENCE_RE.sub(lambda m: render_value(lookup(data, m.group(1))), text)


def expand_value(value: Any, data: Mapping[str, Any]) -> Any:
    """Expand references inside every string of a parsed value.

    Mappings and lists are walked recursively; other values pass through.
    Strategies use this to expand their own fields independently of the
    document-level expansion.
    """
    if isinstance(value, str):
        return expand_text(value, data)
    if isinstance(value, Mapping):
        return {key: expand_value(item, data) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_value(item, data) for item in value]
    return value
