"""Request body decoding for the write flow — JSON, URL-encoded, multipart.

Every supported encoding collapses into one flat ``dict`` keyed by field
name, which becomes ``formData`` in the pipeline context.  Decoding never
raises: an unknown or missing content type, or a payload that does not
parse, yields an empty map.

Multipart parsing uses ``python-multipart``.  File parts keep only their
metadata (``{"filename": ..., "type": ...}``); the content is discarded.
URL-encoded forms use stdlib ``urllib.parse``.
"""

import json
from typing import Any
from urllib.parse import parse_qsl

from python_multipart.multipart import MultipartParser, parse_options_header


def decode_form_body(body: bytes, content_type: str | None) -> dict[str, Any]:
    """Decode a request body into a flat field map.

    Supports:
    - ``application/json`` — the whole body must be a JSON object
    - ``application/x-www-form-urlencoded`` — repeated keys keep the last value
    - ``multipart/form-data`` — text fields as strings, files as metadata

    Args:
        body: Raw request body bytes.
        content_type: The Content-Type header value, if any.

    Returns:
        The decoded fields, or ``{}`` when nothing could be decoded.
    """
    if not content_type:
        return {}

    ct_lower = content_type.lower()
    try:
        if "application/json" in ct_lower:
            return _decode_json(body)
        if "application/x-www-form-urlencoded" in ct_lower:
            return _decode_urlencoded(body)
        if "multipart/form-data" in ct_lower:
            return _decode_multipart(body, content_type)
    except (ValueError, RecursionError):
        # JSONDecodeError, UnicodeDecodeError and multipart parse errors
        # are all ValueError subclasses; deeply nested JSON raises RecursionError.
        return {}
    return {}


def _decode_json(body: bytes) -> dict[str, Any]:
    if not body.strip():
        return {}
    data = json.loads(body)
    if not isinstance(data, dict):
        return {}
    return data


def _decode_urlencoded(body: bytes) -> dict[str, Any]:
    return dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True))


def _decode_multipart(body: bytes, content_type: str) -> dict[str, Any]:
    """Parse multipart form data using python-multipart."""
    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    fields: dict[str, Any] = {}

    # Track current part state
    current_headers: dict[str, str] = {}
    current_data = bytearray()
    current_field_name: str | None = None
    current_filename: str | None = None
    pending_header = ""

    def on_part_begin() -> None:
        nonlocal current_headers, current_data, current_field_name, current_filename
        current_headers = {}
        current_data = bytearray()
        current_field_name = None
        current_filename = None

    def on_part_data(data_chunk: bytes, start: int, end: int) -> None:
        current_data.extend(data_chunk[start:end])

    def on_part_end() -> None:
        if current_field_name is None:
            return
        if current_filename is not None:
            fields[current_field_name] = {
                "filename": current_filename,
                "type": current_headers.get("content-type", "application/octet-stream"),
            }
        else:
            fields[current_field_name] = current_data.decode("utf-8", errors="replace")

    def on_header_field(hdata: bytes, start: int, end: int) -> None:
        nonlocal pending_header
        pending_header += hdata[start:end].decode("latin-1").lower()

    def on_header_value(hdata: bytes, start: int, end: int) -> None:
        current_headers[pending_header] = (
            current_headers.get(pending_header, "") + hdata[start:end].decode("latin-1")
        )

    def on_header_end() -> None:
        nonlocal pending_header, current_field_name, current_filename
        if pending_header == "content-disposition":
            disposition = current_headers.get(pending_header, "")
            _, params = parse_options_header(disposition.encode("latin-1"))
            name = params.get(b"name")
            if name is not None:
                current_field_name = name.decode("utf-8")
            fname = params.get(b"filename")
            if fname is not None:
                current_filename = fname.decode("utf-8")
        pending_header = ""

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()
    return fields
