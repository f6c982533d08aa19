"""Error handling pipeline for trellis requests.

Maps HTTPError exceptions and unexpected failures to plain-text
responses.
"""

import logging

from trellis.errors import HTTPError
from trellis.http.request import Request
from trellis.http.response import Response, text_response

logger = logging.getLogger("trellis.server")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a text response carrying its detail and headers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    resp = text_response(exc.detail or f"Error {exc.status}", status=exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)
    return text_response("Internal Server Error", status=500)
