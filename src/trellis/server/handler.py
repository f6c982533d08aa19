"""ASGI handler: translates ASGI scope/messages to trellis types.

The only component that touches raw ASGI HTTP messages. Converts the
scope to a typed Request, dispatches through middleware to the
orchestrator, and sends the Response back through ASGI send().
"""

from collections.abc import Callable
from typing import Any

from trellis._internal.asgi import Receive, Scope, Send
from trellis.errors import HTTPError
from trellis.http.request import Request
from trellis.http.response import Response
from trellis.log import LogSink
from trellis.middleware.protocol import Next
from trellis.orchestrator import RequestOrchestrator
from trellis.server.errors import handle_http_error, handle_internal_error
from trellis.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    orchestrator: RequestOrchestrator,
    middleware: tuple[Callable[..., Any], ...],
    log: LogSink,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    log("info", f"Request: {request.method} {request.path}", {"query": request.query})

    async def dispatch(req: Request) -> Response:
        if req.is_write:
            body = await req.body()
            return await orchestrator.handle_write(req.path, req.content_type, body)
        return await orchestrator.handle_read(req.path, req.query)

    handler = dispatch
    for mw in reversed(middleware):
        outer = handler

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
            return await _mw(req, _next)

        handler = make_next

    try:
        response = await handler(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request)

    await send_response(response, send, head=request.method == "HEAD")
