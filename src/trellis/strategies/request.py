"""The ``request`` strategy: fetch a remote resource over HTTP.

Fields::

    fetch_data:
      type: request
      key: repos
      url: https://api.example.com/users/{{ params.id }}/repos   # required
      method: GET                                                # default
      headers: {Accept: application/json}
      body: {name: "{{ formData.name }}"}                        # str or mapping

Every field is expanded against the request context again, so values
built from nested document data resolve too.  A string body is sent as
is; a mapping or list body is sent as JSON.  Non-2xx responses raise
:class:`~trellis.errors.StrategyError`, which the dispatcher logs.
"""

from collections.abc import Mapping
from typing import Any

import httpx

from trellis.errors import StrategyError
from trellis.pages.types import RequestContext
from trellis.pipeline.expand import expand_value
from trellis.strategies.base import Operation


class RequestStrategy:
    """HTTP strategy backed by ``httpx.AsyncClient``.

    Args:
        client: Shared client to send through.  When ``None`` a client is
            created for each call and closed afterwards.
        timeout: Passed to httpx; ``None`` waits indefinitely.
    """

    __slots__ = ("_client", "_timeout")

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self._client = client
        self._timeout = timeout

    async def execute(self, op: Operation, context: RequestContext) -> Any:
        data = context.as_dict()
        url = expand_value(op.get("url"), data)
        if not url:
            msg = "request operation requires a 'url' field"
            raise StrategyError(msg)

        method = str(expand_value(op.get("method") or "GET", data)).upper()
        headers = expand_value(op.get("headers") or {}, data)
        if not isinstance(headers, Mapping):
            msg = "request operation 'headers' must be a mapping"
            raise StrategyError(msg)
        headers = {str(name): str(value) for name, value in headers.items()}

        kwargs: dict[str, Any] = {"headers": headers, "timeout": self._timeout}
        body = expand_value(op.get("body"), data)
        if isinstance(body, (Mapping, list)):
            kwargs["json"] = body
        elif body is not None:
            kwargs["content"] = str(body)

        if self._client is not None:
            response = await self._client.request(method, str(url), **kwargs)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.request(method, str(url), **kwargs)

        return decode_response(response)


def decode_response(response: httpx.Response) -> Any:
    """Decode a successful response: JSON content types parse, others stay text.

    Raises:
        StrategyError: For non-2xx statuses.
    """
    if not response.is_success:
        msg = f"HTTP {response.status_code}: {response.reason_phrase}"
        raise StrategyError(msg)

    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        return response.json()
    return response.text
