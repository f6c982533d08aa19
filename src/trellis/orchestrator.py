"""Request orchestration: the read and write flows.

Read (any method but POST)::

    resolve -> load content + read-config -> pipeline("fetch_data")
            -> verbatim document | render body + layout -> 200 HTML

Write (POST)::

    resolve -> write-config present? -> decode body
            -> pipeline("send_data") -> 200 JSON

Resolution failures raise :class:`~trellis.errors.NotFound`; a page
without a write-config raises :class:`~trellis.errors.MethodNotAllowed`.
Everything else in the read flow that fails becomes a 500 response.
After the permission check the write flow never fails.
"""

from collections.abc import Mapping

from trellis.errors import MethodNotAllowed, NotFound
from trellis.http.forms import decode_form_body
from trellis.http.response import Response, json_response, text_response
from trellis.log import LogSink
from trellis.pages.loader import PageLoader
from trellis.pages.renderer import PageRenderer, is_full_document, page_title
from trellis.pages.types import READ_KEY, WRITE_KEY, RequestContext
from trellis.pipeline.runner import ConfigPipeline

_READ_ONLY = frozenset({"GET"})


class RequestOrchestrator:
    """Ties the loader, pipeline and renderer together per request.

    Stateless between requests; one instance is built at app freeze and
    shared by every request task.
    """

    __slots__ = ("_loader", "_log", "_pipeline", "_renderer")

    def __init__(
        self,
        loader: PageLoader,
        pipeline: ConfigPipeline,
        renderer: PageRenderer,
        *,
        log: LogSink,
    ) -> None:
        self._loader = loader
        self._pipeline = pipeline
        self._renderer = renderer
        self._log = log

    @property
    def loader(self) -> PageLoader:
        return self._loader

    @property
    def pipeline(self) -> ConfigPipeline:
        return self._pipeline

    async def handle_read(self, path: str, query: Mapping[str, str]) -> Response:
        """Serve a page.

        Raises:
            NotFound: When no page directory matches *path*.
        """
        match = await self._loader.find(path)
        if match is None:
            raise NotFound()

        try:
            source = await self._loader.load(match)
            context = RequestContext(params=match.params, query=dict(query))
            data = await self._pipeline.run(source.read_config, context, READ_KEY)

            if is_full_document(source.content):
                self._log("info", "Serving full HTML document", {"path": path})
                return Response(source.content)

            html = self._renderer.render(source.content, data, title=page_title(path))
            self._log("info", "Rendered page", {"path": path, "length": len(html)})
            return Response(html)
        except Exception as exc:
            self._log("error", f"Error serving page: {exc}", {"path": path, "error": str(exc)})
            return text_response(f"Internal server error: {exc}", status=500)

    async def handle_write(
        self,
        path: str,
        content_type: str | None,
        body: bytes,
    ) -> Response:
        """Accept a form submission and return the merged data as JSON.

        Raises:
            NotFound: When no page directory matches *path*.
            MethodNotAllowed: When the page has no write-config.
        """
        match = await self._loader.find(path)
        if match is None:
            raise NotFound()

        if not await self._loader.write_allowed(match):
            self._log("warn", f"POST not allowed for path: {path}", {"path": path})
            raise MethodNotAllowed(_READ_ONLY)

        form_data = decode_form_body(body, content_type)
        self._log("info", "Received form data", {"fields": list(form_data)})

        write_config = await self._loader.load_write_config(match)
        if write_config is None:
            self._log("warn", "No post.yaml found, but POST was allowed", {"path": path})

        context = RequestContext(params=match.params, query={}, form_data=form_data)
        data = await self._pipeline.run(write_config, context, WRITE_KEY)
        return json_response(data)
