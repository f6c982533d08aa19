"""The two-phase document pipeline.

``ConfigPipeline.run()`` turns a page document plus the request context
into the data a page is rendered with (reads) or the JSON a write
returns::

    expand text -> parse -> extract operations -> dispatch -> merge

The merge is a left-to-right shallow merge where later sources win::

    {**document_fields, **operation_results, **context}

so the request context can never be shadowed by a document or by an
operation result.  ``run()`` never raises; every failure degrades to a
context-only result.
"""

from typing import Any

from trellis.log import LogSink
from trellis.pages.types import RequestContext
from trellis.pipeline.document import DocumentError, extract_operations, parse_document
from trellis.pipeline.expand import expand_text
from trellis.strategies.base import NO_RESULT, Operation, StrategyDispatcher


class ConfigPipeline:
    """Expand, parse, dispatch and merge page documents.

    Args:
        dispatcher: Strategy registry used for every operation.
        log: Sink for parse and dispatch decisions.
    """

    __slots__ = ("_dispatcher", "_log")

    def __init__(self, dispatcher: StrategyDispatcher, *, log: LogSink) -> None:
        self._dispatcher = dispatcher
        self._log = log

    @property
    def dispatcher(self) -> StrategyDispatcher:
        return self._dispatcher

    async def run(
        self,
        document_text: str | None,
        context: RequestContext,
        reserved_key: str,
    ) -> dict[str, Any]:
        """Process one document for one request.

        Args:
            document_text: Raw document text, or ``None`` when the page has none.
            context: The request's params, query and (on writes) form data.
            reserved_key: ``fetch_data`` or ``send_data``.

        Returns:
            The merged data.  Always contains the context fields.
        """
        context_data = context.as_dict()
        if not document_text:
            return context_data

        self._log("info", "Processing YAML content", {"reservedKey": reserved_key})

        expanded = expand_text(document_text, context_data)
        self._log("info", "Processed YAML template", {"processedLength": len(expanded)})
        try:
            document = parse_document(expanded)
        except DocumentError as exc:
            self._log("error", f"YAML processing failed: {exc}", {"error": str(exc)})
            return context_data

        fields, operations = extract_operations(document, reserved_key, log=self._log)
        self._log(
            "info",
            "Parsed YAML data",
            {"operations": len(operations), "fieldKeys": list(fields)},
        )

        if operations:
            self._log("info", "Fetching data using strategies", {"count": len(operations)})
        results = await self._dispatch(operations, context)
        merged = {**fields, **results, **context_data}
        self._log("info", "Final data after fetch", {"dataKeys": list(merged)})
        return merged

    async def _dispatch(
        self,
        operations: list[Operation],
        context: RequestContext,
    ) -> dict[str, Any]:
        """Run operations in declared order; later duplicate keys win."""
        results: dict[str, Any] = {}
        for op in operations:
            result = await self._dispatcher.execute(op, context)
            if op.key is not None and result is not NO_RESULT:
                results[op.key] = result
        return results
