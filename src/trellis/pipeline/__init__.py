"""Document pipeline: expand, parse, dispatch, merge."""

from trellis.pipeline.document import DocumentError, extract_operations, parse_document
from trellis.pipeline.expand import expand_text, expand_value
from trellis.pipeline.runner import ConfigPipeline

__all__ = [
    "ConfigPipeline",
    "DocumentError",
    "expand_text",
    "expand_value",
    "extract_operations",
    "parse_document",
]
