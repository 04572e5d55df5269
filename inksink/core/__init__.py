"""Core utilities: errors, document enrichment and SSE framing."""

from .enrichment import DOCUMENT_CONTEXT_TEMPLATE, enrich_with_document
from .errors import ApiError, ChatWorkflowError, ClassificationError, ResponderError
from .sse import SSE_HEADERS, format_sse_event, stream_sse

__all__ = [
    "ApiError",
    "ChatWorkflowError",
    "ClassificationError",
    "DOCUMENT_CONTEXT_TEMPLATE",
    "ResponderError",
    "SSE_HEADERS",
    "enrich_with_document",
    "format_sse_event",
    "stream_sse",
]
