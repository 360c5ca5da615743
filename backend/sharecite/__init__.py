"""sharecite: citation pipeline for shared document conversations."""

from sharecite.lookup import DocumentInfo, DocumentLookup, ShareLinkClient
from sharecite.references import (
    DocumentReference,
    MessagePart,
    MessagePartType,
    convert_citations_to_numbered,
    parse_document_references,
    split_message_into_parts,
)
from sharecite.render import CitationMode, MessageRenderer, RenderedMessage
from sharecite.streaming import ConversationStreamer, SSEMessageAccumulator
from sharecite.viewer import (
    CitationNavigator,
    HighlightCoordinator,
    compute_centered_scroll_top,
)

__version__ = "0.1.0"

__all__ = [
    # Parsing
    "DocumentReference",
    "MessagePart",
    "MessagePartType",
    "parse_document_references",
    "split_message_into_parts",
    "convert_citations_to_numbered",
    # Lookup
    "DocumentInfo",
    "DocumentLookup",
    "ShareLinkClient",
    # Rendering
    "CitationMode",
    "MessageRenderer",
    "RenderedMessage",
    # Viewer
    "CitationNavigator",
    "HighlightCoordinator",
    "compute_centered_scroll_top",
    # Streaming
    "ConversationStreamer",
    "SSEMessageAccumulator",
]
