"""HTML rendering of messages and citations."""

from sharecite.render.markdown import CitationLinkExtension, render_markdown
from sharecite.render.message import (
    CitationMode,
    MessageRenderer,
    RenderedCitation,
    RenderedMessage,
    render_citation_block,
    render_citation_button,
)

__all__ = [
    "CitationLinkExtension",
    "render_markdown",
    "CitationMode",
    "MessageRenderer",
    "RenderedCitation",
    "RenderedMessage",
    "render_citation_block",
    "render_citation_button",
]
