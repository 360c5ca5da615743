"""Rendering of assistant messages with document citations.

Two citation modes are supported:

- ``inline``: each marker becomes a button labelled with the document and
  section names, e.g. "Board_Memo.docx: Revenue Outlook"
- ``numbered``: each marker becomes a compact numbered pill, and a
  collapsible source list is appended to the message
"""

from dataclasses import dataclass, field
from enum import Enum
from html import escape
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

from sharecite.config import get_settings
from sharecite.lookup.cache import DocumentLookup
from sharecite.references.links import convert_citations_to_numbered
from sharecite.references.models import MessagePart, ParsedCitation
from sharecite.references.parser import split_message_into_parts
from sharecite.render.markdown import render_markdown

logger = structlog.get_logger()

# Receives (filename, section_id) when a citation is clicked
NavigationCallback = Callable[[str, str], None]


class CitationMode(str, Enum):
    """Citation rendering modes."""

    INLINE = "inline"
    NUMBERED = "numbered"


@dataclass
class RenderedCitation:
    """A citation as shown to the reader."""

    filename: str
    section_id: str
    number: Optional[int] = None
    document_id: Optional[str] = None
    document_title: Optional[str] = None
    section_title: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.document_id is not None

    @property
    def label(self) -> str:
        """Inline label: "document: section" when known, else the best known name."""
        if self.document_title and self.section_title:
            return f"{self.document_title}: {self.section_title}"
        return self.document_title or self.filename

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "filename": self.filename,
            "section_id": self.section_id,
            "number": self.number,
            "document_id": self.document_id,
            "document_title": self.document_title,
            "section_title": self.section_title,
            "resolved": self.resolved,
            "label": self.label,
        }


@dataclass
class RenderedMessage:
    """HTML for a message plus the structure it was built from."""

    html: str
    mode: CitationMode
    parts: List[MessagePart] = field(default_factory=list)
    citations: List[RenderedCitation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "html": self.html,
            "mode": self.mode.value,
            "parts": [part.to_dict() for part in self.parts],
            "citations": [citation.to_dict() for citation in self.citations],
        }


class MessageRenderer:
    """Renders message text into HTML with interactive citations.

    Example:
        ```python
        renderer = MessageRenderer(lookup, on_citation_click=navigator.handle_citation_click)
        rendered = renderer.render(message.content, mode=CitationMode.NUMBERED)
        ```
    """

    def __init__(
        self,
        lookup: DocumentLookup,
        mode: Optional[CitationMode] = None,
        on_citation_click: Optional[NavigationCallback] = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            lookup: Document lookup used to resolve citation names
            mode: Default citation mode (default from settings)
            on_citation_click: Navigation callback for citation clicks
        """
        self.lookup = lookup
        self.mode = mode or CitationMode(get_settings().citation_mode)
        self.on_citation_click = on_citation_click

    def resolve(
        self,
        filename: str,
        section_id: str,
        number: Optional[int] = None,
    ) -> RenderedCitation:
        """Resolve a citation against the lookup's current snapshot."""
        citation = RenderedCitation(filename=filename, section_id=section_id, number=number)

        doc = self.lookup.lookup_document_by_filename(filename)
        if doc is None:
            return citation

        citation.document_id = doc.id
        citation.document_title = doc.filename

        section = doc.find_section(section_id)
        if section is not None:
            citation.section_title = section.title

        return citation

    def _label_for(self, citation: ParsedCitation) -> str:
        return self.resolve(citation.filename, citation.section_id).label

    def render(self, content: str, mode: Optional[CitationMode] = None) -> RenderedMessage:
        """Render message content.

        Args:
            content: Raw message text with citation markers
            mode: Citation mode (default: the renderer's mode)

        Returns:
            RenderedMessage with HTML, parts and resolved citations
        """
        mode = CitationMode(mode) if mode else self.mode
        parts = split_message_into_parts(content)

        if mode == CitationMode.NUMBERED:
            rendered = self._render_numbered(content, parts)
        else:
            rendered = self._render_inline(content, parts)

        unresolved = sum(1 for c in rendered.citations if not c.resolved)
        if unresolved:
            logger.debug(
                "unresolved_citations",
                count=unresolved,
                total=len(rendered.citations),
            )

        return rendered

    def _render_inline(self, content: str, parts: List[MessagePart]) -> RenderedMessage:
        if not any(part.is_reference for part in parts):
            return RenderedMessage(
                html=render_markdown(content, label_for=self._label_for),
                mode=CitationMode.INLINE,
                parts=parts,
            )

        html_parts: List[str] = []
        citations: List[RenderedCitation] = []
        seen: Dict[Tuple[str, str], RenderedCitation] = {}

        for part in parts:
            if not part.is_reference:
                html_parts.append(render_markdown(part.content, label_for=self._label_for))
                continue

            reference = part.reference
            key = (reference.filename, reference.section_id)
            citation = seen.get(key)
            if citation is None:
                citation = self.resolve(reference.filename, reference.section_id)
                seen[key] = citation
                citations.append(citation)

            html_parts.append(render_citation_button(citation))

        return RenderedMessage(
            html="".join(html_parts),
            mode=CitationMode.INLINE,
            parts=parts,
            citations=citations,
        )

    def _render_numbered(self, content: str, parts: List[MessagePart]) -> RenderedMessage:
        numbered = convert_citations_to_numbered(content)
        citations = [
            self.resolve(c.filename, c.section_id, number=c.number)
            for c in numbered.citations
        ]

        html = render_markdown(numbered.content, label_for=self._label_for)
        html += render_citation_block(citations)

        return RenderedMessage(
            html=html,
            mode=CitationMode.NUMBERED,
            parts=parts,
            citations=citations,
        )

    def click(self, filename: str, section_id: str) -> bool:
        """Dispatch a citation click to the navigation callback.

        Returns:
            True if a callback handled the click
        """
        if self.on_citation_click is None:
            return False

        logger.debug("citation_clicked", filename=filename, section_id=section_id)
        self.on_citation_click(filename, section_id)
        return True


def render_citation_button(citation: RenderedCitation) -> str:
    """Render an inline citation button."""
    section_label = citation.section_title or citation.section_id
    title = f"Open {citation.filename}, section: {section_label}"
    return (
        '<button type="button" class="citation-link"'
        f' data-filename="{escape(citation.filename)}"'
        f' data-section-id="{escape(citation.section_id)}"'
        f' title="{escape(title)}">'
        f"{escape(citation.label)}</button>"
    )


def render_citation_block(citations: List[RenderedCitation]) -> str:
    """Render the collapsible source list shown under numbered citations."""
    if not citations:
        return ""

    noun = "source" if len(citations) == 1 else "sources"
    items = []
    for citation in citations:
        section = (
            f'<span class="citation-section">{escape(citation.section_title)}</span>'
            if citation.section_title
            else ""
        )
        items.append(
            "<li>"
            '<button type="button" class="citation-source"'
            f' data-filename="{escape(citation.filename)}"'
            f' data-section-id="{escape(citation.section_id)}"'
            f' data-citation-number="{citation.number}">'
            f'<span class="citation-number">{citation.number}</span>'
            f'<span class="citation-document">'
            f"{escape(citation.document_title or citation.filename)}</span>"
            f"{section}"
            "</button>"
            "</li>"
        )

    return (
        '<details class="citation-block">'
        f"<summary>{len(citations)} {noun}</summary>"
        f'<ol class="citation-list">{"".join(items)}</ol>'
        "</details>"
    )
