"""Markdown rendering with citation-aware link handling."""

from typing import Callable, Optional
from xml.etree import ElementTree as etree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from sharecite.references.links import (
    CITE_SCHEME,
    citation_url_transform,
    parse_citation_url,
)
from sharecite.references.models import ParsedCitation

# Returns the visible label for a legacy (unnumbered) citation link
CitationLabeler = Callable[[ParsedCitation], Optional[str]]

BASE_EXTENSIONS = ["tables", "fenced_code", "sane_lists"]


def build_citation_element(
    tag: str,
    citation: ParsedCitation,
    label: str,
    css_class: str,
    title: str,
) -> etree.Element:
    """Create a clickable citation element carrying its target as data attributes."""
    element = etree.Element(tag)
    if tag == "button":
        element.set("type", "button")
    element.set("class", css_class)
    element.set("data-filename", citation.filename)
    element.set("data-section-id", citation.section_id)
    if citation.number is not None:
        element.set("data-citation-number", str(citation.number))
    element.set("title", title)
    element.text = label
    return element


class CitationLinkTreeprocessor(Treeprocessor):
    """Sanitizes link and image targets and turns `cite://` links into citation buttons."""

    def __init__(self, md: Markdown, label_for: Optional[CitationLabeler] = None) -> None:
        super().__init__(md)
        self.label_for = label_for

    def run(self, root: etree.Element) -> None:
        for parent in list(root.iter()):
            for index, child in enumerate(list(parent)):
                if child.tag == "img":
                    self._sanitize_image(child)
                    continue

                if child.tag != "a":
                    continue

                href = citation_url_transform(child.get("href", ""))
                citation = parse_citation_url(href)

                if citation is not None:
                    replacement = self._citation_element(citation)
                    replacement.tail = child.tail
                    parent.remove(child)
                    parent.insert(index, replacement)
                elif href:
                    child.set("href", href)
                    child.set("target", "_blank")
                    child.set("rel", "noopener noreferrer")
                else:
                    child.attrib.pop("href", None)

    def _sanitize_image(self, image: etree.Element) -> None:
        src = citation_url_transform(image.get("src", ""))
        # Citation URLs are only meaningful as links
        if src and not src.startswith(CITE_SCHEME):
            image.set("src", src)
        else:
            image.attrib.pop("src", None)

    def _citation_element(self, citation: ParsedCitation) -> etree.Element:
        if citation.number is not None:
            element = build_citation_element(
                "button",
                citation,
                label=str(citation.number),
                css_class="citation-pill",
                title=f"View source {citation.number}",
            )
            element.set("aria-label", f"Citation {citation.number}")
            return element

        label = (self.label_for(citation) if self.label_for else None) or citation.filename
        return build_citation_element(
            "button",
            citation,
            label=label,
            css_class="citation-link",
            title=f"Open {citation.filename}, section: {citation.section_id}",
        )


class CitationLinkExtension(Extension):
    """Python-Markdown extension wiring in citation link handling.

    Raw HTML in the source is escaped rather than passed through, since the
    text being rendered is model output.
    """

    def __init__(
        self,
        label_for: Optional[CitationLabeler] = None,
        escape_html: bool = True,
        **kwargs,
    ) -> None:
        self.label_for = label_for
        self.escape_html = escape_html
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        if self.escape_html:
            md.preprocessors.deregister("html_block", strict=False)
            md.inlinePatterns.deregister("html", strict=False)

        # Runs after inline parsing (20) and prettify (10)
        md.treeprocessors.register(
            CitationLinkTreeprocessor(md, self.label_for),
            "citation_links",
            5,
        )


def render_markdown(
    text: str,
    label_for: Optional[CitationLabeler] = None,
    escape_html: bool = True,
) -> str:
    """Render markdown text to an HTML fragment.

    Args:
        text: Markdown source
        label_for: Optional labeler for unnumbered citation links
        escape_html: Escape raw HTML in the source

    Returns:
        HTML fragment
    """
    if not text:
        return ""

    md = Markdown(
        extensions=BASE_EXTENSIONS
        + [CitationLinkExtension(label_for=label_for, escape_html=escape_html)],
    )
    return md.convert(text)
