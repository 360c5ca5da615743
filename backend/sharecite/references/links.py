"""Conversion of citation markers into `cite://` markdown links.

Two link shapes are produced:

- `cite://<filename>/<section-id>` for the legacy full-text citation mode
- `cite://<filename>/<section-id>/<number>` for numbered citation pills

Both path segments are percent-encoded so filenames with spaces survive the
markdown link syntax.
"""

import re
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

import structlog

from sharecite.references.models import CollectedCitation, NumberedContent, ParsedCitation
from sharecite.references.parser import DOC_REFERENCE_PATTERN

logger = structlog.get_logger()

CITE_SCHEME = "cite://"

SAFE_PROTOCOLS = ("http", "https", "mailto", "tel")


def _encode(value: str) -> str:
    return quote(value, safe="")


def build_citation_url(filename: str, section_id: str, number: Optional[int] = None) -> str:
    """Build a `cite://` URL for a citation."""
    url = f"{CITE_SCHEME}{_encode(filename)}/{_encode(section_id)}"
    if number is not None:
        url += f"/{number}"
    return url


def convert_citations_to_markdown_links(content: str) -> str:
    """Rewrite each marker as `[CITE](cite://filename/section-id)`.

    Args:
        content: Message content

    Returns:
        Content with markers replaced by markdown links
    """
    return DOC_REFERENCE_PATTERN.sub(
        lambda match: f"[CITE]({build_citation_url(match.group(1), match.group(2))})",
        content,
    )


def convert_citations_to_numbered(content: str) -> NumberedContent:
    """Rewrite markers as numbered citation links and collect them.

    Each distinct (filename, section-id) pair gets the next number in order of
    first appearance; repeated citations reuse the number they were given.

    Args:
        content: Message content

    Returns:
        Rewritten content plus the collected citations, ordered by number
    """
    citations: List[CollectedCitation] = []
    seen: Dict[str, int] = {}

    def replace(match: "re.Match[str]") -> str:
        filename, section_id = match.group(1), match.group(2)
        key = f"{filename}:{section_id}"

        number = seen.get(key)
        if number is None:
            number = len(citations) + 1
            seen[key] = number
            citations.append(
                CollectedCitation(number=number, filename=filename, section_id=section_id)
            )

        return f"[{number}]({build_citation_url(filename, section_id, number)})"

    processed = DOC_REFERENCE_PATTERN.sub(replace, content)

    if citations:
        logger.debug("citations_numbered", count=len(citations))

    return NumberedContent(content=processed, citations=citations)


def citation_url_transform(url: str) -> str:
    """Sanitize a link URL while letting `cite://` links through.

    Args:
        url: URL found in rendered markdown

    Returns:
        The URL when its protocol is allowed, otherwise an empty string
    """
    if url.startswith(CITE_SCHEME):
        return url

    protocol = url.split(":")[0].lower()
    if protocol in SAFE_PROTOCOLS:
        return url

    # javascript:, data:, relative paths and anything else
    return ""


def parse_citation_url(href: Optional[str]) -> Optional[ParsedCitation]:
    """Parse a `cite://` URL into its components.

    Supports both `cite://filename/section-id` and
    `cite://filename/section-id/number`.

    Args:
        href: Link target

    Returns:
        Parsed citation, or None if href is not a valid citation URL
    """
    if not href or not href.startswith(CITE_SCHEME):
        return None

    path = href[len(CITE_SCHEME):]
    if not path:
        return None

    parts = path.split("/")
    if len(parts) < 2:
        return None

    encoded_filename, encoded_section_id = parts[0], parts[1]
    if not encoded_filename or not encoded_section_id:
        return None

    number: Optional[int] = None
    if len(parts) > 2 and parts[2]:
        leading_digits = re.match(r"\s*([+-]?\d+)", parts[2])
        if leading_digits:
            number = int(leading_digits.group(1))

    return ParsedCitation(
        filename=unquote(encoded_filename),
        section_id=unquote(encoded_section_id),
        number=number,
    )
