"""Citation marker parsing and link conversion.

Example:
    ```python
    from sharecite.references import split_message_into_parts

    parts = split_message_into_parts("See [DOC:report.pdf:section-3]")
    ```
"""

from sharecite.references.links import (
    CITE_SCHEME,
    build_citation_url,
    citation_url_transform,
    convert_citations_to_markdown_links,
    convert_citations_to_numbered,
    parse_citation_url,
)
from sharecite.references.models import (
    CollectedCitation,
    DocumentReference,
    MessagePart,
    MessagePartType,
    NumberedContent,
    ParsedCitation,
)
from sharecite.references.parser import (
    DOC_REFERENCE_PATTERN,
    has_document_references,
    parse_document_references,
    split_message_into_parts,
)

__all__ = [
    # Parsing
    "DOC_REFERENCE_PATTERN",
    "parse_document_references",
    "has_document_references",
    "split_message_into_parts",
    # Links
    "CITE_SCHEME",
    "build_citation_url",
    "convert_citations_to_markdown_links",
    "convert_citations_to_numbered",
    "citation_url_transform",
    "parse_citation_url",
    # Types
    "DocumentReference",
    "MessagePart",
    "MessagePartType",
    "ParsedCitation",
    "CollectedCitation",
    "NumberedContent",
]
