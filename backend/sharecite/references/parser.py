"""Parsing of `[DOC:filename:section-id]` citation markers.

Assistant answers cite document sections with markers such as
`[DOC:financial.pdf:section-3-2]`. The filename may contain letters, digits,
whitespace, dots, dashes and underscores; the section id letters, digits,
dashes and underscores. Anything that does not match is left alone and flows
through as literal text.
"""

import re
from typing import List

from sharecite.references.models import DocumentReference, MessagePart

# Group 1: filename, group 2: section id
DOC_REFERENCE_PATTERN = re.compile(r"\[DOC:([a-zA-Z0-9\s._-]+):([a-zA-Z0-9_-]+)\]")


def parse_document_references(text: str) -> List[DocumentReference]:
    """Find every citation marker in text.

    Args:
        text: Raw assistant message text

    Returns:
        References in order of appearance, with offsets into text
    """
    if not text:
        return []

    return [
        DocumentReference(
            filename=match.group(1),
            section_id=match.group(2),
            start_index=match.start(),
            end_index=match.end(),
            full_match=match.group(0),
        )
        for match in DOC_REFERENCE_PATTERN.finditer(text)
    ]


def has_document_references(text: str) -> bool:
    """Check whether text contains at least one citation marker."""
    return bool(text) and DOC_REFERENCE_PATTERN.search(text) is not None


def split_message_into_parts(content: str) -> List[MessagePart]:
    """Split a message into interleaved text and reference parts.

    Joining the `content` of the returned parts in order gives back the
    original string. Empty text runs between adjacent markers are skipped.

    Args:
        content: Message content

    Returns:
        Ordered list of message parts
    """
    parts: List[MessagePart] = []
    last_index = 0

    for reference in parse_document_references(content):
        if reference.start_index > last_index:
            parts.append(MessagePart.text(content[last_index:reference.start_index]))
        parts.append(MessagePart.from_reference(reference))
        last_index = reference.end_index

    if last_index < len(content):
        parts.append(MessagePart.text(content[last_index:]))

    return parts
