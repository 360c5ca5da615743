"""Grouping of document chunks into viewer sections."""

from typing import List, Optional

from sharecite.lookup.models import DocumentChunk, SectionedContent


def group_chunks_by_section(chunks: List[DocumentChunk]) -> List[SectionedContent]:
    """Group consecutive chunks that share a section id.

    A section id that reappears later starts a new group, so the output
    preserves chunk order.
    """
    sections: List[SectionedContent] = []
    current: Optional[SectionedContent] = None

    for chunk in chunks:
        if current is None or current.section_id != chunk.section_id:
            current = SectionedContent(
                section_id=chunk.section_id,
                section_title=chunk.section_title,
            )
            sections.append(current)
        current.chunks.append(chunk)

    return sections
