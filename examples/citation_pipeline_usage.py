"""
Example: Citation Pipeline Usage

This example walks an assistant reply through the citation pipeline:
parsing markers, resolving them against a share link's documents,
rendering both citation modes, and navigating the viewer to a section.

The backend is simulated with an in-process transport, so no server is needed.
"""

import asyncio

import httpx

from sharecite import (
    CitationMode,
    CitationNavigator,
    DocumentLookup,
    MessageRenderer,
    ShareLinkClient,
    split_message_into_parts,
)
from sharecite.viewer import ContainerBox, ElementBox, HighlightCoordinator

DOCUMENTS = [
    {
        "id": "doc-1",
        "filename": "Business Plan.pdf",
        "internalFilename": "1766337527304_631ff5d36a408576.pdf",
        "title": "Business Plan 2025",
        "mimeType": "application/pdf",
        "outline": [
            {"id": "executive-summary", "title": "Executive Summary", "level": 1, "position": 0},
            {"id": "financials", "title": "Financial Projections", "level": 1, "position": 1},
        ],
        "status": "completed",
    },
]

REPLY = (
    "Revenue is expected to double by year three "
    "[DOC:1766337527304_631ff5d36a408576.pdf:financials], driven by the "
    "expansion described in the summary [DOC:Business Plan.pdf:executive-summary]."
)


def fake_backend(request: httpx.Request) -> httpx.Response:
    """Serve the share link listing."""
    return httpx.Response(200, json={"documents": DOCUMENTS})


class PrintingSurface:
    """Viewer surface that prints what a real viewer would do."""

    def element_box(self, element_id):
        return ElementBox(top=1200, height=80)

    def container_box(self):
        return ContainerBox(top=64, scroll_top=0, client_height=720)

    def scroll_to(self, top, smooth=True):
        print(f"  scroll container to {top:.0f}px")

    def add_class(self, element_id, class_name):
        print(f"  + {class_name} on #{element_id}")

    def remove_class(self, element_id, class_name):
        print(f"  - {class_name} on #{element_id}")


async def parsing_example():
    """Split a reply into text and citation parts."""
    print("=" * 60)
    print("Parsing Citation Markers")
    print("=" * 60)

    for part in split_message_into_parts(REPLY):
        if part.is_reference:
            print(f"  [reference] {part.reference.filename} -> {part.reference.section_id}")
        else:
            print(f"  [text] {part.content!r}")


async def rendering_example(lookup: DocumentLookup):
    """Render the reply in both citation modes."""
    print("\n" + "=" * 60)
    print("Rendering Citations")
    print("=" * 60)

    renderer = MessageRenderer(lookup)

    inline = renderer.render(REPLY, mode=CitationMode.INLINE)
    print("Inline labels:")
    for citation in inline.citations:
        print(f"  ✓ {citation.label}")

    numbered = renderer.render(REPLY, mode=CitationMode.NUMBERED)
    print("Numbered sources:")
    for citation in numbered.citations:
        print(f"  [{citation.number}] {citation.document_title} - {citation.section_title}")

    print(f"\nHTML ({len(numbered.html)} chars):\n{numbered.html}")


async def navigation_example(lookup: DocumentLookup):
    """Open a citation in the viewer and replay the highlight."""
    print("\n" + "=" * 60)
    print("Citation Navigation")
    print("=" * 60)

    navigator = CitationNavigator(lookup, coordinator=HighlightCoordinator(PrintingSurface()))

    state = navigator.handle_citation_click("1766337527304_631ff5d36a408576.pdf", "financials")
    print(f"✓ Opened {state.selected_document_id} at {state.highlight_section_id}")
    await asyncio.sleep(3.5)

    state = navigator.handle_citation_click("Business Plan.pdf", "financials")
    print(f"✓ Same citation again, highlight key {state.highlight_key}")
    await asyncio.sleep(3.5)


async def main():
    """Run all examples."""
    client = ShareLinkClient(
        base_url="http://backend.local",
        client=httpx.AsyncClient(transport=httpx.MockTransport(fake_backend)),
    )
    lookup = DocumentLookup(client)
    await lookup.init_document_lookup("demo-share")

    await parsing_example()
    await rendering_example(lookup)
    await navigation_example(lookup)

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
