"""Tests for markdown and message rendering."""

import pytest

from sharecite.references import convert_citations_to_markdown_links
from sharecite.render import (
    CitationMode,
    MessageRenderer,
    RenderedCitation,
    render_citation_block,
    render_citation_button,
    render_markdown,
)


class TestRenderMarkdown:
    """Test the markdown layer."""

    def test_basic_markdown(self):
        """Test emphasis and lists render."""
        html = render_markdown("Some **bold** text\n\n- one\n- two")

        assert "<strong>bold</strong>" in html
        assert "<li>one</li>" in html

    def test_empty_text(self):
        """Test that empty input renders nothing."""
        assert render_markdown("") == ""

    def test_table_extension(self):
        """Test pipe tables."""
        html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |")

        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_raw_html_is_escaped(self):
        """Test that raw HTML in model output is not passed through."""
        html = render_markdown("before <script>alert(1)</script> after")

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_external_link_opens_new_tab(self):
        """Test that safe links get target and rel attributes."""
        html = render_markdown("[site](https://example.com)")

        assert 'href="https://example.com"' in html
        assert 'target="_blank"' in html
        assert 'rel="noopener noreferrer"' in html

    def test_unsafe_link_is_stripped(self):
        """Test that javascript: links lose their href."""
        html = render_markdown("[click](javascript:alert(1))")

        assert "javascript" not in html
        assert ">click</a>" in html

    def test_unsafe_image_sources_are_stripped(self):
        """Test that images only keep sources with allowed protocols."""
        html = render_markdown(
            "![x](javascript:alert(1)) "
            "![y](data:text/html;base64,PHNjcmlwdD4=) "
            "![z](cite://report.pdf/section-3/1) "
            "![chart](https://example.com/chart.png)"
        )

        assert "javascript" not in html
        assert "data:" not in html
        assert "cite://" not in html
        assert 'alt="x"' in html
        assert 'src="https://example.com/chart.png"' in html
        assert html.count("src=") == 1

    def test_numbered_citation_link_becomes_pill(self):
        """Test that numbered cite links render as pills."""
        html = render_markdown("Growth [2](cite://report.pdf/section-3/2).")

        assert "<a " not in html
        assert 'class="citation-pill"' in html
        assert 'data-filename="report.pdf"' in html
        assert 'data-section-id="section-3"' in html
        assert 'data-citation-number="2"' in html
        assert 'aria-label="Citation 2"' in html
        assert ">2</button>." in html

    def test_legacy_citation_link_uses_labeler(self):
        """Test that unnumbered cite links are labelled by the callback."""
        content = convert_citations_to_markdown_links("See [DOC:report.pdf:section-3]")
        html = render_markdown(content, label_for=lambda c: f"{c.filename} / {c.section_id}")

        assert 'class="citation-link"' in html
        assert ">report.pdf / section-3</button>" in html

    def test_legacy_citation_link_falls_back_to_filename(self):
        """Test the filename label when no labeler is given."""
        html = render_markdown("[CITE](cite://Board%20Memo.docx/section-2)")

        assert ">Board Memo.docx</button>" in html
        assert "data-citation-number" not in html


class TestCitationMarkup:
    """Test citation button and source list markup."""

    def test_button_escapes_values(self):
        """Test that filenames are HTML-escaped."""
        citation = RenderedCitation(filename="a<b>.pdf", section_id="s1")
        html = render_citation_button(citation)

        assert "a&lt;b&gt;.pdf" in html
        assert "<b>" not in html

    def test_block_pluralization(self):
        """Test the source count summary."""
        one = [RenderedCitation(filename="a.pdf", section_id="s1", number=1)]
        two = one + [RenderedCitation(filename="b.pdf", section_id="s2", number=2)]

        assert "<summary>1 source</summary>" in render_citation_block(one)
        assert "<summary>2 sources</summary>" in render_citation_block(two)
        assert render_citation_block([]) == ""


class TestMessageRenderer:
    """Test message rendering in both citation modes."""

    @pytest.mark.asyncio
    async def test_inline_mode(self, loaded_lookup):
        """Test inline citation buttons with resolved labels."""
        renderer = MessageRenderer(loaded_lookup, mode=CitationMode.INLINE)
        rendered = renderer.render("See the results [DOC:report.pdf:section-3]")

        assert rendered.mode == CitationMode.INLINE
        assert len(rendered.parts) == 2
        assert rendered.html.startswith("<p>See the results")
        assert 'class="citation-link"' in rendered.html
        assert "report.pdf: Results</button>" in rendered.html

        citation = rendered.citations[0]
        assert citation.resolved is True
        assert citation.document_id == "doc-2"
        assert citation.label == "report.pdf: Results"

    @pytest.mark.asyncio
    async def test_inline_mode_internal_filename(self, loaded_lookup):
        """Test that internal storage names show the display name."""
        renderer = MessageRenderer(loaded_lookup, mode=CitationMode.INLINE)
        rendered = renderer.render("[DOC:1766337527304_abc.docx:section-2]")

        assert "Board_Memo.docx: Revenue Outlook" in rendered.html

    @pytest.mark.asyncio
    async def test_inline_mode_deduplicates_citations(self, loaded_lookup):
        """Test that repeated markers are listed once."""
        renderer = MessageRenderer(loaded_lookup, mode=CitationMode.INLINE)
        rendered = renderer.render("[DOC:report.pdf:section-3] and [DOC:report.pdf:section-3]")

        assert rendered.html.count('class="citation-link"') == 2
        assert len(rendered.citations) == 1

    @pytest.mark.asyncio
    async def test_unresolved_citation_uses_filename(self, loaded_lookup):
        """Test the fallback label for unknown documents."""
        renderer = MessageRenderer(loaded_lookup, mode=CitationMode.INLINE)
        rendered = renderer.render("[DOC:unknown.pdf:intro]")

        citation = rendered.citations[0]
        assert citation.resolved is False
        assert citation.label == "unknown.pdf"
        assert ">unknown.pdf</button>" in rendered.html

    @pytest.mark.asyncio
    async def test_missing_section_uses_display_name(self, loaded_lookup):
        """Test that an unknown section falls back to the document's display name."""
        renderer = MessageRenderer(loaded_lookup, mode=CitationMode.INLINE)
        rendered = renderer.render("[DOC:1766337527304_abc.docx:section-99]")

        citation = rendered.citations[0]
        assert citation.resolved is True
        assert citation.section_title is None
        assert citation.label == "Board_Memo.docx"
        assert ">Board_Memo.docx</button>" in rendered.html
        assert "1766337527304_abc.docx</button>" not in rendered.html

    @pytest.mark.asyncio
    async def test_numbered_mode(self, loaded_lookup):
        """Test numbered pills and the source list."""
        renderer = MessageRenderer(loaded_lookup, mode=CitationMode.NUMBERED)
        rendered = renderer.render(
            "Growth [DOC:Board_Memo.docx:section-2] and results "
            "[DOC:report.pdf:section-3], again [DOC:Board_Memo.docx:section-2]."
        )

        assert [c.number for c in rendered.citations] == [1, 2]
        assert rendered.html.count('class="citation-pill"') == 3
        assert "<summary>2 sources</summary>" in rendered.html
        assert '<span class="citation-section">Revenue Outlook</span>' in rendered.html
        assert '<span class="citation-document">report.pdf</span>' in rendered.html

    @pytest.mark.asyncio
    async def test_mode_override(self, loaded_lookup):
        """Test that a per-call mode overrides the default."""
        renderer = MessageRenderer(loaded_lookup, mode=CitationMode.INLINE)
        rendered = renderer.render("[DOC:report.pdf:section-3]", mode="numbered")

        assert rendered.mode == CitationMode.NUMBERED
        assert rendered.to_dict()["mode"] == "numbered"

    @pytest.mark.asyncio
    async def test_plain_content(self, loaded_lookup):
        """Test content without citations."""
        renderer = MessageRenderer(loaded_lookup, mode=CitationMode.INLINE)
        rendered = renderer.render("Nothing to cite here.")

        assert rendered.html == "<p>Nothing to cite here.</p>"
        assert rendered.citations == []

    def test_click_dispatches_to_callback(self, lookup):
        """Test citation clicks reach the navigation callback."""
        clicks = []
        renderer = MessageRenderer(
            lookup,
            mode=CitationMode.INLINE,
            on_citation_click=lambda filename, section_id: clicks.append((filename, section_id)),
        )

        assert renderer.click("report.pdf", "section-3") is True
        assert clicks == [("report.pdf", "section-3")]

    def test_click_without_callback(self, lookup):
        """Test that clicks are ignored without a callback."""
        renderer = MessageRenderer(lookup, mode=CitationMode.INLINE)

        assert renderer.click("report.pdf", "section-3") is False
