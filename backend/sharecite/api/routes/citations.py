"""Citation API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from sharecite.core.exceptions import ShareLinkAPIError
from sharecite.lookup import DocumentInfo, DocumentLookup, get_document_lookup
from sharecite.references import convert_citations_to_numbered, split_message_into_parts
from sharecite.render import CitationMode, MessageRenderer

# Create router
router = APIRouter(tags=["citations"])


# Request/Response models
class ContentRequest(BaseModel):
    """Raw message content."""

    content: str


class RenderRequest(BaseModel):
    """Message render request."""

    content: str
    mode: Optional[CitationMode] = None


class ReferenceResponse(BaseModel):
    """A parsed citation marker."""

    filename: str
    section_id: str
    start_index: int
    end_index: int
    full_match: str


class MessagePartResponse(BaseModel):
    """A text or reference segment."""

    type: str
    content: str
    reference: Optional[ReferenceResponse] = None


class ParseResponse(BaseModel):
    """Parse result."""

    parts: List[MessagePartResponse]
    reference_count: int


class CollectedCitationResponse(BaseModel):
    """A numbered citation."""

    number: int
    filename: str
    section_id: str


class NumberedResponse(BaseModel):
    """Numbered citation conversion result."""

    content: str
    citations: List[CollectedCitationResponse]


class RenderedCitationResponse(BaseModel):
    """A citation as rendered."""

    filename: str
    section_id: str
    number: Optional[int] = None
    document_id: Optional[str] = None
    document_title: Optional[str] = None
    section_title: Optional[str] = None
    resolved: bool
    label: str


class RenderResponse(BaseModel):
    """Rendered message."""

    html: str
    mode: str
    parts: List[MessagePartResponse]
    citations: List[RenderedCitationResponse]


class SectionInfoResponse(BaseModel):
    """Readable names for a section."""

    document_title: str
    section_title: str


class ResolveRequest(BaseModel):
    """Citation click to resolve."""

    filename: str
    section_id: str


class ResolveResponse(BaseModel):
    """Where a citation click should take the viewer."""

    document_id: Optional[str] = None
    section_id: str
    display_name: Optional[str] = None
    section_exists: bool = False
    resolved: bool = False


class CacheStatusResponse(BaseModel):
    """Lookup cache status for a slug."""

    slug: str
    initialized: bool
    document_count: int = Field(default=0, ge=0)


async def _load_lookup(slug: str, lookup: DocumentLookup) -> DocumentLookup:
    try:
        await lookup.init_document_lookup(slug)
    except ShareLinkAPIError as e:
        if e.status_code == status.HTTP_404_NOT_FOUND:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(e),
            )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to load share link documents: {str(e)}",
        )
    return lookup


@router.post("/citations/parse", response_model=ParseResponse)
async def parse_citations(request: ContentRequest) -> ParseResponse:
    """
    Split message content into text and citation parts.

    Args:
        request: Message content

    Returns:
        Ordered message parts
    """
    parts = split_message_into_parts(request.content)
    return ParseResponse(
        parts=[MessagePartResponse(**part.to_dict()) for part in parts],
        reference_count=sum(1 for part in parts if part.is_reference),
    )


@router.post("/citations/numbered", response_model=NumberedResponse)
async def number_citations(request: ContentRequest) -> NumberedResponse:
    """Rewrite citation markers as numbered `cite://` links."""
    numbered = convert_citations_to_numbered(request.content)
    return NumberedResponse(
        content=numbered.content,
        citations=[CollectedCitationResponse(**c.to_dict()) for c in numbered.citations],
    )


@router.post("/share/{slug}/messages/render", response_model=RenderResponse)
async def render_message(
    slug: str,
    request: RenderRequest,
    lookup: DocumentLookup = Depends(get_document_lookup),
) -> RenderResponse:
    """
    Render a message with citations resolved against a share link.

    Args:
        slug: Share link slug
        request: Content and citation mode

    Returns:
        Rendered HTML with parts and citations
    """
    await _load_lookup(slug, lookup)

    rendered = MessageRenderer(lookup).render(request.content, mode=request.mode)
    return RenderResponse(**rendered.to_dict())


@router.get("/share/{slug}/documents/lookup", response_model=DocumentInfo)
async def lookup_document(
    slug: str,
    filename: str = Query(..., min_length=1),
    lookup: DocumentLookup = Depends(get_document_lookup),
) -> DocumentInfo:
    """Resolve a citation filename to a share link document."""
    await _load_lookup(slug, lookup)

    doc = lookup.lookup_document_by_filename(filename)
    if doc is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document not found: {filename}",
        )
    return doc


@router.get("/share/{slug}/sections", response_model=SectionInfoResponse)
async def get_section(
    slug: str,
    filename: str = Query(..., min_length=1),
    section_id: str = Query(..., min_length=1),
    lookup: DocumentLookup = Depends(get_document_lookup),
) -> SectionInfoResponse:
    """Get readable document and section names for a citation."""
    await _load_lookup(slug, lookup)

    info = lookup.get_section_info(filename, section_id)
    if info is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Section {section_id} not found in {filename}",
        )
    return SectionInfoResponse(**info.to_dict())


@router.post("/share/{slug}/citations/resolve", response_model=ResolveResponse)
async def resolve_citation(
    slug: str,
    request: ResolveRequest,
    lookup: DocumentLookup = Depends(get_document_lookup),
) -> ResolveResponse:
    """Work out which document and section a citation click opens."""
    await _load_lookup(slug, lookup)

    doc = lookup.lookup_document_by_filename(request.filename)
    if doc is None:
        return ResolveResponse(section_id=request.section_id)

    return ResolveResponse(
        document_id=doc.id,
        section_id=request.section_id,
        display_name=doc.filename,
        section_exists=lookup.verify_section_exists(doc.id, request.section_id),
        resolved=True,
    )


@router.get("/share/{slug}/cache", response_model=CacheStatusResponse)
async def get_cache_status(
    slug: str,
    lookup: DocumentLookup = Depends(get_document_lookup),
) -> CacheStatusResponse:
    """Report whether a fresh document index is held for a slug."""
    initialized = lookup.is_cache_initialized(slug)
    return CacheStatusResponse(
        slug=slug,
        initialized=initialized,
        document_count=len(lookup.get_all_documents()) if initialized else 0,
    )


@router.delete("/share/{slug}/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(
    slug: str,
    lookup: DocumentLookup = Depends(get_document_lookup),
) -> None:
    """Drop the cached document index."""
    lookup.clear_document_cache()
