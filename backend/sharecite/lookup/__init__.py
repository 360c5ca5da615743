"""Share link document lookup."""

from sharecite.lookup.cache import (
    DocumentLookup,
    build_document_cache,
    clear_document_cache,
    get_all_documents,
    get_document_display_name,
    get_document_lookup,
    get_section_info,
    init_document_lookup,
    is_cache_initialized,
    lookup_document_by_filename,
    lookup_document_by_id,
    reset_document_lookup,
    strip_extension,
    verify_section_exists,
)
from sharecite.lookup.client import ShareLinkClient
from sharecite.lookup.models import (
    DocumentCache,
    DocumentChunk,
    DocumentInfo,
    OutlineSection,
    SectionedContent,
    SectionInfo,
)

__all__ = [
    "DocumentLookup",
    "ShareLinkClient",
    "build_document_cache",
    "strip_extension",
    "get_document_lookup",
    "reset_document_lookup",
    "init_document_lookup",
    "lookup_document_by_filename",
    "lookup_document_by_id",
    "get_all_documents",
    "verify_section_exists",
    "get_document_display_name",
    "get_section_info",
    "clear_document_cache",
    "is_cache_initialized",
    "DocumentCache",
    "DocumentChunk",
    "DocumentInfo",
    "OutlineSection",
    "SectionedContent",
    "SectionInfo",
]
