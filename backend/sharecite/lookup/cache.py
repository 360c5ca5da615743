"""Document lookup cache for citation resolution.

Resolves the filenames used in citation markers to share link documents in
constant time. Citations may use either the display filename
(`Board_Memo.docx`) or the internal storage filename
(`1766337527304_631ff5d36a408576.docx`), with or without the extension, or
the document title.
"""

import asyncio
import re
import time
from typing import Callable, Dict, List, Optional

import structlog

from sharecite.config import get_settings
from sharecite.lookup.client import ShareLinkClient
from sharecite.lookup.models import DocumentCache, DocumentInfo, SectionInfo

logger = structlog.get_logger()

_EXTENSION_PATTERN = re.compile(r"\.[^.]+$")


def strip_extension(filename: str) -> str:
    """Remove the last extension from a filename."""
    return _EXTENSION_PATTERN.sub("", filename)


def build_document_cache(
    documents: List[DocumentInfo],
    slug: str,
    loaded_at: float,
) -> DocumentCache:
    """Build the lookup maps for a document listing.

    Exact filenames are always written. Extension-stripped variants are only
    written when the key is still free, so the first document keeps a
    shortened name shared by several files.

    Args:
        documents: Documents returned by the share link listing
        slug: Share link slug
        loaded_at: Timestamp of the fetch

    Returns:
        Populated cache snapshot
    """
    by_filename: Dict[str, DocumentInfo] = {}
    by_id: Dict[str, DocumentInfo] = {}
    by_title: Dict[str, DocumentInfo] = {}

    for doc in documents:
        by_filename[doc.filename.lower()] = doc
        by_filename.setdefault(strip_extension(doc.filename).lower(), doc)

        # Citations are generated against internal storage names
        if doc.internal_filename and doc.internal_filename != doc.filename:
            by_filename[doc.internal_filename.lower()] = doc
            by_filename.setdefault(strip_extension(doc.internal_filename).lower(), doc)

        by_id[doc.id] = doc

        if doc.title:
            by_title[doc.title.lower()] = doc

    return DocumentCache(
        by_filename=by_filename,
        by_id=by_id,
        by_title=by_title,
        slug=slug,
        loaded_at=loaded_at,
    )


class DocumentLookup:
    """TTL-bound index of the documents behind one share link.

    Holds a single slot: initializing for another slug replaces the current
    snapshot. Reads are synchronous and always see the installed snapshot.

    Example:
        ```python
        lookup = DocumentLookup(ShareLinkClient())
        await lookup.init_document_lookup("team-update")

        doc = lookup.lookup_document_by_filename("board_memo.docx")
        info = lookup.get_section_info("board_memo.docx", "section-2")
        ```
    """

    def __init__(
        self,
        client: Optional[ShareLinkClient] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the lookup.

        Args:
            client: Share link API client
            ttl_seconds: Freshness window (default from settings)
            clock: Time source in seconds
        """
        self.client = client or ShareLinkClient()
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else get_settings().document_cache_ttl_seconds
        )
        self._clock = clock
        self._cache: Optional[DocumentCache] = None
        self._lock = asyncio.Lock()
        self.fetch_count = 0

    @property
    def cache(self) -> Optional[DocumentCache]:
        return self._cache

    def _is_fresh(self, slug: str) -> bool:
        return (
            self._cache is not None
            and self._cache.slug == slug
            and self._clock() - self._cache.loaded_at < self.ttl_seconds
        )

    async def init_document_lookup(self, slug: str, force: bool = False) -> None:
        """Load the document index for a share link.

        Does nothing while a fresh snapshot for the same slug is installed,
        unless `force` is set.

        Args:
            slug: Share link slug
            force: Refresh even if the snapshot is fresh

        Raises:
            ShareLinkAPIError: If the listing cannot be fetched; the previous
                snapshot is left in place
        """
        if not force and self._is_fresh(slug):
            return

        async with self._lock:
            # Another caller may have refreshed while we waited
            if not force and self._is_fresh(slug):
                return

            self.fetch_count += 1
            try:
                documents = await self.client.get_share_link_documents(slug)
            except Exception as e:
                logger.error("document_lookup_init_failed", slug=slug, error=str(e))
                raise

            self._cache = build_document_cache(documents, slug, self._clock())

        logger.info(
            "document_lookup_initialized",
            slug=slug,
            document_count=len(documents),
            forced=force,
        )

    def lookup_document_by_filename(self, filename: str) -> Optional[DocumentInfo]:
        """Resolve a citation filename to a document.

        Tries the exact name, then the name without extension, then the
        title, all case-insensitively.

        Args:
            filename: Filename from the citation

        Returns:
            DocumentInfo or None if not found
        """
        if self._cache is None:
            logger.warning("document_lookup_not_initialized", filename=filename)
            return None

        key = filename.lower()

        exact = self._cache.by_filename.get(key)
        if exact is not None:
            return exact

        without_ext = self._cache.by_filename.get(strip_extension(filename).lower())
        if without_ext is not None:
            return without_ext

        return self._cache.by_title.get(key)

    def lookup_document_by_id(self, document_id: str) -> Optional[DocumentInfo]:
        """Look up a document by id."""
        if self._cache is None:
            logger.warning("document_lookup_not_initialized", document_id=document_id)
            return None

        return self._cache.by_id.get(document_id)

    def get_all_documents(self) -> List[DocumentInfo]:
        """Return every cached document in listing order."""
        if self._cache is None:
            return []

        return list(self._cache.by_id.values())

    def verify_section_exists(self, document_id: str, section_id: str) -> bool:
        """Check that a section id appears in a document's outline."""
        doc = self.lookup_document_by_id(document_id)
        if doc is None:
            return False

        return doc.find_section(section_id) is not None

    def get_document_display_name(self, filename: str) -> Optional[str]:
        """Get the display filename for an internal or display filename."""
        doc = self.lookup_document_by_filename(filename)
        return doc.filename if doc is not None else None

    def get_section_info(self, filename: str, section_id: str) -> Optional[SectionInfo]:
        """Get readable document and section names for a citation.

        The document title is the display filename; `DocumentInfo.title`
        often holds the first heading rather than a name.

        Args:
            filename: Filename from the citation
            section_id: Section id from the citation

        Returns:
            SectionInfo, or None when the document or section is unknown
        """
        doc = self.lookup_document_by_filename(filename)
        if doc is None:
            return None

        section = doc.find_section(section_id)
        if section is None:
            logger.debug(
                "section_not_found",
                filename=filename,
                section_id=section_id,
                document_id=doc.id,
            )
            return None

        return SectionInfo(document_title=doc.filename, section_title=section.title)

    def clear_document_cache(self) -> None:
        """Drop the installed snapshot."""
        self._cache = None
        logger.debug("document_cache_cleared")

    def is_cache_initialized(self, slug: str) -> bool:
        """Check for a fresh snapshot of slug without fetching."""
        return self._is_fresh(slug)


# Default lookup used by the module-level helpers
_document_lookup: Optional[DocumentLookup] = None


def get_document_lookup() -> DocumentLookup:
    """Get the default document lookup.

    Returns:
        Process-wide DocumentLookup instance
    """
    global _document_lookup
    if _document_lookup is None:
        _document_lookup = DocumentLookup()
    return _document_lookup


def reset_document_lookup() -> None:
    """Reset the default document lookup (useful for testing)."""
    global _document_lookup
    _document_lookup = None


async def init_document_lookup(slug: str, force: bool = False) -> None:
    """Load the default lookup for a share link."""
    await get_document_lookup().init_document_lookup(slug, force=force)


def lookup_document_by_filename(filename: str) -> Optional[DocumentInfo]:
    """Resolve a citation filename with the default lookup."""
    return get_document_lookup().lookup_document_by_filename(filename)


def lookup_document_by_id(document_id: str) -> Optional[DocumentInfo]:
    """Look up a document id with the default lookup."""
    return get_document_lookup().lookup_document_by_id(document_id)


def get_all_documents() -> List[DocumentInfo]:
    """List documents held by the default lookup."""
    return get_document_lookup().get_all_documents()


def verify_section_exists(document_id: str, section_id: str) -> bool:
    """Check a section id against the default lookup."""
    return get_document_lookup().verify_section_exists(document_id, section_id)


def get_document_display_name(filename: str) -> Optional[str]:
    """Get a display filename from the default lookup."""
    return get_document_lookup().get_document_display_name(filename)


def get_section_info(filename: str, section_id: str) -> Optional[SectionInfo]:
    """Get section names from the default lookup."""
    return get_document_lookup().get_section_info(filename, section_id)


def clear_document_cache() -> None:
    """Clear the default lookup's snapshot."""
    get_document_lookup().clear_document_cache()


def is_cache_initialized(slug: str) -> bool:
    """Check the default lookup's freshness for slug."""
    return get_document_lookup().is_cache_initialized(slug)
