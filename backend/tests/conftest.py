"""Shared fixtures for sharecite tests."""

from typing import List

import httpx
import pytest
import pytest_asyncio

from sharecite.lookup import DocumentInfo, DocumentLookup, ShareLinkClient

BASE_URL = "http://backend.test"

SAMPLE_DOCUMENTS = [
    {
        "id": "doc-1",
        "filename": "Board_Memo.docx",
        "internalFilename": "1766337527304_abc.docx",
        "title": "Quarterly Board Memo",
        "mimeType": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "outline": [
            {"id": "section-1", "title": "Summary", "level": 1, "position": 0},
            {"id": "section-2", "title": "Revenue Outlook", "level": 2, "position": 1},
        ],
        "status": "completed",
    },
    {
        "id": "doc-2",
        "filename": "report.pdf",
        "title": "Annual Report",
        "mimeType": "application/pdf",
        "outline": [
            {"id": "section-3", "title": "Results", "level": 1, "position": 0},
        ],
        "status": "completed",
    },
    {
        "id": "doc-3",
        "filename": "report.docx",
        "title": None,
        "mimeType": "application/msword",
        "outline": None,
        "status": "processing",
    },
]

OTHER_DOCUMENTS = [
    {
        "id": "doc-9",
        "filename": "Pitch Deck.pptx",
        "title": "Pitch",
        "mimeType": "application/vnd.ms-powerpoint",
        "outline": [{"id": "intro", "title": "Intro", "level": 1, "position": 0}],
        "status": "completed",
    },
]

SAMPLE_CHUNKS = [
    {"id": "c1", "content": "Intro text", "sectionId": "section-1", "sectionTitle": "Summary", "chunkIndex": 0},
    {"id": "c2", "content": "More intro", "sectionId": "section-1", "sectionTitle": "Summary", "chunkIndex": 1},
    {"id": "c3", "content": "Revenue", "sectionId": "section-2", "sectionTitle": "Revenue Outlook", "chunkIndex": 2},
    {"id": "c4", "content": "Loose text", "sectionId": None, "sectionTitle": None, "chunkIndex": 3},
]


class FakeClock:
    """Controllable time source in seconds."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def share_link_handler(request_log: List[httpx.Request]):
    """Build a fake backend for the share link endpoints."""

    def handler(request: httpx.Request) -> httpx.Response:
        request_log.append(request)
        path = request.url.path

        if path == "/api/share/team-update/documents":
            return httpx.Response(200, json={"documents": SAMPLE_DOCUMENTS})
        if path == "/api/share/other-link/documents":
            return httpx.Response(200, json={"documents": OTHER_DOCUMENTS})
        if path == "/api/share/team-update/documents/doc-1":
            return httpx.Response(200, json={"document": SAMPLE_DOCUMENTS[0]})
        if path == "/api/share/team-update/documents/doc-1/chunks":
            return httpx.Response(200, json={"chunks": SAMPLE_CHUNKS})
        if path == "/api/share/expired-link/documents":
            return httpx.Response(
                403,
                json={
                    "error": {
                        "code": "LINK_EXPIRED",
                        "message": "This share link has expired",
                        "retryable": False,
                    }
                },
            )
        return httpx.Response(
            404,
            json={"error": {"code": "NOT_FOUND", "message": "Share link not found"}},
        )

    return handler


@pytest.fixture
def request_log() -> List[httpx.Request]:
    return []


@pytest.fixture
def share_client(request_log) -> ShareLinkClient:
    transport = httpx.MockTransport(share_link_handler(request_log))
    return ShareLinkClient(
        base_url=BASE_URL,
        token="viewer-token",
        client=httpx.AsyncClient(transport=transport),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def lookup(share_client, clock) -> DocumentLookup:
    return DocumentLookup(share_client, ttl_seconds=300, clock=clock)


@pytest_asyncio.fixture
async def loaded_lookup(lookup) -> DocumentLookup:
    await lookup.init_document_lookup("team-update")
    return lookup


@pytest.fixture
def sample_documents() -> List[DocumentInfo]:
    return [DocumentInfo.model_validate(doc) for doc in SAMPLE_DOCUMENTS]
