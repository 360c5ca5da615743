"""Async HTTP client for the backend share link endpoints."""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from sharecite.config import get_settings
from sharecite.core.exceptions import ShareLinkAPIError
from sharecite.lookup.models import DocumentChunk, DocumentInfo

logger = structlog.get_logger()


class ShareLinkClient:
    """Reads the documents a share link exposes.

    Example:
        ```python
        async with ShareLinkClient(base_url="https://api.example.com") as client:
            documents = await client.get_share_link_documents("team-update")
        ```
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend base URL (default from settings)
            token: Optional bearer token (default from settings)
            timeout: Request timeout in seconds (default from settings)
            client: Pre-built httpx client, mainly for tests
        """
        settings = get_settings()

        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token if token is not None else settings.api_token
        self.timeout = timeout or settings.request_timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=10.0),
            )
        return self._client

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(self, method: str, endpoint: str, **kwargs: Any) -> Dict[str, Any]:
        """Perform a JSON request against the backend.

        Args:
            method: HTTP method
            endpoint: Path starting with `/api/`
            **kwargs: Extra arguments for httpx

        Returns:
            Decoded JSON body (empty dict for 204 responses)

        Raises:
            ShareLinkAPIError: On transport failure or non-2xx status
        """
        url = f"{self.base_url}{endpoint}"

        try:
            response = await self._get_client().request(
                method,
                url,
                headers=self._headers(),
                **kwargs,
            )
        except httpx.HTTPError as e:
            logger.error("share_link_request_failed", url=url, error=str(e))
            raise ShareLinkAPIError(f"Request to {endpoint} failed: {e}") from e

        if response.is_error:
            message = "An error occurred"
            code = ""
            try:
                error = response.json().get("error") or {}
                message = error.get("message") or message
                code = error.get("code") or ""
            except (ValueError, AttributeError):
                pass

            logger.warning(
                "share_link_request_rejected",
                url=url,
                status_code=response.status_code,
                code=code,
            )
            raise ShareLinkAPIError(message, status_code=response.status_code, code=code)

        if response.status_code == 204:
            return {}

        return response.json()

    async def get_share_link_documents(self, slug: str) -> List[DocumentInfo]:
        """List the documents available through a share link."""
        data = await self.request("GET", f"/api/share/{slug}/documents")
        return [DocumentInfo.model_validate(doc) for doc in data.get("documents", [])]

    async def get_share_link_document(self, slug: str, document_id: str) -> DocumentInfo:
        """Fetch a single document's metadata."""
        data = await self.request("GET", f"/api/share/{slug}/documents/{document_id}")
        return DocumentInfo.model_validate(data["document"])

    async def get_share_link_document_chunks(
        self,
        slug: str,
        document_id: str,
    ) -> List[DocumentChunk]:
        """Fetch the text chunks of a document for the viewer."""
        data = await self.request(
            "GET", f"/api/share/{slug}/documents/{document_id}/chunks"
        )
        return [DocumentChunk.model_validate(chunk) for chunk in data.get("chunks", [])]

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ShareLinkClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
