"""Accumulation of streamed assistant messages.

The backend streams replies as server-sent events::

    data: {"chunk": "Revenue grew "}
    data: {"chunk": "[DOC:report.pdf:section-3]"}
    data: [DONE]

Payloads may also carry `messageId` and `userMessageId`.
"""

import json
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Dict, Optional

import httpx
import structlog

from sharecite.config import get_settings
from sharecite.core.exceptions import StreamError

logger = structlog.get_logger()

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

FALLBACK_ERROR_MESSAGE = (
    "Sorry, I encountered an error processing your message. Please try again."
)


@dataclass
class ChatMessage:
    """A message in a conversation."""

    id: str
    role: str
    content: str
    timestamp: datetime = field(default_factory=datetime.utcnow)
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "is_error": self.is_error,
        }


class SSEMessageAccumulator:
    """Builds the full assistant message from SSE lines."""

    def __init__(self) -> None:
        self.chunks: list[str] = []
        self.message_id: Optional[str] = None
        self.user_message_id: Optional[str] = None
        self.is_done = False
        self.ignored_lines = 0

    @property
    def content(self) -> str:
        return "".join(self.chunks)

    def feed_line(self, line: str) -> bool:
        """Process one SSE line.

        Args:
            line: A line of the event stream, without the trailing newline

        Returns:
            True if the line added message text
        """
        if self.is_done or not line.startswith(DATA_PREFIX):
            return False

        data = line[len(DATA_PREFIX):].strip()

        if data == DONE_SENTINEL:
            self.is_done = True
            return False

        try:
            payload = json.loads(data)
        except ValueError:
            self.ignored_lines += 1
            return False

        if not isinstance(payload, dict):
            self.ignored_lines += 1
            return False

        if payload.get("messageId"):
            self.message_id = str(payload["messageId"])
        if payload.get("userMessageId"):
            self.user_message_id = str(payload["userMessageId"])

        chunk = payload.get("chunk")
        if chunk:
            self.chunks.append(str(chunk))
            return True

        return False

    def to_message(self) -> ChatMessage:
        """Build the final assistant message."""
        return ChatMessage(
            id=self.message_id or f"assistant-{int(time.time() * 1000)}",
            role="assistant",
            content=self.content,
        )


class ConversationStreamer:
    """Sends a chat message and reads the streamed reply.

    Example:
        ```python
        streamer = ConversationStreamer()
        async for partial in streamer.stream(conversation_id, "What is the ROI?"):
            print(partial)
        ```
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the streamer.

        Args:
            base_url: Backend base URL (default from settings)
            client: Pre-built httpx client, mainly for tests
            timeout: Read timeout in seconds (default from settings)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=10.0))
        return self._client

    async def stream(
        self,
        conversation_id: str,
        message: str,
        accumulator: Optional[SSEMessageAccumulator] = None,
    ) -> AsyncIterator[str]:
        """Post a message and yield the accumulated reply as it grows.

        Args:
            conversation_id: Conversation to post to
            message: User message text
            accumulator: Optional accumulator to fill (for ids and final content)

        Yields:
            The full reply text so far, after each received chunk

        Raises:
            StreamError: If the request fails or the backend rejects it
        """
        accumulator = accumulator or SSEMessageAccumulator()
        url = f"{self.base_url}/api/conversations/{conversation_id}/messages/stream"

        try:
            async with self._get_client().stream(
                "POST",
                url,
                json={"message": message},
                headers={"Accept": "text/event-stream"},
            ) as response:
                if response.is_error:
                    raise StreamError(
                        f"Failed to send message (status {response.status_code})"
                    )

                async for line in response.aiter_lines():
                    if accumulator.feed_line(line):
                        yield accumulator.content
                    if accumulator.is_done:
                        break
        except httpx.HTTPError as e:
            raise StreamError(f"Message stream failed: {e}") from e

        logger.debug(
            "message_stream_complete",
            conversation_id=conversation_id,
            length=len(accumulator.content),
            completed=accumulator.is_done,
            ignored_lines=accumulator.ignored_lines,
        )

    async def send_message(self, conversation_id: str, message: str) -> ChatMessage:
        """Send a message and return the complete assistant reply.

        Failures produce an apology message flagged with `is_error` instead of
        raising.

        Args:
            conversation_id: Conversation to post to
            message: User message text

        Returns:
            Assistant ChatMessage
        """
        accumulator = SSEMessageAccumulator()
        try:
            async for _ in self.stream(conversation_id, message, accumulator):
                pass
        except StreamError as e:
            logger.error(
                "send_message_failed",
                conversation_id=conversation_id,
                error=str(e),
            )
            return ChatMessage(
                id=f"error-{uuid.uuid4().hex[:8]}",
                role="assistant",
                content=FALLBACK_ERROR_MESSAGE,
                is_error=True,
            )

        return accumulator.to_message()

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
