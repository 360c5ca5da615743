"""Streaming of assistant replies."""

from sharecite.streaming.sse import (
    FALLBACK_ERROR_MESSAGE,
    ChatMessage,
    ConversationStreamer,
    SSEMessageAccumulator,
)

__all__ = [
    "ChatMessage",
    "ConversationStreamer",
    "SSEMessageAccumulator",
    "FALLBACK_ERROR_MESSAGE",
]
