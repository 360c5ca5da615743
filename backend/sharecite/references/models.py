"""Type definitions for parsed document references."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class MessagePartType(str, Enum):
    """Kinds of message segments."""

    TEXT = "text"
    REFERENCE = "reference"


@dataclass(frozen=True)
class DocumentReference:
    """A single `[DOC:filename:section-id]` occurrence in message text.

    Offsets index into the original string; `end_index` is exclusive.
    """

    filename: str
    section_id: str
    start_index: int
    end_index: int
    full_match: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "filename": self.filename,
            "section_id": self.section_id,
            "start_index": self.start_index,
            "end_index": self.end_index,
            "full_match": self.full_match,
        }


@dataclass(frozen=True)
class MessagePart:
    """A text or reference segment of a message."""

    type: MessagePartType
    content: str
    reference: Optional[DocumentReference] = None

    @classmethod
    def text(cls, content: str) -> MessagePart:
        return cls(type=MessagePartType.TEXT, content=content)

    @classmethod
    def from_reference(cls, reference: DocumentReference) -> MessagePart:
        return cls(
            type=MessagePartType.REFERENCE,
            content=reference.full_match,
            reference=reference,
        )

    @property
    def is_reference(self) -> bool:
        return self.type == MessagePartType.REFERENCE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {"type": self.type.value, "content": self.content}
        if self.reference is not None:
            data["reference"] = self.reference.to_dict()
        return data


@dataclass(frozen=True)
class ParsedCitation:
    """Citation data decoded from a `cite://` URL."""

    filename: str
    section_id: str
    number: Optional[int] = None


@dataclass(frozen=True)
class CollectedCitation:
    """A distinct citation collected in numbered mode."""

    number: int
    filename: str
    section_id: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "number": self.number,
            "filename": self.filename,
            "section_id": self.section_id,
        }


@dataclass
class NumberedContent:
    """Result of rewriting markers into numbered citation links."""

    content: str
    citations: List[CollectedCitation]
