"""Data models for share link documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OutlineSection(BaseModel):
    """A named section inside a document outline."""

    id: str
    title: str = ""
    level: int = 1
    position: int = 0

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Optional[str]) -> str:
        return v or ""


class DocumentInfo(BaseModel):
    """A document exposed through a share link.

    `filename` is the display name; `internal_filename` is the storage-level
    name that citation markers may use instead.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    filename: str
    internal_filename: Optional[str] = Field(default=None, alias="internalFilename")
    title: str = ""
    mime_type: str = Field(default="", alias="mimeType")
    outline: List[OutlineSection] = Field(default_factory=list)
    status: str = ""

    @field_validator("outline", mode="before")
    @classmethod
    def default_outline(cls, v: Any) -> Any:
        return v or []

    @field_validator("title", "mime_type", "status", mode="before")
    @classmethod
    def default_text(cls, v: Optional[str]) -> str:
        return v or ""

    def find_section(self, section_id: str) -> Optional[OutlineSection]:
        """Find an outline section by id."""
        for section in self.outline:
            if section.id == section_id:
                return section
        return None


class DocumentChunk(BaseModel):
    """A chunk of document text as served to the viewer."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    content: str
    section_id: Optional[str] = Field(default=None, alias="sectionId")
    section_title: Optional[str] = Field(default=None, alias="sectionTitle")
    chunk_index: int = Field(default=0, alias="chunkIndex")


@dataclass(frozen=True)
class SectionInfo:
    """Human-readable names for a cited section."""

    document_title: str
    section_title: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary."""
        return {
            "document_title": self.document_title,
            "section_title": self.section_title,
        }


@dataclass
class DocumentCache:
    """Snapshot of one share link's document index."""

    by_filename: Dict[str, DocumentInfo]
    by_id: Dict[str, DocumentInfo]
    by_title: Dict[str, DocumentInfo]
    slug: str
    loaded_at: float


@dataclass
class SectionedContent:
    """A run of consecutive chunks that belong to the same section."""

    section_id: Optional[str]
    section_title: Optional[str]
    chunks: List[DocumentChunk] = field(default_factory=list)
