"""Citation click handling for the share link document panel."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import structlog

from sharecite.lookup.cache import DocumentLookup
from sharecite.viewer.highlight import HighlightCoordinator

logger = structlog.get_logger()


class PanelMode(str, Enum):
    """What the document panel is showing."""

    CAPSULE = "capsule"
    DOCUMENT = "document"


@dataclass
class ViewerState:
    """Selection state of the document panel."""

    selected_document_id: Optional[str] = None
    highlight_section_id: Optional[str] = None
    highlight_key: int = 0
    panel_mode: PanelMode = PanelMode.CAPSULE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "selected_document_id": self.selected_document_id,
            "highlight_section_id": self.highlight_section_id,
            "highlight_key": self.highlight_key,
            "panel_mode": self.panel_mode.value,
        }


class CitationNavigator:
    """Turns citation clicks into document panel state.

    Clicking the citation that is already shown bumps `highlight_key` so the
    viewer replays the highlight instead of ignoring an unchanged target.
    """

    def __init__(
        self,
        lookup: DocumentLookup,
        coordinator: Optional[HighlightCoordinator] = None,
    ) -> None:
        """Initialize the navigator.

        Args:
            lookup: Document lookup used to resolve citation filenames
            coordinator: Optional highlight coordinator kept in sync with state
        """
        self.lookup = lookup
        self.coordinator = coordinator
        self.state = ViewerState()

    def _select(self, document_id: str, section_id: Optional[str]) -> None:
        state = self.state
        if (
            section_id is not None
            and state.selected_document_id == document_id
            and state.highlight_section_id == section_id
        ):
            state.highlight_key += 1
        else:
            state.selected_document_id = document_id
            state.highlight_section_id = section_id
        state.panel_mode = PanelMode.DOCUMENT

    def _sync(self) -> None:
        if self.coordinator is not None:
            self.coordinator.sync(self.state.highlight_section_id, self.state.highlight_key)

    def handle_citation_click(self, filename_or_id: str, section_id: str) -> ViewerState:
        """Open the cited document at the cited section.

        The value is resolved as a filename first; if the lookup does not know
        it, it is used as a document id directly.

        Args:
            filename_or_id: Filename from the citation, or a document id
            section_id: Section id from the citation

        Returns:
            Updated viewer state
        """
        doc = self.lookup.lookup_document_by_filename(filename_or_id)
        document_id = doc.id if doc is not None else filename_or_id

        if doc is None:
            logger.debug("citation_target_unresolved", value=filename_or_id)

        self._select(document_id, section_id)
        self._sync()
        return self.state

    def handle_document_click(self, document_id: str) -> ViewerState:
        """Open a document at the top."""
        self.state.selected_document_id = document_id
        self.state.highlight_section_id = None
        self.state.panel_mode = PanelMode.DOCUMENT
        self._sync()
        return self.state

    def handle_section_click(self, document_id: str, section_id: str) -> ViewerState:
        """Open a document at a section picked from its outline."""
        self.state.selected_document_id = document_id
        self.state.highlight_section_id = section_id
        self.state.panel_mode = PanelMode.DOCUMENT
        self._sync()
        return self.state

    def back_to_capsule(self) -> ViewerState:
        """Return to the document overview."""
        self.state.panel_mode = PanelMode.CAPSULE
        self.state.selected_document_id = None
        self.state.highlight_section_id = None
        self._sync()
        return self.state
