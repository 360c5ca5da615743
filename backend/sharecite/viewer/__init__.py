"""Document viewer coordination: navigation, scrolling and highlighting."""

from sharecite.viewer.highlight import HighlightCoordinator, ViewerSurface
from sharecite.viewer.navigation import CitationNavigator, PanelMode, ViewerState
from sharecite.viewer.scroll import ContainerBox, ElementBox, compute_centered_scroll_top
from sharecite.viewer.sections import group_chunks_by_section

__all__ = [
    "HighlightCoordinator",
    "ViewerSurface",
    "CitationNavigator",
    "PanelMode",
    "ViewerState",
    "ContainerBox",
    "ElementBox",
    "compute_centered_scroll_top",
    "group_chunks_by_section",
]
