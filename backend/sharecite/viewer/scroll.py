"""Scroll offset calculation for section navigation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ElementBox:
    """Viewport-relative geometry of a section element."""

    top: float
    height: float


@dataclass(frozen=True)
class ContainerBox:
    """Geometry and scroll state of the scrolling container."""

    top: float
    scroll_top: float
    client_height: float


def compute_centered_scroll_top(element: ElementBox, container: ContainerBox) -> float:
    """Compute the container scroll offset that centers an element.

    Only the container scrolls, never the page, so the element position is
    taken relative to the container's content rather than the viewport.

    Args:
        element: Element geometry as reported by the viewport
        container: Container geometry as reported by the viewport

    Returns:
        Target `scrollTop`, never negative
    """
    element_top = element.top - container.top + container.scroll_top
    target = element_top - container.client_height / 2 + element.height / 2
    return max(0.0, target)
