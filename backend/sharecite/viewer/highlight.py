"""Scroll-and-highlight sequencing for cited sections."""

import asyncio
from typing import Awaitable, Callable, Optional, Protocol, Tuple

import structlog

from sharecite.config import ViewerSettings, get_viewer_settings
from sharecite.viewer.scroll import ContainerBox, ElementBox, compute_centered_scroll_top

logger = structlog.get_logger()


class ViewerSurface(Protocol):
    """The platform side of a document viewer.

    Implementations wrap whatever actually displays the document; elements
    are addressed by their element id (`section-<section id>`).
    """

    def element_box(self, element_id: str) -> Optional[ElementBox]:
        """Geometry of an element, or None if it is not mounted."""
        ...

    def container_box(self) -> Optional[ContainerBox]:
        """Geometry of the scroll container, or None if it is not mounted."""
        ...

    def scroll_to(self, top: float, smooth: bool = True) -> None:
        """Scroll the container to an offset."""
        ...

    def add_class(self, element_id: str, class_name: str) -> None:
        ...

    def remove_class(self, element_id: str, class_name: str) -> None:
        ...


class HighlightCoordinator:
    """Scrolls a viewer to a section and plays a timed highlight.

    At most one element is highlighted at a time. A new request cancels the
    one in flight, and any highlight it applied is removed.

    Example:
        ```python
        coordinator = HighlightCoordinator(surface)

        # React to navigation state; a new highlight key replays the animation
        task = coordinator.sync(state.highlight_section_id, state.highlight_key)
        ```
    """

    def __init__(
        self,
        surface: ViewerSurface,
        settings: Optional[ViewerSettings] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the coordinator.

        Args:
            surface: Viewer surface to drive
            settings: Timing settings (default from settings)
            sleep: Coroutine used for delays, in seconds
        """
        self.surface = surface
        self.settings = settings or get_viewer_settings()
        self._sleep = sleep
        self.highlighted_element: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._last_target: Optional[Tuple[str, int]] = None

    def element_id_for(self, section_id: str) -> str:
        return f"{self.settings.section_element_prefix}{section_id}"

    def sync(self, section_id: Optional[str], highlight_key: int = 0) -> Optional[asyncio.Task]:
        """Start a highlight when the (section, key) target changes.

        Args:
            section_id: Section to show, or None when nothing is selected
            highlight_key: Counter bumped to replay the same section

        Returns:
            The scheduled task, or None if nothing changed or could be scheduled
        """
        if section_id is None:
            self._last_target = None
            return None

        target = (section_id, highlight_key)
        if target == self._last_target:
            return None

        task = self.request(section_id)
        # Retry on the next sync if nothing could be scheduled
        self._last_target = target if task is not None else None
        return task

    def request(self, section_id: str) -> Optional[asyncio.Task]:
        """Schedule scroll-and-highlight for a section, replacing any pending one.

        Must be called from a running event loop; otherwise the request is
        logged and skipped.

        Returns:
            The scheduled task, or None outside a running event loop
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("highlight_skipped_no_event_loop", section_id=section_id)
            return None

        if self._task is not None and not self._task.done():
            self._task.cancel()

        self._task = loop.create_task(self.scroll_to_and_highlight(section_id))
        return self._task

    def clear_highlight(self) -> None:
        """Remove the current highlight, if any."""
        if self.highlighted_element is not None:
            self.surface.remove_class(self.highlighted_element, self.settings.highlight_class)
            self.highlighted_element = None

    async def scroll_to_and_highlight(self, section_id: str) -> bool:
        """Center a section in the container and highlight it.

        Args:
            section_id: Section id from the citation

        Returns:
            True if the section was found and highlighted
        """
        settings = self.settings
        element_id = self.element_id_for(section_id)

        # Give the viewer a moment to mount the section
        await self._sleep(settings.mount_delay_ms / 1000)

        element = self.surface.element_box(element_id)
        container = self.surface.container_box()

        if element is None:
            logger.warning("section_element_not_found", section_id=section_id)
            return False

        if container is None:
            logger.warning("scroll_container_not_found", section_id=section_id)
            return False

        self.clear_highlight()

        target = compute_centered_scroll_top(element, container)
        self.surface.scroll_to(target, smooth=True)

        await self._sleep(settings.highlight_delay_ms / 1000)

        self.surface.add_class(element_id, settings.highlight_class)
        self.highlighted_element = element_id

        try:
            await self._sleep(settings.highlight_duration_ms / 1000)
        finally:
            self.surface.remove_class(element_id, settings.highlight_class)
            if self.highlighted_element == element_id:
                self.highlighted_element = None

        logger.debug("section_highlighted", section_id=section_id, scroll_top=target)
        return True
