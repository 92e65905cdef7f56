"""Display and window directory.

Wraps a backend's raw enumeration with the guarantees callers rely on:
a display list that is never empty and has exactly one primary, a window
list that degrades to empty, and first-match lookups by id or title. Every
call takes a fresh snapshot; nothing is cached between calls.
"""

import re
from dataclasses import replace

from .capture_exceptions import InvalidPatternError
from .config import CaptureSettings
from .interfaces.capture_backend import ICaptureBackend
from .logging import get_logger
from .models import DisplayInfo, Position, Resolution, WindowInfo

logger = get_logger(__name__)

FALLBACK_DISPLAY_ID = "default"
FALLBACK_DISPLAY_NAME = "Default Display"


def fallback_display(settings: CaptureSettings) -> DisplayInfo:
    """Build the synthetic display reported when enumeration fails."""
    return DisplayInfo(
        id=FALLBACK_DISPLAY_ID,
        name=FALLBACK_DISPLAY_NAME,
        resolution=Resolution(settings.fallback_width, settings.fallback_height),
        position=Position(0, 0),
        is_primary=True,
    )


def ensure_single_primary(displays: list[DisplayInfo]) -> list[DisplayInfo]:
    """Make exactly one display primary.

    The first display flagged primary keeps the flag; when none is flagged
    the first display becomes primary.

    Args:
        displays: Displays in enumeration order

    Returns:
        New list with exactly one primary display, empty if ``displays`` is
    """
    if not displays:
        return []

    primary_index = next((i for i, d in enumerate(displays) if d.is_primary), 0)
    return [
        d if d.is_primary == (i == primary_index) else replace(d, is_primary=i == primary_index)
        for i, d in enumerate(displays)
    ]


class DisplayWindowDirectory:
    """Enumerate displays and windows through one backend."""

    def __init__(self, backend: ICaptureBackend, settings: CaptureSettings) -> None:
        """Initialize the directory.

        Args:
            backend: Active capture backend
            settings: Capture settings, used for the fallback display size
        """
        self.backend = backend
        self.settings = settings

    def get_displays(self) -> list[DisplayInfo]:
        """Enumerate displays.

        Enumeration failures never propagate: a single synthetic primary
        display is returned instead, so captures that do not need display
        metadata can still be attempted.

        Returns:
            Non-empty list of displays with exactly one primary
        """
        try:
            displays = self.backend.get_displays()
        except Exception as e:
            logger.warning(
                "display_enumeration_failed",
                backend=self.backend.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return [fallback_display(self.settings)]

        if not displays:
            logger.warning("display_enumeration_empty", backend=self.backend.name)
            return [fallback_display(self.settings)]

        return ensure_single_primary(displays)

    def get_windows(self) -> list[WindowInfo]:
        """Enumerate windows, returning an empty list when enumeration fails."""
        try:
            return self.backend.get_windows()
        except Exception as e:
            logger.warning(
                "window_enumeration_failed",
                backend=self.backend.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

    def get_window_by_id(self, window_id: str) -> WindowInfo | None:
        """Find a window in a fresh snapshot by id.

        Args:
            window_id: Opaque window id

        Returns:
            Matching window, or None
        """
        return next((w for w in self.get_windows() if w.id == window_id), None)

    def get_window_by_title(self, pattern: str) -> WindowInfo | None:
        """Find the first window whose title matches a pattern.

        The pattern is a case-insensitive regular expression searched
        anywhere in the title; it is not escaped, so callers wanting a
        literal match must escape it themselves. An empty pattern matches
        the first window.

        Args:
            pattern: Regular expression

        Returns:
            First matching window in enumeration order, or None

        Raises:
            InvalidPatternError: If the pattern does not compile
        """
        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e

        return next((w for w in self.get_windows() if regex.search(w.title)), None)
