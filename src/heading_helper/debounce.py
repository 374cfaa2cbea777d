"""Suppression of repeated identical warnings."""

import time
from collections.abc import Callable

from .hierarchy import HierarchyIssue

DEBOUNCE_WINDOW_SECONDS = 1.5


class WarningDebouncer:
    """Remembers the last warning shown and hides identical repeats.

    Only display is affected; callers still act on every issue.
    """

    def __init__(
        self,
        window: float = DEBOUNCE_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window = window
        self._clock = clock
        self._last_key: tuple | None = None
        self._last_time: float | None = None

    def should_display(self, issue: HierarchyIssue) -> bool:
        """Record the issue and return False if it repeats the last one too soon."""
        now = self._clock()
        key = issue.warning_key
        if (
            self._last_key == key
            and self._last_time is not None
            and now - self._last_time < self.window
        ):
            return False

        self._last_key = key
        self._last_time = now
        return True

    def reset(self) -> None:
        self._last_key = None
        self._last_time = None
