"""Pytest configuration and fixtures."""

import pytest

from heading_helper.buffer import LineBuffer


class RecordingNotifier:
    """Notifier that remembers every message it was asked to show."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.durations: list[int] = []

    def notify(self, message: str, duration_ms: int) -> None:
        self.messages.append(message)
        self.durations.append(duration_ms)


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def outline_doc() -> str:
    """A document with one heading per level."""
    return """# Title
## Introduction
### Background
#### Details
##### Notes
###### Footnote
Plain paragraph.
"""


@pytest.fixture
def outline_buffer(outline_doc: str) -> LineBuffer:
    return LineBuffer.from_text(outline_doc)
