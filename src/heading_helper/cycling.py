"""Next-level computation for promote, demote and cycle commands."""

from typing import Literal

from .levels import HeadingLevel

Direction = Literal["up", "down", "cycle"]


def cycle_heading(
    current: HeadingLevel, direction: Direction, wrap_after_h6: bool = True
) -> HeadingLevel:
    """Compute the next heading level.

    Paragraphs never cycle. Promotion stops at H1. Demotion and cycling stop at
    H6 unless ``wrap_after_h6`` is set, in which case H6 becomes a paragraph.
    Min/max clamping is applied separately by ``clamp_level``.
    """
    if current == HeadingLevel.PARAGRAPH:
        return HeadingLevel.PARAGRAPH

    if direction == "up":
        if current == HeadingLevel.H1:
            return HeadingLevel.H1
        return HeadingLevel(current - 1)

    if direction in ("down", "cycle"):
        if current == HeadingLevel.H6:
            return HeadingLevel.PARAGRAPH if wrap_after_h6 else HeadingLevel.H6
        return HeadingLevel(current + 1)

    return current


def clamp_level(
    level: HeadingLevel, min_level: HeadingLevel, max_level: HeadingLevel
) -> HeadingLevel:
    """Force a heading into [min_level, max_level]; paragraphs pass through."""
    if level == HeadingLevel.PARAGRAPH:
        return level
    if level < min_level:
        return min_level
    if level > max_level:
        return max_level
    return level
