"""Heading level vocabulary shared by the parser, cycler and rule engine."""

from enum import IntEnum


class HeadingLevel(IntEnum):
    """Heading depth, with PARAGRAPH as the "no heading" sentinel."""

    PARAGRAPH = 0
    H1 = 1
    H2 = 2
    H3 = 3
    H4 = 4
    H5 = 5
    H6 = 6

    @property
    def is_heading(self) -> bool:
        """Return True for H1..H6."""
        return self is not HeadingLevel.PARAGRAPH


def level_name(level: HeadingLevel) -> str:
    """Name a level the way warnings refer to it ("H3" or "Paragraph")."""
    if level == HeadingLevel.PARAGRAPH:
        return "Paragraph"
    return f"H{int(level)}"


def display_text(level: HeadingLevel) -> str:
    """Short badge label for a level."""
    if level == HeadingLevel.PARAGRAPH:
        return "¶"
    return f"H{int(level)}"


def tooltip(level: HeadingLevel) -> str:
    """Hover text for a level badge."""
    if level == HeadingLevel.PARAGRAPH:
        return "Paragraph – click to change"
    return f"Heading {int(level)} – click to change"


def coerce_level(value: int | str | HeadingLevel) -> HeadingLevel:
    """Convert an int, "H3"/"h3", "3" or "paragraph" into a HeadingLevel.

    Raises:
        ValueError: If the value does not name a level.
    """
    if isinstance(value, HeadingLevel):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid heading level: {value!r}")
    if isinstance(value, int):
        return HeadingLevel(value)
    if not isinstance(value, str):
        raise ValueError(f"Invalid heading level: {value!r}")

    text = value.strip().lower()
    if text in ("p", "paragraph", "¶"):
        return HeadingLevel.PARAGRAPH
    if text.startswith("h"):
        text = text[1:]
    if not text.isdigit():
        raise ValueError(f"Invalid heading level: {value!r}")
    return HeadingLevel(int(text))
