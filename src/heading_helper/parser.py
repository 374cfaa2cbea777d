"""Line parser for heading markers inside list-aware markdown lines."""

import re
from dataclasses import dataclass

from .levels import HeadingLevel

# indent, optional list marker, optional "#" run that must be followed by whitespace
LINE_PATTERN = re.compile(r"(\s*)([-*+]\s+)?(?:(#+)(?=\s))?\s*(.*)")

MAX_HEADING_MARKER = 6


@dataclass(frozen=True)
class ParsedLine:
    """A single line split into its structural parts."""

    indent: str
    list_marker: str  # "- ", "* " or "+ " including trailing spaces
    heading_marker: str  # "###" or "" for paragraphs
    content: str
    level: HeadingLevel

    @property
    def is_heading(self) -> bool:
        return self.level.is_heading


def _unparsed(text: str) -> ParsedLine:
    return ParsedLine(
        indent="",
        list_marker="",
        heading_marker="",
        content=text,
        level=HeadingLevel.PARAGRAPH,
    )


def parse_line(text: str) -> ParsedLine:
    """Parse a line into indent, list marker, heading marker and content.

    Never fails: anything that does not look like a heading comes back as a
    paragraph. A "#" run longer than six is not capped to H6; the whole line
    is returned untouched as paragraph content.
    """
    match = LINE_PATTERN.fullmatch(text)
    if not match:
        return _unparsed(text)

    indent, list_marker, heading_marker, content = match.groups()
    heading_marker = heading_marker or ""
    if len(heading_marker) > MAX_HEADING_MARKER:
        return _unparsed(text)

    level = HeadingLevel(len(heading_marker)) if heading_marker else HeadingLevel.PARAGRAPH
    return ParsedLine(
        indent=indent,
        list_marker=list_marker or "",
        heading_marker=heading_marker,
        content=content.strip(),
        level=level,
    )


def line_to_text(parsed: ParsedLine, new_level: HeadingLevel) -> str:
    """Rebuild a line at a new level, keeping its indent and list marker."""
    marker = "" if new_level == HeadingLevel.PARAGRAPH else "#" * int(new_level) + " "
    return f"{parsed.indent}{parsed.list_marker}{marker}{parsed.content}"


def level_of(text: str) -> HeadingLevel:
    """Heading level of a raw line."""
    return parse_line(text).level
