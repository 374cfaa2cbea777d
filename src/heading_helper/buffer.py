"""Text buffer and notification contracts the heading engine runs against."""

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class Selection:
    """A selection touching lines anchor_line..head_line (0-indexed, either order)."""

    anchor_line: int
    head_line: int

    @property
    def start(self) -> int:
        return min(self.anchor_line, self.head_line)

    @property
    def end(self) -> int:
        return max(self.anchor_line, self.head_line)

    def lines(self) -> range:
        """Line indexes covered by the selection, inclusive of both ends."""
        return range(self.start, self.end + 1)


class TextBuffer(Protocol):
    """Line-indexed document the engine reads and rewrites."""

    def get_line(self, index: int) -> str: ...

    def line_count(self) -> int: ...

    def replace_line(self, index: int, text: str) -> None:
        """Replace the full text of one line."""
        ...

    def list_selections(self) -> list[Selection]: ...


class Notifier(Protocol):
    """Sink for user-visible warnings."""

    def notify(self, message: str, duration_ms: int) -> None: ...


@dataclass
class LineBuffer:
    """In-memory TextBuffer over a list of lines."""

    lines: list[str]
    selections: list[Selection] = field(default_factory=list)
    trailing_newline: bool = False
    newline: str = "\n"

    @classmethod
    def from_text(cls, text: str, selections: list[Selection] | None = None) -> "LineBuffer":
        """Split text on its line separator, remembering whether it ended with one.

        Only LF (or CRLF when the text uses it) separates lines; form feeds
        and other Unicode line breaks stay inside the line.
        """
        newline = "\r\n" if "\r\n" in text else "\n"
        lines = text.split(newline)
        trailing_newline = text.endswith(newline)
        if trailing_newline:
            lines.pop()
        return cls(
            lines=lines,
            selections=list(selections or []),
            trailing_newline=trailing_newline,
            newline=newline,
        )

    @property
    def text(self) -> str:
        content = self.newline.join(self.lines)
        if self.trailing_newline:
            content += self.newline
        return content

    def get_line(self, index: int) -> str:
        self._check_index(index)
        return self.lines[index]

    def line_count(self) -> int:
        return len(self.lines)

    def replace_line(self, index: int, text: str) -> None:
        self._check_index(index)
        self.lines[index] = text

    def list_selections(self) -> list[Selection]:
        return list(self.selections)

    def select(self, anchor_line: int, head_line: int | None = None) -> None:
        """Replace all selections with a single one."""
        head = anchor_line if head_line is None else head_line
        self._check_index(anchor_line)
        self._check_index(head)
        self.selections = [Selection(anchor_line, head)]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.lines):
            raise IndexError(f"Line {index} out of range (0-{len(self.lines) - 1})")
