"""Heading level cycling with hierarchy validation for markdown documents."""

from ._version import __version__
from .buffer import LineBuffer, Notifier, Selection, TextBuffer
from .config import Settings, load_settings
from .cycling import Direction, clamp_level, cycle_heading
from .debounce import WarningDebouncer
from .hierarchy import HierarchyIssue, IssueKind, TransformationRequest
from .levels import HeadingLevel
from .operations import HeadingOperations, LineInfo
from .parser import ParsedLine, line_to_text, parse_line

__all__ = [
    "__version__",
    "Direction",
    "HeadingLevel",
    "HeadingOperations",
    "HierarchyIssue",
    "IssueKind",
    "LineBuffer",
    "LineInfo",
    "Notifier",
    "ParsedLine",
    "Selection",
    "Settings",
    "TextBuffer",
    "TransformationRequest",
    "WarningDebouncer",
    "clamp_level",
    "cycle_heading",
    "line_to_text",
    "load_settings",
    "parse_line",
]
