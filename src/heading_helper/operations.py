"""Heading level operations over a text buffer.

Range operations plan a batch of per-line changes, apply them, check the
resulting structure and either keep the batch or restore every touched
line to its exact original text. Single-line operations check first and
then apply.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from .buffer import Notifier, Selection, TextBuffer
from .config import Settings
from .cycling import Direction, clamp_level, cycle_heading
from .debounce import WarningDebouncer
from .hierarchy import (
    HierarchyIssue,
    TransformationRequest,
    analyze_batch,
    check_line_transformation,
    is_blocked,
)
from .levels import HeadingLevel, coerce_level
from .parser import level_of, line_to_text, parse_line

logger = logging.getLogger(__name__)

NOTICE_DURATION_MS = 5000


@dataclass
class LineInfo:
    """Structure of one non-blank or heading line."""

    line_number: int  # 1-based
    text: str
    level: HeadingLevel
    indent: str
    list_marker: str
    heading_marker: str
    content: str


@dataclass(frozen=True)
class LineSnapshot:
    """Exact text of a line before a batch touched it."""

    line_index: int
    original_text: str
    original_level: HeadingLevel


@dataclass
class BatchResult:
    """Outcome of one batch (one selection, or one line)."""

    requests: list[TransformationRequest]
    issues: list[HierarchyIssue] = field(default_factory=list)
    committed: bool = True

    @property
    def primary_issue(self) -> HierarchyIssue | None:
        return self.issues[0] if self.issues else None

    @property
    def lines_changed(self) -> int:
        return len(self.requests) if self.committed else 0


@dataclass
class HeadingResult:
    """Outcome of a heading command across all of its batches."""

    batches: list[BatchResult] = field(default_factory=list)
    notice: str | None = None

    @property
    def lines_changed(self) -> int:
        return sum(batch.lines_changed for batch in self.batches)

    @property
    def changed(self) -> bool:
        return self.lines_changed > 0

    @property
    def reverted(self) -> bool:
        return any(not batch.committed for batch in self.batches)

    @property
    def issues(self) -> list[HierarchyIssue]:
        return [issue for batch in self.batches for issue in batch.issues]


class HeadingOperations:
    """Promotes, demotes, cycles and sets heading levels with hierarchy checks."""

    def __init__(
        self,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the heading operations.

        Args:
            settings: Engine settings (defaults if omitted).
            notifier: Where warnings are shown. Without one there is no host
                to report to, so changes are applied without hierarchy checks.
            clock: Time source for warning debouncing.
        """
        self.notifier = notifier
        self.debouncer = WarningDebouncer(clock=clock)
        self.configure(settings or Settings())

    def configure(self, settings: Settings) -> None:
        """Replace the settings and reset the warning debouncer."""
        self.settings = settings
        self.debouncer.reset()

    @property
    def validation_enabled(self) -> bool:
        return self.notifier is not None and self.settings.check_hierarchy

    # Public operations

    def cycle_heading(
        self,
        buffer: TextBuffer,
        direction: Direction = "cycle",
        line_number: int | None = None,
    ) -> HeadingResult:
        """Promote, demote or cycle headings in every selection.

        Args:
            buffer: The document.
            direction: "up" promotes, "down" and "cycle" demote.
            line_number: 1-based line to change instead of the selections.

        Returns:
            HeadingResult describing what was kept or reverted.
        """
        if not self.settings.enable_cycling:
            logger.debug("Heading cycling disabled, ignoring %s", direction)
            return HeadingResult()

        if line_number is not None:
            index = line_number - 1
            current = level_of(buffer.get_line(index))
            target = self._next_level(current, direction)
            return self._transform_single_line(buffer, index, current, target)

        batches = [
            self._process_selection(buffer, selection, direction)
            for selection in buffer.list_selections()
        ]
        return self._finish(batches)

    def set_heading_level(
        self,
        buffer: TextBuffer,
        target_level: HeadingLevel | int | str,
        line_number: int | None = None,
    ) -> HeadingResult:
        """Set an explicit heading level on one line or on every selection.

        Assignments over selections always take effect; hierarchy issues are
        only reported. A single line is checked first and left alone when the
        change would break the hierarchy (unless overrides are allowed).

        Args:
            buffer: The document.
            target_level: Level to assign (PARAGRAPH clears the heading).
            line_number: 1-based line to change instead of the selections.

        Returns:
            HeadingResult describing what changed.
        """
        target = coerce_level(target_level)

        if line_number is not None:
            index = line_number - 1
            current = level_of(buffer.get_line(index))
            return self._transform_single_line(buffer, index, current, target)

        batches = [
            self._process_selection_with_level(buffer, selection, target)
            for selection in buffer.list_selections()
        ]
        return self._finish(batches)

    def get_heading_level(self, buffer: TextBuffer, line_number: int) -> HeadingLevel:
        """Heading level of a 1-based line."""
        return level_of(buffer.get_line(line_number - 1))

    def get_line_info(self, buffer: TextBuffer) -> list[LineInfo]:
        """Describe every line that has text or a heading."""
        infos: list[LineInfo] = []
        for index in range(buffer.line_count()):
            text = buffer.get_line(index)
            parsed = parse_line(text)
            if not text.strip() and not parsed.is_heading:
                continue
            infos.append(
                LineInfo(
                    line_number=index + 1,
                    text=text,
                    level=parsed.level,
                    indent=parsed.indent,
                    list_marker=parsed.list_marker,
                    heading_marker=parsed.heading_marker,
                    content=parsed.content,
                )
            )
        return infos

    # Planning

    def _next_level(self, current: HeadingLevel, direction: Direction) -> HeadingLevel:
        next_level = cycle_heading(current, direction, self.settings.wrap_after_h6)
        return clamp_level(next_level, self.settings.min_level, self.settings.max_level)

    def _process_selection(
        self, buffer: TextBuffer, selection: Selection, direction: Direction
    ) -> BatchResult:
        requests: list[TransformationRequest] = []
        for index in selection.lines():
            current = level_of(buffer.get_line(index))
            # Paragraphs only become headings through explicit assignment
            if not current.is_heading:
                continue
            target = self._next_level(current, direction)
            if target != current:
                requests.append(TransformationRequest(index, current, target))

        return self._execute_batch(buffer, requests, selection, authoritative=False)

    def _process_selection_with_level(
        self, buffer: TextBuffer, selection: Selection, target: HeadingLevel
    ) -> BatchResult:
        requests: list[TransformationRequest] = []
        for index in selection.lines():
            current = level_of(buffer.get_line(index))
            if current.is_heading and current != target:
                requests.append(TransformationRequest(index, current, target))

        return self._execute_batch(buffer, requests, selection, authoritative=True)

    # Execution

    def _transform_line(self, buffer: TextBuffer, index: int, level: HeadingLevel) -> None:
        parsed = parse_line(buffer.get_line(index))
        buffer.replace_line(index, line_to_text(parsed, level))

    def _execute_batch(
        self,
        buffer: TextBuffer,
        requests: list[TransformationRequest],
        selection: Selection,
        authoritative: bool,
    ) -> BatchResult:
        """Apply a batch, check it, and restore the original lines if vetoed."""
        if not requests:
            return BatchResult(requests=[])

        snapshots = [
            LineSnapshot(r.line_index, buffer.get_line(r.line_index), r.current_level)
            for r in requests
        ]
        snapshot_levels = {s.line_index: s.original_level for s in snapshots}
        original_levels = {
            index: snapshot_levels[index]
            if index in snapshot_levels
            else level_of(buffer.get_line(index))
            for index in selection.lines()
        }

        logger.debug(
            "Applying %d heading change(s) in lines %d-%d",
            len(requests),
            selection.start + 1,
            selection.end + 1,
        )
        for request in requests:
            self._transform_line(buffer, request.line_index, request.target_level)

        if not self.validation_enabled:
            return BatchResult(requests=requests)

        post_levels = {index: level_of(buffer.get_line(index)) for index in selection.lines()}
        issues = analyze_batch(requests, original_levels, post_levels, self.settings)
        if not issues:
            return BatchResult(requests=requests)

        primary = issues[0]
        if not authoritative and is_blocked(primary, self.settings):
            for snapshot in snapshots:
                buffer.replace_line(snapshot.line_index, snapshot.original_text)
            logger.info(
                "Reverted %d heading change(s): %s", len(requests), primary.kind.value
            )
            return BatchResult(requests=requests, issues=issues, committed=False)

        return BatchResult(requests=requests, issues=issues)

    def _transform_single_line(
        self,
        buffer: TextBuffer,
        index: int,
        current: HeadingLevel,
        target: HeadingLevel,
    ) -> HeadingResult:
        """Check a single-line change, then apply it unless it is vetoed."""
        # Only existing headings can be retargeted; this covers H6 -> paragraph
        if not current.is_heading or current == target:
            return HeadingResult()

        request = TransformationRequest(index, current, target)
        if not self.validation_enabled:
            self._transform_line(buffer, index, target)
            return HeadingResult(batches=[BatchResult(requests=[request])])

        scope_name, scope_levels = self._single_line_scope(buffer)
        issues = check_line_transformation(request, scope_levels, self.settings, scope_name)
        primary = issues[0] if issues else None

        committed = primary is None or not is_blocked(primary, self.settings)
        if committed:
            self._transform_line(buffer, index, target)
        else:
            logger.info("Blocked change on line %d: %s", index + 1, primary.kind.value)

        notice = None
        if primary is not None and self.notifier is not None:
            if self.debouncer.should_display(primary):
                self.notifier.notify(primary.message, NOTICE_DURATION_MS)
                notice = primary.message
            else:
                logger.debug("Suppressed repeated warning for line %d", index + 1)

        batch = BatchResult(requests=[request], issues=issues, committed=committed)
        return HeadingResult(batches=[batch], notice=notice)

    def _single_line_scope(self, buffer: TextBuffer) -> tuple[str, dict[int, HeadingLevel]]:
        """Levels of the lines a single-line change is checked against."""
        selections = buffer.list_selections()
        if self.settings.single_line_scope == "selection" and selections:
            lines: range = selections[0].lines()
            scope_name = "selection"
        else:
            lines = range(buffer.line_count())
            scope_name = "document"
        return scope_name, {index: level_of(buffer.get_line(index)) for index in lines}

    def _finish(self, batches: list[BatchResult]) -> HeadingResult:
        """Emit at most one notice for a whole command."""
        result = HeadingResult(batches=batches)
        primary = next(
            (batch.primary_issue for batch in batches if batch.primary_issue is not None), None
        )
        if primary is not None and self.notifier is not None:
            self.notifier.notify(primary.message, NOTICE_DURATION_MS)
            result.notice = primary.message
        return result
