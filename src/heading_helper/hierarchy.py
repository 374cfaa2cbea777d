"""Hierarchy rules for heading level changes.

The rules look at a proposed change (or a batch of changes) together with
the heading levels around it and report structural issues. Blocking issues
veto directional operations unless overrides are allowed; advisory issues
are only shown to the user.

Rules, in priority order:

1. Promoting to H1 while another H1 exists in scope (blocking).
2. Demoting H5 to H6 with wrap disabled while an H6 exists (blocking).
3. Demoting H6 with wrap enabled (advisory: headings end up as paragraphs).
4. Demoting H6 to a paragraph with wrap disabled (blocking).
5. Turning H1-H5 into a paragraph while deeper headings remain (blocking).
6. Batch leaves both H1 and H2 in the changed span (advisory).
7. Batch leaves both H5 and H6 in the changed span with wrap disabled (advisory).
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from .config import Settings
from .levels import HeadingLevel, level_name


class IssueKind(Enum):
    """Kind of hierarchy issue."""

    PROMOTION_BLOCKED = "promotion_blocked"
    DEMOTION_BLOCKED = "demotion_blocked"
    HIERARCHY_BREAK = "hierarchy_break"
    GENERAL_WARNING = "general_warning"

    @property
    def is_blocking(self) -> bool:
        return self is not IssueKind.GENERAL_WARNING


@dataclass(frozen=True)
class TransformationRequest:
    """A planned level change for one line."""

    line_index: int  # 0-indexed
    current_level: HeadingLevel
    target_level: HeadingLevel

    @property
    def line_number(self) -> int:
        """1-based line number, as shown to users."""
        return self.line_index + 1

    @property
    def is_promotion(self) -> bool:
        return self.target_level.is_heading and self.target_level < self.current_level

    @property
    def is_demotion(self) -> bool:
        if not self.current_level.is_heading:
            return False
        if self.target_level == HeadingLevel.PARAGRAPH:
            return True
        return self.target_level > self.current_level


@dataclass(frozen=True)
class HierarchyIssue:
    """A structural problem detected for a proposed change."""

    kind: IssueKind
    message: str
    current_level: HeadingLevel | None = None
    target_level: HeadingLevel | None = None
    line_number: int | None = None  # 1-based

    @property
    def is_blocking(self) -> bool:
        return self.kind.is_blocking

    @property
    def warning_key(self) -> tuple:
        """Identity used to recognise a repeated warning."""
        return (self.kind, self.current_level, self.target_level, self.line_number)


def is_blocked(issue: HierarchyIssue, settings: Settings) -> bool:
    """Whether an issue vetoes a directional operation under these settings."""
    return issue.is_blocking and not settings.allow_hierarchy_override


def _issue(kind: IssueKind, message: str, request: TransformationRequest) -> HierarchyIssue:
    return HierarchyIssue(
        kind=kind,
        message=message,
        current_level=request.current_level,
        target_level=request.target_level,
        line_number=request.line_number,
    )


def _first_deeper_level(current: HeadingLevel, present: set[HeadingLevel]) -> HeadingLevel | None:
    for candidate in range(current + 1, HeadingLevel.H6 + 1):
        if HeadingLevel(candidate) in present:
            return HeadingLevel(candidate)
    return None


def deduplicate(issues: Iterable[HierarchyIssue]) -> list[HierarchyIssue]:
    """Drop repeats of the same message on the same line (or with no line)."""
    unique: list[HierarchyIssue] = []
    seen: set[tuple[int | None, str]] = set()
    for issue in issues:
        key = (issue.line_number, issue.message)
        if key in seen:
            continue
        seen.add(key)
        unique.append(issue)
    return unique


def check_line_transformation(
    request: TransformationRequest,
    scope_levels: Mapping[int, HeadingLevel],
    settings: Settings,
    scope_name: str = "selection",
) -> list[HierarchyIssue]:
    """Check a single-line change against the levels in its scope.

    Args:
        request: The change being considered (not yet applied).
        scope_levels: Line index -> level for every line in scope, before
            the change. The changed line itself may be included.
        settings: Wrap and override settings.
        scope_name: Word used for the scope in messages.

    Returns:
        Issues in priority order; the first one is primary.
    """
    current, target = request.current_level, request.target_level
    if current == target:
        return []

    all_levels = set(scope_levels.values())
    other_levels = {
        level for index, level in scope_levels.items() if index != request.line_index
    }
    issues: list[HierarchyIssue] = []

    if (
        request.is_promotion
        and target == HeadingLevel.H1
        and current != HeadingLevel.H1
        and HeadingLevel.H1 in other_levels
    ):
        issues.append(
            _issue(
                IssueKind.PROMOTION_BLOCKED,
                f"Cannot promote {level_name(current)} to H1: an H1 heading already "
                f"exists in the {scope_name}.",
                request,
            )
        )

    if request.is_demotion:
        wrap = settings.wrap_after_h6

        if (
            current == HeadingLevel.H5
            and target == HeadingLevel.H6
            and not wrap
            and HeadingLevel.H6 in all_levels
        ):
            issues.append(
                _issue(
                    IssueKind.DEMOTION_BLOCKED,
                    'Cannot demote H5 to H6: an H6 already exists and "Wrap after H6" '
                    "is disabled, which would create another dead-end heading.",
                    request,
                )
            )

        if wrap and current == HeadingLevel.H6:
            issues.append(
                _issue(
                    IssueKind.GENERAL_WARNING,
                    'Reminder: "Wrap after H6" is enabled. Repeatedly demoting H6 '
                    "headings will turn them into paragraphs.",
                    request,
                )
            )

        if current == HeadingLevel.H6 and target == HeadingLevel.PARAGRAPH and not wrap:
            issues.append(
                HierarchyIssue(
                    kind=IssueKind.DEMOTION_BLOCKED,
                    message='Cannot demote H6 to Paragraph: "Wrap after H6" is disabled. '
                    "Enable it to allow conversion to Paragraph.",
                    current_level=current,
                    target_level=HeadingLevel.H6,
                    line_number=request.line_number,
                )
            )

        if wrap and target == HeadingLevel.PARAGRAPH and HeadingLevel.H1 <= current <= HeadingLevel.H5:
            deeper = _first_deeper_level(current, other_levels)
            if deeper is not None:
                issues.append(
                    _issue(
                        IssueKind.HIERARCHY_BREAK,
                        f"Converting {level_name(current)} to Paragraph would orphan "
                        f"{level_name(deeper)} headings in the {scope_name}.",
                        request,
                    )
                )

    return deduplicate(issues)


def analyze_batch(
    requests: list[TransformationRequest],
    original_levels: Mapping[int, HeadingLevel],
    post_levels: Mapping[int, HeadingLevel],
    settings: Settings,
) -> list[HierarchyIssue]:
    """Check a batch of changes that has already been applied.

    Args:
        requests: Every change in the batch.
        original_levels: Line index -> level before the batch, for every line
            of the original selection.
        post_levels: Line index -> level after the batch, for the same lines.
        settings: Wrap and override settings.

    Returns:
        Deduplicated issues in priority order; the first one is primary.
    """
    if not requests:
        return []

    wrap = settings.wrap_after_h6
    issues: list[HierarchyIssue] = []

    first_line = min(r.line_index for r in requests)
    last_line = max(r.line_index for r in requests)
    span_levels = {
        level for index, level in post_levels.items() if first_line <= index <= last_line
    }
    selection_levels_after = set(post_levels.values())

    def existed_outside(level: HeadingLevel, moving: list[TransformationRequest]) -> bool:
        moving_lines = {r.line_index for r in moving}
        return any(
            index not in moving_lines and original == level
            for index, original in original_levels.items()
        )

    # 1. One H1 per selection
    to_h1 = [
        r
        for r in requests
        if r.target_level == HeadingLevel.H1 and r.current_level > HeadingLevel.H1
    ]
    if to_h1 and existed_outside(HeadingLevel.H1, to_h1):
        for r in to_h1:
            issues.append(
                _issue(
                    IssueKind.PROMOTION_BLOCKED,
                    "Cannot promote to H1: an H1 heading already exists in the selection.",
                    r,
                )
            )

    # 2. No second dead-end H6
    if not wrap:
        h5_to_h6 = [
            r
            for r in requests
            if r.current_level == HeadingLevel.H5 and r.target_level == HeadingLevel.H6
        ]
        if h5_to_h6 and existed_outside(HeadingLevel.H6, h5_to_h6):
            for r in h5_to_h6:
                issues.append(
                    _issue(
                        IssueKind.DEMOTION_BLOCKED,
                        "Cannot demote H5 to H6: an H6 already exists in the selection "
                        'and "Wrap after H6" is disabled.',
                        r,
                    )
                )

    # 3. Wrapping reminder
    if wrap:
        for r in requests:
            if r.current_level == HeadingLevel.H6 and r.is_demotion:
                issues.append(
                    _issue(
                        IssueKind.GENERAL_WARNING,
                        'Reminder: "Wrap after H6" is enabled. Repeatedly demoting H6 '
                        "headings will turn them into paragraphs.",
                        r,
                    )
                )

    # 4. H6 is terminal without wrap
    if not wrap:
        for r in requests:
            if r.current_level == HeadingLevel.H6 and r.target_level == HeadingLevel.PARAGRAPH:
                issues.append(
                    HierarchyIssue(
                        kind=IssueKind.DEMOTION_BLOCKED,
                        message='Cannot demote H6 to Paragraph: "Wrap after H6" is disabled.',
                        current_level=r.current_level,
                        target_level=HeadingLevel.H6,
                        line_number=r.line_number,
                    )
                )

    # 5. Orphaned deeper headings
    if wrap:
        for r in requests:
            if r.target_level != HeadingLevel.PARAGRAPH:
                continue
            if not HeadingLevel.H1 <= r.current_level <= HeadingLevel.H5:
                continue
            deeper = _first_deeper_level(r.current_level, selection_levels_after)
            if deeper is not None:
                issues.append(
                    _issue(
                        IssueKind.HIERARCHY_BREAK,
                        f"Converting {level_name(r.current_level)} to Paragraph may orphan "
                        f"{level_name(deeper)} headings within the selection.",
                        r,
                    )
                )

    promotion_blocked = any(i.kind is IssueKind.PROMOTION_BLOCKED for i in issues)
    demotion_blocked = any(i.kind is IssueKind.DEMOTION_BLOCKED for i in issues)

    # 6. Mixed H1/H2
    if (
        not promotion_blocked
        and HeadingLevel.H1 in span_levels
        and HeadingLevel.H2 in span_levels
    ):
        anchor = _representative(requests, {HeadingLevel.H1, HeadingLevel.H2})
        issues.append(
            _issue(
                IssueKind.GENERAL_WARNING,
                "Warning: the selection now contains both H1 and H2 headings. "
                "This might affect document structure.",
                anchor,
            )
        )

    # 7. Mixed H5/H6 without wrap
    if (
        not demotion_blocked
        and not wrap
        and HeadingLevel.H5 in span_levels
        and HeadingLevel.H6 in span_levels
    ):
        anchor = _representative(requests, {HeadingLevel.H5, HeadingLevel.H6})
        issues.append(
            _issue(
                IssueKind.GENERAL_WARNING,
                'Warning: the selection now contains H5 and H6 headings and "Wrap after H6" '
                "is disabled. This may lead to H6 dead-ends.",
                anchor,
            )
        )

    return deduplicate(issues)


def _representative(
    requests: list[TransformationRequest], targets: set[HeadingLevel]
) -> TransformationRequest:
    """First request moving into one of ``targets``, else the first request."""
    return next((r for r in requests if r.target_level in targets), requests[0])
