"""Tests for the warning debouncer."""

from heading_helper.debounce import DEBOUNCE_WINDOW_SECONDS, WarningDebouncer
from heading_helper.hierarchy import HierarchyIssue, IssueKind
from heading_helper.levels import HeadingLevel


def make_issue(line_number: int = 3, kind: IssueKind = IssueKind.DEMOTION_BLOCKED):
    return HierarchyIssue(
        kind=kind,
        message="Cannot demote",
        current_level=HeadingLevel.H6,
        target_level=HeadingLevel.H6,
        line_number=line_number,
    )


class TestWarningDebouncer:
    """Tests for WarningDebouncer."""

    def test_first_warning_is_shown(self, clock):
        debouncer = WarningDebouncer(clock=clock)
        assert debouncer.should_display(make_issue())

    def test_repeat_within_window_is_suppressed(self, clock):
        debouncer = WarningDebouncer(clock=clock)
        debouncer.should_display(make_issue())
        clock.advance(1.0)
        assert not debouncer.should_display(make_issue())

    def test_repeat_after_window_is_shown(self, clock):
        debouncer = WarningDebouncer(clock=clock)
        debouncer.should_display(make_issue())
        clock.advance(DEBOUNCE_WINDOW_SECONDS + 0.1)
        assert debouncer.should_display(make_issue())

    def test_suppressed_repeat_does_not_extend_window(self, clock):
        debouncer = WarningDebouncer(clock=clock)
        debouncer.should_display(make_issue())
        clock.advance(1.0)
        debouncer.should_display(make_issue())
        clock.advance(1.0)
        assert debouncer.should_display(make_issue())

    def test_different_line_is_shown(self, clock):
        debouncer = WarningDebouncer(clock=clock)
        debouncer.should_display(make_issue(line_number=3))
        assert debouncer.should_display(make_issue(line_number=4))

    def test_different_kind_is_shown(self, clock):
        debouncer = WarningDebouncer(clock=clock)
        debouncer.should_display(make_issue())
        assert debouncer.should_display(make_issue(kind=IssueKind.GENERAL_WARNING))

    def test_reset(self, clock):
        debouncer = WarningDebouncer(clock=clock)
        debouncer.should_display(make_issue())
        debouncer.reset()
        assert debouncer.should_display(make_issue())
