"""Heading Document Tool for changing heading levels in markdown files."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from openhands.sdk.tool import (
    Action,
    Observation,
    ToolAnnotations,
    ToolDefinition,
    ToolExecutor,
)
from pydantic import Field
from rich.text import Text

from .buffer import LineBuffer, Selection
from .config import Settings, load_settings
from .levels import HeadingLevel, level_name
from .operations import HeadingOperations, HeadingResult

if TYPE_CHECKING:
    from openhands.sdk.conversation.state import ConversationState

logger = logging.getLogger(__name__)


HEADING_TOOL_DESCRIPTION = """
Heading Document Tool for changing heading levels in markdown documents.

This tool provides commands for:
- Showing the heading structure of a document
- Reading the heading level of a line
- Promoting, demoting or cycling headings over a line range
- Setting an explicit heading level (or clearing it to a paragraph)

Promotions and demotions are checked against the document hierarchy (one H1,
no orphaned sub-headings, H6 dead-ends) and are undone when they would break
it. Explicit levels over a line range are always applied and problems are
reported as warnings; a single-line change is refused when it breaks the
hierarchy.
""".strip()

# Command visualization metadata: (icon, style, label_template)
ACTION_DISPLAY: dict[str, tuple[str, str, str]] = {
    "show": ("📄 ", "yellow", "Show Heading Structure"),
    "get": ("🔍 ", "blue", "Get Heading Level"),
    "cycle": ("🔁 ", "magenta", "Cycle Headings ({direction})"),
    "set": ("✏️ ", "green", "Set Heading Level {level}"),
}


class CollectingNotifier:
    """Notifier that keeps messages so they can be returned to the agent."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str, duration_ms: int) -> None:  # noqa: ARG002
        self.messages.append(message)


class HeadingAction(Action):
    """Action for the heading document tool."""

    command: Literal["show", "get", "cycle", "set"] = Field(
        description=(
            "Command to execute: 'show' lists headings, 'get' reads the level of 'line', "
            "'cycle' promotes/demotes headings, 'set' assigns an explicit level"
        )
    )
    file: str = Field(description="Path to the markdown file to process")
    line: int | None = Field(
        default=None,
        description="Single 1-based line to operate on. Used with get, cycle, set.",
    )
    start_line: int | None = Field(
        default=None, description="First 1-based line of the range. Used with cycle, set."
    )
    end_line: int | None = Field(
        default=None,
        description="Last 1-based line of the range (defaults to start_line). Used with cycle, set.",
    )
    direction: Literal["up", "down", "cycle"] = Field(
        default="cycle",
        description="'up' promotes (## → #), 'down' and 'cycle' demote (## → ###). Used with cycle.",
    )
    level: int | None = Field(
        default=None,
        description="Heading level 1-6, or 0 for a paragraph. Used with set.",
    )

    @property
    def visualize(self) -> Text:
        """Return Rich Text representation of this action."""
        content = Text()
        icon, style, label_template = ACTION_DISPLAY[self.command]
        label = label_template.format(direction=self.direction, level=self.level)
        content.append(icon, style=style)
        content.append(label, style=style)
        content.append(f" - {self.file}", style="white")
        return content


class HeadingObservation(Observation):
    """Observation from the heading document tool."""

    command: Literal["show", "get", "cycle", "set"] = Field(
        description="The command that was executed."
    )
    file: str = Field(description="Path to the markdown file that was processed.")
    result: str = Field(description="Result of the operation: 'success', 'error', or 'warning'.")

    # Read-only fields
    headings: list[dict[str, str | int]] | None = Field(
        default=None, description="Heading lines with their level and content."
    )
    level: int | None = Field(default=None, description="Heading level of the requested line.")

    # Mutation fields
    lines_changed: int | None = Field(default=None, description="Number of lines rewritten.")
    reverted: bool | None = Field(
        default=None, description="Whether a change was undone because it broke the hierarchy."
    )
    notices: list[str] | None = Field(
        default=None, description="Hierarchy warnings raised by the operation."
    )

    @property
    def visualize(self) -> Text:
        """Return Rich Text representation of this observation."""
        text = Text()

        if self.is_error:
            text.append("❌ ", style="red bold")
            text.append(self.ERROR_MESSAGE_HEADER, style="bold red")
            return text

        if self.result == "success":
            text.append("✅ ", style="green bold")
        elif self.result == "warning":
            text.append("⚠️  ", style="yellow bold")
        else:
            text.append("❌ ", style="red bold")

        if self.command == "show":
            text.append(f"Found {len(self.headings or [])} headings", style="blue")

        elif self.command == "get":
            text.append(f"Level: {level_name(HeadingLevel(self.level or 0))}", style="blue")

        elif self.command in ("cycle", "set"):
            if self.reverted:
                text.append("Change reverted", style="yellow")
            else:
                text.append(f"Changed {self.lines_changed or 0} lines", style="green")
            if self.notices:
                text.append(f" - {self.notices[0]}", style="dim")

        return text


class HeadingExecutor(ToolExecutor[HeadingAction, HeadingObservation]):
    """Executor for heading level operations."""

    def __init__(self, workspace_dir: Path, settings: Settings | None = None):
        """Initialize the heading executor.

        Args:
            workspace_dir: Path to the workspace directory.
            settings: Settings to use instead of the workspace config file.
        """
        self.workspace_dir = workspace_dir
        self.settings = settings

    def __call__(self, action: HeadingAction, conversation=None) -> HeadingObservation:  # noqa: ARG002
        """Execute a heading action.

        Args:
            action: The action to execute.
            conversation: The conversation context (unused).

        Returns:
            Observation with the results.
        """
        return self.execute(action)

    def execute(self, action: HeadingAction) -> HeadingObservation:
        """Execute a heading action.

        Args:
            action: The action to execute.

        Returns:
            Observation with the results.
        """
        try:
            file_path = (self.workspace_dir / action.file).resolve()

            # Prevent path traversal attacks
            if not file_path.is_relative_to(self.workspace_dir.resolve()):
                return self._error(action, f"Invalid path (outside workspace): {action.file}")

            if not file_path.exists():
                return self._error(action, f"File not found: {action.file}")

            try:
                content = file_path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                return self._error(action, f"Could not read file as UTF-8: {action.file}")

            buffer = LineBuffer.from_text(content)

            if action.command == "show":
                return self._show(action, buffer)
            if action.command == "get":
                return self._get(action, buffer)
            if action.command in ("cycle", "set"):
                return self._mutate(action, buffer, file_path)

            return self._error(action, f"Unknown command: {action.command}")

        except Exception as e:
            logger.exception("Heading tool failed on %s", action.file)
            return self._error(action, f"Unexpected error: {str(e)}")

    def _error(self, action: HeadingAction, message: str) -> HeadingObservation:
        return HeadingObservation.from_text(
            text=message,
            is_error=True,
            command=action.command,
            file=action.file,
            result="error",
        )

    def _operations(self, notifier: CollectingNotifier) -> HeadingOperations:
        settings = self.settings if self.settings is not None else load_settings(self.workspace_dir)
        return HeadingOperations(settings, notifier=notifier)

    def _show(self, action: HeadingAction, buffer: LineBuffer) -> HeadingObservation:
        """List heading lines."""
        ops = HeadingOperations(self.settings or Settings())
        headings: list[dict[str, str | int]] = [
            {
                "line": info.line_number,
                "level": int(info.level),
                "content": info.content,
            }
            for info in ops.get_line_info(buffer)
            if info.level.is_heading
        ]
        return HeadingObservation(
            command=action.command,
            file=action.file,
            result="success",
            headings=headings,
        )

    def _get(self, action: HeadingAction, buffer: LineBuffer) -> HeadingObservation:
        """Read the level of one line."""
        if action.line is None:
            return self._error(action, "Missing required parameter: 'line'")
        if not 1 <= action.line <= buffer.line_count():
            return self._error(action, f"Line {action.line} is outside the document")

        level = HeadingOperations(self.settings or Settings()).get_heading_level(
            buffer, action.line
        )
        return HeadingObservation(
            command=action.command,
            file=action.file,
            result="success",
            level=int(level),
        )

    def _mutate(
        self, action: HeadingAction, buffer: LineBuffer, file_path: Path
    ) -> HeadingObservation:
        """Run cycle or set over a line or a range and write the file back."""
        if action.command == "set" and action.level is None:
            return self._error(action, "Missing required parameter: 'level'")
        if action.command == "set" and not 0 <= action.level <= 6:
            return self._error(action, f"Invalid heading level: {action.level}. Must be 0-6.")

        if action.line is not None:
            first = last = action.line
        elif action.start_line is not None:
            first = action.start_line
            last = action.end_line if action.end_line is not None else action.start_line
        else:
            return self._error(action, "Missing required parameter: 'line' or 'start_line'")

        if not (1 <= first <= buffer.line_count() and 1 <= last <= buffer.line_count()):
            return self._error(action, f"Lines {first}-{last} are outside the document")

        notifier = CollectingNotifier()
        ops = self._operations(notifier)

        result: HeadingResult
        if action.line is not None:
            # No selection: single-line checks scope to the whole document
            if action.command == "cycle":
                result = ops.cycle_heading(buffer, action.direction, line_number=action.line)
            else:
                result = ops.set_heading_level(buffer, action.level, line_number=action.line)
        else:
            buffer.select(first - 1, last - 1)
            if action.command == "cycle":
                result = ops.cycle_heading(buffer, action.direction)
            else:
                result = ops.set_heading_level(buffer, action.level)

        if result.changed:
            file_path.write_text(buffer.text, encoding="utf-8")

        return HeadingObservation(
            command=action.command,
            file=action.file,
            result="warning" if notifier.messages else "success",
            lines_changed=result.lines_changed,
            reverted=result.reverted,
            notices=notifier.messages or None,
        )


class HeadingDocumentTool(ToolDefinition[HeadingAction, HeadingObservation]):
    """Tool for changing heading levels in markdown documents."""

    @classmethod
    def create(cls, conv_state: ConversationState) -> Sequence[HeadingDocumentTool]:
        """Create the heading document tool.

        Args:
            conv_state: Conversation state with workspace info.
        """
        workspace_dir = Path(conv_state.workspace.working_dir)
        executor = HeadingExecutor(workspace_dir)

        return [
            cls(
                description=HEADING_TOOL_DESCRIPTION,
                action_type=HeadingAction,
                observation_type=HeadingObservation,
                annotations=ToolAnnotations(
                    title="Heading Document Tool",
                ),
                executor=executor,
            )
        ]
