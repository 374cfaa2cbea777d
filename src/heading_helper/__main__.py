"""CLI entry point for heading-helper.

Usage:
    python -m heading_helper show notes.md                 # List headings
    python -m heading_helper get notes.md 3                # Level of line 3
    python -m heading_helper cycle notes.md --lines 3:8    # Demote headings in lines 3-8
    python -m heading_helper cycle notes.md --line 3 -d up # Promote line 3
    python -m heading_helper set notes.md H2 --lines 5     # Make line 5 an H2
    python -m heading_helper set notes.md paragraph --line 5

Or via the installed command:
    heading-helper cycle notes.md --lines 3:8 --direction up
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ._version import get_full_version_string
from .buffer import LineBuffer
from .config import get_config_path, load_settings
from .levels import HeadingLevel, coerce_level, display_text
from .operations import HeadingOperations, HeadingResult

console = Console()

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Prints hierarchy warnings to the console."""

    def __init__(self, target: Console | None = None):
        self.console = target or console

    def notify(self, message: str, duration_ms: int) -> None:  # noqa: ARG002
        self.console.print(f"[yellow]![/] {message}")


def parse_line_range(value: str) -> tuple[int, int]:
    """Parse "5" or "3:8" into a 1-based inclusive (start, end) pair."""
    start_text, _, end_text = value.partition(":")
    try:
        start = int(start_text)
        end = int(end_text) if end_text else start
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid line range: {value!r}") from None
    if start < 1 or end < 1:
        raise argparse.ArgumentTypeError(f"Line numbers start at 1: {value!r}")
    return start, end


def parse_level(value: str) -> HeadingLevel:
    try:
        return coerce_level(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def find_git_root(start_path: Path) -> Path:
    """Find the git repository root from a starting path.

    Args:
        start_path: Directory to start searching from

    Returns:
        Path to the git root, or start_path if not found
    """
    current = start_path.resolve()
    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent
    return start_path.resolve()


def run_show(file: Path) -> int:
    """Print the heading structure of a file."""
    buffer = LineBuffer.from_text(file.read_text(encoding="utf-8"))
    infos = [info for info in HeadingOperations().get_line_info(buffer) if info.level.is_heading]

    if not infos:
        console.print("[dim]No headings found[/]")
        return 0

    table = Table(show_header=True, header_style="bold")
    table.add_column("Line", justify="right")
    table.add_column("Level")
    table.add_column("Heading")
    for info in infos:
        indent = "  " * (int(info.level) - 1)
        table.add_row(str(info.line_number), display_text(info.level), f"{indent}{info.content}")
    console.print(table)
    return 0


def run_get(file: Path, line_number: int) -> int:
    """Print the heading level of a line."""
    buffer = LineBuffer.from_text(file.read_text(encoding="utf-8"))
    if not 1 <= line_number <= buffer.line_count():
        console.print(f"[red]Error:[/] Line {line_number} is outside the document")
        return 1
    level = HeadingOperations().get_heading_level(buffer, line_number)
    console.print(display_text(level))
    return 0


def run_change(args: argparse.Namespace, workspace: Path) -> int:
    """Run cycle or set on a file and write the result back."""
    file: Path = args.file
    buffer = LineBuffer.from_text(file.read_text(encoding="utf-8"))

    if args.line is not None:
        first = last = args.line
    else:
        first, last = args.lines
    if min(first, last) < 1 or max(first, last) > buffer.line_count():
        console.print(f"[red]Error:[/] Lines {first}-{last} are outside the document")
        return 1

    try:
        settings = load_settings(workspace).with_overrides(
            wrap_after_h6=args.wrap,
            allow_hierarchy_override=args.allow_override,
            check_hierarchy=args.check,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/] Invalid config in {get_config_path(workspace)}: {e}")
        return 1

    ops = HeadingOperations(settings, notifier=ConsoleNotifier())

    result: HeadingResult
    if args.command == "cycle":
        if args.line is not None:
            result = ops.cycle_heading(buffer, args.direction, line_number=args.line)
        else:
            buffer.select(first - 1, last - 1)
            result = ops.cycle_heading(buffer, args.direction)
    else:
        if args.line is not None:
            result = ops.set_heading_level(buffer, args.level, line_number=args.line)
        else:
            buffer.select(first - 1, last - 1)
            result = ops.set_heading_level(buffer, args.level)

    if result.reverted:
        console.print("[red]✗[/] Change rejected, file left unchanged")
        return 1

    if not result.changed:
        console.print("[dim]Nothing to change[/]")
        return 0

    if args.dry_run:
        console.print(f"[dim]Dry run: {result.lines_changed} line(s) would change[/]")
        return 0

    file.write_text(buffer.text, encoding="utf-8")
    console.print(f"[green]✓[/] Changed {result.lines_changed} line(s) in {file}")
    return 0


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--lines",
        "-l",
        type=parse_line_range,
        help="Selected line range, 1-based and inclusive (e.g. 3:8)",
    )
    target.add_argument(
        "--line",
        type=int,
        help="Single line to change (checked against the whole document)",
    )
    parser.add_argument(
        "--workspace",
        "-w",
        type=Path,
        default=None,
        help="Workspace directory holding .heading-helper/config.toml (defaults to git root)",
    )
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would change without writing the file",
    )
    parser.add_argument(
        "--wrap",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Let H6 wrap to a paragraph when demoted",
    )
    parser.add_argument(
        "--check",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Check the heading hierarchy before keeping changes",
    )
    parser.add_argument(
        "--allow-override",
        action="store_true",
        default=None,
        help="Keep changes even when they break the hierarchy",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "WARNING").upper())

    parser = argparse.ArgumentParser(
        prog="heading-helper",
        description="Promote, demote and set markdown heading levels without breaking hierarchy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  heading-helper show notes.md                     List headings
  heading-helper cycle notes.md --lines 3:8        Demote headings in lines 3-8
  heading-helper cycle notes.md --line 4 -d up     Promote the heading on line 4
  heading-helper set notes.md H2 --lines 5:9       Make headings in lines 5-9 H2

Configuration:
  Create .heading-helper/config.toml in your repo:
    [cycling]
    wrap_after_h6 = true
    min_level = 1
    max_level = 6

    [hierarchy]
    check = true
    allow_override = false
""",
    )
    parser.add_argument("--version", action="version", version=get_full_version_string())

    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="List the headings of a file")
    show_parser.add_argument("file", type=Path, help="Markdown file")

    get_parser = subparsers.add_parser("get", help="Print the heading level of a line")
    get_parser.add_argument("file", type=Path, help="Markdown file")
    get_parser.add_argument("line", type=int, help="1-based line number")

    cycle_parser = subparsers.add_parser("cycle", help="Promote, demote or cycle headings")
    cycle_parser.add_argument("file", type=Path, help="Markdown file")
    cycle_parser.add_argument(
        "--direction",
        "-d",
        choices=["up", "down", "cycle"],
        default="cycle",
        help="up promotes, down/cycle demote (default: cycle)",
    )
    _add_target_arguments(cycle_parser)

    set_parser = subparsers.add_parser("set", help="Set an explicit heading level")
    set_parser.add_argument("file", type=Path, help="Markdown file")
    set_parser.add_argument(
        "level", type=parse_level, help="Level: 1-6, H1-H6, or 'paragraph'"
    )
    _add_target_arguments(set_parser)

    args = parser.parse_args(argv)

    file = args.file.resolve()
    if not file.is_file():
        console.print(f"[red]Error:[/] File not found: {args.file}")
        return 1
    args.file = file

    try:
        if args.command == "show":
            return run_show(file)
        if args.command == "get":
            return run_get(file, args.line)

        workspace = args.workspace.resolve() if args.workspace else find_git_root(file.parent)
        return run_change(args, workspace)
    except UnicodeDecodeError:
        console.print(f"[red]Error:[/] Could not read file as UTF-8: {args.file}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
