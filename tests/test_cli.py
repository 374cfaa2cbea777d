"""Tests for CLI entry point."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from heading_helper.__main__ import find_git_root, main, parse_level, parse_line_range
from heading_helper.levels import HeadingLevel


@pytest.fixture
def doc(tmp_path: Path) -> Path:
    path = tmp_path / "notes.md"
    path.write_text("# Title\nBody\n## Section\n### Detail\n")
    return path


def run(doc: Path, *args: str) -> int:
    return main([*args[:1], str(doc), *args[1:], "--workspace", str(doc.parent)])


class TestFindGitRoot:
    """Tests for find_git_root function."""

    def test_finds_git_root_in_current_dir(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        assert find_git_root(tmp_path) == tmp_path

    def test_finds_git_root_in_parent(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        subdir = tmp_path / "subdir" / "nested"
        subdir.mkdir(parents=True)
        assert find_git_root(subdir) == tmp_path

    def test_returns_start_path_if_no_git(self, tmp_path: Path) -> None:
        subdir = tmp_path / "subdir"
        subdir.mkdir()
        assert find_git_root(subdir) == subdir


class TestArgumentParsing:
    """Tests for argument converters."""

    def test_single_line(self) -> None:
        assert parse_line_range("5") == (5, 5)

    def test_line_range(self) -> None:
        assert parse_line_range("3:8") == (3, 8)

    @pytest.mark.parametrize("value", ["x", "3:y", "0", "0:2"])
    def test_invalid_line_range(self, value: str) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_line_range(value)

    def test_parse_level(self) -> None:
        assert parse_level("H2") == HeadingLevel.H2
        assert parse_level("paragraph") == HeadingLevel.PARAGRAPH

    def test_parse_invalid_level(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_level("title")


class TestMainHelp:
    """Tests for CLI help output."""

    @pytest.mark.parametrize("argv", [["--help"], ["cycle", "--help"], ["set", "--help"]])
    def test_help_returns_zero(self, argv: list[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 0

    def test_no_args_shows_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code != 0

    def test_cycle_requires_target(self, doc: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["cycle", str(doc)])
        assert exc_info.value.code != 0


class TestReadCommands:
    """Tests for show and get."""

    def test_show(self, doc: Path, capsys) -> None:
        assert main(["show", str(doc)]) == 0
        out = capsys.readouterr().out
        assert "Title" in out
        assert "Detail" in out

    def test_show_without_headings(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "plain.md"
        path.write_text("Just text\n")
        assert main(["show", str(path)]) == 0
        assert "No headings found" in capsys.readouterr().out

    def test_get(self, doc: Path, capsys) -> None:
        assert main(["get", str(doc), "3"]) == 0
        assert "H2" in capsys.readouterr().out

    def test_get_outside_document(self, doc: Path) -> None:
        assert main(["get", str(doc), "40"]) == 1

    def test_nonexistent_file_returns_error(self) -> None:
        assert main(["show", "/nonexistent/path/notes.md"]) == 1


class TestCycleCommand:
    """Tests for the cycle command."""

    def test_demote_range(self, doc: Path) -> None:
        assert run(doc, "cycle", "--lines", "3:4", "--direction", "down") == 0
        assert doc.read_text() == "# Title\nBody\n### Section\n#### Detail\n"

    def test_promote_within_selection(self, doc: Path) -> None:
        assert run(doc, "cycle", "--lines", "2:3", "-d", "up") == 0
        assert doc.read_text() == "# Title\nBody\n# Section\n### Detail\n"

    def test_rejected_promotion_leaves_file(self, doc: Path, capsys) -> None:
        original = doc.read_text()
        assert run(doc, "cycle", "--line", "3", "-d", "up") == 1
        assert doc.read_text() == original
        assert "rejected" in capsys.readouterr().out

    def test_allow_override(self, doc: Path) -> None:
        assert run(doc, "cycle", "--line", "3", "-d", "up", "--allow-override") == 0
        assert doc.read_text().splitlines()[2] == "# Section"

    def test_no_check(self, doc: Path) -> None:
        assert run(doc, "cycle", "--lines", "1:4", "-d", "up", "--no-check") == 0
        assert doc.read_text() == "# Title\nBody\n# Section\n## Detail\n"

    def test_dry_run(self, doc: Path, capsys) -> None:
        original = doc.read_text()
        assert run(doc, "cycle", "--lines", "3:4", "--dry-run") == 0
        assert doc.read_text() == original
        assert "Dry run" in capsys.readouterr().out

    def test_nothing_to_change(self, doc: Path, capsys) -> None:
        assert run(doc, "cycle", "--lines", "2") == 0
        assert "Nothing to change" in capsys.readouterr().out

    def test_lines_outside_document(self, doc: Path) -> None:
        assert run(doc, "cycle", "--lines", "3:40") == 1

    def test_line_zero(self, doc: Path) -> None:
        assert run(doc, "cycle", "--line", "0") == 1


class TestSetCommand:
    """Tests for the set command."""

    def test_set_range(self, doc: Path) -> None:
        assert run(doc, "set", "H4", "--lines", "3:4") == 0
        assert doc.read_text() == "# Title\nBody\n#### Section\n#### Detail\n"

    def test_set_paragraph_on_single_line(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.md"
        path.write_text("# Title\n###### Footnote\n")
        assert run(path, "set", "paragraph", "--line", "2") == 0
        assert path.read_text() == "# Title\nFootnote\n"

    def test_workspace_config_is_used(self, tmp_path: Path) -> None:
        config_dir = tmp_path / ".heading-helper"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("[cycling]\nwrap_after_h6 = false\n")
        path = tmp_path / "notes.md"
        path.write_text("# Title\n###### Footnote\n")

        assert run(path, "set", "paragraph", "--line", "2") == 1
        assert path.read_text() == "# Title\n###### Footnote\n"

    def test_wrap_flag_overrides_config(self, tmp_path: Path) -> None:
        config_dir = tmp_path / ".heading-helper"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("[cycling]\nwrap_after_h6 = false\n")
        path = tmp_path / "notes.md"
        path.write_text("# Title\n###### Footnote\n")

        assert run(path, "set", "paragraph", "--line", "2", "--wrap") == 0
        assert path.read_text() == "# Title\nFootnote\n"

    def test_invalid_config(self, tmp_path: Path, capsys) -> None:
        config_dir = tmp_path / ".heading-helper"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('[cycling]\nmin_level = "H9"\n')
        path = tmp_path / "notes.md"
        path.write_text("## Title\n")

        assert run(path, "set", "H3", "--line", "1") == 1
        assert "Invalid config" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "config", ["[cycling]\nmax_level = 5.0\n", "cycling = 5\n"]
    )
    def test_malformed_config_values(self, tmp_path: Path, capsys, config: str) -> None:
        config_dir = tmp_path / ".heading-helper"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text(config)
        path = tmp_path / "notes.md"
        path.write_text("## Title\n")

        assert run(path, "set", "H3", "--line", "1") == 1
        assert "Invalid config" in capsys.readouterr().out
        assert path.read_text() == "## Title\n"


class TestLineBreaks:
    """Tests for files holding characters other than LF that break lines."""

    def test_unicode_line_separator_is_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.md"
        path.write_text("# Title\n## Intro\nsee\u2028this\n", encoding="utf-8")

        assert run(path, "cycle", "--lines", "2", "-d", "down") == 0
        assert path.read_text(encoding="utf-8") == "# Title\n### Intro\nsee\u2028this\n"

    def test_line_numbers_count_only_newlines(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.md"
        path.write_text("# Title\nsee\x0cthis\n## Intro\n", encoding="utf-8")

        assert run(path, "set", "H3", "--line", "3") == 0
        assert path.read_text(encoding="utf-8") == "# Title\nsee\x0cthis\n### Intro\n"
