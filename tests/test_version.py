"""Tests for version module."""

from __future__ import annotations

import pytest

import heading_helper
from heading_helper.__main__ import main
from heading_helper._version import __version__, get_full_version_string, get_version


class TestVersionModule:
    """Tests for version module functions."""

    def test_version_is_string(self) -> None:
        """__version__ should be a string."""
        assert isinstance(__version__, str)

    def test_version_format(self) -> None:
        """Version should follow semver pattern."""
        parts = __version__.split(".")
        assert len(parts) >= 2
        assert all(p.isdigit() for p in parts[:2])

    def test_get_version_returns_version(self) -> None:
        assert get_version() == __version__

    def test_full_version_string(self) -> None:
        assert get_full_version_string() == f"heading-helper {__version__}"

    def test_package_exports_version(self) -> None:
        assert heading_helper.__version__ == __version__


class TestVersionFlag:
    """Tests for the --version CLI flag."""

    def test_version_flag(self, capsys) -> None:
        """--version should print the version and exit 0."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert f"heading-helper {__version__}" in capsys.readouterr().out
