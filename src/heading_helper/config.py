"""Heading helper configuration management.

Loads settings from .heading-helper/config.toml if present, with sensible defaults.
Configuration hierarchy (highest priority first):
1. Command-line flags
2. Repo-level config (.heading-helper/config.toml)
3. Defaults

Example config:

    [cycling]
    enabled = true
    wrap_after_h6 = true
    min_level = "H1"
    max_level = 6

    [hierarchy]
    check = true
    allow_override = false
    single_line_scope = "selection"
"""

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from .levels import HeadingLevel, coerce_level

SingleLineScope = Literal["selection", "document"]

CONFIG_DIR = ".heading-helper"
CONFIG_FILE = "config.toml"


@dataclass(frozen=True)
class Settings:
    """Settings read by the heading engine. The engine never mutates them."""

    enable_cycling: bool = True
    wrap_after_h6: bool = True
    min_level: HeadingLevel = HeadingLevel.H1
    max_level: HeadingLevel = HeadingLevel.H6
    check_hierarchy: bool = True
    allow_hierarchy_override: bool = False
    # Scope of single-line checks; "selection" falls back to the document
    # when the buffer has no selection.
    single_line_scope: SingleLineScope = "selection"

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_level", coerce_level(self.min_level))
        object.__setattr__(self, "max_level", coerce_level(self.max_level))

        for name in ("min_level", "max_level"):
            if not getattr(self, name).is_heading:
                raise ValueError(f"{name} must be between H1 and H6")
        if self.min_level > self.max_level:
            raise ValueError(
                f"min_level (H{int(self.min_level)}) is deeper than max_level "
                f"(H{int(self.max_level)})"
            )
        if self.single_line_scope not in ("selection", "document"):
            raise ValueError(
                f"single_line_scope must be 'selection' or 'document', "
                f"got {self.single_line_scope!r}"
            )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with non-None overrides applied (used for CLI flags)."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def get_config_path(workspace: Path) -> Path:
    """Path of the repo-level config file."""
    return workspace / CONFIG_DIR / CONFIG_FILE


def load_settings(workspace: Path) -> Settings:
    """Load settings from .heading-helper/config.toml if it exists.

    Args:
        workspace: Path to the workspace/repository root.

    Returns:
        Settings with values from config file or defaults.

    Raises:
        ValueError: If the file holds invalid levels or scope.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    config_path = get_config_path(workspace)

    if not config_path.exists():
        return Settings()

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return settings_from_dict(data)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table, got {type(section).__name__}")
    return section


def settings_from_dict(data: dict[str, Any]) -> Settings:
    """Build Settings from the sectioned TOML structure."""
    defaults = Settings()
    cycling = _section(data, "cycling")
    hierarchy = _section(data, "hierarchy")

    return Settings(
        enable_cycling=cycling.get("enabled", defaults.enable_cycling),
        wrap_after_h6=cycling.get("wrap_after_h6", defaults.wrap_after_h6),
        min_level=coerce_level(cycling.get("min_level", defaults.min_level)),
        max_level=coerce_level(cycling.get("max_level", defaults.max_level)),
        check_hierarchy=hierarchy.get("check", defaults.check_hierarchy),
        allow_hierarchy_override=hierarchy.get(
            "allow_override", defaults.allow_hierarchy_override
        ),
        single_line_scope=hierarchy.get("single_line_scope", defaults.single_line_scope),
    )
