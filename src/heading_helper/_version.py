"""Version information for heading-helper.

The version is statically defined here and should match pyproject.toml.
"""

__version__ = "0.1.0"


def get_version() -> str:
    """Get the version string.

    Returns:
        Version string like "0.1.0"
    """
    return __version__


def get_full_version_string() -> str:
    """Get a human-readable version string.

    Returns:
        String like "heading-helper 0.1.0"
    """
    return f"heading-helper {__version__}"
