"""Default configuration values for projscan."""

from typing import Any


def get_default_config() -> dict[str, Any]:
    """Return the default configuration.

    Every key here is user-overridable through the global config.json and the
    project-local .projscan.json. The matching environment variable, when
    set, takes precedence over both files.
    """
    return {
        "top_contributors": 5,
        "most_active_files_limit": 10,
        "detect_renames": True,
        "gitignore_mode": "simple",
        "output_dir": ".parsed",
        "log_level": "WARNING",
        "log_format": "pretty",
        "log_colors": True,
    }
