"""projscan: structural snapshots of Git repositories and project files."""

__version__ = "0.1.0"
