"""
phpsorter Path Configuration

Centralized path management for phpsorter data files.
All paths are relative to the project root (current working directory).

Directory Structure:
.phpsorter/
├── config.json          # Local configuration overrides
├── backups/             # Pre-write backups (files.backup = true)
└── logs/                # Log files (PHPSORTER_FILE_LOGGING=1)
"""

from pathlib import Path
from typing import Optional


class SorterPaths:
    """
    Centralized path configuration for phpsorter.

    All paths are lazily resolved relative to project_root.
    Default project_root is current working directory.
    """

    # Directory name for all phpsorter data
    DATA_DIR = ".phpsorter"

    CONFIG_NAME = "config.json"

    # Subdirectory names
    BACKUPS_DIR = "backups"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize paths configuration.

        Args:
            project_root: Root directory for the project. Defaults to CWD.
        """
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def data_dir(self) -> Path:
        """Get the .phpsorter directory path."""
        return self.project_root / self.DATA_DIR

    @property
    def local_config(self) -> Path:
        """Get the project-local config file path."""
        return self.data_dir / self.CONFIG_NAME

    @property
    def global_config(self) -> Path:
        """Get the user-wide config file path."""
        return Path.home() / self.DATA_DIR / self.CONFIG_NAME

    @property
    def backups_dir(self) -> Path:
        """Get the backups directory path."""
        return self.data_dir / self.BACKUPS_DIR

    @property
    def logs_dir(self) -> Path:
        """Get the logs directory path."""
        return self.data_dir / self.LOGS_DIR

    def ensure_dirs(self) -> None:
        """Create all necessary directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.backups_dir.mkdir(exist_ok=True)
        self.logs_dir.mkdir(exist_ok=True)


# Global instance for convenience
_default_paths: Optional[SorterPaths] = None


def get_paths(project_root: Optional[Path] = None) -> SorterPaths:
    """
    Get the paths configuration.

    Args:
        project_root: Optional project root override

    Returns:
        SorterPaths instance
    """
    global _default_paths
    if project_root is not None:
        return SorterPaths(project_root)
    if _default_paths is None:
        _default_paths = SorterPaths()
    return _default_paths


def reset_paths() -> None:
    """Reset the global paths instance (useful for testing)."""
    global _default_paths
    _default_paths = None
