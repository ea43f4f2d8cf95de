"""
CLI Configuration

Centralized configuration for the phpsorter CLI.
"""

import os
from typing import Optional


class CLIConfig:
    """Configuration for CLI commands"""

    # Longest diff printed per file with --diff
    DEFAULT_MAX_DIFF_LINES = 200

    # Machine mode (pure JSON output)
    _machine_mode: Optional[bool] = None

    @classmethod
    def set_machine_mode(cls, enabled: Optional[bool]) -> None:
        """Set machine mode (pure data output, no presentation)"""
        cls._machine_mode = enabled

    @classmethod
    def is_machine_mode(cls) -> bool:
        """
        Check if machine mode is active.

        Machine mode is the default; PHPSORTER_HUMAN_MODE=1 or --human turns
        it off.
        """
        if cls._machine_mode is not None:
            return cls._machine_mode
        if os.getenv("PHPSORTER_HUMAN_MODE", "").lower() in ("1", "true", "yes"):
            return False
        return True
