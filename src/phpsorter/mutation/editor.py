"""
FileEditor: load PHP files into LineBuffers and write them back atomically.

Features:
- UTF-8 read with line-ending detection (LF/CRLF)
- Optional timestamped backup before a write
- Atomic writes (temp file + rename)
- Unified diff for preview output
"""

import difflib
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from phpsorter.logging_config import logger
from phpsorter.parser.config import detect_language
from phpsorter.paths import get_paths
from .buffer import LineBuffer


class FileEditor:
    """
    File layer around LineBuffer.

    The sorter never touches the filesystem itself: it works on a buffer
    and the editor persists the result once the whole invocation is done.
    """

    def __init__(self, config: Optional[dict] = None):
        """
        Initialize file editor with optional config.

        Args:
            config: Optional overrides: backup_enabled, backup_dir
        """
        defaults = {
            "backup_enabled": False,
            "backup_dir": str(get_paths().backups_dir),
        }
        self.config = {**defaults, **(config or {})}

    def load(self, file_path: str) -> Tuple[LineBuffer, str]:
        """
        Read a file into a buffer.

        Args:
            file_path: Path to source file

        Returns:
            (buffer, original_content)

        Raises:
            OSError, UnicodeDecodeError: The file cannot be read as UTF-8
        """
        path = Path(file_path)
        with open(path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()

        buffer = LineBuffer.from_text(content, name=str(path), language=detect_language(str(path)))
        logger.debug(f"Loaded {len(buffer)} lines from {file_path} (language={buffer.language})")
        return buffer, content

    def render(self, buffer: LineBuffer) -> str:
        """Buffer content with the buffer's original line endings restored."""
        return self._normalize_line_endings(buffer.text(), buffer.line_ending)

    def save(self, file_path: str, buffer: LineBuffer) -> Tuple[bool, Optional[str]]:
        """
        Write a buffer back to disk.

        Args:
            file_path: Target file
            buffer: Buffer to persist

        Returns:
            (success, backup_path)
        """
        backup_path = None
        if self.config["backup_enabled"]:
            backup_path = self.create_backup(file_path)
            if not backup_path:
                logger.error("Backup creation failed, aborting write")
                return False, None

        success = self._atomic_write(file_path, self.render(buffer))

        if success:
            logger.info(f"Wrote sorted elements to {file_path}")
        else:
            logger.error(f"Failed to write changes to {file_path}")
            if backup_path:
                self._restore_backup(backup_path, file_path)

        return success, backup_path

    def create_backup(self, file_path: str) -> Optional[str]:
        """
        Create a timestamped backup of a file.

        Returns:
            Path to backup file or None if failed
        """
        path = Path(file_path)
        if not path.exists():
            logger.error(f"Cannot backup non-existent file: {file_path}")
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_dir = Path(self.config["backup_dir"])
        backup_path = backup_dir / f"{path.name}.{timestamp}.backup"

        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(str(path), str(backup_path))
        except OSError as e:
            logger.error(f"Failed to create backup: {e}")
            return None

        logger.debug(f"Created backup: {backup_path}")
        return str(backup_path)

    def _atomic_write(self, file_path: str, content: str) -> bool:
        """
        Write file atomically using temp file + rename.

        Returns:
            True if successful
        """
        path = Path(file_path)

        try:
            # Same directory as target so the rename stays on one filesystem
            fd, temp_path = tempfile.mkstemp(
                dir=str(path.parent),
                prefix=f".{path.name}.",
                suffix=".tmp"
            )
        except OSError as e:
            logger.error(f"Failed to create temp file: {e}")
            return False

        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
            if path.exists():
                shutil.copymode(str(path), temp_path)
            os.replace(temp_path, str(path))
        except OSError as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            logger.error(f"Failed during atomic write: {e}")
            return False

        logger.debug(f"Atomic write completed: {file_path}")
        return True

    def _restore_backup(self, backup_path: str, target_path: str) -> bool:
        """Restore file from backup."""
        try:
            shutil.copy2(backup_path, target_path)
        except OSError as e:
            logger.error(f"Failed to restore backup: {e}")
            return False
        logger.info(f"Restored {target_path} from backup")
        return True

    def _normalize_line_endings(self, content: str, line_ending: str) -> str:
        """
        Normalize line endings to match detected style.

        Args:
            content: Content to normalize
            line_ending: Target line ending ('\n' or '\r\n')
        """
        content = content.replace('\r\n', '\n')
        if line_ending == '\r\n':
            content = content.replace('\n', '\r\n')
        return content

    def generate_unified_diff(
        self,
        file_path: str,
        original_content: str,
        modified_content: str,
        max_diff_lines: int = 200
    ) -> str:
        """
        Generate unified diff between original and modified content.

        Diffs longer than max_diff_lines are cut with a trailing notice.
        """
        diff_lines: List[str] = list(difflib.unified_diff(
            original_content.replace('\r\n', '\n').splitlines(keepends=True),
            modified_content.replace('\r\n', '\n').splitlines(keepends=True),
            fromfile=f"a/{file_path}",
            tofile=f"b/{file_path}",
        ))

        if len(diff_lines) > max_diff_lines:
            hidden = len(diff_lines) - max_diff_lines
            diff_lines = diff_lines[:max_diff_lines]
            diff_lines.append(f"\n[... {hidden} diff lines truncated ...]\n")

        return ''.join(diff_lines)
