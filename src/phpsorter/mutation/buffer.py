"""
LineBuffer: the row-indexed text store every rewrite goes through.

Rows are 0-indexed and ranges are end-exclusive, the same convention
editors use for get/set-lines APIs. Reads clamp to the buffer, writes are
validated and raise BufferWriteError when rejected.
"""

from typing import List, Optional, Sequence

from phpsorter.exceptions import BufferWriteError


class LineBuffer:
    """
    Mutable list of lines with get/set-range primitives.

    Features:
    - Clamped reads (get_lines never raises)
    - Validated range replacement (set_lines)
    - Optional read-only mode, so hosts can reject writes
    - Change counter for "was anything written" checks
    """

    def __init__(
        self,
        lines: Optional[Sequence[str]] = None,
        name: str = "<buffer>",
        language: Optional[str] = "php",
        trailing_newline: bool = True,
        line_ending: str = "\n",
        read_only: bool = False,
    ):
        self._lines: List[str] = list(lines) if lines is not None else []
        self.name = name
        self.language = language
        self.trailing_newline = trailing_newline
        self.line_ending = line_ending
        self.read_only = read_only
        self.change_count = 0

    @classmethod
    def from_text(cls, text: str, name: str = "<buffer>", language: Optional[str] = "php") -> "LineBuffer":
        """
        Build a buffer from file content.

        CRLF is folded to LF; the original ending is kept in line_ending.
        """
        line_ending = "\r\n" if "\r\n" in text else "\n"
        text = text.replace("\r\n", "\n")
        trailing_newline = text.endswith("\n")
        if trailing_newline:
            text = text[:-1]
        return cls(
            text.split("\n"),
            name=name,
            language=language,
            trailing_newline=trailing_newline,
            line_ending=line_ending,
        )

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def modified(self) -> bool:
        return self.change_count > 0

    def text(self) -> str:
        """Return the buffer content joined with LF."""
        if not self._lines:
            return ""
        content = "\n".join(self._lines)
        if self.trailing_newline:
            content += "\n"
        return content

    def get_lines(self, start_row: int, end_row: int) -> List[str]:
        """
        Read rows [start_row, end_row).

        end_row == -1 reads to the end of the buffer. Rows outside the
        buffer are simply not returned.
        """
        if end_row == -1:
            end_row = len(self._lines)
        start_row = max(start_row, 0)
        return self._lines[start_row:end_row]

    def get_line(self, row: int) -> Optional[str]:
        """Read a single row, or None past either end."""
        if 0 <= row < len(self._lines):
            return self._lines[row]
        return None

    def set_lines(self, start_row: int, end_row: int, new_lines: Sequence[str]) -> None:
        """
        Replace rows [start_row, end_row) with new_lines.

        An empty new_lines deletes the range; start_row == end_row inserts.

        Raises:
            BufferWriteError: Read-only buffer or a range outside the buffer
        """
        if self.read_only:
            raise BufferWriteError(start_row, end_row, "buffer is read-only")
        if start_row < 0 or end_row < start_row or end_row > len(self._lines):
            raise BufferWriteError(
                start_row, end_row, f"range outside buffer of {len(self._lines)} lines"
            )
        for line in new_lines:
            if "\n" in line:
                raise BufferWriteError(start_row, end_row, "replacement line contains a newline")

        self._lines[start_row:end_row] = list(new_lines)
        self.change_count += 1

    def snapshot(self) -> List[str]:
        """Copy of all lines."""
        return list(self._lines)
