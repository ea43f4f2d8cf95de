"""
Element records: immutable snapshots of one declaration statement.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

VISIBILITY_VALUES = {"private": 1, "protected": 2, "public": 3}


class ElementCategory(Enum):
    """Kinds of statements the sorter reorders."""
    IMPORT_USE = "import_use"
    TRAIT_USE = "trait_use"
    CONSTANT = "constant"
    PROPERTY = "property"


@dataclass(frozen=True)
class LineRange:
    """Inclusive 1-indexed line span."""
    min: int
    max: int

    @classmethod
    def union(cls, ranges: Iterable["LineRange"]) -> "LineRange":
        ranges = list(ranges)
        if not ranges:
            raise ValueError("union of no ranges")
        return cls(min(r.min for r in ranges), max(r.max for r in ranges))

    @property
    def start_row(self) -> int:
        """0-indexed first row."""
        return self.min - 1

    @property
    def end_row(self) -> int:
        """0-indexed row just past the span (for end-exclusive APIs)."""
        return self.max


@dataclass(frozen=True)
class Comment:
    """A leading comment attached to an element."""
    start_line: int
    end_line: int
    lines: Tuple[str, ...]


@dataclass(frozen=True)
class Element:
    """
    One declaration statement as seen at extraction time.

    Stale as soon as a write shifts the buffer's line numbers.
    """
    category: ElementCategory
    start_line: int
    end_line: int
    lines: Tuple[str, ...]
    text: str
    comment: Optional[Comment] = None
    visibility_modifier: Optional[str] = None
    standalone: bool = True

    @property
    def sort_key(self) -> str:
        return self.text

    @property
    def block_start(self) -> int:
        """First line of the element including its comment."""
        return self.comment.start_line if self.comment else self.start_line

    @property
    def block_range(self) -> LineRange:
        return LineRange(self.block_start, self.end_line)

    @property
    def block_lines(self) -> Tuple[str, ...]:
        """Comment lines followed by the element's own lines."""
        if self.comment:
            return self.comment.lines + self.lines
        return self.lines

    def visibility(self, default: str) -> str:
        """Explicit visibility, or the configured default."""
        return self.visibility_modifier or default

    def rank(self, default: str) -> int:
        return VISIBILITY_VALUES[self.visibility(default)]
