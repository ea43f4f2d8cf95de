"""
Sort-and-render engine.

A SortSession owns the rolling cursors of one invocation. Each call to
sort_and_render handles one ElementGroup: sort, detect a no-op, render the
group with the spacing rules and replace the group's line span with a single
buffer write.
"""

from typing import List, Optional, Sequence

from phpsorter.exceptions import BufferWriteError
from phpsorter.logging_config import logger
from phpsorter.mutation.buffer import LineBuffer
from phpsorter.schemas import GroupChange, SorterConfig
from .comparator import sort_elements, validate_visibility
from .elements import Element, ElementCategory, LineRange


def _is_blank(line: Optional[str]) -> bool:
    return line is not None and not line.strip()


class SortSession:
    """
    Per-invocation rendering state.

    prev_category rolls across every group rendered in the session;
    prev_visibility restarts with each group.
    """

    def __init__(self, buffer: LineBuffer, config: SorterConfig):
        validate_visibility(config.default_visibility)
        self.buffer = buffer
        self.config = config
        self.prev_category: Optional[ElementCategory] = None
        self.prev_visibility: Optional[str] = None
        self.changes: List[GroupChange] = []

    def reset(self) -> None:
        """Start a new invocation."""
        self.prev_category = None
        self.prev_visibility = None
        self.changes = []

    def sort_and_render(
        self,
        group: Sequence[Element],
        use_visibility: bool,
        is_property_group: bool,
    ) -> bool:
        """
        Sort a group and rewrite its span if the order changed.

        Args:
            group: Same-category, contiguous elements in source order
            use_visibility: Rank by visibility before text
            is_property_group: Apply visibility spacing

        Returns:
            True if the buffer was written
        """
        if not group:
            return False

        span = LineRange.union(element.block_range for element in group)
        original_order = [element.sort_key for element in group]

        ordered = sort_elements(group, use_visibility, self.config.default_visibility)

        if [element.sort_key for element in ordered] == original_order:
            logger.debug(
                f"{group[0].category.value} group at lines {span.min}-{span.max} already sorted"
            )
            return False

        lines = self.render(ordered, span, is_property_group)
        written = self.update_buffer(span, lines)

        if written:
            logger.info(
                f"Sorted {len(group)} {group[0].category.value} element(s) at lines {span.min}-{span.max}"
            )
            self.changes.append(GroupChange(
                category=group[0].category.value,
                start_line=span.min,
                end_line=span.min + len(lines) - 1,
                element_count=len(group),
            ))
        return written

    def render(
        self,
        ordered: Sequence[Element],
        span: LineRange,
        is_property_group: bool,
    ) -> List[str]:
        """Build the replacement lines for a sorted group."""
        lines: List[str] = []
        self.prev_visibility = None

        for element in ordered:
            if self.config.add_newline_between_const_and_properties:
                if (
                    self.prev_category is ElementCategory.CONSTANT
                    and element.category is ElementCategory.PROPERTY
                    and self._needs_const_separator(lines, span)
                ):
                    lines.append("")
                self.prev_category = element.category

            if is_property_group and self.config.add_visibility_spacing:
                visibility = element.visibility(self.config.default_visibility)
                if self.prev_visibility is not None and visibility != self.prev_visibility:
                    if lines and not _is_blank(lines[-1]):
                        lines.append("")
                self.prev_visibility = visibility

            # Comment stays glued to its statement; spacing goes above both
            lines.extend(element.block_lines)

        return lines

    def _needs_const_separator(self, lines: List[str], span: LineRange) -> bool:
        """
        Whether the preceding emitted line calls for a blank separator.

        With nothing rendered yet, the buffer line above the span is the
        preceding line; a blank line or a scope's opening brace needs none.
        """
        preceding = lines[-1] if lines else self.buffer.get_line(span.start_row - 1)
        if preceding is None or _is_blank(preceding):
            return False
        return not preceding.rstrip().endswith("{")

    def update_buffer(self, span: LineRange, lines: List[str]) -> bool:
        """
        Replace a span with new lines unless they are already identical.

        Returns:
            True if a write happened; False on no-op or rejected write
        """
        original_lines = self.buffer.get_lines(span.start_row, span.end_row)
        if original_lines == lines:
            return False

        try:
            self.buffer.set_lines(span.start_row, span.end_row, lines)
        except BufferWriteError as e:
            logger.error(f"Failed to update buffer: {e}")
            return False
        return True
