"""
Unused-element pruner.

Deletions shrink the buffer and shift every line below them, so pending
elements are processed highest start line first: when an element is checked,
nothing above it has moved yet.
"""

from typing import Callable, List, Optional, Sequence

from phpsorter.exceptions import BufferWriteError
from phpsorter.logging_config import logger
from phpsorter.mutation.buffer import LineBuffer
from .elements import Element

# Oracle: 0-indexed row -> "the declaration starting here is unused"
UnusedOracle = Callable[[int], bool]


def prune_unused(
    buffer: LineBuffer,
    elements: Sequence[Element],
    is_unused: UnusedOracle,
) -> List[Element]:
    """
    Delete every element the oracle flags, together with its comment.

    Args:
        buffer: Buffer the elements were extracted from
        elements: Candidates, in any order
        is_unused: Oracle asked for each element's first row

    Returns:
        Removed elements, bottom-most first
    """
    pending = sorted(elements, key=lambda element: element.start_line, reverse=True)
    removed: List[Element] = []
    lowest_deleted: Optional[int] = None

    for element in pending:
        if lowest_deleted is not None and element.end_line >= lowest_deleted:
            # Shares lines with a range that is already gone
            logger.debug(f"Skipping element at line {element.start_line}: overlaps a deleted range")
            continue
        if not element.standalone:
            logger.debug(f"Skipping element at line {element.start_line}: shares its line with other code")
            continue
        if not is_unused(element.start_line - 1):
            continue

        span = element.block_range
        try:
            buffer.set_lines(span.start_row, span.end_row, [])
        except BufferWriteError as e:
            logger.error(f"Failed to remove unused element at lines {span.min}-{span.max}: {e}")
            continue

        logger.info(f"Removed unused {element.category.value} at lines {span.min}-{span.max}: {element.text}")
        lowest_deleted = span.min
        removed.append(element)

    return removed
