"""
Tests for prune_unused: bottom-up deletion of flagged elements.
"""

import pytest

pytestmark = pytest.mark.fast

from phpsorter.mutation import LineBuffer
from phpsorter.sorting import Comment, Element, ElementCategory, prune_unused


def import_at(buffer, line, comment_lines=0, standalone=True):
    lines = tuple(buffer.get_lines(line - 1, line))
    comment = None
    if comment_lines:
        start = line - comment_lines
        comment = Comment(start, line - 1, tuple(buffer.get_lines(start - 1, line - 1)))
    return Element(
        category=ElementCategory.IMPORT_USE,
        start_line=line,
        end_line=line,
        lines=lines,
        text=lines[0],
        comment=comment,
        standalone=standalone,
    )


LINES = ["<?php", "use A;", "keep1", "use B;", "keep2", "use C;", "keep3"]


class TestPruneUnused:

    def test_three_flagged_elements_removed_exactly(self):
        buffer = LineBuffer(LINES)
        elements = [import_at(buffer, 2), import_at(buffer, 4), import_at(buffer, 6)]

        removed = prune_unused(buffer, elements, lambda row: True)

        assert buffer.snapshot() == ["<?php", "keep1", "keep2", "keep3"]
        assert [e.text for e in removed] == ["use C;", "use B;", "use A;"]

    def test_only_flagged_rows_removed(self):
        buffer = LineBuffer(LINES)
        elements = [import_at(buffer, 2), import_at(buffer, 4), import_at(buffer, 6)]

        # Oracle rows are 0-indexed: "use A;" and "use C;"
        removed = prune_unused(buffer, elements, lambda row: row in (1, 5))

        assert buffer.snapshot() == ["<?php", "keep1", "use B;", "keep2", "keep3"]
        assert len(removed) == 2

    def test_input_order_does_not_matter(self):
        buffer = LineBuffer(LINES)
        elements = [import_at(buffer, 2), import_at(buffer, 6), import_at(buffer, 4)]

        prune_unused(buffer, elements, lambda row: True)
        assert buffer.snapshot() == ["<?php", "keep1", "keep2", "keep3"]

    def test_comment_removed_with_statement(self):
        buffer = LineBuffer(["<?php", "// legacy", "use A;", "use B;"])
        elements = [import_at(buffer, 3, comment_lines=1), import_at(buffer, 4)]

        prune_unused(buffer, elements, lambda row: row == 2)
        assert buffer.snapshot() == ["<?php", "use B;"]

    def test_shared_line_is_kept(self):
        buffer = LineBuffer(["<?php", "use A; use B;"])
        elements = [import_at(buffer, 2, standalone=False)]

        assert prune_unused(buffer, elements, lambda row: True) == []
        assert buffer.snapshot() == ["<?php", "use A; use B;"]

    def test_rejected_write_leaves_element(self):
        buffer = LineBuffer(LINES, read_only=True)
        elements = [import_at(buffer, 2)]

        assert prune_unused(buffer, elements, lambda row: True) == []
        assert buffer.snapshot() == LINES
