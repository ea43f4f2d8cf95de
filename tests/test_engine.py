"""
Tests for SortSession: sort, no-op detection and rendering rules.

Elements are built by hand over a LineBuffer, no parsing involved.
"""

import pytest

pytestmark = pytest.mark.fast

from phpsorter.mutation import LineBuffer
from phpsorter.schemas import SorterConfig
from phpsorter.sorting import Comment, Element, ElementCategory, SortSession


def element(buffer, category, line, visibility=None, comment_lines=0):
    """Element for a one-line statement, optionally with comment lines above it."""
    lines = tuple(buffer.get_lines(line - 1, line))
    comment = None
    if comment_lines:
        start = line - comment_lines
        comment = Comment(start, line - 1, tuple(buffer.get_lines(start - 1, line - 1)))
    return Element(
        category=category,
        start_line=line,
        end_line=line,
        lines=lines,
        text=lines[0].strip(),
        comment=comment,
        visibility_modifier=visibility,
    )


def prop(buffer, line, visibility, comment_lines=0):
    return element(buffer, ElementCategory.PROPERTY, line, visibility, comment_lines)


class TestSortAndRender:

    def test_property_visibility_spacing(self):
        buffer = LineBuffer(["<?php", "class A", "{", "    public $bar;", "    private $foo;", "}"])
        session = SortSession(buffer, SorterConfig())

        group = [prop(buffer, 4, "public"), prop(buffer, 5, "private")]
        assert session.sort_and_render(group, use_visibility=True, is_property_group=True)

        assert buffer.snapshot()[3:] == ["    private $foo;", "", "    public $bar;", "}"]
        change = session.changes[0]
        assert change.category == "property"
        assert (change.start_line, change.end_line, change.element_count) == (4, 6, 2)

    def test_imports_get_no_spacing(self):
        buffer = LineBuffer(["<?php", "", "use Foo\\Baz;", "use Foo\\Bar;", ""])
        session = SortSession(buffer, SorterConfig())

        group = [
            element(buffer, ElementCategory.IMPORT_USE, 3),
            element(buffer, ElementCategory.IMPORT_USE, 4),
        ]
        assert session.sort_and_render(group, use_visibility=False, is_property_group=False)
        assert buffer.snapshot() == ["<?php", "", "use Foo\\Bar;", "use Foo\\Baz;", ""]

    def test_sorted_group_is_noop(self):
        buffer = LineBuffer(["class A", "{", "    private $a;", "    public $b;", "}"])
        session = SortSession(buffer, SorterConfig())

        group = [prop(buffer, 3, "private"), prop(buffer, 4, "public")]
        assert not session.sort_and_render(group, True, True)
        assert buffer.change_count == 0
        assert session.changes == []

    def test_empty_group(self):
        session = SortSession(LineBuffer([]), SorterConfig())
        assert not session.sort_and_render([], True, True)

    def test_visibility_spacing_disabled(self):
        buffer = LineBuffer(["class A", "{", "    public $bar;", "    private $foo;", "}"])
        session = SortSession(buffer, SorterConfig(add_visibility_spacing=False))

        session.sort_and_render([prop(buffer, 3, "public"), prop(buffer, 4, "private")], True, True)
        assert buffer.snapshot()[2:4] == ["    private $foo;", "    public $bar;"]

    def test_constants_get_no_visibility_spacing(self):
        buffer = LineBuffer(["class A", "{", "    public const B = 2;", "    private const A = 1;", "}"])
        session = SortSession(buffer, SorterConfig())

        group = [
            element(buffer, ElementCategory.CONSTANT, 3, "public"),
            element(buffer, ElementCategory.CONSTANT, 4, "private"),
        ]
        assert session.sort_and_render(group, use_visibility=True, is_property_group=False)
        assert buffer.snapshot()[2:4] == ["    private const A = 1;", "    public const B = 2;"]

    def test_leading_comment_moves_with_statement(self):
        buffer = LineBuffer(["class A", "{", "    /** B */", "    public $b;", "    public $a;", "}"])
        session = SortSession(buffer, SorterConfig())

        group = [prop(buffer, 4, "public", comment_lines=1), prop(buffer, 5, "public")]
        assert session.sort_and_render(group, True, True)
        assert buffer.snapshot()[2:5] == ["    public $a;", "    /** B */", "    public $b;"]

    def test_spacing_goes_above_comment(self):
        buffer = LineBuffer(["class A", "{", "    // bar", "    public $bar;", "    private $foo;", "}"])
        session = SortSession(buffer, SorterConfig())

        group = [prop(buffer, 4, "public", comment_lines=1), prop(buffer, 5, "private")]
        session.sort_and_render(group, True, True)
        assert buffer.snapshot()[2:6] == ["    private $foo;", "", "    // bar", "    public $bar;"]

    def test_second_pass_is_noop(self):
        buffer = LineBuffer(["class A", "{", "    public $bar;", "    private $foo;", "}"])
        session = SortSession(buffer, SorterConfig())
        session.sort_and_render([prop(buffer, 3, "public"), prop(buffer, 4, "private")], True, True)
        count = buffer.change_count

        # Fresh elements over the rewritten buffer: private, blank, public
        regrouped = [prop(buffer, 3, "private"), prop(buffer, 5, "public")]
        assert not session.sort_and_render(regrouped, True, True)
        assert buffer.change_count == count

    def test_read_only_buffer_reports_no_change(self):
        lines = ["class A", "{", "    public $bar;", "    private $foo;", "}"]
        buffer = LineBuffer(lines, read_only=True)
        session = SortSession(buffer, SorterConfig())

        assert not session.sort_and_render([prop(buffer, 3, "public"), prop(buffer, 4, "private")], True, True)
        assert buffer.snapshot() == lines
        assert session.changes == []


class TestConstPropertySeparator:

    def test_blank_after_constants(self):
        buffer = LineBuffer(["class A", "{", "    const A = 1;", "    public $b;", "    public $a;", "}"])
        session = SortSession(buffer, SorterConfig())
        session.prev_category = ElementCategory.CONSTANT

        session.sort_and_render([prop(buffer, 4, "public"), prop(buffer, 5, "public")], True, True)
        assert buffer.snapshot()[2:6] == ["    const A = 1;", "", "    public $a;", "    public $b;"]

    def test_no_blank_after_opening_brace(self):
        buffer = LineBuffer(["class A", "{", "    public $b;", "    public $a;", "}"])
        session = SortSession(buffer, SorterConfig())
        session.prev_category = ElementCategory.CONSTANT

        session.sort_and_render([prop(buffer, 3, "public"), prop(buffer, 4, "public")], True, True)
        assert buffer.snapshot()[1:4] == ["{", "    public $a;", "    public $b;"]

    def test_separator_disabled(self):
        buffer = LineBuffer(["class A", "{", "    const A = 1;", "    public $b;", "    public $a;", "}"])
        config = SorterConfig(add_newline_between_const_and_properties=False)
        session = SortSession(buffer, config)
        session.prev_category = ElementCategory.CONSTANT

        session.sort_and_render([prop(buffer, 4, "public"), prop(buffer, 5, "public")], True, True)
        assert buffer.snapshot()[2:5] == ["    const A = 1;", "    public $a;", "    public $b;"]

    def test_category_cursor_rolls_across_groups(self):
        buffer = LineBuffer(["class A", "{", "    const B = 2;", "    const A = 1;", "}"])
        session = SortSession(buffer, SorterConfig())

        group = [
            element(buffer, ElementCategory.CONSTANT, 3),
            element(buffer, ElementCategory.CONSTANT, 4),
        ]
        session.sort_and_render(group, True, False)
        assert session.prev_category is ElementCategory.CONSTANT

        session.reset()
        assert session.prev_category is None
        assert session.changes == []
