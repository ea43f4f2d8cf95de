"""
Blank-line normalizer: the post-pass after sorting and pruning.

Imports, trait uses, constants and properties are independent sequences.
Every contiguous run of an enabled category is re-rendered without stray blank
lines; member runs get one blank line wherever the grouping key changes and
one after the run when code follows directly. All rewrites are applied
bottom-up from a single extraction.
"""

from typing import List, Optional, Set, Tuple

from phpsorter.exceptions import BufferWriteError
from phpsorter.logging_config import logger
from phpsorter.mutation.buffer import LineBuffer
from phpsorter.parser.tree import SyntaxTree
from phpsorter.schemas import SorterConfig
from .elements import Element, ElementCategory, LineRange
from .extractor import ElementExtractor, ElementGroup, group_contiguous

MEMBER_CATEGORIES = (
    ElementCategory.TRAIT_USE,
    ElementCategory.CONSTANT,
    ElementCategory.PROPERTY,
)

# Config toggle that enables each category
CATEGORY_TOGGLES = {
    ElementCategory.IMPORT_USE: "sort_namespace_uses",
    ElementCategory.TRAIT_USE: "sort_traits",
    ElementCategory.CONSTANT: "sort_constants",
    ElementCategory.PROPERTY: "sort_properties",
}

Plan = Tuple[LineRange, List[str]]


class BlankLineNormalizer:
    """
    Collapse and re-derive blank lines inside element runs.
    """

    def __init__(self, buffer: LineBuffer, tree: SyntaxTree, config: SorterConfig):
        self.buffer = buffer
        self.config = config
        self.extractor = ElementExtractor(tree, buffer)
        self._property_starts: Set[int] = set()

    def normalize(self) -> int:
        """
        Rewrite every run whose layout differs from the normalized one.

        Returns:
            Number of regions written
        """
        elements = self.extractor.extract_all()
        self._property_starts = {
            element.block_range.start_row for element in elements[ElementCategory.PROPERTY]
        }
        plans: List[Plan] = []

        if self._enabled(ElementCategory.IMPORT_USE):
            for group in group_contiguous(elements[ElementCategory.IMPORT_USE], self.buffer):
                plans.append(self._plan_imports(group))

        for category in MEMBER_CATEGORIES:
            if not self._enabled(category):
                continue
            for group in group_contiguous(elements[category], self.buffer):
                plans.append(self._plan_members(group))

        rewritten = 0
        for span, lines in sorted(plans, key=lambda plan: plan[0].min, reverse=True):
            if self._apply(span, lines):
                rewritten += 1

        if rewritten:
            logger.info(f"Normalized blank lines in {rewritten} region(s) of {self.buffer.name}")
        return rewritten

    def _enabled(self, category: ElementCategory) -> bool:
        return getattr(self.config, CATEGORY_TOGGLES[category])

    def _plan_imports(self, group: ElementGroup) -> Plan:
        """Imports lose every blank line between them."""
        span = LineRange.union(element.block_range for element in group)
        lines: List[str] = []
        for element in group:
            lines.extend(element.block_lines)
        return span, lines

    def _plan_members(self, group: ElementGroup) -> Plan:
        span = LineRange.union(element.block_range for element in group)
        lines: List[str] = []
        prev_key: Optional[str] = None

        for element in group:
            key = self._group_key(element)
            if prev_key is not None and key != prev_key and lines and lines[-1].strip():
                lines.append("")
            lines.extend(element.block_lines)
            prev_key = key

        if self._needs_trailing_blank(group[0], span):
            lines.append("")

        return span, lines

    def _needs_trailing_blank(self, first: Element, span: LineRange) -> bool:
        next_line = self.buffer.get_line(span.end_row)
        if next_line is None or not next_line.strip() or next_line.strip().startswith("}"):
            return False
        if first.category is ElementCategory.CONSTANT and span.end_row in self._property_starts:
            return self.config.add_newline_between_const_and_properties
        return True

    def _group_key(self, element: Element) -> str:
        """Visibility for constants and properties, `use` for trait uses."""
        if element.category is ElementCategory.TRAIT_USE:
            return "use"
        if not self.config.add_visibility_spacing:
            return element.category.value
        return element.visibility(self.config.default_visibility)

    def _apply(self, span: LineRange, lines: List[str]) -> bool:
        current = self.buffer.get_lines(span.start_row, span.end_row)
        if current == lines:
            return False
        try:
            self.buffer.set_lines(span.start_row, span.end_row, lines)
        except BufferWriteError as e:
            logger.error(f"Failed to normalize lines {span.min}-{span.max}: {e}")
            return False
        return True
