"""
ElementExtractor: turn syntax-tree captures into Element records.

Pure reads over a SyntaxTree and the LineBuffer it was parsed from.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from tree_sitter import Node

from phpsorter.exceptions import LanguageMismatchError, MissingParserError
from phpsorter.logging_config import logger
from phpsorter.mutation.buffer import LineBuffer
from phpsorter.parser.config import TARGET_LANGUAGE
from phpsorter.parser.tree import SyntaxTree, node_rows, node_text
from .comparator import find_visibility
from .elements import Comment, Element, ElementCategory

ElementGroup = List[Element]

MEMBER_CAPTURES = {
    "use_declaration": "trait",
    "const_declaration": "const",
    "property_declaration": "property",
}

IMPORT_CAPTURES = {
    "namespace_use_declaration": "namespace_use_declaration",
}

CAPTURE_CATEGORIES = {
    "trait": ElementCategory.TRAIT_USE,
    "const": ElementCategory.CONSTANT,
    "property": ElementCategory.PROPERTY,
    "namespace_use_declaration": ElementCategory.IMPORT_USE,
}

SCOPE_TYPES = (
    "class_declaration",
    "trait_declaration",
    "interface_declaration",
    "enum_declaration",
)

TRAILING_COMMENT_PREFIXES = ("//", "#", "/*")


@dataclass
class ExtractedElements:
    """Member declarations of one scope, by category, in source order."""
    traits: List[Element] = field(default_factory=list)
    constants: List[Element] = field(default_factory=list)
    properties: List[Element] = field(default_factory=list)

    def for_category(self, category: ElementCategory) -> List[Element]:
        return {
            ElementCategory.TRAIT_USE: self.traits,
            ElementCategory.CONSTANT: self.constants,
            ElementCategory.PROPERTY: self.properties,
        }[category]


class ElementExtractor:
    """
    Build Elements for a row range of a parsed buffer.

    Raises MissingParserError / LanguageMismatchError on construction, before
    any element is read.
    """

    def __init__(self, tree: Optional[SyntaxTree], buffer: LineBuffer):
        if tree is None:
            raise MissingParserError(buffer.name, "failed to get a syntax tree for the buffer")
        if tree.language != TARGET_LANGUAGE:
            raise LanguageMismatchError(tree.language, TARGET_LANGUAGE)
        self.tree = tree
        self.buffer = buffer

    def scope_ranges(self) -> List[Tuple[int, int]]:
        """0-indexed (start_row, end_row) of every class-like declaration."""
        return [node_rows(node) for node in self.tree.find_all(SCOPE_TYPES)]

    def extract_range(self, start_row: int, end_row: int) -> ExtractedElements:
        """
        Collect trait uses, constants and properties starting in a row span.

        end_row == -1 lifts the upper bound: each declaration is only
        checked against its own start row.
        """
        extracted = ExtractedElements()
        for capture_name, node in self.tree.iter_captures(MEMBER_CAPTURES, start_row, end_row):
            node_start = node.start_point[0]
            effective_end = node_start + 1 if end_row == -1 else end_row
            if not start_row <= node_start <= effective_end:
                continue
            element = self.build_element(node, CAPTURE_CATEGORIES[capture_name])
            extracted.for_category(element.category).append(element)
        return extracted

    def extract_imports(self) -> List[Element]:
        """Every namespace import in the file, in source order."""
        return [
            self.build_element(node, ElementCategory.IMPORT_USE)
            for _, node in self.tree.iter_captures(IMPORT_CAPTURES)
        ]

    def extract_all(self) -> Dict[ElementCategory, List[Element]]:
        """Every element of every category in the file."""
        captures = {**MEMBER_CAPTURES, **IMPORT_CAPTURES}
        result: Dict[ElementCategory, List[Element]] = {category: [] for category in ElementCategory}
        for capture_name, node in self.tree.iter_captures(captures):
            category = CAPTURE_CATEGORIES[capture_name]
            result[category].append(self.build_element(node, category))
        return result

    def build_element(self, node: Node, category: ElementCategory) -> Element:
        start_row, end_row = node_rows(node)
        visibility = None
        if category in (ElementCategory.CONSTANT, ElementCategory.PROPERTY):
            visibility = find_visibility(node)
        return Element(
            category=category,
            start_line=start_row + 1,
            end_line=end_row + 1,
            lines=tuple(self.buffer.get_lines(start_row, end_row + 1)),
            text=node_text(node),
            comment=self._leading_comment(node),
            visibility_modifier=visibility,
            standalone=self._owns_lines(node),
        )

    def _leading_comment(self, node: Node) -> Optional[Comment]:
        """
        Comment siblings directly above a node.

        Each comment must start its own line and end on the line right
        above the next one, so trailing comments of a previous statement and
        comments separated by a blank line are never attached.
        """
        expected_end = node.start_point[0] - 1
        chain: List[Node] = []
        sibling = node.prev_sibling
        while sibling is not None and sibling.type == "comment":
            comment_start, comment_end = node_rows(sibling)
            if comment_end != expected_end or not self._starts_line(sibling):
                break
            chain.append(sibling)
            expected_end = comment_start - 1
            sibling = sibling.prev_sibling

        if not chain:
            return None

        start_row = chain[-1].start_point[0]
        end_row = chain[0].end_point[0]
        return Comment(
            start_line=start_row + 1,
            end_line=end_row + 1,
            lines=tuple(self.buffer.get_lines(start_row, end_row + 1)),
        )

    def _starts_line(self, node: Node) -> bool:
        row, column = node.start_point[0], node.start_point[1]
        line = self.buffer.get_line(row) or ""
        # tree-sitter columns are byte offsets
        return not line.encode("utf8")[:column].strip()

    def _owns_lines(self, node: Node) -> bool:
        """
        True if nothing but whitespace precedes the node on its first line
        and nothing but whitespace or a comment follows it on its last line.
        """
        if not self._starts_line(node):
            return False
        row, column = node.end_point[0], node.end_point[1]
        line = self.buffer.get_line(row) or ""
        rest = line.encode("utf8")[column:].decode("utf8", errors="replace").strip()
        return not rest or rest.startswith(TRAILING_COMMENT_PREFIXES)


def group_contiguous(elements: List[Element], buffer: LineBuffer) -> List[ElementGroup]:
    """
    Split same-category elements into contiguous groups.

    Only blank lines may separate consecutive members of a group. Regions
    where elements share a line with each other or with other code are
    dropped, since rewriting them would move code that is not an element.
    """
    groups: List[ElementGroup] = []
    current: ElementGroup = []
    tainted = False

    def flush():
        if not current:
            return
        if tainted:
            logger.debug(
                f"Skipping {current[0].category.value} region at lines "
                f"{current[0].block_start}-{current[-1].end_line}: statements share lines"
            )
        else:
            groups.append(list(current))

    for element in sorted(elements, key=lambda e: e.start_line):
        if current:
            previous = current[-1]
            if element.block_start <= previous.end_line:
                tainted = True
                current.append(element)
                continue
            gap = buffer.get_lines(previous.end_line, element.block_start - 1)
            if any(line.strip() for line in gap):
                flush()
                current = []
                tainted = False
        if not element.standalone:
            tainted = True
        current.append(element)

    flush()
    return groups
