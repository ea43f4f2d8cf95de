"""
SyntaxTree: thin wrapper around a tree-sitter parse of a LineBuffer.

The sorting engine only needs four capabilities from a tree: iterate
captures over a row span, read a node's rows, read a node's text and walk
to a node's previous sibling. Everything else stays inside this module.
"""

from typing import Dict, Iterator, Tuple

from tree_sitter import Node, Tree

from phpsorter.exceptions import LanguageMismatchError, MissingParserError
from phpsorter.logging_config import logger
from phpsorter.mutation.buffer import LineBuffer
from .config import TARGET_LANGUAGE
from .language_manager import get_parser


def node_rows(node: Node) -> Tuple[int, int]:
    """Return the (start_row, end_row) of a node, 0-indexed and inclusive."""
    return node.start_point[0], node.end_point[0]


def node_text(node: Node) -> str:
    """Return the source text covered by a node."""
    return node.text.decode("utf8")


class SyntaxTree:
    """
    A parsed buffer.

    Nodes are only valid as long as the buffer is not written to; callers
    re-parse after every write.
    """

    def __init__(self, tree: Tree, language: str):
        self._tree = tree
        self.language = language
        self.root: Node = tree.root_node

    def iter_captures(
        self,
        capture_map: Dict[str, str],
        start_row: int = 0,
        end_row: int = -1,
    ) -> Iterator[Tuple[str, Node]]:
        """
        Yield (capture_name, node) for every node whose type is in capture_map.

        Nodes are visited in document order. Subtrees that lie entirely
        outside [start_row, end_row] are skipped; end_row == -1 means no
        upper bound.

        Args:
            capture_map: node type -> capture name
            start_row: First row of interest (0-indexed)
            end_row: Last row of interest (inclusive), or -1
        """
        yield from self._walk(self.root, capture_map, start_row, end_row)

    def _walk(
        self,
        node: Node,
        capture_map: Dict[str, str],
        start_row: int,
        end_row: int,
    ) -> Iterator[Tuple[str, Node]]:
        node_start, node_end = node_rows(node)
        if node_end < start_row:
            return
        if end_row != -1 and node_start > end_row:
            return

        name = capture_map.get(node.type)
        if name is not None:
            yield name, node

        for child in node.children:
            yield from self._walk(child, capture_map, start_row, end_row)

    def find_all(self, node_types) -> Iterator[Node]:
        """Yield every node of the given types in document order."""
        capture_map = {node_type: node_type for node_type in node_types}
        for _, node in self.iter_captures(capture_map):
            yield node

    @property
    def has_errors(self) -> bool:
        return self.root.has_error


class TreeProvider:
    """
    Produce SyntaxTrees for buffers of the target language.
    """

    def __init__(self, language: str = TARGET_LANGUAGE):
        self.language = language

    def parse(self, buffer: LineBuffer) -> SyntaxTree:
        """
        Parse a buffer.

        Raises:
            MissingParserError: No language declared, grammar not loadable,
                or the parser returned no tree.
            LanguageMismatchError: The buffer declares another language.
        """
        if not buffer.language:
            raise MissingParserError(buffer.name, "buffer has no declared language")

        if buffer.language != self.language:
            raise LanguageMismatchError(buffer.language, self.language)

        parser = get_parser(self.language)
        if parser is None:
            raise MissingParserError(buffer.name, f"grammar '{self.language}' is not available")

        tree = parser.parse(buffer.text().encode("utf8"))
        if tree is None or tree.root_node is None:
            raise MissingParserError(buffer.name, "failed to parse the syntax tree")

        syntax_tree = SyntaxTree(tree, self.language)
        if syntax_tree.has_errors:
            logger.debug(f"{buffer.name}: syntax tree contains error nodes")
        return syntax_tree

