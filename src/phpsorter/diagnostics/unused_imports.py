"""
Built-in unused-import analysis for a single PHP file.

Used when no external analyser report is available. A namespace import is
unused when none of its aliases appears as a name anywhere else in the file
or as a word inside a comment (docblock types count as uses).
"""

import re
from typing import Dict, List, Set

from tree_sitter import Node

from phpsorter.logging_config import logger
from phpsorter.parser.tree import SyntaxTree, node_text
from .oracle import Diagnostic, DiagnosticsProvider

WORD_PATTERN = re.compile(r"[A-Za-z_\x80-\uffff][A-Za-z0-9_\x80-\uffff]*")

IMPORT_KINDS = ("function", "const")


def _strip_kind(item: str) -> str:
    parts = item.split(None, 1)
    if len(parts) == 2 and parts[0].lower() in IMPORT_KINDS:
        return parts[1].strip()
    return item


def import_aliases(declaration: str) -> List[str]:
    """
    Names a `use` declaration brings into scope.

    `use Foo\\Bar;` -> ["Bar"], `use Foo\\Bar as Baz;` -> ["Baz"],
    `use Foo\\{A, B as C};` -> ["A", "C"].
    """
    body = declaration.strip().rstrip(";").strip()
    if body[:3].lower() == "use":
        body = body[3:]
    body = _strip_kind(body.strip())

    if "{" in body:
        _, _, group = body.partition("{")
        items = group.rstrip().rstrip("}").split(",")
    else:
        items = body.split(",")

    aliases = []
    for item in items:
        item = _strip_kind(" ".join(item.split()))
        if not item:
            continue
        parts = item.split(" ")
        if len(parts) >= 3 and parts[-2].lower() == "as":
            aliases.append(parts[-1])
        else:
            aliases.append(parts[0].strip("\\").split("\\")[-1])
    return aliases


class UnusedImportDetector(DiagnosticsProvider):
    """
    Report unused namespace imports of a parsed file.

    Analysis runs once, on construction; rows refer to the tree's buffer.
    """

    def __init__(self, tree: SyntaxTree):
        self.tree = tree
        self._by_row: Dict[int, List[Diagnostic]] = {}
        self._analyze()

    def diagnostics_at(self, row: int) -> List[Diagnostic]:
        return list(self._by_row.get(row, []))

    @property
    def unused_rows(self) -> List[int]:
        return sorted(self._by_row)

    def _analyze(self) -> None:
        used = self._used_names()
        for node in self.tree.find_all(("namespace_use_declaration",)):
            aliases = import_aliases(node_text(node))
            if not aliases:
                continue
            if any(alias.casefold() in used for alias in aliases):
                continue
            row = node.start_point[0]
            label = ", ".join(aliases)
            self._by_row.setdefault(row, []).append(Diagnostic(
                row=row,
                message=f"'{label}' is declared but not used",
                source="phpsorter",
            ))
            logger.debug(f"Import at line {row + 1} is unused: {label}")

    def _used_names(self) -> Set[str]:
        used: Set[str] = set()
        self._collect(self.tree.root, used)
        return used

    def _collect(self, node: Node, used: Set[str]) -> None:
        if node.type == "namespace_use_declaration":
            return
        if node.type == "namespace_name" and node.parent is not None \
                and node.parent.type == "namespace_definition":
            return

        if node.type == "comment":
            used.update(word.casefold() for word in WORD_PATTERN.findall(node_text(node)))
            return

        if node.type == "name":
            if node.parent is None or node.parent.type != "variable_name":
                used.add(node_text(node).casefold())
            return

        for child in node.children:
            self._collect(child, used)
