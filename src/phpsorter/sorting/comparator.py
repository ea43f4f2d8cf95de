"""
Ordering of elements: visibility rank first (optional), then ordinal text.
"""

from functools import cmp_to_key
from typing import List, Optional, Sequence

from tree_sitter import Node

from phpsorter.exceptions import ConfigError
from phpsorter.parser.tree import node_text
from .elements import VISIBILITY_VALUES, Element

VISIBILITY_NODES = ("visibility_modifier", "var_modifier")


def validate_visibility(value: str) -> str:
    """
    Check a default visibility setting.

    Raises:
        ConfigError: value is not public, protected or private
    """
    if value not in VISIBILITY_VALUES:
        allowed = ", ".join(sorted(VISIBILITY_VALUES))
        raise ConfigError(f"Invalid default visibility '{value}'. Expected one of: {allowed}")
    return value


def normalize_visibility(token: str) -> Optional[str]:
    """
    Map a visibility_modifier token to its keyword.

    Asymmetric forms like ``private(set)`` resolve to the leading keyword.
    The PHP 4 ``var`` modifier is public.
    """
    word = token.strip().lower().split("(", 1)[0].strip()
    if word == "var":
        return "public"
    return word if word in VISIBILITY_VALUES else None


def find_visibility(node: Node) -> Optional[str]:
    """Scan a declaration's immediate children for its visibility token."""
    for child in node.children:
        if child.type in VISIBILITY_NODES:
            visibility = normalize_visibility(node_text(child))
            if visibility:
                return visibility
    return None


def element_precedes(
    a: Element,
    b: Element,
    use_visibility: bool,
    default_visibility: str = "public",
) -> bool:
    """
    True if a sorts strictly before b.

    Visibility rank (private < protected < public) is the primary key when
    use_visibility is set; the statement text, compared by code point, breaks
    ties and is the only key otherwise.
    """
    if use_visibility:
        rank_a = a.rank(default_visibility)
        rank_b = b.rank(default_visibility)
        if rank_a != rank_b:
            return rank_a < rank_b
    return a.sort_key < b.sort_key


def sort_elements(
    group: Sequence[Element],
    use_visibility: bool,
    default_visibility: str = "public",
) -> List[Element]:
    """Stable sort: elements that compare equal keep their source order."""

    def compare(a: Element, b: Element) -> int:
        if element_precedes(a, b, use_visibility, default_visibility):
            return -1
        if element_precedes(b, a, use_visibility, default_visibility):
            return 1
        return 0

    return sorted(group, key=cmp_to_key(compare))
