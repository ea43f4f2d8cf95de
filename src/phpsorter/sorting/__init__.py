"""
PHP element sorting.

Reorders namespace imports, trait uses, constants and properties, keeps
their leading comments attached and re-derives blank-line spacing.
"""

from .elements import VISIBILITY_VALUES, Comment, Element, ElementCategory, LineRange
from .comparator import element_precedes, sort_elements, validate_visibility
from .extractor import ElementExtractor, ElementGroup, ExtractedElements, group_contiguous
from .engine import SortSession
from .pruner import prune_unused
from .normalizer import BlankLineNormalizer
from .facade import ElementSorter, sort_php_source

__all__ = [
    "VISIBILITY_VALUES",
    "Comment",
    "Element",
    "ElementCategory",
    "LineRange",
    "element_precedes",
    "sort_elements",
    "validate_visibility",
    "ElementExtractor",
    "ElementGroup",
    "ExtractedElements",
    "group_contiguous",
    "SortSession",
    "prune_unused",
    "BlankLineNormalizer",
    "ElementSorter",
    "sort_php_source",
]
