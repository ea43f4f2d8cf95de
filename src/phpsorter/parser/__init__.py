"""
This facade exposes the public API for the parser module.
"""
from .config import SUPPORTED_LANGUAGES, detect_language
from .language_manager import get_language, get_parser
from .tree import SyntaxTree, TreeProvider, node_rows, node_text

__all__ = [
    "SUPPORTED_LANGUAGES",
    "detect_language",
    "get_language",
    "get_parser",
    "SyntaxTree",
    "TreeProvider",
    "node_rows",
    "node_text",
]
