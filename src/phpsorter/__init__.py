"""
phpsorter - Tree-sitter based PHP element sorter

Reorders namespace imports, trait uses, constants and properties in PHP
files, keeps their leading comments attached, spaces visibility groups and
drops unused imports.
"""

__version__ = "0.3.0"

# Core exports
from phpsorter.sorting import ElementSorter, SortSession, sort_php_source
from phpsorter.schemas import SorterConfig, SortReport
from phpsorter.mutation import LineBuffer, FileEditor

__all__ = [
    "__version__",
    "ElementSorter",
    "SortSession",
    "sort_php_source",
    "SorterConfig",
    "SortReport",
    "LineBuffer",
    "FileEditor",
]
