"""
Mutation package: the buffer every rewrite goes through and the file
layer that loads and persists it.
"""

from .buffer import LineBuffer
from .editor import FileEditor

__all__ = [
    "LineBuffer",
    "FileEditor",
]
