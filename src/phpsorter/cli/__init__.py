"""
CLI Command Modules

Each module contains a logical group of related commands.
"""

from phpsorter.cli import sort

__all__ = ['sort']
