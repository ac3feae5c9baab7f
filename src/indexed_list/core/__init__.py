"""Indexed list core package."""

from .indexed_list import IndexedList

__all__ = ["IndexedList"]
