"""Selection parsing and byte-range resolution"""
from .resolver import parse_selection, resolve_selection, selection_range

__all__ = ["parse_selection", "resolve_selection", "selection_range"]
