"""HTML rendering of source files and workspace pages"""
from .pages import render_index, render_source_page, source_url
from .source import comment_ranges, format_source

__all__ = ["comment_ranges", "format_source", "render_index", "render_source_page", "source_url"]
