"""Scoped access to file contents"""
from .content_store import FileContentStore

__all__ = ["FileContentStore"]
