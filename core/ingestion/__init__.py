"""Scope loading: command-line arguments → in-scope file paths"""
from .loader import ScopeLoader

__all__ = ["ScopeLoader"]
