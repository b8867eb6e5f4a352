"""File-scope access guard"""
from .scope import ScopeSet

__all__ = ["ScopeSet"]
