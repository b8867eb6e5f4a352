"""
Core API for the Pythia query server.

Interface-agnostic entry points used by the HTTP server and the CLI.
"""
from .dispatcher import QueryDispatcher

__all__ = ["QueryDispatcher"]
