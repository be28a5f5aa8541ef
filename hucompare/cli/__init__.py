"""Command line entry points (hu-diff / hu-match)."""

from .diff import main
from .match import main as match_main

__all__ = [
    "main",
    "match_main",
]
