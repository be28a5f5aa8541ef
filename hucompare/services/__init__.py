"""Comparison services: column resolution, keyed diff, vector match, reports and run orchestration."""

from .keyed_diff import compare_keyed
from .vector_match import compare_vectors

__all__ = [
    "compare_keyed",
    "compare_vectors",
]
