"""Hu moment table comparison toolkit.

Two entry points are exposed for library use:

- ``compare_keyed``: key-aligned, tolerance-aware cell diff of two tables
- ``compare_vectors``: nearest-reference matching of Hu moment vectors
"""

from .services.keyed_diff import compare_keyed
from .services.vector_match import compare_vectors

__all__ = [
    "compare_keyed",
    "compare_vectors",
]

__version__ = "0.3.0"
