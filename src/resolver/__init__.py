"""Package indexing and dependency resolution."""

from .index import Indexes, build_indexes
from .resolve import DependencyResolver, ResolutionResult, resolve

__all__ = [
    "Indexes",
    "build_indexes",
    "DependencyResolver",
    "ResolutionResult",
    "resolve",
]
