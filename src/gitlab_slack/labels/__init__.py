"""Issue label tracking."""

from .label_cache import LabelCache
from .patterns import PatternMatcher

__all__ = [
    "LabelCache",
    "PatternMatcher",
]
