"""Cross-revision node matching."""

from .matcher import TreeMatcher
from .model import Mapping, MappingStore

__all__ = ["Mapping", "MappingStore", "TreeMatcher"]
