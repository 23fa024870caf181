"""Following a syntax node through history."""

from .store import ChangeRecord, NodeSnapshot, TrackedState
from .tracker import NodeTracker, TrackerState

__all__ = ["ChangeRecord", "NodeSnapshot", "NodeTracker", "TrackedState", "TrackerState"]
