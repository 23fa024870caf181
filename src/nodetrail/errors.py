"""Error taxonomy for node history runs."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .temporal.store import ChangeRecord


class NodeTrailError(Exception):
    """Base class for every fatal error of a tracking run.

    ``partial_records`` holds the change records collected before the failure
    when the error was raised mid-walk. Callers that want all-or-nothing
    semantics simply ignore it.
    """

    def __init__(self, message: str, partial_records: Optional[List["ChangeRecord"]] = None):
        super().__init__(message)
        self.partial_records: List["ChangeRecord"] = list(partial_records or [])


class RepositoryError(NodeTrailError):
    """Raised when the repository, its HEAD or its log cannot be read."""


class ContentNotFoundError(NodeTrailError):
    """Raised when the tracked file does not exist at a commit."""


class ParseServiceError(NodeTrailError):
    """Raised when a revision cannot be turned into a syntax tree."""


class NodeNotFound(NodeTrailError):
    """Raised when the requested node id is absent from the newest revision."""

    def __init__(self, node_id: int):
        super().__init__(f"node with id {node_id} not found")
        self.node_id = node_id
