"""Backward walk that follows one syntax node through a file's history."""

from __future__ import annotations

import enum
import logging
from typing import List, Optional, Protocol

from ..ast.tree import SyntaxNode, SyntaxTree
from ..errors import ContentNotFoundError, NodeNotFound, ParseServiceError, RepositoryError
from ..git.history import Commit
from ..graph.model import MappingStore
from ..stats import PhaseTimings
from .store import ChangeRecord, NodeSnapshot, TrackedState

logger = logging.getLogger(__name__)


class RevisionSource(Protocol):
    def list_commits(self, file_path: str) -> List[Commit]: ...

    def fetch_content(self, commit: Commit, file_path: str) -> bytes: ...


class Parser(Protocol):
    def parse(self, path: str, content: bytes) -> SyntaxTree: ...

    def find_by_id(self, tree: SyntaxTree, node_id: int) -> Optional[SyntaxNode]: ...


class Matcher(Protocol):
    def match(self, src: SyntaxTree, dst: SyntaxTree) -> MappingStore: ...

    def is_isomorphic(self, node_a: SyntaxNode, node_b: SyntaxNode) -> bool: ...


class TrackerState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    TRACKING = "tracking"
    TERMINATED = "terminated"


class NodeTracker:
    """Walks the commits touching a file from newest to oldest.

    The tracked node is re-located in every older revision through the
    matcher. A :class:`ChangeRecord` is emitted whenever the matched node
    changed, and once more when the walk ends, either because no older
    revision contains a counterpart of the node or because history is
    exhausted. Commits where the node kept its shape produce no record.

    Parameters
    ----------
    source:
        Provides the commit sequence and file contents
    parser:
        Turns file contents into syntax trees
    matcher:
        Maps nodes of an older tree onto the newer one
    compare:
        ``"isomorphic"`` treats structurally identical nodes as unchanged,
        ``"text"`` only byte-identical ones
    timings:
        Counters the run adds its phase durations to
    """

    def __init__(
        self,
        source: RevisionSource,
        parser: Parser,
        matcher: Matcher,
        *,
        compare: str = "isomorphic",
        timings: PhaseTimings | None = None,
    ):
        self.source = source
        self.parser = parser
        self.matcher = matcher
        self.compare = compare
        self.timings = timings if timings is not None else PhaseTimings()
        self.state = TrackerState.UNINITIALIZED

    def list_commits(self, file_path: str) -> List[Commit]:
        with self.timings.measure("vcs"):
            commits = self.source.list_commits(file_path)
        if not commits:
            raise ContentNotFoundError(f"File {file_path} has no history")
        return commits

    def load(self, commit: Commit, file_path: str) -> SyntaxTree:
        """Fetch and parse ``file_path`` as of ``commit``."""
        with self.timings.measure("vcs"):
            content = self.source.fetch_content(commit, file_path)
        with self.timings.measure("parsing"):
            return self.parser.parse(file_path, content)

    def track(self, file_path: str, node_id: int) -> List[ChangeRecord]:
        """Return the change records of node ``node_id``, newest first.

        Errors from the collaborators abort the walk; the records gathered
        until then are attached to the raised error as ``partial_records``.
        """
        if self.state is TrackerState.TRACKING:
            raise RuntimeError("tracker is already running")

        records: List[ChangeRecord] = []
        with self.timings.measure("total"):
            try:
                commits = self.list_commits(file_path)
                tracked = self._initialize(commits[0], file_path, node_id)
                self.state = TrackerState.TRACKING

                for commit in commits[1:]:
                    src_tree = self.load(commit, file_path)
                    with self.timings.measure("matching"):
                        mappings = self.matcher.match(src_tree, tracked.tree)
                    src_id = mappings.src_for(tracked.node.id)

                    if src_id is None:
                        logger.debug("%s %s: can't find node in commit", commit.short_sha, commit.title)
                        break

                    src = NodeSnapshot(commit=commit, tree=src_tree, node=src_tree.node(src_id))
                    if self._unchanged(src, tracked):
                        logger.debug("%s %s: found unchanged node, skipping commit", commit.short_sha, commit.title)
                    else:
                        logger.debug(
                            "%s %s: found matched node\nNode content:\n%s",
                            commit.short_sha,
                            commit.title,
                            src.text,
                        )
                        records.append(ChangeRecord(commit=tracked.commit, previous=src, current=tracked))
                    tracked = src

                records.append(ChangeRecord(commit=tracked.commit, previous=None, current=tracked))
                return records
            except (RepositoryError, ContentNotFoundError, ParseServiceError) as e:
                e.partial_records = list(records)
                raise
            finally:
                self.state = TrackerState.TERMINATED

    def _initialize(self, commit: Commit, file_path: str, node_id: int) -> TrackedState:
        tree = self.load(commit, file_path)
        node = self.parser.find_by_id(tree, node_id)
        if node is None:
            raise NodeNotFound(node_id)

        state = TrackedState(commit=commit, tree=tree, node=node)
        logger.debug(
            "%s %s: target node is set\nNode content:\n%s", commit.short_sha, commit.title, state.text
        )
        return state

    def _unchanged(self, src: NodeSnapshot, tracked: TrackedState) -> bool:
        if self.compare == "text":
            return src.span == tracked.span
        return self.matcher.is_isomorphic(src.node, tracked.node)
