"""Runtime configuration for a node history run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

COMPARE_POLICIES: Tuple[str, ...] = ("isomorphic", "text")


@dataclass(slots=True)
class TrackerConfig:
    """Settings shared by the CLI and library callers.

    Attributes
    ----------
    repo_path:
        Path to the git repository. Defaults to the current directory.
    file_path:
        Path of the tracked file, relative to the repository root.
    node_id:
        Id of the node in the HEAD parse tree. ``None`` selects tree-printing
        mode on the command line.
    debug:
        Emit debug logging for every processed commit.
    timing:
        Print the phase timing table after a successful run.
    diff_context:
        Number of context lines in each unified diff.
    compare:
        ``"isomorphic"`` skips commits where the matched node has the same
        structure; ``"text"`` skips only commits where its source text is
        byte-identical.
    min_height:
        Smallest subtree height considered by the top-down matching phase.
    sim_threshold:
        Minimum dice similarity for the bottom-up container matching phase.
    max_recovery_size:
        Largest subtree size for which recovery maps leftover subtrees by
        digest. Sibling pairing under mapped parents is not limited.
    """

    repo_path: Path = field(default_factory=lambda: Path("."))
    file_path: str = ""
    node_id: Optional[int] = None
    debug: bool = False
    timing: bool = False
    diff_context: int = 3
    compare: str = "isomorphic"
    min_height: int = 2
    sim_threshold: float = 0.5
    max_recovery_size: int = 1000

    def validate(self) -> None:
        """Raise ``ValueError`` for settings no run could honour."""

        if self.compare not in COMPARE_POLICIES:
            raise ValueError(
                f"Unknown compare policy {self.compare!r}, expected one of {', '.join(COMPARE_POLICIES)}"
            )
        if self.diff_context < 0:
            raise ValueError("diff_context must not be negative")
        if self.min_height < 1:
            raise ValueError("min_height must be at least 1")
        if not 0.0 <= self.sim_threshold <= 1.0:
            raise ValueError("sim_threshold must be between 0 and 1")
        if self.max_recovery_size < 0:
            raise ValueError("max_recovery_size must not be negative")


DEFAULT_CONFIG = TrackerConfig()
