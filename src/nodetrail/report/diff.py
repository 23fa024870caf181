"""Unified diff rendering of change records."""

from __future__ import annotations

import difflib
import sys
from typing import Iterable, List, TextIO

from ..git.history import Commit
from ..temporal.store import ChangeRecord, NodeSnapshot

DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"


def _split_lines(text: str) -> List[str]:
    lines = text.splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"
    return lines


def _label(side: NodeSnapshot, prefix: str) -> str:
    return f"{prefix}/{side.tree.path} @ {side.commit.short_sha}"


def format_header(commit: Commit) -> str:
    """Describe a commit the way ``git log`` does."""
    lines = [
        f"commit {commit.hexsha}",
        f"Author: {commit.author}",
        f"Date:   {commit.committed_at.strftime(DATE_FORMAT)}",
        "",
    ]
    lines.extend(f"    {line}".rstrip() for line in commit.message.splitlines())
    return "\n".join(lines) + "\n"


def format_diff(record: ChangeRecord, context: int = 3) -> str:
    return "".join(
        difflib.unified_diff(
            _split_lines(record.previous_text),
            _split_lines(record.current_text),
            fromfile="/dev/null" if record.is_introduction else _label(record.previous, "a"),
            tofile=_label(record.current, "b"),
            n=context,
        )
    )


def format_record(record: ChangeRecord, context: int = 3) -> str:
    return f"{format_header(record.commit)}\n{format_diff(record, context)}"


def print_records(records: Iterable[ChangeRecord], context: int = 3, stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    for record in records:
        print(format_record(record, context), file=out)
