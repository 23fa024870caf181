"""nodetrail package.

Follows a single syntax node backward through the git history of a file and
reports the commits where it changed.
"""

__all__ = [
    "ast",
    "cli",
    "config",
    "errors",
    "git",
    "graph",
    "report",
    "stats",
    "temporal",
]
