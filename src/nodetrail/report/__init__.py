"""Human-readable output."""

from .diff import format_diff, format_header, format_record, print_records
from .tree import format_tree

__all__ = ["format_diff", "format_header", "format_record", "format_tree", "print_records"]
