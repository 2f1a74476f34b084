"""Diff handling — line classification and position tracking."""

from camel_leaked.git.diff_parser import DiffParser, classify_line, iter_added_lines, split_lines
from camel_leaked.git.models import AddedLine, LineKind

__all__ = ["AddedLine", "DiffParser", "LineKind", "classify_line", "iter_added_lines", "split_lines"]
