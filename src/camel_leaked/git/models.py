"""Data models for diff position tracking."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LineKind(str, Enum):
    FILE_MARKER = "file_marker"  # +++ b/<path>
    HUNK_HEADER = "hunk_header"  # @@ -a,b +c,d @@
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"
    OTHER = "other"  # diff metadata, --- headers, index lines


@dataclass(frozen=True, slots=True)
class AddedLine:
    """One added line, addressed by its position in the new file."""

    file: str
    line_number: int
    text: str
