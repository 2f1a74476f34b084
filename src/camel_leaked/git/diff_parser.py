"""Unified diff position tracker.

Walks diff text once and yields every added line paired with the file it
belongs to and its 1-based line number in the new version of that file.
Only the ``+++`` / ``@@`` markers are modelled; binary patches, renames
and other git metadata are treated as inert lines.
"""

from __future__ import annotations

import re
from typing import Generator, List, Optional, Tuple, Union

from camel_leaked.git.models import AddedLine, LineKind

_FILE_MARKER_RE = re.compile(r"^\+\+\+ b/(.+)$")
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_NULL_TARGET_RE = re.compile(r"^\+\+\+ /dev/null")
_FILE_HEADER_OLD = re.compile(r"^--- (?:a/|/dev/null)")

Payload = Union[str, int, None]


def split_lines(text: Optional[str]) -> List[str]:
    """Split *text* on "\\n" only, dropping one trailing "\\r" per line.

    Other Unicode line boundaries (form feed, U+2028, ...) stay inside the
    line so numbering matches what git and editors count.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def classify_line(line: str) -> Tuple[LineKind, Payload]:
    """Classify one raw diff line.

    Returns ``(kind, payload)``: the target path for FILE_MARKER, the
    new-file start line for HUNK_HEADER, the text after the ``+`` for
    ADDED, and None for everything else.
    """
    m = _FILE_MARKER_RE.match(line)
    if m:
        return LineKind.FILE_MARKER, m.group(1)

    hm = _HUNK_HEADER_RE.match(line)
    if hm:
        return LineKind.HUNK_HEADER, int(hm.group(3))

    if _NULL_TARGET_RE.match(line) or _FILE_HEADER_OLD.match(line):
        return LineKind.OTHER, None

    if line.startswith("+"):
        return LineKind.ADDED, line[1:]
    if line.startswith("-"):
        return LineKind.REMOVED, None
    if line.startswith(" "):
        return LineKind.CONTEXT, None
    return LineKind.OTHER, None


class DiffParser:
    """Yield :class:`AddedLine` items from unified diff text.

    Usage::

        for added in DiffParser(diff_text).parse():
            print(added.file, added.line_number, added.text)

    ``parse()`` keeps no state between calls, so it can be re-run on the
    same text.
    """

    def __init__(self, diff_text: Optional[str]) -> None:
        self._lines = split_lines(diff_text)

    def parse(self) -> Generator[AddedLine, None, None]:
        current_file = ""
        line_number = 0

        for raw_line in self._lines:
            kind, payload = classify_line(raw_line)

            if kind is LineKind.FILE_MARKER:
                assert isinstance(payload, str)
                current_file = payload
                line_number = 0
            elif kind is LineKind.HUNK_HEADER:
                assert isinstance(payload, int)
                # The next context/added line is the hunk's first new line
                line_number = payload - 1
            elif kind is LineKind.CONTEXT:
                line_number += 1
            elif kind is LineKind.ADDED:
                assert isinstance(payload, str)
                line_number += 1
                yield AddedLine(file=current_file, line_number=line_number, text=payload)
            # REMOVED and OTHER lines advance nothing


def iter_added_lines(diff_text: Optional[str]) -> Generator[AddedLine, None, None]:
    """Shorthand for ``DiffParser(diff_text).parse()``."""
    return DiffParser(diff_text).parse()
