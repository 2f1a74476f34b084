"""False-positive filters shared by the pattern matcher and entropy detector.

Ignore conventions:
  - ``# camel-leaked-ignore`` or ``// camel-leaked-ignore`` anywhere on a
    line skips that line for every detector.
  - A line whose first non-blank character opens a comment (``#``, ``/``,
    ``*``) is skipped as well.
"""

from __future__ import annotations

import base64
import binascii
import re

IGNORE_MARKER = "camel-leaked-ignore"

_IGNORE_MARKER_RE = re.compile(r"(?:#|//)\s*" + re.escape(IGNORE_MARKER))
_COMMENT_LINE_RE = re.compile(r"^\s*[#/*]")

# Shapes that look random but are usually structural when short
_BASE64_SHAPE_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")
_HEX_DIGEST_RE = re.compile(r"^[0-9a-f]{32,64}$")
_BENIGN_PREFIX_RE = re.compile(r"^(?:test|example|demo|placeholder)", re.IGNORECASE)
_CONSTANT_NAME_RE = re.compile(r"^[A-Z0-9_]+$")

COMMON_LENGTH_CUTOFF = 40


def has_ignore_marker(line: str) -> bool:
    """Return True if *line* carries an inline ``camel-leaked-ignore`` comment."""
    return _IGNORE_MARKER_RE.search(line) is not None


def is_comment_line(line: str) -> bool:
    """Return True if *line* starts (after indentation) with a comment opener."""
    return _COMMENT_LINE_RE.match(line) is not None


def should_ignore_line(line: str) -> bool:
    """Return True if *line* must be skipped by every detector."""
    return has_ignore_marker(line) or is_comment_line(line)


def decodes_to_text(token: str) -> bool:
    """Return True if *token* is base64 for printable UTF-8 text.

    Missing padding is tolerated. Random key material decodes to arbitrary
    bytes and fails this check.
    """
    body = token.rstrip("=")
    if not body or len(body) % 4 == 1:
        return False
    try:
        raw = base64.b64decode(body + "=" * (-len(body) % 4), validate=True)
        text = raw.decode("utf-8")
    except (binascii.Error, ValueError):
        return False
    return all(ch.isprintable() or ch in "\t\r\n" for ch in text)


def is_common_string(token: str) -> bool:
    """Return True if a high-entropy *token* is known benign noise.

    Short (< 40 chars) encoded text, lowercase hex digests and
    test/example/demo/placeholder strings are benign. Constant-style names
    (uppercase, digits, underscores, no lowercase) are benign at any length.
    """
    if len(token) < COMMON_LENGTH_CUTOFF:
        if _BASE64_SHAPE_RE.match(token) and decodes_to_text(token):
            return True
        if _HEX_DIGEST_RE.match(token):
            return True
        if _BENIGN_PREFIX_RE.match(token):
            return True

    return bool(_CONSTANT_NAME_RE.match(token)) and not any(c.islower() for c in token)
