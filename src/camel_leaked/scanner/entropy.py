"""Shannon entropy calculator and high-entropy token detection."""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import List, Tuple

from camel_leaked.scanner.filters import is_common_string

HIGH_ENTROPY_RULE_NAME = "High Entropy String"
DEFAULT_MIN_ENTROPY = 4.5
DEFAULT_MIN_LENGTH = 20

# Candidate extraction floor, independent of the configured min_length
_CANDIDATE_RE = re.compile(r"[A-Za-z0-9+/=]{20,}")


def shannon_entropy(s: str) -> float:
    """Compute Shannon entropy (bits per character) of string *s*.

    H = -Σ p(c) · log₂(p(c))  over unique characters c.
    """
    if not s:
        return 0.0
    counts = Counter(s)
    total = len(s)
    return -sum((c / total) * math.log2(c / total) for c in counts.values())


def extract_candidates(line: str) -> List[str]:
    """Return every maximal run of base64-alphabet characters of length >= 20."""
    return _CANDIDATE_RE.findall(line)


def find_high_entropy(
    line: str,
    min_entropy: float = DEFAULT_MIN_ENTROPY,
    min_length: int = DEFAULT_MIN_LENGTH,
) -> List[Tuple[str, float]]:
    """Return (token, entropy) pairs from *line* that look like secrets.

    A token is kept when it is at least *min_length* long, its entropy is
    at or above *min_entropy*, and it is not a common benign string.
    """
    results: List[Tuple[str, float]] = []
    for token in extract_candidates(line):
        if len(token) < min_length:
            continue
        h = shannon_entropy(token)
        if h < min_entropy:
            continue
        if is_common_string(token):
            continue
        results.append((token, h))
    return results
