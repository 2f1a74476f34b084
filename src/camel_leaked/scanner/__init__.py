"""Scanner — engine, pattern matcher, entropy detector, false-positive filters."""

from camel_leaked.scanner.engine import ScanError, Scanner, scan, scan_path
from camel_leaked.scanner.entropy import (
    HIGH_ENTROPY_RULE_NAME,
    extract_candidates,
    find_high_entropy,
    shannon_entropy,
)
from camel_leaked.scanner.filters import is_common_string, should_ignore_line
from camel_leaked.scanner.matcher import match_rules

__all__ = [
    "HIGH_ENTROPY_RULE_NAME",
    "ScanError",
    "Scanner",
    "extract_candidates",
    "find_high_entropy",
    "is_common_string",
    "match_rules",
    "scan",
    "scan_path",
    "shannon_entropy",
    "should_ignore_line",
]
