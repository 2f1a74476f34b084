"""Core scan engine — diff tracking, rule matching and entropy detection.

Findings come out in encounter order: file, then line, and for a single
line every rule finding precedes every entropy finding. Nothing is
deduplicated across detectors.

Exception safety: :func:`scan` wraps the run so that matched secret
values never leak into tracebacks or error messages.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, List, Optional, Union

from camel_leaked.config.schema import CamelLeakedConfig
from camel_leaked.findings.models import Finding, ScanResult
from camel_leaked.git.diff_parser import DiffParser, split_lines
from camel_leaked.rules.models import Rule
from camel_leaked.scanner.entropy import (
    DEFAULT_MIN_ENTROPY,
    DEFAULT_MIN_LENGTH,
    HIGH_ENTROPY_RULE_NAME,
    find_high_entropy,
)
from camel_leaked.scanner.filters import should_ignore_line
from camel_leaked.scanner.matcher import match_rules

logger = logging.getLogger(__name__)


class ScanError(Exception):
    """Raised on internal scanner error (never contains secret values)."""


class Scanner:
    """Run the pattern matcher and entropy detector over added lines.

    *rules* is borrowed read-only (a :class:`RuleSet` or any iterable of
    :class:`Rule`); it must not be mutated while a scan is running.
    """

    def __init__(
        self,
        rules: Iterable[Rule],
        min_entropy: float = DEFAULT_MIN_ENTROPY,
        min_length: int = DEFAULT_MIN_LENGTH,
    ) -> None:
        self.rules = rules
        self.min_entropy = min_entropy
        self.min_length = min_length

    def scan_line(
        self,
        text: str,
        file: str,
        line_number: Optional[int],
        rules: Optional[List[Rule]] = None,
    ) -> List[Finding]:
        """Return the findings for one added line."""
        if should_ignore_line(text):
            return []
        active = rules if rules is not None else list(self.rules)

        findings: List[Finding] = [
            Finding(
                file=file,
                line_number=line_number,
                rule_name=rule_name,
                content=matched,
                context=text,
            )
            for rule_name, matched in match_rules(text, active)
        ]
        for token, _entropy in find_high_entropy(text, self.min_entropy, self.min_length):
            findings.append(
                Finding(
                    file=file,
                    line_number=line_number,
                    rule_name=HIGH_ENTROPY_RULE_NAME,
                    content=token,
                    context=text,
                )
            )
        return findings

    def scan_diff(self, diff_text: Optional[str]) -> List[Finding]:
        """Scan the added lines of unified diff text."""
        if not diff_text:
            return []
        rules = list(self.rules)
        findings: List[Finding] = []
        for added in DiffParser(diff_text).parse():
            findings.extend(self.scan_line(added.text, added.file, added.line_number, rules))
        logger.debug("Diff scan: %d rule(s), %d finding(s)", len(rules), len(findings))
        return findings

    def scan_content(self, content: Optional[str], filename: str = "unknown") -> List[Finding]:
        """Scan plain text as if every line were added, numbering from 1."""
        if not content:
            return []
        rules = list(self.rules)
        findings: List[Finding] = []
        for line_number, line in enumerate(split_lines(content), 1):
            findings.extend(self.scan_line(line, filename, line_number, rules))
        logger.debug(
            "Content scan of %s: %d rule(s), %d finding(s)", filename, len(rules), len(findings)
        )
        return findings


def _scanner_for(config: CamelLeakedConfig, rules: Iterable[Rule]) -> Scanner:
    return Scanner(
        rules,
        min_entropy=config.scan.min_entropy,
        min_length=config.scan.min_length,
    )


def _run(call, *args) -> List[Finding]:
    try:
        return call(*args)
    except Exception:
        # Do NOT let matched values reach the traceback
        raise ScanError(
            "Internal scanner error. Secrets have been scrubbed from this error."
        ) from None


def scan(diff_text: str, config: CamelLeakedConfig, rules: Iterable[Rule]) -> ScanResult:
    """Scan *diff_text* with the configured thresholds. Returns a ScanResult."""
    start = time.perf_counter()
    scanner = _scanner_for(config, rules)
    findings = _run(scanner.scan_diff, diff_text)
    files = {added.file for added in DiffParser(diff_text).parse()}
    elapsed = (time.perf_counter() - start) * 1000
    return ScanResult(
        findings=findings,
        files_scanned=len(files),
        scan_duration_ms=round(elapsed, 2),
    )


def scan_path(
    path: Union[str, Path], config: CamelLeakedConfig, rules: Iterable[Rule]
) -> ScanResult:
    """Scan a plain file on disk. OSError propagates to the caller."""
    start = time.perf_counter()
    p = Path(path)
    content = p.read_text(encoding="utf-8", errors="replace")
    scanner = _scanner_for(config, rules)
    findings = _run(scanner.scan_content, content, str(path))
    elapsed = (time.perf_counter() - start) * 1000
    return ScanResult(
        findings=findings,
        files_scanned=1,
        scan_duration_ms=round(elapsed, 2),
    )
