"""Finding data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Finding:
    """One suspected secret found on an added line."""

    file: str
    line_number: Optional[int]
    rule_name: str
    content: str  # exact matched substring
    context: str  # the full added line, unmodified

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScanResult:
    """Complete result of a scan run."""

    findings: List[Finding] = field(default_factory=list)
    files_scanned: int = 0
    scan_duration_ms: float = 0.0

    @property
    def total_findings(self) -> int:
        return len(self.findings)

    @property
    def blocked(self) -> bool:
        """True when the change must not merge (any finding at all)."""
        return bool(self.findings)

    def rule_names(self) -> List[str]:
        return [f.rule_name for f in self.findings]
