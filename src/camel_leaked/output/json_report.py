"""JSON reporter for CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from camel_leaked.findings.models import ScanResult


def to_dict(result: ScanResult) -> Dict[str, Any]:
    """Convert ScanResult to a JSON-serialisable dict."""
    findings_list: List[Dict[str, Any]] = [
        {
            "file": f.file,
            "line": f.line_number,
            "rule": f.rule_name,
            "content": f.content,
            "context": f.context,
        }
        for f in result.findings
    ]
    return {
        "version": "1.0",
        "files_scanned": result.files_scanned,
        "total_findings": result.total_findings,
        "blocked": result.blocked,
        "findings": findings_list,
        "scan_duration_ms": result.scan_duration_ms,
    }


def render(result: ScanResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2, ensure_ascii=False)
