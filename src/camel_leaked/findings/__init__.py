"""Finding and scan result models."""

from camel_leaked.findings.models import Finding, ScanResult

__all__ = ["Finding", "ScanResult"]
