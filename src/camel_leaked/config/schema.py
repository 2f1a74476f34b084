"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

OutputFormat = Literal["terminal", "json"]
OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class ScanConfig:
    min_entropy: float = 4.5
    min_length: int = 20
    rules_file: Optional[str] = None  # None = built-in rules


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class NotifyConfig:
    enabled: bool = False
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""
    from_email: str = "security@company.com"
    github_token: str = ""
    github_repository: str = ""
    github_event_path: str = ""


@dataclass
class CamelLeakedConfig:
    version: str = "1.0"
    scan: ScanConfig = field(default_factory=ScanConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
