"""Load and merge configuration from .camel-leaked.toml and env vars."""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from camel_leaked.config.defaults import CONFIG_FILENAME
from camel_leaked.config.schema import (
    OUTPUT_FORMATS,
    CamelLeakedConfig,
    NotifyConfig,
    OutputConfig,
    ScanConfig,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _env_number(name: str, kind: type) -> Optional[Any]:
    val = os.environ.get(name)
    if not val:
        return None
    try:
        return kind(val)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, val)
        return None


def _merge_env_overrides(cfg: CamelLeakedConfig) -> None:
    """Apply CAMEL_LEAKED_* and notification environment overrides."""
    if (val := _env_number("CAMEL_LEAKED_MIN_ENTROPY", float)) is not None:
        cfg.scan.min_entropy = val
    if (val := _env_number("CAMEL_LEAKED_MIN_LENGTH", int)) is not None:
        cfg.scan.min_length = val
    if val := os.environ.get("CAMEL_LEAKED_RULES"):
        cfg.scan.rules_file = val
    if val := os.environ.get("CAMEL_LEAKED_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]

    notify = cfg.notify
    if val := os.environ.get("SMTP_HOST"):
        notify.smtp_host = val
    if (port := _env_number("SMTP_PORT", int)) is not None:
        notify.smtp_port = port
    for env_name, attr in (
        ("SMTP_USER", "smtp_user"),
        ("SMTP_PASS", "smtp_pass"),
        ("FROM_EMAIL", "from_email"),
        ("GITHUB_TOKEN", "github_token"),
        ("GITHUB_REPOSITORY", "github_repository"),
        ("GITHUB_EVENT_PATH", "github_event_path"),
    ):
        if val := os.environ.get(env_name):
            setattr(notify, attr, val)


def load_config(
    root: Optional[Path] = None,
    config_override: Optional[str] = None,
) -> CamelLeakedConfig:
    """Load, validate, and return a CamelLeakedConfig."""
    config_path = find_config_file(root or Path.cwd(), config_override)

    if config_path is None:
        cfg = CamelLeakedConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = CamelLeakedConfig(
            version=raw.get("version", "1.0"),
            scan=_build_section(raw, ScanConfig, "scan"),
            output=_build_section(raw, OutputConfig, "output"),
            notify=_build_section(raw, NotifyConfig, "notify"),
        )
        logger.debug("Loaded configuration from %s", config_path)

    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Unknown output format: {cfg.output.format!r}")

    _merge_env_overrides(cfg)
    return cfg
