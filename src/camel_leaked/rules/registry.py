"""Rule set — validates rule documents and stores the enabled rules."""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Iterator, List, Mapping, Optional, Tuple, Union

import yaml

from camel_leaked.rules.models import Rule

logger = logging.getLogger(__name__)

RuleSource = Union[Mapping[str, Any], str, bytes, "os.PathLike[str]"]


class RuleConfigError(Exception):
    """Base class for every rule-loading failure."""


class ConfigFormatError(RuleConfigError):
    """The rule source is not a document with a ``rules`` array."""


class ConfigFieldError(RuleConfigError):
    """A rule entry is malformed or lacks a required field."""

    def __init__(self, message: str, index: Optional[int] = None) -> None:
        super().__init__(message)
        self.index = index


class PatternCompileError(RuleConfigError):
    """A rule pattern is not a valid regular expression."""

    def __init__(self, message: str, index: Optional[int] = None, detail: str = "") -> None:
        super().__init__(message)
        self.index = index
        self.detail = detail


class NoRulesError(RuleConfigError):
    """No enabled rule survived validation."""


def _label(index: Optional[int]) -> str:
    return "Rule" if index is None else f"Rule {index}"


def _scalar_field(entry: Mapping[str, Any], field: str, index: Optional[int]) -> str:
    """Return a required field as text; numbers are accepted and stringified."""
    value = entry.get(field)
    if value is None or value == "":
        raise ConfigFieldError(f"{_label(index)} missing required '{field}' field", index=index)
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigFieldError(
            f"{_label(index)} '{field}' field must be a string, got {type(value).__name__}",
            index=index,
        )
    return str(value)


def _build_rule(entry: Any, index: Optional[int]) -> Rule:
    """Validate one rule entry and return the compiled Rule."""
    if not isinstance(entry, Mapping):
        raise ConfigFieldError(f"{_label(index)} must be an object", index=index)

    name = _scalar_field(entry, "name", index)
    pattern = _scalar_field(entry, "pattern", index)

    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise PatternCompileError(
            f"{_label(index)} has invalid regex pattern: {exc}",
            index=index,
            detail=str(exc),
        ) from exc

    description = entry.get("description")
    example = entry.get("example")
    enabled = entry.get("enabled", True)
    return Rule(
        name=name,
        pattern=compiled,
        description="" if description is None else str(description),
        example="" if example is None else str(example),
        enabled=bool(enabled),
    )


def _read_document(source: RuleSource) -> Any:
    """Turn any accepted rule source into a parsed document."""
    if isinstance(source, Mapping):
        return source

    path: Optional[Path] = None
    if isinstance(source, os.PathLike):
        path = Path(source)
    elif isinstance(source, str) and "\n" not in source and source.strip():
        candidate = Path(source)
        try:
            if candidate.is_file():
                path = candidate
        except OSError:
            path = None

    if path is not None:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigFormatError(f"Cannot read rules file {path}: {exc}") from exc
        return _parse_text(text, as_json=path.suffix.lower() == ".json")

    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ConfigFormatError(f"Rules document is not UTF-8: {exc}") from exc
    if isinstance(source, str):
        return _parse_text(source, as_json=False)

    raise ConfigFormatError(f"Unsupported rules source: {type(source).__name__}")


def _parse_text(text: str, *, as_json: bool) -> Any:
    """Decode JSON, or for non-.json sources JSON first and YAML second."""
    try:
        return json.loads(text)
    except ValueError as exc:
        if as_json:
            raise ConfigFormatError(f"Invalid rules document: {exc}") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigFormatError(f"Invalid rules document: {exc}") from exc


def _validate_document(document: Any) -> Tuple[List[Rule], int]:
    """Run every load-time check. Returns (enabled rules, total entries)."""
    if not isinstance(document, Mapping) or "rules" not in document:
        raise ConfigFormatError("Rules document must contain a 'rules' array")
    entries = document["rules"]
    if not isinstance(entries, list):
        raise ConfigFormatError("'rules' must be an array")

    enabled: List[Rule] = []
    for index, entry in enumerate(entries):
        rule = _build_rule(entry, index)
        if not rule.enabled:
            logger.debug("Skipping disabled rule %r", rule.name)
            continue
        enabled.append(rule)

    if not enabled:
        raise NoRulesError("No valid enabled rules found in configuration")
    return enabled, len(entries)


class RuleSet:
    """Ordered store of validated, enabled rules.

    Mutated only through :meth:`load` / :meth:`add`; scans only read it.
    A failed load leaves the previously stored rules untouched.
    """

    def __init__(self) -> None:
        self._rules: List[Rule] = []

    # ---- loading ----

    def load(self, source: RuleSource) -> int:
        """Validate *source* and replace the stored rules. Returns the count."""
        enabled, total = _validate_document(_read_document(source))
        self._rules = enabled
        logger.info("Loaded %d enabled rule(s) of %d", len(enabled), total)
        return len(enabled)

    def load_file(self, path: Union[str, "os.PathLike[str]"]) -> int:
        """Load rules from a JSON or YAML file."""
        p = Path(path)
        if not p.is_file():
            raise ConfigFormatError(f"Rules configuration file not found: {p}")
        return self.load(p)

    def validate(self, source: RuleSource) -> None:
        """Dry-run :meth:`load` without touching the stored rules."""
        self.validate_source(source)

    @staticmethod
    def validate_source(source: RuleSource) -> int:
        """Validate *source*; return how many enabled rules it would load."""
        enabled, _ = _validate_document(_read_document(source))
        return len(enabled)

    @classmethod
    def from_source(cls, source: RuleSource) -> "RuleSet":
        rule_set = cls()
        rule_set.load(source)
        return rule_set

    # ---- registration ----

    def add(
        self,
        name: str,
        pattern: str,
        description: str = "",
        example: str = "",
        enabled: bool = True,
    ) -> None:
        """Validate a single rule and append it to the live set."""
        rule = _build_rule(
            {
                "name": name,
                "pattern": pattern,
                "description": description,
                "example": example,
                "enabled": enabled,
            },
            None,
        )
        if not rule.enabled:
            logger.debug("Rule %r added disabled; not stored", rule.name)
            return
        self._rules.append(rule)

    # ---- queries ----

    def rules(self) -> List[Rule]:
        return list(self._rules)

    def find(self, name: str) -> Optional[Rule]:
        """Return the first stored rule called *name*."""
        for rule in self._rules:
            if rule.name == name:
                return rule
        return None

    def rule_count(self) -> int:
        return len(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules))


def build_rule_set(rules_file: Optional[str] = None) -> RuleSet:
    """Create a rule set from *rules_file*, or the built-in rules if None."""
    rule_set = RuleSet()
    if rules_file:
        rule_set.load_file(rules_file)
    else:
        from camel_leaked.rules.builtin import DEFAULT_RULES

        rule_set.load(DEFAULT_RULES)
    return rule_set

