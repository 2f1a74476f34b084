"""Rule engine — rule model, rule set, built-in rule document."""

from camel_leaked.rules.models import Rule
from camel_leaked.rules.registry import (
    ConfigFieldError,
    ConfigFormatError,
    NoRulesError,
    PatternCompileError,
    RuleConfigError,
    RuleSet,
    build_rule_set,
)

__all__ = [
    "ConfigFieldError",
    "ConfigFormatError",
    "NoRulesError",
    "PatternCompileError",
    "Rule",
    "RuleConfigError",
    "RuleSet",
    "build_rule_set",
]
