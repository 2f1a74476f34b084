"""Built-in rule document — used when no rules file is configured."""

from typing import Any, Dict, List

from camel_leaked.rules.builtin.aws import ALL_AWS_RULES
from camel_leaked.rules.builtin.keys import ALL_KEY_RULES
from camel_leaked.rules.builtin.passwords import ALL_PASSWORD_RULES
from camel_leaked.rules.builtin.tokens import ALL_TOKEN_RULES

ALL_BUILTIN_RULES: List[Dict[str, Any]] = [
    *ALL_AWS_RULES,
    *ALL_TOKEN_RULES,
    *ALL_KEY_RULES,
    *ALL_PASSWORD_RULES,
]

DEFAULT_RULES: Dict[str, Any] = {"rules": ALL_BUILTIN_RULES}

__all__ = ["ALL_BUILTIN_RULES", "DEFAULT_RULES"]
