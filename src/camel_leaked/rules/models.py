"""Rule data model — pattern compiled once when the rule is built."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Rule:
    """A single named detection rule.

    ``pattern`` holds the compiled regex so scanning never recompiles
    per line. Rules are only built by :class:`~camel_leaked.rules.registry.RuleSet`
    after validation.
    """

    name: str
    pattern: re.Pattern[str]
    description: str = ""
    example: str = ""
    enabled: bool = True

    @property
    def source(self) -> str:
        """The regex source text, as written in the rule document."""
        return self.pattern.pattern

    def matches(self, text: str) -> list[str]:
        """Return every non-overlapping match of this rule in *text*.

        A named group ``secret`` is reported when present; otherwise each
        participating capture group is reported, or the whole match when
        the pattern has no groups. Empty matches are dropped.
        """
        hits: list[str] = []
        has_secret = "secret" in self.pattern.groupindex
        for m in self.pattern.finditer(text):
            if has_secret:
                values = [m.group("secret")]
            elif self.pattern.groups:
                values = list(m.groups())
            else:
                values = [m.group(0)]
            hits.extend(v for v in values if v)
        return hits
