"""Pattern matcher — applies every stored rule to a line of text."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from camel_leaked.rules.models import Rule


def match_rules(line: str, rules: Iterable[Rule]) -> List[Tuple[str, str]]:
    """Return ``(rule_name, matched_substring)`` pairs for *line*.

    Rules run in the given order and every non-overlapping match is
    reported, so the output order follows rule order then match position.
    """
    hits: List[Tuple[str, str]] = []
    for rule in rules:
        for matched in rule.matches(line):
            hits.append((rule.name, matched))
    return hits
