"""Generic rule engine for pattern-based safety checks."""

import re
from dataclasses import dataclass
from typing import Iterable

from generative_pages.data.safety import SafetyFlag


@dataclass(frozen=True)
class SafetyRule:
    pattern: re.Pattern[str]
    kind: str
    severity: str
    suggestion: str | None = None

    def scan(self, text: str) -> list[SafetyFlag]:
        return [
            SafetyFlag(
                kind=self.kind,
                severity=self.severity,
                span=match.group(0),
                suggestion=self.suggestion,
            )
            for match in self.pattern.finditer(text)
        ]


class RuleEngine:
    """
    Evaluates a primary rule set, then a supplementary one.

    Every primary match is reported. A supplementary match is reported only
    when its text (case-insensitive) was not already flagged.
    """

    def __init__(
        self,
        rules: Iterable[SafetyRule],
        supplementary: Iterable[SafetyRule] = (),
    ):
        self.rules = tuple(rules)
        self.supplementary = tuple(supplementary)

    def scan(self, text: str) -> list[SafetyFlag]:
        flags: list[SafetyFlag] = []
        for rule in self.rules:
            flags.extend(rule.scan(text))

        seen = {flag.span.lower() for flag in flags}
        for rule in self.supplementary:
            for flag in rule.scan(text):
                if flag.span.lower() not in seen:
                    flags.append(flag)
                    seen.add(flag.span.lower())

        return flags


def default_engine() -> RuleEngine:
    from generative_pages.safety.rules import BANNED_WORD_RULES, OFFENSIVE_RULES

    return RuleEngine(OFFENSIVE_RULES, BANNED_WORD_RULES)
