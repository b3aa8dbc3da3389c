"""Pattern rules for the fast safety scan.

Each rule is (pattern, kind, severity, suggestion). Patterns are compiled
case-insensitive and matched on word boundaries.
"""

import re

from generative_pages.safety.engine import SafetyRule


def _rule(pattern: str, kind: str, severity: str, suggestion: str | None = None) -> SafetyRule:
    return SafetyRule(
        pattern=re.compile(pattern, re.IGNORECASE),
        kind=kind,
        severity=severity,
        suggestion=suggestion,
    )


_COMPETITOR = "Remove competitor reference"

OFFENSIVE_RULES: tuple[SafetyRule, ...] = (
    # Profanity
    _rule(r"\b(damn|darn|hell|crap|sucks?)\b", "profanity", "low"),

    # Competitor mentions
    _rule(r"\b(ninja\s+blender|ninja\s+professional|ninja\s+foodi)\b", "competitor_mention", "medium", _COMPETITOR),
    _rule(r"\b(blendtec|blendtec\s+blender)\b", "competitor_mention", "medium", _COMPETITOR),
    _rule(r"\b(nutribullet|magic\s+bullet)\b", "competitor_mention", "medium", _COMPETITOR),
    _rule(r"\b(cuisinart\s+blender|kitchenaid\s+blender)\b", "competitor_mention", "medium", _COMPETITOR),
    _rule(r"\b(better\s+than\s+(?:ninja|blendtec|nutribullet))\b", "competitor_mention", "high",
          "Avoid competitive comparisons"),

    # Unverified health claims
    _rule(r"\b(cure[sd]?|curing)\s+(cancer|diabetes|disease|illness|condition)\b", "unverified_claim", "critical",
          "Remove unverified medical claims"),
    _rule(r"\b(treat[sd]?|treating)\s+(cancer|diabetes|disease|illness)\b", "unverified_claim", "critical",
          'Use "may support" instead of treatment claims'),
    _rule(r"\b(heal[sd]?|healing)\s+(cancer|diabetes|disease|illness)\b", "unverified_claim", "critical",
          "Remove unverified healing claims"),
    _rule(r"\b(guaranteed|proven)\s+to\s+(cure|treat|heal|fix|eliminate)\b", "unverified_claim", "critical",
          "Remove guarantee language"),
    _rule(r"\b(rapid|extreme|fast|quick)\s+weight\s+loss\b", "harmful_advice", "high",
          'Use "healthy weight management" instead'),
    _rule(r"\b(miracle|magic)\s+(cure|remedy|solution|diet)\b", "unverified_claim", "high", "Remove miracle claims"),
    _rule(r"\bdetox\s+(your\s+)?body\b", "unverified_claim", "medium", 'Use "support healthy eating" instead'),

    # Harmful advice
    _rule(r"\b(skip|replace)\s+(meals?|eating|food)\s+(entirely|completely)\b", "harmful_advice", "high",
          "Promote balanced nutrition"),
    _rule(r"\b(extreme|crash)\s+diet(ing)?\b", "harmful_advice", "high", "Promote sustainable healthy eating"),
    _rule(r"\b(only\s+eat|eat\s+only)\s+(smoothies?|liquids?)\b", "harmful_advice", "medium",
          "Recommend balanced diet"),

    # Violence
    _rule(r"\b(kill|murder|destroy|attack|violent|weapon)\b", "violence", "high"),

    # Off-brand phrasing
    _rule(r"\b(cheap|cheapest|cheaply)\b", "off_brand", "medium", 'Use "value" or "accessible"'),
    _rule(r"\b(budget|budget-friendly|budget\s+option)\b", "off_brand", "medium", 'Use "accessible" or remove'),
    _rule(r"\b(hack|hacks|life\s*hack|blender\s+hack)\b", "off_brand", "low", 'Use "tip" or "technique"'),
    _rule(r"\b(game-?changer|game\s+changing)\b", "off_brand", "low", 'Use "transformative"'),
    _rule(r"\b(revolutionary|revolutionize)\b", "off_brand", "low", 'Use "innovative"'),
    _rule(r"\b(insane|crazy|killer|epic|awesome)\b", "off_brand", "low", "Use professional descriptors"),
    _rule(r"\b(just\s+(?:throw|dump|toss)|throw\s+everything\s+in)\b", "off_brand", "low",
          "Use more professional language"),
    _rule(r"\b(super\s+(?:cheap|easy|simple))\b", "off_brand", "low", "Maintain premium positioning"),
)

# Brand-voice words. Reported low severity only when no rule above already
# flagged the same text.
BANNED_WORD_RULES: tuple[SafetyRule, ...] = tuple(
    _rule(rf"\b{word}\b", "off_brand", "low", suggestion)
    for word, suggestion in (
        ("cheap", "value"),
        ("budget", "accessible"),
        ("just", "[remove or rephrase]"),
        ("simply", "[remove or rephrase]"),
        ("basically", "[remove or rephrase]"),
        ("hack", "tip"),
        ("insane", "impressive"),
        ("epic", "exceptional"),
        ("awesome", "excellent"),
        ("crazy", "remarkable"),
        ("killer", "outstanding"),
        ("game-?changer", "transformative"),
        ("revolutionary", "innovative"),
    )
)
