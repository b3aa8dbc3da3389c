"""Content safety: pattern rules, rule engine and the safety gate."""

from generative_pages.safety.engine import RuleEngine, SafetyRule, default_engine
from generative_pages.safety.gate import (
    ContentSafetyGate,
    SafetyThresholds,
    is_safe_for_use_case,
    quick_safety_check,
)

__all__ = [
    "ContentSafetyGate",
    "RuleEngine",
    "SafetyRule",
    "SafetyThresholds",
    "default_engine",
    "is_safe_for_use_case",
    "quick_safety_check",
]
