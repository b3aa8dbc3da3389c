"""
Content safety gate.

Three checks over the full page text:

1. Pattern scan (local, synchronous)
2. Toxicity classifier (LLM)
3. Brand compliance scorer (LLM)

The two LLM checks run concurrently. Either one failing is logged and
replaced by a permissive default, so the gate itself never raises for a
classifier outage.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Literal, NamedTuple

from generative_pages.config.prompts import (
    BRAND_COMPLIANCE_PROMPT,
    TOXICITY_PROMPT,
    TOXICITY_SYSTEM_PROMPT,
)
from generative_pages.config.settings import Settings
from generative_pages.data.safety import (
    SEVERITY_WEIGHTS,
    BrandComplianceResult,
    SafetyFlag,
    SafetyResult,
    SafetyScores,
    SafetyTiming,
    ToxicityResult,
)
from generative_pages.safety.engine import RuleEngine, default_engine
from generative_pages.utils.logging import get_logger
from generative_pages.utils.structured_llm import StructuredLLMCaller


logger = get_logger(__name__)

MAX_CLASSIFIER_CHARS = 4000
MAX_SUGGESTIONS = 10


@dataclass(frozen=True)
class SafetyThresholds:
    brand_block: float = 50.0
    brand_warn: float = 70.0
    toxicity_block: float = 0.3
    toxicity_warn: float = 0.1
    critical_flags: int = 1
    high_flags: int = 2
    medium_flags: int = 3

    @classmethod
    def from_settings(cls, settings: Settings) -> "SafetyThresholds":
        return cls(
            brand_block=settings.safety_brand_block,
            brand_warn=settings.safety_brand_warn,
            toxicity_block=settings.safety_toxicity_block,
            toxicity_warn=settings.safety_toxicity_warn,
            critical_flags=settings.safety_critical_flag_limit,
            high_flags=settings.safety_high_flag_limit,
            medium_flags=settings.safety_medium_flag_limit,
        )


# =============================================================================
# SCORING
# =============================================================================


def offensiveness_score(flags: list[SafetyFlag]) -> float:
    """Severity-weighted flag sum, capped at 1.0."""
    return min(1.0, sum(SEVERITY_WEIGHTS[flag.severity] for flag in flags))


def overall_score(brand: float, toxicity: float, offensiveness: float) -> float:
    overall = brand * 0.4 + (100 - toxicity * 100) * 0.4 + (100 - offensiveness * 100) * 0.2
    return float(round(max(0.0, min(100.0, overall))))


def block_reason(
    scores: SafetyScores,
    flags: list[SafetyFlag],
    thresholds: SafetyThresholds,
) -> str | None:
    """First matching blocking rule, or None when the page may be shown."""
    if scores.brand < thresholds.brand_block:
        return f"Brand compliance score {scores.brand:g} below threshold {thresholds.brand_block:g}"

    if scores.toxicity > thresholds.toxicity_block:
        return f"Toxicity score {scores.toxicity:.2f} exceeds threshold {thresholds.toxicity_block:g}"

    critical = [f for f in flags if f.severity == "critical"]
    if critical and len(critical) >= thresholds.critical_flags:
        return f"Critical safety flag: {critical[0].span} ({critical[0].kind})"

    high = [f for f in flags if f.severity == "high"]
    if high and len(high) >= thresholds.high_flags:
        kinds = ", ".join(f.kind for f in high)
        return f"Multiple high-severity safety flags ({len(high)}): {kinds}"

    medium = [f for f in flags if f.severity == "medium"]
    if medium and len(medium) >= thresholds.medium_flags:
        kinds = ", ".join(f.kind for f in medium)
        return f"Multiple medium-severity safety flags ({len(medium)}): {kinds}"

    return None


def build_suggestions(flags: list[SafetyFlag]) -> list[str]:
    suggestions: list[str] = []
    seen: set[str] = set()
    for flag in flags:
        if flag.suggestion and flag.suggestion not in seen:
            suggestions.append(f'{flag.kind}: "{flag.span}" - {flag.suggestion}')
            seen.add(flag.suggestion)
    return suggestions[:MAX_SUGGESTIONS]


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


# =============================================================================
# GATE
# =============================================================================


class ContentSafetyGate:
    def __init__(
        self,
        caller: StructuredLLMCaller,
        thresholds: SafetyThresholds | None = None,
        engine: RuleEngine | None = None,
        model: str = "haiku",
    ):
        self.caller = caller
        self.thresholds = thresholds or SafetyThresholds()
        self.engine = engine or default_engine()
        self.model = model

    async def check_toxicity(self, text: str) -> ToxicityResult:
        try:
            return await self.caller.call(
                prompt=TOXICITY_PROMPT.format(content=text[:MAX_CLASSIFIER_CHARS]),
                response_model=ToxicityResult,
                system=TOXICITY_SYSTEM_PROMPT,
                model=self.model,
                max_tokens=500,
                temperature=0.1,
                include_schema=False,
            )
        except Exception as e:
            logger.warning("Toxicity check failed, assuming safe", error=str(e))
            return ToxicityResult(explanation="Toxicity check skipped due to classifier error")

    async def check_brand_compliance(self, text: str) -> BrandComplianceResult:
        try:
            return await self.caller.call(
                prompt=BRAND_COMPLIANCE_PROMPT.format(content=text[:MAX_CLASSIFIER_CHARS]),
                response_model=BrandComplianceResult,
                model=self.model,
                max_tokens=500,
                temperature=0.1,
                include_schema=False,
            )
        except Exception as e:
            logger.warning("Brand compliance check failed, using default score", error=str(e))
            return BrandComplianceResult()

    async def validate(self, text: str) -> SafetyResult:
        """Block/warn/pass decision for ``text``."""
        start = time.perf_counter()
        timing = SafetyTiming()

        pattern_start = time.perf_counter()
        flags = self.engine.scan(text)
        timing.pattern_check = _elapsed_ms(pattern_start)

        async def timed_toxicity() -> ToxicityResult:
            t0 = time.perf_counter()
            result = await self.check_toxicity(text)
            timing.toxicity_check = _elapsed_ms(t0)
            return result

        async def timed_brand() -> BrandComplianceResult:
            t0 = time.perf_counter()
            result = await self.check_brand_compliance(text)
            timing.brand_check = _elapsed_ms(t0)
            return result

        toxicity, brand = await asyncio.gather(timed_toxicity(), timed_brand())

        flags.extend(
            SafetyFlag(kind=f.type, severity=f.severity, span=f.excerpt)
            for f in toxicity.flags
        )

        offensiveness = offensiveness_score(flags)
        scores = SafetyScores(
            brand=brand.score,
            toxicity=toxicity.toxicity_score,
            offensiveness=offensiveness,
            overall=overall_score(brand.score, toxicity.toxicity_score, offensiveness),
        )

        reason = block_reason(scores, flags, self.thresholds)
        safe = (
            scores.brand >= self.thresholds.brand_warn
            and scores.toxicity <= self.thresholds.toxicity_warn
            and not any(f.severity in ("high", "critical") for f in flags)
        )
        timing.total = _elapsed_ms(start)

        result = SafetyResult(
            safe=safe,
            blocked=reason is not None,
            reason=reason,
            scores=scores,
            flags=flags,
            suggestions=build_suggestions(flags),
            timing=timing,
        )

        log = logger.warning if result.blocked or not result.safe else logger.info
        log(
            "Safety validation complete",
            blocked=result.blocked,
            safe=result.safe,
            reason=reason,
            overall=scores.overall,
            flags=len(flags),
        )
        return result


# =============================================================================
# UTILITIES
# =============================================================================


class QuickSafetyCheck(NamedTuple):
    passed: bool
    critical_flags: list[SafetyFlag]


def quick_safety_check(text: str, engine: RuleEngine | None = None) -> QuickSafetyCheck:
    """Pattern-only pre-check: fails on any high or critical flag."""
    flags = (engine or default_engine()).scan(text)
    serious = [f for f in flags if f.severity in ("high", "critical")]
    return QuickSafetyCheck(passed=not serious, critical_flags=serious)


UseCase = Literal["production", "preview", "debug"]


def is_safe_for_use_case(result: SafetyResult, use_case: UseCase) -> bool:
    if use_case == "production":
        return not result.blocked and result.safe
    if use_case == "debug":
        return True
    return not result.blocked
