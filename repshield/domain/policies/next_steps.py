"""Recommended next actions shown with a scan result."""

from __future__ import annotations

from repshield.domain.value_objects.enums import RiskLevel

NEXT_STEPS: dict[RiskLevel, list[str]] = {
    RiskLevel.HIGH: [
        "Immediate specialist consultation recommended",
        "Professional content removal assessment",
        "24-hour priority response team assigned",
    ],
    RiskLevel.MEDIUM: [
        "Detailed sentiment analysis available",
        "Specialist consultation within 2 hours",
        "Reputation monitoring setup",
    ],
    RiskLevel.LOW: [
        "Current brand mention status is healthy",
        "Optional quarterly monitoring available",
        "Specialist available for consultation",
    ],
}

COMPREHENSIVE_EXTRA_STEPS = [
    "Detailed removal strategy report",
    "Legal assessment for problematic content",
    "Brand protection strategy consultation",
]


def generate_next_steps(risk_level: RiskLevel, mention_count: int) -> list[str]:
    steps = list(NEXT_STEPS[risk_level])
    if mention_count > 0:
        steps.append(f"{mention_count} mentions require professional review")
    return steps


def generate_comprehensive_next_steps(risk_level: RiskLevel, mention_count: int) -> list[str]:
    return generate_next_steps(risk_level, mention_count) + COMPREHENSIVE_EXTRA_STEPS
