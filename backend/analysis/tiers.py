from __future__ import annotations

"""
Map fabricated risk scores onto priority tiers and analyst decisions.

Design intent:
- Single source of the threshold table so every result path agrees on tiers.
- Keep decisions derived from tiers; analysts may still override afterwards.
"""

from typing import Literal

Priority = Literal["LOW", "MEDIUM", "CRITICAL"]
Decision = Literal["APPROVE", "REJECT", "MANUAL_REVIEW"]

CRITICAL_MIN_SCORE = 61
MEDIUM_MIN_SCORE = 31

ANALYST_ACTION_REQUIRED = "Analyst verification needed"

_DECISION_BY_PRIORITY: dict[str, str] = {
    "CRITICAL": "REJECT",
    "MEDIUM": "MANUAL_REVIEW",
    "LOW": "APPROVE",
}


def priority_for_score(risk_score: int) -> Priority:
    if risk_score >= CRITICAL_MIN_SCORE:
        return "CRITICAL"
    if risk_score >= MEDIUM_MIN_SCORE:
        return "MEDIUM"
    return "LOW"


def map_risk_score(risk_score: int) -> tuple[Priority, Decision]:
    if not 0 <= int(risk_score) <= 100:
        raise ValueError(f"risk_score must be within 0..100, got {risk_score}")
    priority = priority_for_score(int(risk_score))
    return priority, _DECISION_BY_PRIORITY[priority]  # type: ignore[return-value]


def action_required_for(decision: str) -> str | None:
    return ANALYST_ACTION_REQUIRED if decision == "MANUAL_REVIEW" else None
