from __future__ import annotations

"""
Demo keyword overrides ("fake" / "real") applied on top of derived results.

A word counts when it is bounded by the start/end of the text or by any
character outside [a-z0-9], so `scan_fake.png` and `Real photo` both match
while `realistic` and `fakery` do not.
"""

import re
from dataclasses import dataclass, replace
from functools import lru_cache

from backend.analysis.bundles import Assessment
from backend.analysis.tiers import action_required_for, map_risk_score


@dataclass(frozen=True)
class DemoOverride:
    word: str
    risk_score: int
    evidence: list[str]


_OVERRIDE_SCORES: list[tuple[str, int]] = [
    ("fake", 92),
    ("real", 8),
]


@lru_cache(maxsize=None)
def _word_boundary_re(word: str) -> re.Pattern[str]:
    return re.compile(rf"(^|[^a-z0-9]){re.escape(word)}([^a-z0-9]|$)", re.IGNORECASE)


def contains_word(text: str, word: str) -> bool:
    return bool(_word_boundary_re(word).search(text or ""))


def get_demo_override(filename: str | None, content: str | None) -> DemoOverride | None:
    source = f"{filename or ''} {content or ''}".strip()
    if not source:
        return None

    for word, score in _OVERRIDE_SCORES:
        if contains_word(source, word):
            return DemoOverride(
                word=word,
                risk_score=score,
                evidence=[f'Demo override: filename/content contains the word "{word}".'],
            )
    return None


def apply_demo_override(assessment: Assessment, override: DemoOverride) -> Assessment:
    priority, decision = map_risk_score(override.risk_score)
    return replace(
        assessment,
        risk_score=override.risk_score,
        priority=priority,
        decision=decision,
        evidence=[*override.evidence, *assessment.evidence],
        action_required=action_required_for(decision),
    )
