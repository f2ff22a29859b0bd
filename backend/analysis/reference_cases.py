from __future__ import annotations

"""
Curated fact-check and propaganda reference cases keyed by filename triggers.

Design intent:
- Give demos a stable, richly documented outcome for a handful of known uploads.
- Keep scores inside the tier bands their decisions imply.
"""

import random
from dataclasses import dataclass
from typing import Callable

from backend.analysis.bundles import Assessment, FactCheckEvidence, PropagandaEvidence
from backend.analysis.tiers import ANALYST_ACTION_REQUIRED, map_risk_score


@dataclass(frozen=True)
class ReferenceCase:
    case_id: str
    tool_type: str
    triggers: tuple[str, ...]
    build: Callable[[random.Random], Assessment]

    def matches(self, tool_type: str, filename_lower: str) -> bool:
        if tool_type != self.tool_type:
            return False
        return any(trigger in filename_lower for trigger in self.triggers)


def _sensex_budget_day(rng: random.Random) -> Assessment:
    risk_score = rng.randint(8, 14)
    priority, decision = map_risk_score(risk_score)
    return Assessment(
        risk_score=risk_score,
        priority=priority,
        decision=decision,
        evidence=[
            "Over the past 15 years, the Sensex and Nifty have shown mixed but slightly positive "
            "performance on Budget day. The Sensex delivered an average return of 0.35%, while the "
            "Nifty followed a similar trend. Markets tend to perform better in the weeks after the "
            "Budget as investors focus more on fundamentals than on day-one reactions."
        ],
        action_required=None,
        fact_check=FactCheckEvidence(
            verdict="verified",
            confidence=0.92,
            reference_id="sensex_budgetday_15y",
            trigger="filename:14001",
            title="Sensex averages 0.35% gain on Budget day over last 15 years",
            publisher="Free Press Journal",
        ),
        pinned=True,
    )


_DOOM64_ENTITIES = [
    "Aubrey Hodges (game composer)",
    "Doom 64 (Nintendo 64 shooter)",
    "Nintendo 64",
    "Midway",
    "id Software",
    "Nightdive Studios",
    "The Ongaku (republisher / source label)",
]

_DOOM64_KEY_CLAIMS = [
    "Aubrey Hodges created a classic dark ambient score for the Nintendo 64 shooter Doom 64, "
    "revisiting it ~20 years later for an augmented album release.",
    "Doom 64 is not the 64th game in the Doom series.",
    "Doom 64 was developed by Midway with oversight from id Software.",
    "The game recently got a fresh port for PC and consoles by Nightdive Studios.",
]

_DOOM64_EVIDENCE_CARDS = [
    "Publisher/credits snippet present in screenshot (The Ongaku republish line).",
    "Known franchise info usually requires a reliable external source (developer/publisher credits).",
    "Port claim requires verification against release notes / store listing.",
]

_DOOM64_WHY_MANUAL_REVIEW = [
    "Multiple factual claims; some require external confirmation (credits, release timing, port details).",
    "Screenshot is partial; not enough context to confirm all claims.",
    "Marking as MEDIUM risk to route to analyst review (demo).",
]


def _doom64_article(rng: random.Random) -> Assessment:
    risk_score = 58
    priority, decision = map_risk_score(risk_score)
    return Assessment(
        risk_score=risk_score,
        priority=priority,
        decision=decision,
        evidence=[*_DOOM64_KEY_CLAIMS[:2], "Extracted from uploaded screenshot (demo)"],
        action_required=ANALYST_ACTION_REQUIRED,
        fact_check=FactCheckEvidence(
            verdict="needs_review",
            confidence=0.62,
            reference_id="doom64_ongaku_42001",
            trigger="filename:42001",
            title="Doom 64 / Aubrey Hodges",
            publisher="The Ongaku",
            case_id="FACT_DOOM64_42001",
            display_title="Article claim review: Doom 64 / Aubrey Hodges",
            extracted_entities=list(_DOOM64_ENTITIES),
            key_claims=list(_DOOM64_KEY_CLAIMS),
            evidence_cards=list(_DOOM64_EVIDENCE_CARDS),
            why_manual_review=list(_DOOM64_WHY_MANUAL_REVIEW),
            verdict_status="Likely credible but needs manual verification",
            recommended_action="Manual Review",
        ),
        pinned=True,
    )


_QUIET_HOUR_INDICATORS = [
    "Loaded framing / rhetorical question (\"for your safety…or for their control?\")",
    "Call-to-action language (\"Don't let them…\")",
    "'They'/oppressor framing (\"The silence they seek…\")",
    "Emotional appeal / fear of suppression (\"silence of submission\")",
]

_QUIET_HOUR_EXCERPTS = [
    "Source header: \"The Gossamer Ledger\"",
    "Headline: \"QUIET HOUR ORDINANCE: 'FOR YOUR SAFETY,' OR FOR THEIR CONTROL?\"",
    "Byline/date: By A. Thorne | October 26, 2023",
    "\"Is 'quiet' just code for compliance?\"",
    "\"Don't let them turn down the volume on your rights.\"",
    "\"The silence they seek is the silence of submission.\"",
]


def _quiet_hour_editorial(rng: random.Random) -> Assessment:
    risk_score = 78
    priority, decision = map_risk_score(risk_score)
    return Assessment(
        risk_score=risk_score,
        priority=priority,
        decision=decision,
        evidence=list(_QUIET_HOUR_EXCERPTS),
        action_required=None,
        propaganda=PropagandaEvidence(
            trigger="filename:25001",
            score=risk_score,
            risk_level=priority,
            indicators_found=list(_QUIET_HOUR_INDICATORS),
            evidence_excerpts=list(_QUIET_HOUR_EXCERPTS),
            matched_facts=[],
        ),
        pinned=True,
    )


REFERENCE_CASES: list[ReferenceCase] = [
    ReferenceCase(
        case_id="sensex_budgetday_15y",
        tool_type="fact-check",
        triggers=("14001", "sensex_budgetday", "fact_sensex"),
        build=_sensex_budget_day,
    ),
    ReferenceCase(
        case_id="doom64_ongaku_42001",
        tool_type="fact-check",
        triggers=("doom64", "aubrey", "hodges", "ongaku", "fact_42001"),
        build=_doom64_article,
    ),
    ReferenceCase(
        case_id="quiet_hour_25001",
        tool_type="propaganda",
        triggers=("25001", "quiet_hour", "gossamer_ledger"),
        build=_quiet_hour_editorial,
    ),
]


def find_reference_case(tool_type: str, filename: str | None) -> ReferenceCase | None:
    filename_lower = (filename or "").lower()
    for case in REFERENCE_CASES:
        if case.matches(tool_type, filename_lower):
            return case
    return None
