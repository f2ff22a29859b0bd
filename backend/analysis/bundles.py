from __future__ import annotations

"""
Structured evidence bundles attached to derived results per tool type.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SectionEvidence:
    decision: str
    evidence: list[str]


@dataclass(frozen=True)
class FactCheckEvidence:
    verdict: str
    confidence: float
    reference_id: str
    trigger: str
    title: str | None = None
    publisher: str | None = None
    case_id: str | None = None
    display_title: str | None = None
    extracted_entities: list[str] | None = None
    key_claims: list[str] | None = None
    evidence_cards: list[str] | None = None
    why_manual_review: list[str] | None = None
    verdict_status: str | None = None
    recommended_action: str | None = None


@dataclass(frozen=True)
class PropagandaEvidence:
    trigger: str
    score: int
    risk_level: str
    indicators_found: list[str] = field(default_factory=list)
    evidence_excerpts: list[str] = field(default_factory=list)
    matched_facts: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class VerificationEvidence:
    claimed_location: str
    claimed_event: str
    predicted_location: str
    predicted_event: str
    confidence: float
    match_status: str
    reasons: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Assessment:
    risk_score: int
    priority: str
    decision: str
    evidence: list[str]
    action_required: str | None = None
    metadata: SectionEvidence | None = None
    geolocation: SectionEvidence | None = None
    fact_check: FactCheckEvidence | None = None
    propaganda: PropagandaEvidence | None = None
    verification: VerificationEvidence | None = None
    # Curated reference cases keep their fixed outcome under demo overrides.
    pinned: bool = False
