from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ToolType = Literal["document", "fact-check", "propaganda", "verification"]
Priority = Literal["LOW", "MEDIUM", "CRITICAL"]
Decision = Literal["APPROVE", "REJECT", "MANUAL_REVIEW"]
MatchStatus = Literal["match", "mismatch", "insufficient"]


class SectionVerdict(BaseModel):
    model_config = ConfigDict(extra="forbid")

    decision: Decision
    evidence: List[str] = Field(default_factory=list)


class FactCheckBundle(BaseModel):
    model_config = ConfigDict(extra="forbid")

    verdict: str
    confidence: float = Field(ge=0.0, le=1.0)
    reference_id: str
    trigger: str
    title: Optional[str] = None
    publisher: Optional[str] = None
    case_id: Optional[str] = None
    display_title: Optional[str] = None
    extracted_entities: Optional[List[str]] = None
    key_claims: Optional[List[str]] = None
    evidence_cards: Optional[List[str]] = None
    why_manual_review: Optional[List[str]] = None
    verdict_status: Optional[str] = None
    recommended_action: Optional[str] = None


class PropagandaBundle(BaseModel):
    model_config = ConfigDict(extra="forbid")

    trigger: str
    score: int = Field(ge=0, le=100)
    risk_level: Priority
    indicators_found: List[str] = Field(default_factory=list)
    evidence_excerpts: List[str] = Field(default_factory=list)
    matched_facts: List[str] = Field(default_factory=list)


class VerificationBundle(BaseModel):
    model_config = ConfigDict(extra="forbid")

    claimed_location: str
    claimed_event: str
    predicted_location: str
    predicted_event: str
    confidence: float = Field(ge=0.0, le=1.0)
    match_status: MatchStatus
    reasons: List[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    filename: str
    tool_type: ToolType
    risk_score: int = Field(ge=0, le=100)
    priority: Priority
    decision: Decision
    evidence: List[str] = Field(default_factory=list)
    action_required: Optional[str] = None
    timestamp: str
    preview_url: Optional[str] = None
    metadata: Optional[SectionVerdict] = None
    geolocation: Optional[SectionVerdict] = None
    fact_check: Optional[FactCheckBundle] = None
    propaganda: Optional[PropagandaBundle] = None
    verification: Optional[VerificationBundle] = None


class KpiStats(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total: int = Field(ge=0)
    rejected: int = Field(ge=0)
    manual: int = Field(ge=0)
    approved: int = Field(ge=0)


AuditEventType = Literal[
    "ANALYSIS_STARTED",
    "ANALYSIS_DONE",
    "REMOTE_STAGE_FAILED",
    "UPLOAD_RETRIED",
    "DECISION_OVERRIDDEN",
    "REPORT_EXPORTED",
    "STORE_RESET",
]


class AuditEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ts_iso: str
    type: AuditEventType
    code: str
    detail: str
    result_id: Optional[int] = None
    duration_ms: Optional[int] = None
