from __future__ import annotations

"""
Run one analysis end to end and reconcile it with the KPI counters.

Design intent:
- Choose between the hosted integrity scorer (document image uploads) and the
  local simulator for every other request.
- Apply demo keyword overrides consistently on both paths.
- Leave results and counters untouched when any stage fails.
"""

import logging
import random
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from backend.analysis.bundles import Assessment
from backend.analysis.overrides import DemoOverride, apply_demo_override, get_demo_override
from backend.analysis.simulator import AnalysisInput, derive_assessment
from backend.analysis.tiers import action_required_for, map_risk_score
from backend.internal_core.audit import log_event
from backend.internal_core.config import DemoConfig
from backend.internal_core.contracts import AnalysisResult, Decision
from backend.internal_core.result_store import InMemoryResultStore
from backend.remote.integrity_client import IntegrityClient, RemoteStageError

logger = logging.getLogger(__name__)

STATUS_COMPLETE = "Analysis complete"

_STAGE_FAILURES: dict[str, tuple[int, str]] = {
    "upload-url": (503, "Upload service temporarily unavailable"),
    "s3-upload": (502, "Upload failed. Please retry."),
    "analyze": (502, "Analysis failed. Please retry."),
}

_DEFAULT_FILENAME_PREFIX: dict[str, str] = {
    "verification": "verification",
    "fact-check": "fact_check",
    "propaganda": "propaganda",
}

REMOTE_MODEL_EVIDENCE = "Risk score generated by Bedrock document integrity model."


class AnalysisFailed(RuntimeError):
    def __init__(self, stage: str, status_code: int, status_message: str):
        super().__init__(status_message)
        self.stage = stage
        self.status_code = status_code
        self.status_message = status_message


@dataclass(frozen=True)
class AnalysisRequest:
    tool_type: str
    filename: str | None = None
    content: str | None = None
    claimed_location: str | None = None
    claimed_event: str | None = None
    file_bytes: bytes | None = None
    content_type: str | None = None

    @property
    def is_image_upload(self) -> bool:
        return self.file_bytes is not None and (self.content_type or "").lower().startswith("image/")


@dataclass(frozen=True)
class AnalysisOutcome:
    result: AnalysisResult
    status_message: str
    debug: dict[str, Any] = field(default_factory=dict)


def failure_for_stage(stage: str) -> tuple[int, str]:
    return _STAGE_FAILURES.get(stage, _STAGE_FAILURES["analyze"])


def default_filename(tool_type: str, *, remote: bool, now: datetime) -> str:
    stamp = int(now.timestamp() * 1000)
    if remote:
        return f"document_{stamp}.png"
    prefix = _DEFAULT_FILENAME_PREFIX.get(tool_type, "text_analysis")
    return f"{prefix}_{stamp}.txt"


class AnalysisWorkflow:
    def __init__(
        self,
        store: InMemoryResultStore,
        config: DemoConfig,
        client: IntegrityClient | None = None,
        *,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] | None = None,
    ):
        self._store = store
        self._config = config
        self._client = client or IntegrityClient(
            config.REAGVIS_API_BASE_URL,
            config.REAGVIS_ANALYZE_BUCKET,
            timeout_sec=config.REAGVIS_HTTP_TIMEOUT_SECONDS,
        )
        self._rng = rng or random.Random(config.REAGVIS_RANDOM_SEED)
        self._sleep = sleep
        self._clock = clock
        self._now = now or (lambda: datetime.now(timezone.utc))

    @property
    def store(self) -> InMemoryResultStore:
        return self._store

    def run(self, request: AnalysisRequest) -> AnalysisOutcome:
        started = self._clock()
        use_remote = request.tool_type == "document" and request.is_image_upload
        override = None
        if self._config.REAGVIS_DEMO_OVERRIDES:
            override = get_demo_override(request.filename, request.content)

        log_event(
            self._store,
            "ANALYSIS_STARTED",
            "REMOTE" if use_remote else "SIMULATED",
            f"tool={request.tool_type} filename={request.filename or '-'}",
        )

        try:
            if use_remote:
                assessment, debug = self._run_remote(request, override)
            else:
                assessment, debug = self._run_simulated(request, override)
        except RemoteStageError as exc:
            status_code, status_message = failure_for_stage(exc.stage)
            log_event(
                self._store,
                "REMOTE_STAGE_FAILED",
                exc.stage,
                exc.message,
                duration_ms=self._elapsed_ms(started),
            )
            logger.warning("Analysis failed at stage %s: %s", exc.stage, exc.message)
            raise AnalysisFailed(exc.stage, status_code, status_message) from exc

        remaining = self._config.REAGVIS_MIN_DELAY_MS / 1000.0 - (self._clock() - started)
        if remaining > 0:
            self._sleep(remaining)

        result = self._store.add_result(self._build_result(request, assessment, remote=use_remote))
        log_event(
            self._store,
            "ANALYSIS_DONE",
            result.decision,
            f"tool={result.tool_type} score={result.risk_score} priority={result.priority}",
            result_id=result.id,
            duration_ms=self._elapsed_ms(started),
        )
        logger.info(
            "Analysis %s complete: tool=%s score=%s decision=%s",
            result.id,
            result.tool_type,
            result.risk_score,
            result.decision,
        )
        return AnalysisOutcome(result=result, status_message=STATUS_COMPLETE, debug=debug)

    def update_decision(self, result_id: int, decision: Decision) -> AnalysisResult:
        previous, updated = self._store.update_decision(result_id, decision)
        if previous != decision:
            log_event(
                self._store,
                "DECISION_OVERRIDDEN",
                decision,
                f"{previous} -> {decision}",
                result_id=result_id,
            )
        return updated

    def _run_simulated(
        self, request: AnalysisRequest, override: DemoOverride | None
    ) -> tuple[Assessment, dict[str, Any]]:
        latency_ms = self._config.REAGVIS_SIMULATED_LATENCY_MS
        if latency_ms > 0:
            self._sleep(latency_ms / 1000.0)

        assessment = derive_assessment(
            AnalysisInput(
                tool_type=request.tool_type,  # type: ignore[arg-type]
                filename=request.filename,
                content=request.content,
                claimed_location=request.claimed_location,
                claimed_event=request.claimed_event,
            ),
            self._rng,
        )
        debug: dict[str, Any] = {"engine": "simulated", "pinned": assessment.pinned}
        if override is not None and not assessment.pinned:
            assessment = apply_demo_override(assessment, override)
            debug["override"] = override.word
        return assessment, debug

    def _run_remote(
        self, request: AnalysisRequest, override: DemoOverride | None
    ) -> tuple[Assessment, dict[str, Any]]:
        if override is not None:
            return (
                _score_only_assessment(override.risk_score, list(override.evidence)),
                {"engine": "demo_override", "override": override.word},
            )

        target = self._client.request_upload_url()
        upload_attempts = self._upload_with_retry(target.upload_url, request)
        risk_score = self._client.analyze_object(target.key)
        return (
            _score_only_assessment(risk_score, [REMOTE_MODEL_EVIDENCE, f"S3 key: {target.key}"]),
            {"engine": "remote", "key": target.key, "upload_attempts": upload_attempts},
        )

    def _upload_with_retry(self, upload_url: str, request: AnalysisRequest) -> int:
        attempts = 1 + self._config.REAGVIS_UPLOAD_RETRIES
        for attempt in range(1, attempts + 1):
            try:
                self._client.upload_object(upload_url, request.file_bytes or b"", request.content_type)
                return attempt
            except RemoteStageError as exc:
                if attempt >= attempts:
                    raise
                log_event(self._store, "UPLOAD_RETRIED", exc.stage, f"attempt={attempt} {exc.message}")
                logger.info("Retrying object upload after attempt %s failed", attempt)
        return attempts

    def _build_result(self, request: AnalysisRequest, assessment: Assessment, *, remote: bool) -> AnalysisResult:
        now = self._now()
        result_id = self._store.reserve_id()
        preview_url = None
        if request.is_image_upload:
            self._store.set_preview(result_id, request.file_bytes or b"", request.content_type or "image/png")
            preview_url = f"/api/results/{result_id}/preview"

        return AnalysisResult(
            id=result_id,
            filename=request.filename or default_filename(request.tool_type, remote=remote, now=now),
            tool_type=request.tool_type,  # type: ignore[arg-type]
            risk_score=assessment.risk_score,
            priority=assessment.priority,  # type: ignore[arg-type]
            decision=assessment.decision,  # type: ignore[arg-type]
            evidence=list(assessment.evidence),
            action_required=assessment.action_required,
            timestamp=now.isoformat(),
            preview_url=preview_url,
            metadata=_bundle(assessment.metadata),
            geolocation=_bundle(assessment.geolocation),
            fact_check=_bundle(assessment.fact_check),
            propaganda=_bundle(assessment.propaganda),
            verification=_bundle(assessment.verification),
        )

    def _elapsed_ms(self, started: float) -> int:
        return int((self._clock() - started) * 1000)


def _score_only_assessment(risk_score: int, evidence: list[str]) -> Assessment:
    priority, decision = map_risk_score(risk_score)
    return Assessment(
        risk_score=risk_score,
        priority=priority,
        decision=decision,
        evidence=evidence,
        action_required=action_required_for(decision),
    )


def _bundle(item: Any) -> dict[str, Any] | None:
    return asdict(item) if item is not None else None
