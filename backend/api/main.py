from __future__ import annotations

"""
API surface for the verification demo backend.

Design intent:
- Keep API orchestration thin and typed.
- Delegate decision derivation to analysis/, remote scoring to remote/,
  and counters to the in-memory result store.
- Return the same result shape for every tool so the dashboard can render it uniformly.
"""

import logging
import time
from pathlib import Path
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from backend.internal_core.audit import log_event
from backend.internal_core.config import DemoConfig, load_config
from backend.internal_core.contracts import AnalysisResult, AuditEvent, KpiStats
from backend.internal_core.result_store import InMemoryResultStore
from backend.report.export import build_export_report, report_filename
from backend.workflow.runner import AnalysisFailed, AnalysisRequest, AnalysisWorkflow

ToolTypeInput = Literal["document", "fact-check", "propaganda", "verification"]
DecisionInput = Literal["APPROVE", "REJECT", "MANUAL_REVIEW"]


class AnalysisCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tool_type: ToolTypeInput
    filename: str | None = Field(default=None, max_length=255)
    content: str | None = Field(default=None, max_length=100_000)
    claimed_location: str | None = Field(default=None, max_length=256)
    claimed_event: str | None = Field(default=None, max_length=256)


class AnalysisCreateResponse(BaseModel):
    result: AnalysisResult
    stats: KpiStats
    status_message: str
    debug: dict[str, Any] = Field(default_factory=dict)


class ResultListResponse(BaseModel):
    results: list[AnalysisResult] = Field(default_factory=list)
    count: int


class DecisionUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    decision: DecisionInput


class DecisionUpdateResponse(BaseModel):
    result: AnalysisResult
    stats: KpiStats


class AuditListResponse(BaseModel):
    events: list[AuditEvent] = Field(default_factory=list)


app = FastAPI(title="reagvis verification demo backend")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_log_middleware(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    logger.info(
        "method=%s path=%s status=%s duration=%.4fs",
        request.method,
        request.url.path,
        response.status_code,
        time.time() - start_time,
    )
    return response


def _get_config() -> DemoConfig:
    existing = getattr(app.state, "config", None)
    if isinstance(existing, DemoConfig):
        return existing
    created = load_config()
    logging.basicConfig(
        level=created.REAGVIS_LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    setattr(app.state, "config", created)
    return created


def _get_workflow() -> AnalysisWorkflow:
    existing = getattr(app.state, "workflow", None)
    if isinstance(existing, AnalysisWorkflow):
        return existing
    config = _get_config()
    created = AnalysisWorkflow(InMemoryResultStore(config.initial_stats()), config)
    setattr(app.state, "workflow", created)
    return created


def _get_store() -> InMemoryResultStore:
    return _get_workflow().store


async def _run_analysis(request: AnalysisRequest) -> AnalysisCreateResponse:
    workflow = _get_workflow()
    try:
        outcome = await run_in_threadpool(workflow.run, request)
    except AnalysisFailed as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.status_message) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return AnalysisCreateResponse(
        result=outcome.result,
        stats=workflow.store.stats(),
        status_message=outcome.status_message,
        debug=outcome.debug,
    )


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/analysis", response_model=AnalysisCreateResponse)
async def create_analysis(payload: AnalysisCreateRequest) -> AnalysisCreateResponse:
    return await _run_analysis(
        AnalysisRequest(
            tool_type=payload.tool_type,
            filename=(payload.filename or "").strip() or None,
            content=payload.content,
            claimed_location=payload.claimed_location,
            claimed_event=payload.claimed_event,
        )
    )


@app.post("/api/analysis/upload", response_model=AnalysisCreateResponse)
async def upload_analysis(
    request: Request,
    tool_type: ToolTypeInput = Query(default="document"),
    filename: str = Query(min_length=1, max_length=255),
    claimed_location: str | None = Query(default=None, max_length=256),
    claimed_event: str | None = Query(default=None, max_length=256),
) -> AnalysisCreateResponse:
    filename = Path(str(filename or "")).name
    if not filename:
        raise HTTPException(status_code=400, detail="Missing filename.")

    payload = await request.body()
    if not payload:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")

    max_bytes = _get_config().REAGVIS_MAX_UPLOAD_BYTES
    if len(payload) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Uploaded file exceeds {max_bytes // (1024 * 1024)}MB limit.",
        )

    content_type = str(request.headers.get("content-type", "")).split(";")[0].strip().lower()
    return await _run_analysis(
        AnalysisRequest(
            tool_type=tool_type,
            filename=filename,
            claimed_location=claimed_location,
            claimed_event=claimed_event,
            file_bytes=payload,
            content_type=content_type or "application/octet-stream",
        )
    )


@app.get("/api/results", response_model=ResultListResponse)
async def list_results() -> ResultListResponse:
    results = _get_store().list_results()
    return ResultListResponse(results=results, count=len(results))


@app.get("/api/results/{result_id}", response_model=AnalysisResult)
async def get_result(result_id: int) -> AnalysisResult:
    try:
        return _get_store().get_result(result_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Result not found: {result_id}") from exc


@app.get("/api/results/{result_id}/preview")
async def get_result_preview(result_id: int) -> Response:
    preview = _get_store().get_preview(result_id)
    if preview is None:
        raise HTTPException(status_code=404, detail=f"No preview for result: {result_id}")
    data, media_type = preview
    return Response(content=data, media_type=media_type)


@app.post("/api/results/{result_id}/decision", response_model=DecisionUpdateResponse)
async def update_result_decision(result_id: int, payload: DecisionUpdateRequest) -> DecisionUpdateResponse:
    workflow = _get_workflow()
    try:
        result = workflow.update_decision(result_id, payload.decision)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Result not found: {result_id}") from exc
    return DecisionUpdateResponse(result=result, stats=workflow.store.stats())


@app.get("/api/stats", response_model=KpiStats)
async def get_stats() -> KpiStats:
    return _get_store().stats()


@app.get("/api/report")
async def export_report(active_tool: ToolTypeInput = Query(default="document")) -> JSONResponse:
    store = _get_store()
    results = store.list_results()
    if not results:
        raise HTTPException(status_code=409, detail="Nothing to export yet.")

    report = build_export_report(
        app_name=_get_config().REAGVIS_APP_NAME,
        active_tool=active_tool,
        stats=store.stats(),
        results=results,
    )
    filename = report_filename()
    log_event(store, "REPORT_EXPORTED", "JSON", f"{filename} results={len(results)}")
    return JSONResponse(
        content=report,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/api/audit", response_model=AuditListResponse)
async def list_audit_events() -> AuditListResponse:
    return AuditListResponse(events=_get_store().list_audit_events())


@app.post("/api/reset", response_model=KpiStats)
async def reset_store() -> KpiStats:
    store = _get_store()
    store.reset()
    log_event(store, "STORE_RESET", "RESET", "results cleared; counters restored")
    return store.stats()
