from __future__ import annotations

"""
Build the downloadable JSON report of the current session.

Design intent:
- Mirror what an analyst sees: KPI summary plus every result, newest first.
- Keep the payload plain JSON so it can be archived or diffed without the service.
"""

from datetime import datetime, timezone
from typing import Any, Sequence

from backend.internal_core.contracts import AnalysisResult, KpiStats

REPORT_FILENAME_PREFIX = "reagvis-labs-report"


def build_export_report(
    *,
    app_name: str,
    active_tool: str,
    stats: KpiStats,
    results: Sequence[AnalysisResult],
    now: datetime | None = None,
) -> dict[str, Any]:
    generated_at = _utc(now)
    return {
        "generated_at": _iso_millis(generated_at),
        "app_name": app_name,
        "active_tool": active_tool,
        "summary": {
            "total": stats.total,
            "rejected": stats.rejected,
            "manual_review": stats.manual,
            "approved": stats.approved,
        },
        "results": [item.model_dump(mode="json") for item in results],
    }


def report_filename(now: datetime | None = None) -> str:
    stamp = _iso_millis(_utc(now)).replace(":", "").replace(".", "").replace("T", "-")
    stamp = stamp.split("Z")[0]
    return f"{REPORT_FILENAME_PREFIX}-{stamp}.json"


def _utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def _iso_millis(value: datetime) -> str:
    # 2026-10-18T14:43:05.123Z
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
