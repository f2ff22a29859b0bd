from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from .contracts import AuditEvent, AuditEventType
from .result_store import InMemoryResultStore

logger = logging.getLogger(__name__)

MAX_DETAIL_CHARS = 200


def _sanitize_detail(detail: str) -> str:
    # Upload bytes and pasted content never belong here; one short line only.
    detail = " ".join((detail or "").split())
    if len(detail) > MAX_DETAIL_CHARS:
        detail = detail[:MAX_DETAIL_CHARS] + "…"
    return detail


def log_event(
    store: InMemoryResultStore,
    event_type: AuditEventType,
    code: str,
    detail: str,
    result_id: Optional[int] = None,
    duration_ms: Optional[int] = None,
    now: Optional[datetime] = None,
) -> AuditEvent:
    """Append an audit entry to the store and mirror it to the service log."""
    event = AuditEvent(
        ts_iso=(now or datetime.now(timezone.utc)).isoformat(),
        type=event_type,
        code=code,
        detail=_sanitize_detail(detail),
        result_id=result_id,
        duration_ms=duration_ms,
    )
    store.append_audit_event(event)
    logger.debug(
        "audit type=%s code=%s result_id=%s duration_ms=%s detail=%s",
        event.type,
        event.code,
        event.result_id,
        event.duration_ms,
        event.detail,
    )
    return event
