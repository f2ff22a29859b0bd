from __future__ import annotations

from threading import RLock
from typing import Dict, List, Optional, Tuple

from .contracts import AnalysisResult, AuditEvent, Decision, KpiStats

_COUNTER_BY_DECISION: Dict[str, str] = {
    "APPROVE": "approved",
    "REJECT": "rejected",
    "MANUAL_REVIEW": "manual",
}


class InMemoryResultStore:
    def __init__(self, initial_stats: Dict[str, int]):
        self._initial_stats = dict(initial_stats)
        self._lock = RLock()
        self._results: List[AnalysisResult] = []
        self._previews: Dict[int, Tuple[bytes, str]] = {}
        self._audit_events: List[AuditEvent] = []
        self._stats: Dict[str, int] = dict(initial_stats)
        self._next_id = 1

    def reserve_id(self) -> int:
        with self._lock:
            result_id = self._next_id
            self._next_id += 1
            return result_id

    def add_result(self, result: AnalysisResult) -> AnalysisResult:
        with self._lock:
            if any(item.id == result.id for item in self._results):
                raise ValueError(f"Duplicate result id: {result.id}")
            self._next_id = max(self._next_id, result.id + 1)
            self._results.insert(0, result)
            self._stats["total"] += 1
            self._stats[_COUNTER_BY_DECISION[result.decision]] += 1
        return result

    def update_decision(self, result_id: int, decision: Decision) -> Tuple[Decision, AnalysisResult]:
        """Return (previous decision, updated result); counters move in the same critical section."""
        with self._lock:
            for index, item in enumerate(self._results):
                if item.id != result_id:
                    continue
                if item.decision == decision:
                    return item.decision, item
                self._stats[_COUNTER_BY_DECISION[item.decision]] -= 1
                self._stats[_COUNTER_BY_DECISION[decision]] += 1
                updated = item.model_copy(update={"decision": decision, "action_required": None})
                self._results[index] = updated
                return item.decision, updated
        raise KeyError(f"Unknown result_id: {result_id}")

    def get_result(self, result_id: int) -> AnalysisResult:
        with self._lock:
            for item in self._results:
                if item.id == result_id:
                    return item
        raise KeyError(f"Unknown result_id: {result_id}")

    def list_results(self) -> List[AnalysisResult]:
        with self._lock:
            return list(self._results)

    def stats(self) -> KpiStats:
        with self._lock:
            return KpiStats(**self._stats)

    def set_preview(self, result_id: int, data: bytes, media_type: str) -> None:
        with self._lock:
            self._previews[result_id] = (data, media_type)

    def get_preview(self, result_id: int) -> Optional[Tuple[bytes, str]]:
        with self._lock:
            return self._previews.get(result_id)

    def append_audit_event(self, event: AuditEvent) -> None:
        with self._lock:
            self._audit_events.append(event)

    def list_audit_events(self) -> List[AuditEvent]:
        with self._lock:
            return list(self._audit_events)

    def reset(self) -> None:
        with self._lock:
            self._results = []
            self._previews = {}
            self._stats = dict(self._initial_stats)
            self._next_id = 1
