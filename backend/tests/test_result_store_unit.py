import pytest

from backend.internal_core.audit import log_event
from backend.internal_core.contracts import AnalysisResult
from backend.internal_core.result_store import InMemoryResultStore

_INITIAL = {"total": 124, "rejected": 12, "manual": 5, "approved": 107}


def _result(result_id: int, decision: str = "MANUAL_REVIEW", score: int = 50) -> AnalysisResult:
    priority = {"APPROVE": "LOW", "MANUAL_REVIEW": "MEDIUM", "REJECT": "CRITICAL"}[decision]
    return AnalysisResult(
        id=result_id,
        filename=f"item_{result_id}.txt",
        tool_type="document",
        risk_score=score,
        priority=priority,
        decision=decision,
        evidence=["Inconclusive patterns"],
        action_required="Analyst verification needed" if decision == "MANUAL_REVIEW" else None,
        timestamp="2026-10-18T10:00:00+00:00",
    )


def _assert_counters_consistent(store: InMemoryResultStore) -> None:
    stats = store.stats()
    assert stats.total == stats.approved + stats.rejected + stats.manual


def test_add_result_increments_total_and_decision_counter() -> None:
    store = InMemoryResultStore(_INITIAL)
    store.add_result(_result(store.reserve_id(), "REJECT", 90))
    stats = store.stats()
    assert stats.total == 125
    assert stats.rejected == 13
    assert stats.manual == 5
    assert stats.approved == 107
    _assert_counters_consistent(store)


def test_results_are_listed_newest_first_with_sequential_ids() -> None:
    store = InMemoryResultStore(_INITIAL)
    first = store.add_result(_result(store.reserve_id()))
    second = store.add_result(_result(store.reserve_id()))
    assert (first.id, second.id) == (1, 2)
    assert [item.id for item in store.list_results()] == [2, 1]


def test_update_decision_moves_counters_and_clears_action() -> None:
    store = InMemoryResultStore(_INITIAL)
    added = store.add_result(_result(store.reserve_id(), "MANUAL_REVIEW"))

    previous, updated = store.update_decision(added.id, "APPROVE")
    assert previous == "MANUAL_REVIEW"
    assert updated.decision == "APPROVE"
    assert updated.action_required is None
    assert updated.risk_score == added.risk_score
    stats = store.stats()
    assert (stats.total, stats.manual, stats.approved) == (125, 5, 108)

    previous, _ = store.update_decision(added.id, "REJECT")
    assert previous == "APPROVE"
    stats = store.stats()
    assert (stats.total, stats.approved, stats.rejected) == (125, 107, 13)
    _assert_counters_consistent(store)


def test_update_decision_to_same_value_is_noop() -> None:
    store = InMemoryResultStore(_INITIAL)
    added = store.add_result(_result(store.reserve_id(), "MANUAL_REVIEW"))
    before = store.stats()
    previous, unchanged = store.update_decision(added.id, "MANUAL_REVIEW")
    assert previous == "MANUAL_REVIEW"
    assert unchanged.action_required == "Analyst verification needed"
    assert store.stats() == before


def test_update_decision_unknown_id_raises_key_error() -> None:
    store = InMemoryResultStore(_INITIAL)
    with pytest.raises(KeyError):
        store.update_decision(99, "APPROVE")
    with pytest.raises(KeyError):
        store.get_result(99)


def test_duplicate_result_id_is_rejected() -> None:
    store = InMemoryResultStore(_INITIAL)
    store.add_result(_result(1))
    with pytest.raises(ValueError, match="Duplicate result id"):
        store.add_result(_result(1))
    assert store.stats().total == 125


def test_reset_restores_initial_counters_but_keeps_audit_trail() -> None:
    store = InMemoryResultStore(_INITIAL)
    added = store.add_result(_result(store.reserve_id(), "APPROVE", 5))
    store.set_preview(added.id, b"\x89PNG", "image/png")
    log_event(store, "ANALYSIS_DONE", "APPROVE", "line one\nline two", result_id=added.id)

    store.reset()
    assert store.list_results() == []
    assert store.get_preview(added.id) is None
    assert store.stats().model_dump() == _INITIAL
    assert store.reserve_id() == 1

    events = store.list_audit_events()
    assert len(events) == 1
    assert events[0].detail == "line one line two"
