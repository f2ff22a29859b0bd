from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path
from typing import Any


def _percentile(values: list[float], p: float) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    rank = (p / 100.0) * (len(ordered) - 1)
    lo = int(rank)
    hi = min(lo + 1, len(ordered) - 1)
    if lo == hi:
        return ordered[lo]
    w = rank - lo
    return ordered[lo] * (1.0 - w) + ordered[hi] * w


def _format_scores(values: list[float]) -> str:
    if not values:
        return "n/a"
    avg = sum(values) / len(values)
    p50 = _percentile(values, 50)
    p95 = _percentile(values, 95)
    return f"avg={avg:.1f} p50={p50:.1f} p95={p95:.1f} n={len(values)}"


def _format_rate(n: int, d: int) -> str:
    if d <= 0:
        return "n/a"
    return f"{(100.0 * n / d):.1f}% ({n}/{d})"


def summarize_report(payload: dict[str, Any]) -> dict[str, Any]:
    results = payload.get("results") or []
    by_tool: Counter[str] = Counter()
    by_decision: Counter[str] = Counter()
    by_priority: Counter[str] = Counter()
    scores: list[float] = []
    pending_action = 0

    for item in results:
        if not isinstance(item, dict):
            continue
        by_tool[str(item.get("tool_type", "unknown"))] += 1
        by_decision[str(item.get("decision", "unknown"))] += 1
        by_priority[str(item.get("priority", "unknown"))] += 1
        score = item.get("risk_score")
        if isinstance(score, (int, float)) and not isinstance(score, bool):
            scores.append(float(score))
        if item.get("action_required"):
            pending_action += 1

    return {
        "result_count": len(results),
        "by_tool": dict(by_tool),
        "by_decision": dict(by_decision),
        "by_priority": dict(by_priority),
        "scores": scores,
        "pending_action": pending_action,
        "summary": payload.get("summary") or {},
    }


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Summarize an exported verification report (reagvis-labs-report-*.json)"
    )
    parser.add_argument(
        "--report-path",
        required=True,
        help="Path to a report downloaded from GET /api/report",
    )
    parser.add_argument(
        "--list-scores",
        action="store_true",
        help="Print every risk score in addition to the summary.",
    )
    args = parser.parse_args()

    path = Path(args.report_path).expanduser()
    if not path.exists():
        raise SystemExit(f"report file not found: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"report file is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise SystemExit("report file must contain a JSON object")

    stats = summarize_report(payload)
    summary = stats["summary"]

    print(f"report_path: {path}")
    print(f"generated_at: {payload.get('generated_at', 'n/a')}")
    print(f"results: {stats['result_count']}")
    print(f"risk_score: {_format_scores(stats['scores'])}")
    for tool, count in sorted(stats["by_tool"].items()):
        print(f"tool[{tool}]: {count}")
    for decision, count in sorted(stats["by_decision"].items()):
        print(f"decision[{decision}]: {_format_rate(count, stats['result_count'])}")
    for priority, count in sorted(stats["by_priority"].items()):
        print(f"priority[{priority}]: {count}")
    print(f"pending_analyst_action: {stats['pending_action']}")
    if summary:
        print(
            "kpi_summary: "
            f"total={summary.get('total')} approved={summary.get('approved')} "
            f"rejected={summary.get('rejected')} manual_review={summary.get('manual_review')}"
        )

    if args.list_scores:
        print("risk_score_values:", ", ".join(f"{v:.0f}" for v in stats["scores"]) or "n/a")


if __name__ == "__main__":
    main()
