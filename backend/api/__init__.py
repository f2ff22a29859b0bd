"""
API orchestration boundary for the verification demo backend.

Design intent:
- Expose thin, typed endpoints for analysis, analyst decisions, KPI counters and report export.
- Keep request validation explicit and failure modes predictable.
- Orchestrate modules without embedding decision rules in routers.
"""
