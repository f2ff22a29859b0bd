"""
Remote integrity-scoring boundary.

Design intent:
- Keep every outbound HTTP call of the service in one module.
- Report failures per stage so the workflow can map them to user-facing messages.
"""
