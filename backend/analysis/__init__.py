"""
Decision derivation boundary for the verification demo backend.

Design intent:
- Turn a request descriptor into a risk score, priority tier, decision and evidence bundle.
- Keep every rule deterministic and keyword-driven; randomness comes from an injected generator.
- Leave storage, counters and transport to the workflow and API layers.
"""
