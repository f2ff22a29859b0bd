"""
Verification demo backend package.

Design intent:
- Serve the document/media verification workflow behind a small HTTP API.
- Keep domain modules (analysis/remote/workflow/report) independent from the web layer.
"""
