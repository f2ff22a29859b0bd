"""
Analysis workflow boundary.

Design intent:
- Orchestrate simulator, remote scorer and result store for one request at a time.
- Translate remote stage failures into user-facing status messages.
"""
