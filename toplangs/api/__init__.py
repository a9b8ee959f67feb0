"""
toplangs.api — HTTP surface for the language card.

Modules:
    endpoints — FastAPI application factory (create_app) exposing
        GET /api/health     — Liveness probe.
        GET /api/top-langs  — SVG language card.

fastapi and pydantic are optional dependencies: pip install 'toplangs[api]'.
"""
