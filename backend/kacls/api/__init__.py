"""API Layer: FastAPI routes, CORS gate and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON, except the 204 preflight answer

Design Decisions:
    - Thin routes delegate to services
"""
