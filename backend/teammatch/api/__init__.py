"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses
    - Acting user identity comes from a gateway-set header, never from the body

Design Decisions:
    - Thin routes delegate to services (impureim sandwich lives in services/)
"""
