"""API Layer — FastAPI routes, dependencies, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON; errors use the StorefrontError envelope

Design Decisions:
    - Thin routes: token lifecycle, order sync, and trend caching live in services/
"""
