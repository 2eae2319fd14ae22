"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary (request bodies)
    - Bodies accept camelCase keys (web/mobile clients) and snake_case alike

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
