"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Every /api route except register/login depends on get_current_user

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
