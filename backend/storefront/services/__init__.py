"""Services Layer — CJ token lifecycle, order placement/sync, trend cache.

Invariants:
    - Services take an AsyncSession from the caller and commit their own writes
    - No service imports from api/
"""
