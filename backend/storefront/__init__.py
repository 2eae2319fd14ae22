"""CJ Storefront — dropshipping storefront-management API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
