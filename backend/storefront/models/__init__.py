"""ORM Models — SQLAlchemy declarative models for all storefront entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the owner of credentials, products, and orders

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from storefront.models.user import User  # noqa: F401
from storefront.models.cj_credential import CjCredential  # noqa: F401
from storefront.models.product import Product  # noqa: F401
from storefront.models.order import Order  # noqa: F401
from storefront.models.trending_product import TrendingProduct  # noqa: F401
