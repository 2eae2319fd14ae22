"""Demo Trend Catalog — canned marketplace trend records per source.

Invariants:
    - Every record carries source, product_name, search_volume, category, price_range
    - Records within a source are listed by descending search_volume
    - Pure data: no IO, safe to import anywhere

Design Decisions:
    - Static payloads stand in for scrapers until a real feed exists; the cache
      table stores them so the freshness window behaves the same either way
"""

from storefront.core.domain_types import TrendSource

DEMO_NOTE = (
    "Demo trend data. Cached records are refreshed hourly; "
    "connect a live trends feed for real-time numbers."
)

_GOOGLE = [
    ("Wireless Earbuds", 10000, "Electronics", "₱500-2000"),
    ("Phone Cases", 8500, "Accessories", "₱100-500"),
    ("Skincare Products", 7200, "Beauty", "₱200-1500"),
    ("LED Strip Lights", 6800, "Home", "₱300-1000"),
    ("Fitness Tracker", 5500, "Electronics", "₱1000-3000"),
    ("Face Mask", 5000, "Health", "₱50-300"),
    ("Tote Bags", 4500, "Fashion", "₱200-800"),
    ("Smart Watches", 4200, "Electronics", "₱1500-5000"),
]

_SHOPEE = [
    ("Summer Dresses", 15000, "Fashion", "₱300-800"),
    ("Bluetooth Speakers", 12000, "Electronics", "₱500-2000"),
    ("Vitamins & Supplements", 9800, "Health", "₱200-1500"),
    ("Baby Toys", 8500, "Baby & Kids", "₱200-1000"),
    ("Gaming Accessories", 7200, "Gaming", "₱500-3000"),
    ("Home Organization", 6500, "Home", "₱100-500"),
    ("Pet Supplies", 5800, "Pets", "₱200-1500"),
    ("Sneakers", 5200, "Fashion", "₱1500-5000"),
]

_LAZADA = [
    ("Laptops", 18000, "Electronics", "₱15000-50000"),
    ("Air Purifiers", 9500, "Home", "₱3000-10000"),
    ("Makeup Sets", 8200, "Beauty", "₱500-3000"),
    ("Kitchen Appliances", 7800, "Home", "₱1000-5000"),
    ("Men's Watches", 6200, "Fashion", "₱500-3000"),
    ("Wireless Chargers", 5500, "Electronics", "₱300-1500"),
    ("Yoga Mats", 4800, "Sports", "₱200-800"),
    ("Backpacks", 4200, "Fashion", "₱500-2000"),
]

_TIKTOK = [
    ("#TikTokMadeMeBuyIt", 50000, "General", "Various"),
    ("Skincare Routine", 25000, "Beauty", "₱500-3000"),
    ("Viral Gadgets", 18000, "Electronics", "₱500-5000"),
    ("Home Decor Hacks", 15000, "Home", "₱200-2000"),
    ("Food Hacks", 12000, "Food", "₱100-500"),
    ("Fitness Motivation", 10000, "Sports", "₱200-3000"),
    ("Fashion Tips", 8500, "Fashion", "₱300-2000"),
    ("DIY Crafts", 7000, "Crafts", "₱100-1000"),
]

_CATALOG: dict[TrendSource, list[tuple[str, int, str, str]]] = {
    TrendSource.GOOGLE: _GOOGLE,
    TrendSource.SHOPEE: _SHOPEE,
    TrendSource.LAZADA: _LAZADA,
    TrendSource.TIKTOK: _TIKTOK,
}


def demo_trends(source: TrendSource, category: str | None = None) -> list[dict]:
    """Demo records for one source, optionally filtered by category (case-insensitive)."""
    prefix = source.value[0]
    records = [
        {
            "id": f"{prefix}{i}",
            "source": source.value,
            "product_name": name,
            "search_volume": volume,
            "category": cat,
            "price_range": price_range,
        }
        for i, (name, volume, cat, price_range) in enumerate(_CATALOG[source], start=1)
    ]
    if category:
        records = [r for r in records if r["category"].lower() == category.lower()]
    return records
