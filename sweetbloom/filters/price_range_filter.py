# sweetbloom/filters/price_range_filter.py

"""Catalog filtering by fixed price bands."""

import logging

from sweetbloom.config.settings import Settings
from sweetbloom.models.product import Product

logger = logging.getLogger("sweetbloom.filters")

ALL_PRICES = "all"


class PriceRangeFilter:
    """Keep products whose price falls inside the selected band."""

    @staticmethod
    def resolve_band(range_id: str) -> tuple[float, float] | None:
        """Return ``(min, max)`` for a band id, or ``None`` if unknown."""
        for band in Settings.PRICE_RANGES:
            if band["id"] == range_id:
                return float(str(band["min"])), float(str(band["max"]))
        return None

    @staticmethod
    def filter_by_range(
        products: list[Product],
        range_id: str,
    ) -> tuple[list[Product], int]:
        """Keep products with ``min <= price < max``.

        ``"all"`` and unknown band ids are the identity filter.
        Returns the kept list and the excluded count.
        """
        if range_id == ALL_PRICES:
            return list(products), 0

        band = PriceRangeFilter.resolve_band(range_id)
        if band is None:
            logger.debug(
                "Unknown price range '%s', showing all prices", range_id
            )
            return list(products), 0

        low, high = band
        kept = [p for p in products if low <= p.price < high]
        excluded = len(products) - len(kept)
        if excluded:
            logger.debug(
                "Price range '%s' [%s, %s) excluded %d products",
                range_id,
                low,
                high,
                excluded,
            )
        return kept, excluded
