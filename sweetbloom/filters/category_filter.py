# sweetbloom/filters/category_filter.py

"""Catalog filtering by product category."""

import logging

from sweetbloom.config.settings import Settings
from sweetbloom.models.product import Product

logger = logging.getLogger("sweetbloom.filters")

ALL_CATEGORIES = "all"


class CategoryFilter:
    """Keep products belonging to the selected category."""

    @staticmethod
    def known_categories() -> set[str]:
        """Return the lower-cased category ids from the registry."""
        return {c["id"].lower() for c in Settings.CATEGORIES}

    @staticmethod
    def filter_by_category(
        products: list[Product],
        category: str,
    ) -> tuple[list[Product], int]:
        """Keep products whose category matches, case-insensitively.

        ``"all"`` and ids missing from ``Settings.CATEGORIES`` keep
        every product.  Returns the kept list and the excluded count.
        """
        wanted = (category or "").strip().lower()
        if wanted == ALL_CATEGORIES:
            return list(products), 0
        if wanted not in CategoryFilter.known_categories():
            logger.debug(
                "Unknown category '%s', showing all products", category
            )
            return list(products), 0

        kept = [
            p for p in products if p.category.lower() == wanted
        ]
        excluded = len(products) - len(kept)
        if excluded:
            logger.debug(
                "Category '%s' excluded %d products", wanted, excluded
            )
        return kept, excluded
