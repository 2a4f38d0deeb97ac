# sweetbloom/filters/text_filter.py

"""Free-text catalog filtering."""

import logging

from sweetbloom.models.product import Product

logger = logging.getLogger("sweetbloom.filters")


class TextFilter:
    """Filter products by a case-insensitive substring query."""

    @staticmethod
    def matches(product: Product, needle: str) -> bool:
        """True if *needle* (already lower-cased) occurs in a text field."""
        return (
            needle in product.title.lower()
            or needle in product.description.lower()
            or needle in product.category.lower()
        )

    @staticmethod
    def filter_by_text(
        products: list[Product],
        search_text: str,
    ) -> tuple[list[Product], int]:
        """Keep products whose title, description or category contains
        the trimmed query.

        A blank query keeps everything.  Returns the kept list and the
        count of products that did not match.
        """
        needle = (search_text or "").strip().lower()
        if not needle:
            return list(products), 0

        kept = [p for p in products if TextFilter.matches(p, needle)]
        excluded = len(products) - len(kept)
        logger.debug(
            "Search '%s' matched %d of %d products",
            needle,
            len(kept),
            len(products),
        )
        return kept, excluded
