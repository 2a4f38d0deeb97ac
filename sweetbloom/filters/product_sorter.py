# sweetbloom/filters/product_sorter.py

"""Stable multi-key sorting of catalog results."""

import logging
import unicodedata
from collections.abc import Callable
from typing import Any

from sweetbloom.models.product import Product

logger = logging.getLogger("sweetbloom.filters")

DEFAULT_SORT = "default"


def collation_key(text: str) -> str:
    """Accent- and case-insensitive key so that "Éclair" sorts with E."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(
        ch for ch in decomposed if not unicodedata.combining(ch)
    )
    return stripped.casefold()


# sort id -> (key function, descending)
_SORT_KEYS: dict[str, tuple[Callable[[Product], Any], bool]] = {
    "price_asc": (lambda p: p.price, False),
    "price_desc": (lambda p: p.price, True),
    "name_asc": (lambda p: collation_key(p.title), False),
    "popular": (lambda p: p.rating or 0.0, True),
}


class ProductSorter:
    """Order products by one of the registered sort keys."""

    @staticmethod
    def sort(products: list[Product], sort_key: str) -> list[Product]:
        """Return a new, stably sorted list.

        ``"default"`` and unknown keys keep the incoming order.
        Descending sorts keep ties in their original relative order.
        """
        if sort_key == DEFAULT_SORT:
            return list(products)

        entry = _SORT_KEYS.get(sort_key)
        if entry is None:
            logger.debug(
                "Unknown sort key '%s', keeping default order", sort_key
            )
            return list(products)

        key_fn, descending = entry
        return sorted(products, key=key_fn, reverse=descending)
