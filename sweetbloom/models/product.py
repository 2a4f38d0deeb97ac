# sweetbloom/models/product.py

"""Product data model for inter-module data flow."""

import logging
import math
from dataclasses import dataclass
from typing import Any

from sweetbloom.config.settings import Settings

logger = logging.getLogger("sweetbloom.models")


def _to_float(value: Any, default: float = 0.0) -> float:
    """Coerce a raw numeric field, falling back to *default*.

    NaN and infinities count as unparseable.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(str(value).replace(",", ".").strip())
    except ValueError:
        logger.debug("Unparseable numeric value %r", value)
        return default
    if not math.isfinite(result):
        logger.debug("Non-finite numeric value %r", value)
        return default
    return result


def _to_text(value: Any) -> str:
    """Coerce a raw text field; ``None`` becomes the empty string."""
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class Product:
    """A single catalog entry. Immutable once fetched; identity is ``id``."""

    id: str
    title: str = ""
    description: str = ""
    price: float = 0.0
    category: str = ""
    image: str = ""
    rating: float | None = None
    review_count: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Build a Product from a loosely-shaped record.

        Missing text fields become ``""``, a missing or unparseable
        price becomes ``0.0`` and negative prices are clamped to zero.
        Ratings are clamped to ``0..5``; the review count is read from
        ``reviewCount``, ``review_count`` or ``reviews``.
        """
        rating: float | None = None
        if data.get("rating") not in (None, ""):
            rating = min(max(_to_float(data["rating"]), 0.0), 5.0)

        raw_reviews = next(
            (
                data[key]
                for key in ("reviewCount", "review_count", "reviews")
                if data.get(key) not in (None, "")
            ),
            None,
        )
        review_count: int | None = None
        if raw_reviews is not None:
            review_count = max(int(_to_float(raw_reviews)), 0)

        return cls(
            id=_to_text(data.get("id")),
            title=_to_text(data.get("title")),
            description=_to_text(data.get("description")),
            price=max(_to_float(data.get("price")), 0.0),
            category=_to_text(data.get("category")),
            image=_to_text(data.get("image")),
            rating=rating,
            review_count=review_count,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialise to the camelCase record shape used on disk."""
        data: dict[str, object] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "image": self.image,
        }
        if self.rating is not None:
            data["rating"] = self.rating
        if self.review_count is not None:
            data["reviewCount"] = self.review_count
        return data


def format_price(price: float) -> str:
    """Display form of a price, e.g. ``1,299.00 DH``."""
    return f"{price:,.2f} {Settings.CURRENCY}"
