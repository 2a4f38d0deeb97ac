# sweetbloom/filters/product_validator.py

"""Product validation: drop unusable records before they reach a view."""

import logging

from sweetbloom.models.product import Product

logger = logging.getLogger("sweetbloom.filters")


class ProductValidator:
    """Validate fetched products and drop those missing essential fields."""

    @staticmethod
    def validate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop products with an empty id, a blank title or a repeated id.

        The first record for a given id wins.  Returns the valid
        products and the count of dropped items.
        """
        valid: list[Product] = []
        seen_ids: set[str] = set()
        dropped = 0

        for product in products:
            if not product.id.strip():
                logger.debug(
                    "Dropped product without id (title=%s)",
                    product.title,
                )
                dropped += 1
                continue
            if not product.title.strip():
                logger.debug(
                    "Dropped product with empty title (id=%s)",
                    product.id,
                )
                dropped += 1
                continue
            if product.id in seen_ids:
                logger.debug(
                    "Dropped duplicate product id=%s", product.id
                )
                dropped += 1
                continue
            seen_ids.add(product.id)
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid products",
                dropped,
            )

        return valid, dropped
