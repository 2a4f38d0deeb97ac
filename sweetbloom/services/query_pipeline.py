# sweetbloom/services/query_pipeline.py

"""Client-side catalog query pipeline: filter, then sort."""

import logging
from dataclasses import dataclass, field

from sweetbloom.filters.category_filter import CategoryFilter
from sweetbloom.filters.price_range_filter import PriceRangeFilter
from sweetbloom.filters.product_sorter import ProductSorter
from sweetbloom.filters.text_filter import TextFilter
from sweetbloom.models.product import Product
from sweetbloom.models.query_state import QueryState

logger = logging.getLogger("sweetbloom.pipeline")


@dataclass
class QueryResult:
    """Displayed products plus per-step exclusion counts."""

    state: QueryState
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    total_before_filter: int = 0
    category_excluded: int = 0
    price_excluded: int = 0
    search_excluded: int = 0

    @property
    def excluded_count(self) -> int:
        return (
            self.category_excluded
            + self.price_excluded
            + self.search_excluded
        )


class QueryPipeline:
    """Apply a :class:`QueryState` to a product list.

    Steps run in a fixed order: category, price band, free text, then
    sort.  Sorting is last so no filter can undo it.  The input list is
    never mutated and the result only ever contains input products.
    """

    @staticmethod
    def run(products: list[Product], state: QueryState) -> QueryResult:
        """Run every step and report what each one removed."""
        result = QueryResult(
            state=state, total_before_filter=len(products)
        )

        current, result.category_excluded = (
            CategoryFilter.filter_by_category(products, state.category)
        )
        current, result.price_excluded = (
            PriceRangeFilter.filter_by_range(current, state.price_range)
        )
        current, result.search_excluded = TextFilter.filter_by_text(
            current, state.search_text
        )
        result.products = ProductSorter.sort(current, state.sort)

        logger.debug(
            "Pipeline %s kept %d of %d products",
            state,
            len(result.products),
            result.total_before_filter,
        )
        return result

    @staticmethod
    def apply(products: list[Product], state: QueryState) -> list[Product]:
        """Return only the displayed list for *state*."""
        return QueryPipeline.run(products, state).products
