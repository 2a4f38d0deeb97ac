# sweetbloom/services/catalog_service.py

"""Catalog data source: remote document store with a bundled fallback."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from sweetbloom.clients.firestore_client import FirestoreClient
from sweetbloom.config.settings import Settings
from sweetbloom.errors import DataFetchError, NotFoundError
from sweetbloom.filters.product_validator import ProductValidator
from sweetbloom.filters.text_filter import TextFilter
from sweetbloom.models.product import Product

logger = logging.getLogger("sweetbloom.catalog")

SOURCE_REMOTE = "remote"
SOURCE_FALLBACK = "fallback"

# Raised while turning a malformed remote record into a Product
_RECORD_ERRORS = (
    ValueError,
    TypeError,
    KeyError,
    AttributeError,
    ArithmeticError,
)


class CatalogService:
    """Serve products from Firestore, or from the bundled list.

    Callers get the same :class:`Product` shape either way.  Remote
    failures are logged and answered from the fallback list; they never
    reach the caller.
    """

    def __init__(
        self,
        client: FirestoreClient | None = None,
        use_remote: bool | None = None,
        fallback_path: Path | None = None,
    ) -> None:
        self.settings = Settings()
        self._client = client
        self._use_remote = (
            self.settings.USE_REMOTE_CATALOG
            if use_remote is None
            else use_remote
        )
        self._fallback_path = (
            fallback_path or self.settings.FALLBACK_CATALOG_PATH
        )
        self._fallback: list[Product] | None = None
        self.last_source: str = ""

    @property
    def client(self) -> FirestoreClient:
        if self._client is None:
            self._client = FirestoreClient()
        return self._client

    @property
    def remote_enabled(self) -> bool:
        return self._use_remote and self.client.is_configured

    # ── Fallback list ────────────────────────────────────

    def _load_fallback(self) -> list[Product]:
        """Load (once) the bundled product list."""
        if self._fallback is None:
            with open(self._fallback_path, encoding="utf-8") as f:
                raw: list[dict[str, Any]] = json.load(f)
            self._fallback, _ = ProductValidator.validate(
                [Product.from_dict(r) for r in raw]
            )
            logger.debug(
                "Loaded %d fallback products from %s",
                len(self._fallback),
                self._fallback_path,
            )
        return list(self._fallback)

    # ── Blocking implementations (run in a worker thread) ─

    def _records_to_products(
        self, records: list[dict[str, Any]], source: str
    ) -> list[Product]:
        """Convert remote records; a malformed one fails the whole read."""
        try:
            products, _ = ProductValidator.validate(
                [Product.from_dict(r) for r in records]
            )
        except _RECORD_ERRORS as exc:
            raise DataFetchError(source=source) from exc
        return products

    def _fetch_all(self, category: str | None) -> list[Product]:
        if self.remote_enabled:
            collection = self.settings.PRODUCTS_COLLECTION
            try:
                if category:
                    records = self.client.query_equal(
                        collection, "category", category
                    )
                else:
                    records = self.client.list_documents(collection)
                products = self._records_to_products(records, collection)
                self.last_source = SOURCE_REMOTE
                return products
            except DataFetchError as exc:
                logger.warning(
                    "Remote catalog unavailable (%s), "
                    "falling back to bundled products",
                    exc.source,
                    exc_info=True,
                )

        self.last_source = SOURCE_FALLBACK
        products = self._load_fallback()
        if category:
            return [p for p in products if p.category == category]
        return products

    def _fetch_one(self, product_id: str) -> Product | None:
        if self.remote_enabled:
            try:
                record = self.client.get_document(
                    self.settings.PRODUCTS_COLLECTION, product_id
                )
                if record is None:
                    self.last_source = SOURCE_REMOTE
                    return None
                product = self._records_to_products([record], product_id)
                self.last_source = SOURCE_REMOTE
                return product[0] if product else None
            except DataFetchError as exc:
                logger.warning(
                    "Remote lookup of %s failed (%s), "
                    "falling back to bundled products",
                    product_id,
                    exc.source,
                    exc_info=True,
                )

        self.last_source = SOURCE_FALLBACK
        return next(
            (p for p in self._load_fallback() if p.id == product_id),
            None,
        )

    # ── Public async API ─────────────────────────────────

    async def get_all(self) -> list[Product]:
        """Every product in the catalog."""
        return await asyncio.to_thread(self._fetch_all, None)

    async def get_by_category(self, category: str) -> list[Product]:
        """Products whose category equals *category* exactly."""
        return await asyncio.to_thread(self._fetch_all, category)

    async def get_by_id(self, product_id: str) -> Product | None:
        """One product, or ``None`` if the id is unknown."""
        return await asyncio.to_thread(self._fetch_one, str(product_id))

    async def require_by_id(self, product_id: str) -> Product:
        """Like :meth:`get_by_id` but raises :class:`NotFoundError`."""
        product = await self.get_by_id(product_id)
        if product is None:
            raise NotFoundError(str(product_id))
        return product

    async def search(self, query_text: str) -> list[Product]:
        """Products matching the trimmed *query_text*, as the search box
        matches them. A blank query returns the whole catalog.
        """
        products, _ = TextFilter.filter_by_text(
            await self.get_all(), query_text
        )
        return products
