# sweetbloom/storage/favorites_store.py

"""Persisted favorites: product snapshots under one well-known key."""

import asyncio
import json
import logging
from typing import Any

from sweetbloom.config.settings import Settings
from sweetbloom.models.product import Product
from sweetbloom.storage.kv_store import KeyValueStore

logger = logging.getLogger("sweetbloom.favorites")


class FavoritesStore:
    """Async favorites API over a :class:`KeyValueStore`.

    Every mutating call is a single read-modify-write held under one
    lock, so rapid double toggles cannot interleave and lose a write.
    """

    def __init__(
        self,
        kv_store: KeyValueStore | None = None,
        key: str | None = None,
    ) -> None:
        self._owns_kv = kv_store is None
        self._kv = kv_store or KeyValueStore()
        self._key = key or Settings.FAVORITES_KEY
        self._lock = asyncio.Lock()

    def close(self) -> None:
        """Close the database if this store opened it."""
        if self._owns_kv:
            self._kv.close()

    # ── Blocking helpers (worker thread) ─────────────────

    def _read(self) -> list[Product]:
        raw = self._kv.get(self._key)
        if not raw:
            return []
        try:
            data: Any = json.loads(raw)
        except json.JSONDecodeError:
            logger.error(
                "Corrupt favorites under %s, starting empty",
                self._key,
                exc_info=True,
            )
            return []
        if not isinstance(data, list):
            logger.error(
                "Favorites under %s is not a list, starting empty",
                self._key,
            )
            return []
        return [
            Product.from_dict(item)
            for item in data
            if isinstance(item, dict)
        ]

    def _write(self, products: list[Product]) -> None:
        self._kv.set(
            self._key,
            json.dumps(
                [p.to_dict() for p in products], ensure_ascii=False
            ),
        )

    def _toggle_sync(self, product: Product) -> bool:
        favorites = self._read()
        remaining = [p for p in favorites if p.id != product.id]
        if len(remaining) == len(favorites):
            remaining.append(product)
            self._write(remaining)
            logger.info("Added %s to favorites", product.id)
            return True
        self._write(remaining)
        logger.info("Removed %s from favorites", product.id)
        return False

    def _remove_sync(self, product_id: str) -> bool:
        favorites = self._read()
        remaining = [p for p in favorites if p.id != product_id]
        if len(remaining) == len(favorites):
            return False
        self._write(remaining)
        logger.info("Removed %s from favorites", product_id)
        return True

    # ── Public async API ─────────────────────────────────

    async def get_all(self) -> list[Product]:
        """All favorites in the order they were added."""
        async with self._lock:
            return await asyncio.to_thread(self._read)

    async def ids(self) -> list[str]:
        return [p.id for p in await self.get_all()]

    async def is_favorite(self, product_id: str) -> bool:
        return product_id in await self.ids()

    async def toggle(self, product: Product) -> bool:
        """Add *product* if absent, remove it if present.

        Returns the new state (True means now a favorite).
        """
        async with self._lock:
            return await asyncio.to_thread(self._toggle_sync, product)

    async def remove(self, product_id: str) -> bool:
        """Remove by id. Returns True if something was removed."""
        async with self._lock:
            return await asyncio.to_thread(self._remove_sync, product_id)

    async def clear(self) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write, [])
        logger.info("Favorites cleared")
