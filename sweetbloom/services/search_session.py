# sweetbloom/services/search_session.py

"""Per-view search state: Query State, reactive results, stale guard."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import replace

from sweetbloom.errors import SweetBloomError
from sweetbloom.models.product import Product
from sweetbloom.models.query_state import QueryState
from sweetbloom.services.catalog_service import CatalogService
from sweetbloom.services.query_pipeline import QueryPipeline, QueryResult

logger = logging.getLogger("sweetbloom.session")

LOAD_ERROR_MESSAGE = "Impossible de charger les produits. Réessayez."

SessionListener = Callable[["SearchSession"], None]


class SearchSession:
    """Holds the product list and Query State for one catalog view.

    ``results`` is recomputed from scratch whenever the products or the
    state change; there is no cache to invalidate.  Typing updates
    ``state.search_text`` at once, and with ``debounce_seconds > 0`` the
    recompute waits until typing pauses.
    """

    def __init__(
        self,
        catalog: CatalogService,
        debounce_seconds: float = 0.0,
    ) -> None:
        self._catalog = catalog
        self.debounce_seconds = debounce_seconds
        self.products: list[Product] = []
        self.state = QueryState()
        self.result = QueryResult(state=self.state)
        self.loading = False
        self.error: str | None = None
        self._generation = 0
        self._pending: asyncio.TimerHandle | None = None
        self._listeners: list[SessionListener] = []

    @property
    def results(self) -> list[Product]:
        return self.result.products

    @property
    def has_pending_recompute(self) -> bool:
        return self._pending is not None

    # ── Subscriptions ────────────────────────────────────

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.error("Session listener failed", exc_info=True)

    # ── Loading ──────────────────────────────────────────

    async def load(self) -> bool:
        """Fetch the catalog and recompute.

        Each call is tagged with a generation number; a response that
        arrives after a newer call started is dropped.  Returns True if
        this call's data was applied.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True
        self._notify()

        try:
            products = await self._catalog.get_all()
        except (SweetBloomError, OSError, ValueError):
            if generation != self._generation:
                return False
            logger.error("Catalog load failed", exc_info=True)
            self.loading = False
            self.error = LOAD_ERROR_MESSAGE
            self._notify()
            return False

        if generation != self._generation:
            logger.debug(
                "Discarding stale catalog response (generation %d < %d)",
                generation,
                self._generation,
            )
            return False

        self.products = products
        self.loading = False
        self.error = None
        logger.info(
            "Session loaded %d products from %s",
            len(products),
            self._catalog.last_source or "catalog",
        )
        self._recompute()
        return True

    async def refresh(self) -> bool:
        return await self.load()

    # ── Query State updates ──────────────────────────────

    def set_category(self, category: str) -> None:
        self._update(replace(self.state, category=category))

    def set_price_range(self, price_range: str) -> None:
        self._update(replace(self.state, price_range=price_range))

    def set_sort(self, sort: str) -> None:
        self._update(replace(self.state, sort=sort))

    def reset(self) -> None:
        self._update(QueryState())

    def set_search_text(self, text: str) -> None:
        """Store the text now; recompute now or after the debounce delay."""
        self.state = replace(self.state, search_text=text)
        if self.debounce_seconds <= 0:
            self._recompute()
            return

        self._cancel_pending()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (headless use): nothing to debounce against
            self._recompute()
            return
        self._pending = loop.call_later(
            self.debounce_seconds, self._run_pending
        )

    def flush(self) -> None:
        """Run a pending debounced recompute immediately."""
        if self._pending is not None:
            self._cancel_pending()
            self._recompute()

    def _update(self, state: QueryState) -> None:
        self.state = state
        self._cancel_pending()
        self._recompute()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _run_pending(self) -> None:
        self._pending = None
        self._recompute()

    def _recompute(self) -> None:
        self.result = QueryPipeline.run(self.products, self.state)
        self._notify()
