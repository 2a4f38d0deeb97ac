# tests/test_search_session.py

"""Tests for SearchSession state, debounce and stale-response guard."""

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock

from sweetbloom.errors import DataFetchError
from sweetbloom.models.product import Product
from sweetbloom.services.search_session import (
    LOAD_ERROR_MESSAGE,
    SearchSession,
)

PRODUCTS = [
    Product(id="1", title="Bouquet de Roses", price=299.0, category="fleurs"),
    Product(id="2", title="Truffes au Chocolat Noir", price=149.0,
            category="chocolats"),
    Product(id="3", title="Fraisier", price=350.0, category="gateaux"),
]


def _catalog(products: list[Product] | None = None) -> MagicMock:
    catalog = MagicMock()
    catalog.get_all = AsyncMock(return_value=list(products or PRODUCTS))
    catalog.last_source = "fallback"
    return catalog


class TestSearchSessionLoad(unittest.IsolatedAsyncioTestCase):
    """Loading and error reporting."""

    async def test_load_populates_results(self) -> None:
        session = SearchSession(_catalog())
        self.assertTrue(await session.load())
        self.assertFalse(session.loading)
        self.assertIsNone(session.error)
        self.assertEqual([p.id for p in session.results], ["1", "2", "3"])

    async def test_load_error_sets_message(self) -> None:
        catalog = _catalog()
        catalog.get_all.side_effect = DataFetchError()
        session = SearchSession(catalog)
        self.assertFalse(await session.load())
        self.assertEqual(session.error, LOAD_ERROR_MESSAGE)
        self.assertFalse(session.loading)

    async def test_refresh_clears_previous_error(self) -> None:
        catalog = _catalog()
        catalog.get_all.side_effect = [DataFetchError(), list(PRODUCTS)]
        session = SearchSession(catalog)
        await session.load()
        self.assertTrue(await session.refresh())
        self.assertIsNone(session.error)
        self.assertEqual(len(session.results), 3)

    async def test_listeners_see_loading_then_done(self) -> None:
        session = SearchSession(_catalog())
        seen: list[bool] = []
        session.subscribe(lambda s: seen.append(s.loading))
        await session.load()
        self.assertEqual(seen[0], True)
        self.assertEqual(seen[-1], False)

    async def test_stale_response_is_discarded(self) -> None:
        """A slow first load finishing after a second one is ignored."""
        release_first = asyncio.Event()
        old = [Product(id="old", title="Ancien")]
        new = [Product(id="new", title="Nouveau")]
        calls = 0

        async def get_all() -> list[Product]:
            nonlocal calls
            calls += 1
            if calls == 1:
                await release_first.wait()
                return old
            return new

        catalog = MagicMock()
        catalog.get_all = get_all
        catalog.last_source = "remote"
        session = SearchSession(catalog)

        first = asyncio.create_task(session.load())
        await asyncio.sleep(0)
        self.assertTrue(await session.load())

        release_first.set()
        self.assertFalse(await first)
        self.assertEqual([p.id for p in session.results], ["new"])
        self.assertFalse(session.loading)


class TestSearchSessionQueryState(unittest.IsolatedAsyncioTestCase):
    """Query State updates recompute the displayed list."""

    async def asyncSetUp(self) -> None:
        self.session = SearchSession(_catalog())
        await self.session.load()

    async def test_set_category(self) -> None:
        self.session.set_category("fleurs")
        self.assertEqual([p.id for p in self.session.results], ["1"])

    async def test_set_price_range(self) -> None:
        self.session.set_price_range("high")
        self.assertEqual([p.id for p in self.session.results], ["3"])

    async def test_set_sort(self) -> None:
        self.session.set_sort("price_asc")
        self.assertEqual(
            [p.id for p in self.session.results], ["2", "1", "3"]
        )

    async def test_search_text_without_debounce(self) -> None:
        self.session.set_search_text("choc")
        self.assertEqual([p.id for p in self.session.results], ["2"])

    async def test_reset(self) -> None:
        self.session.set_category("fleurs")
        self.session.set_search_text("zzz")
        self.session.reset()
        self.assertEqual(len(self.session.results), 3)
        self.assertEqual(self.session.state.search_text, "")

    async def test_unsubscribe(self) -> None:
        listener = MagicMock()
        unsubscribe = self.session.subscribe(listener)
        unsubscribe()
        self.session.set_sort("name_asc")
        listener.assert_not_called()


class TestSearchSessionDebounce(unittest.IsolatedAsyncioTestCase):
    """Typing waits for a pause before recomputing."""

    async def asyncSetUp(self) -> None:
        self.session = SearchSession(_catalog(), debounce_seconds=0.05)
        await self.session.load()

    async def test_state_updates_immediately(self) -> None:
        self.session.set_search_text("choc")
        self.assertEqual(self.session.state.search_text, "choc")
        self.assertTrue(self.session.has_pending_recompute)
        self.assertEqual(len(self.session.results), 3)

    async def test_recompute_after_delay(self) -> None:
        self.session.set_search_text("choc")
        await asyncio.sleep(0.15)
        self.assertFalse(self.session.has_pending_recompute)
        self.assertEqual([p.id for p in self.session.results], ["2"])

    async def test_rapid_typing_recomputes_once(self) -> None:
        listener = MagicMock()
        self.session.subscribe(listener)
        for text in ("r", "ro", "ros", "rose"):
            self.session.set_search_text(text)
        await asyncio.sleep(0.15)
        listener.assert_called_once()
        self.assertEqual([p.id for p in self.session.results], ["1"])

    async def test_flush_applies_now(self) -> None:
        self.session.set_search_text("fraisier")
        self.session.flush()
        self.assertFalse(self.session.has_pending_recompute)
        self.assertEqual([p.id for p in self.session.results], ["3"])

    async def test_filter_change_supersedes_pending_search(self) -> None:
        """A category change applies the pending text at the same time."""
        self.session.set_search_text("roses")
        self.session.set_category("fleurs")
        self.assertFalse(self.session.has_pending_recompute)
        self.assertEqual([p.id for p in self.session.results], ["1"])
