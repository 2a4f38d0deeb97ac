# sweetbloom/ui/app.py

"""Terminal storefront for the SweetBloom catalog."""

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from sweetbloom.config.settings import Settings
from sweetbloom.errors import EmptyCartError, SweetBloomError
from sweetbloom.models.product import Product, format_price
from sweetbloom.services.catalog_service import CatalogService
from sweetbloom.services.search_session import SearchSession
from sweetbloom.storage.cart_store import CartStore
from sweetbloom.storage.favorites_store import FavoritesStore

logger = logging.getLogger("sweetbloom.ui")


def _options(
    registry: Sequence[Mapping[str, object]],
) -> list[tuple[str, str]]:
    """(label, id) pairs for a Select built from a Settings registry."""
    return [(str(entry["label"]), str(entry["id"])) for entry in registry]


class SweetBloomApp(App[object]):
    """Terminal storefront: browse, filter, favorites and cart."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quitter"),
        Binding("a", "add_to_cart", "Ajouter"),
        Binding("d", "remove_one", "Retirer"),
        Binding("f", "toggle_favorite", "Favori"),
        Binding("x", "clear_cart", "Vider panier"),
        Binding("o", "checkout", "Commander"),
        Binding("r", "refresh", "Rafraîchir"),
    ]

    def __init__(
        self,
        catalog: CatalogService | None = None,
        cart: CartStore | None = None,
        favorites: FavoritesStore | None = None,
        debounce_seconds: float | None = None,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.catalog = catalog or CatalogService()
        self.cart = cart or CartStore()
        self.favorites = favorites or FavoritesStore()
        if debounce_seconds is None:
            debounce_seconds = self.settings.SEARCH_DEBOUNCE_SECONDS
        self.search = SearchSession(
            self.catalog, debounce_seconds=debounce_seconds
        )
        self.favorite_ids: set[str] = set()
        self._unsubscribers: list[Callable[[], None]] = []

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static(
                "🌸 SweetBloom · Fleurs, chocolats et gâteaux",
                id="title",
            ),

            # Search Bar
            Horizontal(
                Input(
                    placeholder="Rechercher un produit...",
                    id="search_input",
                ),
                Button("Rafraîchir", variant="primary", id="refresh_btn"),
                id="search_bar",
            ),

            # Category, price band and sort pickers
            Horizontal(
                Select(
                    _options(self.settings.CATEGORIES),
                    value="all",
                    allow_blank=False,
                    id="category_select",
                ),
                Select(
                    _options(self.settings.PRICE_RANGES),
                    value="all",
                    allow_blank=False,
                    id="price_select",
                ),
                Select(
                    _options(self.settings.SORT_OPTIONS),
                    value="default",
                    allow_blank=False,
                    id="sort_select",
                ),
                id="filters",
            ),

            Static("Chargement...", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Static("", id="cart_summary"),
            id="main_container",
        )
        yield Footer()

    async def on_mount(self) -> None:
        """Configure the table, wire subscriptions and load the catalog."""
        table = self._table()
        table.add_columns("Produit", "Prix", "Note", "Catégorie", "♥")

        self._unsubscribers.append(
            self.search.subscribe(lambda _session: self.populate_table())
        )
        self._unsubscribers.append(
            self.cart.subscribe(lambda _cart: self.update_cart_summary())
        )
        self.update_cart_summary()

        await self.load_favorites()
        await self.search.load()

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.favorites.close()

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )

    async def load_favorites(self) -> None:
        """Refresh the set of favorite ids used for the ♥ column."""
        try:
            self.favorite_ids = set(await self.favorites.ids())
        except (SweetBloomError, OSError):
            logger.error("Failed to read favorites", exc_info=True)
            self.notify("Favoris indisponibles", severity="error")

    # ── Input events ─────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        """Typing updates the search text; results follow after a pause."""
        if event.input.id == "search_input":
            self.search.set_search_text(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter applies the search text without waiting."""
        if event.input.id == "search_input":
            self.search.flush()

    def on_select_changed(self, event: Select.Changed) -> None:
        value = str(event.value)
        if event.select.id == "category_select":
            self.search.set_category(value)
        elif event.select.id == "price_select":
            self.search.set_price_range(value)
        elif event.select.id == "sort_select":
            self.search.set_sort(value)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "refresh_btn":
            await self.action_refresh()

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Show the selected product's details."""
        product = self._product_at(event.cursor_row)
        if product is None:
            return
        details = f"{product.title} · {format_price(product.price)}"
        if product.description:
            details += f"\n{product.description}"
        self.notify(details, title="Détails")

    # ── Rendering ────────────────────────────────────────

    def populate_table(self) -> None:
        """Fill the DataTable and status line from the search session."""
        table = self._table()
        status = self.query_one("#status", Static)
        table.clear()

        if self.search.loading:
            status.update("⏳ Chargement des produits...")
            return
        if self.search.error:
            status.update(f"❌ {self.search.error} (r pour réessayer)")
            return

        results = self.search.results
        if not results:
            status.update("Aucun produit trouvé")
            return

        for p in results:
            table.add_row(
                p.title[:60],
                Text(format_price(p.price), style="bold green"),
                f"⭐ {p.rating:.1f}" if p.rating is not None else "",
                p.category,
                Text("♥", style="red") if p.id in self.favorite_ids else "",
            )
        status.update(
            f"✅ {len(results)} produits sur "
            f"{self.search.result.total_before_filter}"
        )

    def update_cart_summary(self) -> None:
        summary = self.query_one("#cart_summary", Static)
        if self.cart.is_empty:
            summary.update("🛒 Panier vide")
            return
        summary.update(
            f"🛒 {self.cart.total_items} article(s) · "
            f"{format_price(self.cart.total_amount)}"
        )

    def _product_at(self, row: int) -> Product | None:
        results = self.search.results
        if 0 <= row < len(results):
            return results[row]
        return None

    def _selected_product(self) -> Product | None:
        product = self._product_at(self._table().cursor_row)
        if product is None:
            self.notify("Aucun produit sélectionné", severity="warning")
        return product

    # ── Actions ──────────────────────────────────────────

    def action_add_to_cart(self) -> None:
        """Add one unit of the highlighted product to the cart."""
        product = self._selected_product()
        if product is None:
            return
        self.cart.add(product)
        self.notify(f"{product.title} ajouté au panier")

    def action_remove_one(self) -> None:
        """Remove one unit of the highlighted product from the cart."""
        product = self._selected_product()
        if product is None:
            return
        self.cart.decrement(product.id)

    async def action_toggle_favorite(self) -> None:
        """Add or remove the highlighted product from favorites."""
        product = self._selected_product()
        if product is None:
            return
        try:
            added = await self.favorites.toggle(product)
        except (SweetBloomError, OSError):
            logger.error("Failed to toggle favorite", exc_info=True)
            self.notify("Impossible de modifier les favoris", severity="error")
            return

        if added:
            self.favorite_ids.add(product.id)
            self.notify(f"{product.title} ajouté aux favoris")
        else:
            self.favorite_ids.discard(product.id)
            self.notify(f"{product.title} retiré des favoris")
        self.populate_table()

    def action_clear_cart(self) -> None:
        self.cart.clear()
        self.notify("Panier vidé")

    def action_checkout(self) -> None:
        """Place the order for the current cart contents."""
        try:
            summary = self.cart.checkout()
        except EmptyCartError as exc:
            self.notify(exc.message, severity="warning")
            return
        self.notify(
            f"Merci ! Commande de {summary.total_items} article(s) "
            f"pour {format_price(summary.total_amount)}"
        )

    async def action_refresh(self) -> None:
        """Reload the catalog and favorites."""
        await self.load_favorites()
        if not await self.search.refresh() and self.search.error:
            self.notify(self.search.error, severity="error")
