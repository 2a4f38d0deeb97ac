# sweetbloom/cli/runner.py

"""Headless CLI runner: browse, product detail, favorites, auth, health."""

import json
import logging
import sys

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from sweetbloom.errors import SweetBloomError
from sweetbloom.models.product import Product, format_price
from sweetbloom.models.query_state import QueryState
from sweetbloom.services.auth_service import AuthService
from sweetbloom.services.catalog_service import SOURCE_FALLBACK, CatalogService
from sweetbloom.services.query_pipeline import QueryPipeline
from sweetbloom.storage.favorites_store import FavoritesStore

logger = logging.getLogger("sweetbloom.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _products_to_dicts(products: list[Product]) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [p.to_dict() for p in products]


def _emit_json(data: object) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_table(
    products: list[Product],
    title: str = "Produits",
    favorite_ids: set[str] | None = None,
) -> None:
    """Render a Rich table of products to stdout, in the given order."""
    favorites = favorite_ids or set()
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold magenta",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="dim")
    table.add_column("Produit", max_width=50)
    table.add_column("Prix", justify="right", style="green")
    table.add_column("Note", justify="center")
    table.add_column("Catégorie", style="magenta")
    table.add_column("♥", justify="center", style="red")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.id,
            p.title[:50],
            format_price(p.price),
            f"{p.rating:.1f}" if p.rating is not None else "—",
            p.category,
            "♥" if p.id in favorites else "",
        )

    Console().print(table)


async def cli_browse(
    query: str | None,
    category: str,
    price_range: str,
    sort: str,
    output_format: str,
    catalog: CatalogService | None = None,
    favorites: FavoritesStore | None = None,
) -> int:
    """Run the catalog query pipeline once and print the result."""
    catalog = catalog or CatalogService()
    state = QueryState(
        category=category,
        price_range=price_range,
        sort=sort,
        search_text=query or "",
    )

    _err.print(
        f"[bold]Catalogue[/bold] [dim]catégorie={category} "
        f"prix={price_range} tri={sort}[/dim]"
        + (f"  [bold]recherche:[/bold] {query}" if query else "")
    )

    products = await catalog.get_all()
    result = QueryPipeline.run(products, state)

    if catalog.last_source == SOURCE_FALLBACK and catalog.remote_enabled:
        _err.print("[yellow]Catalogue distant indisponible, données locales.[/yellow]")

    if not result.products:
        _err.print("[yellow]Aucun produit trouvé.[/yellow]")
        if output_format != "table":
            _emit_json([])
        return 0

    _err.print(
        f"[green]✓ {len(result.products)} produits"
        f" sur {result.total_before_filter}[/green]"
    )

    if output_format == "table":
        favorite_ids: set[str] = set()
        if favorites is not None:
            favorite_ids = set(await favorites.ids())
        _print_table(result.products, favorite_ids=favorite_ids)
    else:
        _emit_json(_products_to_dicts(result.products))
    return 0


async def cli_show_product(
    product_id: str,
    output_format: str,
    catalog: CatalogService | None = None,
) -> int:
    """Print one product; exit code 1 when the id is unknown."""
    catalog = catalog or CatalogService()
    product = await catalog.get_by_id(product_id)
    if product is None:
        _err.print(f"[red]Produit introuvable: {product_id}[/red]")
        return 1

    if output_format == "table":
        _print_table([product], title=product.title)
        if product.description:
            Console().print(product.description)
    else:
        _emit_json(product.to_dict())
    return 0


async def cli_list_favorites(
    output_format: str,
    favorites: FavoritesStore | None = None,
) -> int:
    """Print the persisted favorites."""
    store = favorites or FavoritesStore()
    try:
        products = await store.get_all()
    finally:
        if favorites is None:
            store.close()
    if not products:
        _err.print("[yellow]Aucun favori pour le moment.[/yellow]")
        return 0

    if output_format == "table":
        _print_table(
            products,
            title="Mes favoris",
            favorite_ids={p.id for p in products},
        )
    else:
        _emit_json(_products_to_dicts(products))
    return 0


async def cli_clear_favorites(
    favorites: FavoritesStore | None = None,
) -> int:
    store = favorites or FavoritesStore()
    try:
        await store.clear()
    finally:
        if favorites is None:
            store.close()
    _err.print("[green]✓ Favoris supprimés[/green]")
    return 0


async def cli_login(
    email: str,
    auth: AuthService | None = None,
) -> int:
    """Prompt for a password and sign in."""
    auth = auth or AuthService()
    password = Prompt.ask("Mot de passe", password=True, console=_err)
    try:
        session = await auth.login(email, password)
    except SweetBloomError as exc:
        _err.print(f"[red]Erreur: {exc.message}[/red]")
        return 1
    _err.print(f"[green]✓ Connecté en tant que {session.email}[/green]")
    return 0


async def cli_register(
    email: str,
    auth: AuthService | None = None,
) -> int:
    """Prompt for name and passwords, then create the account."""
    auth = auth or AuthService()
    name = Prompt.ask("Nom complet", console=_err)
    password = Prompt.ask("Mot de passe", password=True, console=_err)
    confirm = Prompt.ask(
        "Confirmer le mot de passe", password=True, console=_err
    )
    try:
        session = await auth.register(name, email, password, confirm)
    except SweetBloomError as exc:
        _err.print(f"[red]Erreur: {exc.message}[/red]")
        return 1
    _err.print(f"[green]✓ Compte créé avec succès pour {session.email}[/green]")
    return 0


async def run_health_check() -> int:
    """Run connectivity health check on the remote services."""
    from sweetbloom.services.health_checker import HealthChecker

    _err.print("[bold]Vérification des services distants...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Service Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Service", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        elif r.status == "disabled":
            status = "[dim]— DISABLED[/dim]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(r.service, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
