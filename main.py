# main.py

"""Entry point for the SweetBloom storefront (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Mapping, Sequence

from sweetbloom.config.logging_config import setup_logging
from sweetbloom.config.settings import Settings

logger = logging.getLogger("sweetbloom.main")


def _ids(registry: Sequence[Mapping[str, object]]) -> list[str]:
    """The ``id`` of every entry in a Settings registry."""
    return [str(entry["id"]) for entry in registry]


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    categories = _ids(Settings.CATEGORIES)
    price_ranges = _ids(Settings.PRICE_RANGES)
    sorts = _ids(Settings.SORT_OPTIONS)

    parser = argparse.ArgumentParser(
        prog="sweetbloom",
        description="SweetBloom storefront: flowers, chocolates, cakes.",
        epilog=(
            f"Categories: {', '.join(categories)}. "
            f"Price ranges: {', '.join(price_ranges)}."
        ),
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Free-text search. Omit (with no other option) for the TUI.",
    )
    parser.add_argument(
        "-c",
        "--category",
        choices=categories,
        default="all",
        help="Category filter (default: all).",
    )
    parser.add_argument(
        "-p",
        "--price-range",
        choices=price_ranges,
        default="all",
        dest="price_range",
        help="Price band filter (default: all).",
    )
    parser.add_argument(
        "--sort",
        choices=sorts,
        default="default",
        help="Sort order (default: catalog order).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--product",
        default=None,
        metavar="ID",
        help="Show a single product by id.",
    )
    parser.add_argument(
        "--favorites",
        action="store_true",
        default=False,
        help="List saved favorites.",
    )
    parser.add_argument(
        "--clear-favorites",
        action="store_true",
        default=False,
        dest="clear_favorites",
        help="Remove every saved favorite.",
    )
    parser.add_argument(
        "--login",
        default=None,
        metavar="EMAIL",
        help="Sign in (password is prompted).",
    )
    parser.add_argument(
        "--register",
        default=None,
        metavar="EMAIL",
        help="Create an account (name and password are prompted).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the remote services.",
    )
    return parser


def _wants_browse(args: argparse.Namespace) -> bool:
    """True when any browse option was given on the command line."""
    return (
        args.query is not None
        or args.category != "all"
        or args.price_range != "all"
        or args.sort != "default"
    )


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from sweetbloom.ui.app import SweetBloomApp

    try:
        app = SweetBloomApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("SweetBloom TUI shutting down")


def _run_cli(args: argparse.Namespace) -> int:
    """Dispatch a headless command and return its exit code."""
    from sweetbloom.cli import runner

    if args.health:
        return asyncio.run(runner.run_health_check())
    if args.login:
        return asyncio.run(runner.cli_login(args.login))
    if args.register:
        return asyncio.run(runner.cli_register(args.register))
    if args.clear_favorites:
        return asyncio.run(runner.cli_clear_favorites())
    if args.favorites:
        return asyncio.run(runner.cli_list_favorites(args.output_format))
    if args.product:
        return asyncio.run(
            runner.cli_show_product(args.product, args.output_format)
        )

    from sweetbloom.storage.favorites_store import FavoritesStore

    favorites = FavoritesStore()
    try:
        return asyncio.run(
            runner.cli_browse(
                query=args.query,
                category=args.category,
                price_range=args.price_range,
                sort=args.sort,
                output_format=args.output_format,
                favorites=favorites,
            )
        )
    finally:
        favorites.close()


def main() -> None:
    """Route to TUI (no args) or a headless command."""
    parser = _build_parser()
    args = parser.parse_args()

    headless = (
        args.health
        or args.login
        or args.register
        or args.clear_favorites
        or args.favorites
        or args.product
        or _wants_browse(args)
    )
    log_file = setup_logging(headless=bool(headless))
    logger.info("SweetBloom starting, log file: %s", log_file)

    if not headless:
        _run_tui()
        return

    sys.exit(_run_cli(args))


if __name__ == "__main__":
    main()
