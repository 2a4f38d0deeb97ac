# sweetbloom/storage/cart_store.py

"""In-memory shopping cart with change subscriptions."""

import logging
from collections.abc import Callable

from sweetbloom.errors import EmptyCartError
from sweetbloom.models.cart_line import CartLine, CheckoutSummary
from sweetbloom.models.product import Product

logger = logging.getLogger("sweetbloom.cart")

CartListener = Callable[["CartStore"], None]


class CartStore:
    """The session's cart: one line per product id, insertion ordered.

    Not persisted.  Views subscribe to be told when lines change
    instead of polling.
    """

    def __init__(self) -> None:
        self._lines: dict[str, CartLine] = {}
        self._listeners: list[CartListener] = []

    # ── Subscriptions ────────────────────────────────────

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
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
                logger.error("Cart listener failed", exc_info=True)

    # ── Queries ──────────────────────────────────────────

    @property
    def lines(self) -> list[CartLine]:
        return [
            CartLine(product=line.product, quantity=line.quantity)
            for line in self._lines.values()
        ]

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def total_amount(self) -> float:
        return sum(
            (line.subtotal for line in self._lines.values()), 0.0
        )

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def quantity_of(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    # ── Mutations ────────────────────────────────────────

    def add(self, product: Product, quantity: int = 1) -> None:
        """Add *quantity* of *product*, merging with an existing line."""
        if quantity < 1:
            msg = f"quantity must be >= 1, got {quantity}"
            raise ValueError(msg)
        line = self._lines.get(product.id)
        if line is None:
            self._lines[product.id] = CartLine(product, quantity)
        else:
            line.quantity += quantity
        logger.debug(
            "Cart add %s x%d (now %d)",
            product.id,
            quantity,
            self._lines[product.id].quantity,
        )
        self._notify()

    def increment(self, product_id: str) -> None:
        line = self._lines.get(product_id)
        if line is None:
            logger.debug("Cart increment ignored, no line %s", product_id)
            return
        line.quantity += 1
        self._notify()

    def decrement(self, product_id: str) -> None:
        """Remove one unit; the line disappears when it reaches zero."""
        line = self._lines.get(product_id)
        if line is None:
            logger.debug("Cart decrement ignored, no line %s", product_id)
            return
        if line.quantity <= 1:
            del self._lines[product_id]
        else:
            line.quantity -= 1
        self._notify()

    def remove(self, product_id: str) -> None:
        if self._lines.pop(product_id, None) is None:
            logger.debug("Cart remove ignored, no line %s", product_id)
            return
        self._notify()

    def clear(self) -> None:
        if not self._lines:
            return
        self._lines.clear()
        logger.debug("Cart cleared")
        self._notify()

    def checkout(self) -> CheckoutSummary:
        """Snapshot the cart as an order and empty it."""
        if not self._lines:
            raise EmptyCartError()
        summary = CheckoutSummary(
            total_items=self.total_items,
            total_amount=self.total_amount,
            lines=self.lines,
        )
        logger.info(
            "Checkout: %d items, %.2f total",
            summary.total_items,
            summary.total_amount,
        )
        self.clear()
        return summary
