# sweetbloom/models/cart_line.py

"""Cart line and checkout summary models."""

from dataclasses import dataclass, field

from sweetbloom.models.product import Product


@dataclass
class CartLine:
    """One product-plus-quantity entry in the shopping cart."""

    product: Product
    quantity: int = 1

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity


@dataclass(frozen=True)
class CheckoutSummary:
    """Snapshot of the cart taken when an order is placed."""

    total_items: int
    total_amount: float
    lines: list[CartLine] = field(
        default_factory=lambda: list[CartLine]()
    )
