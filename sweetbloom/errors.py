# sweetbloom/errors.py

"""Exception hierarchy shared by the storefront services.

Every message carried by these exceptions is safe to show to the user;
technical detail goes to the log, not into ``str(exc)``.
"""


class SweetBloomError(Exception):
    """Base class for classified storefront errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DataFetchError(SweetBloomError):
    """The remote document store could not be reached or answered badly."""

    def __init__(
        self,
        message: str = "Impossible de charger les produits.",
        source: str = "",
    ) -> None:
        super().__init__(message)
        self.source = source


class NotFoundError(SweetBloomError):
    """A requested product id does not exist."""

    def __init__(self, product_id: str) -> None:
        super().__init__("Produit introuvable.")
        self.product_id = product_id


class ValidationError(SweetBloomError):
    """A form failed client-side checks; nothing was sent."""


class AuthError(SweetBloomError):
    """The identity service rejected a login or registration."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class EmptyCartError(SweetBloomError):
    """Checkout was requested on an empty cart."""

    def __init__(self) -> None:
        super().__init__("Votre panier est vide.")
