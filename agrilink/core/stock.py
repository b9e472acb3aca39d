"""Stock Computation — listing stock net of reserved offer quantities.

Invariants:
    - available = max(0, available_stock - reserved); never negative
    - reserved sums quantities of offers in RESERVING_STATUSES (pending, accepted)
    - Missing stock counts as 0
"""

from agrilink.core.errors import InsufficientStockError, ValidationError


def compute_available(available_stock: int | None, reserved: int | None) -> int:
    """Stock a new offer may still claim."""
    return max(0, (available_stock or 0) - (reserved or 0))


def validate_offer_quantity(quantity: int, available: int) -> None:
    """Raise if the requested quantity is non-positive or exceeds what is left."""
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than 0", field="quantity")
    if quantity > available:
        raise InsufficientStockError(available=available, requested=quantity)
