# Overview: Per-customer session (token, user, cart) passed explicitly into services.

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from .errors import AuthorizationError, NotFoundError, ValidationError
from .models import CartLine, Product, User
from .services import pricing_service


class Cart:
    """Ordered cart lines keyed by product id."""

    def __init__(self, lines: Optional[list[CartLine]] = None):
        self._lines: dict[str, CartLine] = {}
        for line in lines or []:
            self.add(line.product, line.quantity)

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)

    def add(self, product: Product, quantity: int = 1) -> CartLine:
        pricing_service.validate_quantity(quantity)
        existing = self._lines.get(product.id)
        if existing:
            quantity += existing.quantity
        line = CartLine(product=product, quantity=quantity)
        self._lines[product.id] = line
        return line

    def update_quantity(self, product_id: str, quantity: int) -> Optional[CartLine]:
        """Set a line's quantity; zero or less removes the line."""
        if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity <= 0:
            self.remove(product_id)
            return None
        pricing_service.validate_quantity(quantity)
        existing = self._lines.get(product_id)
        if existing is None:
            return None
        line = CartLine(product=existing.product, quantity=quantity)
        self._lines[product_id] = line
        return line

    def remove(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def total(self) -> Decimal:
        return pricing_service.cart_total(self.lines)


def build_cart(items: list, catalogue: list[Product]) -> Cart:
    """Cart from request items ({productId, quantity}) priced off the live catalogue."""
    if not isinstance(items, list):
        raise ValidationError("items must be a list")
    by_id = {product.id: product for product in catalogue}
    cart = Cart()
    for item in items:
        if not isinstance(item, dict) or not item.get("productId"):
            raise ValidationError("each item needs a productId")
        product = by_id.get(str(item["productId"]))
        if product is None:
            raise NotFoundError(f"Product not found: {item['productId']}")
        cart.add(product, item.get("quantity", 1))
    return cart


@dataclass
class StorefrontSession:
    token: Optional[str] = None
    user: Optional[User] = None
    cart: Cart = field(default_factory=Cart)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return bool(self.user and self.user.is_admin)

    def add_to_cart(self, product: Product, quantity: int = 1) -> CartLine:
        if not self.is_authenticated:
            raise AuthorizationError("Please login to add items to cart")
        return self.cart.add(product, quantity)
