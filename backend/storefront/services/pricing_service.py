# Overview: Price engine for product pages, cart and checkout; pure functions, no I/O.

"""
Storefront pricing rules

================================================================================
Two discounts stack on a product:

1. Homepage discount: a flat promotional `discounted_price` shown on listing
   pages. When set it replaces the list price as the starting point.
2. Bulk discount: quantity tiers ({min_quantity, discount_percent}). Among
   the tiers the quantity qualifies for, the one with the HIGHEST percent
   wins (not the one with the highest threshold).

Charged unit price compounds the two:

    unit = (discounted_price or base_price) * (1 - tier_percent / 100)

The "% OFF" badge adds them instead (homepage % + tier %), so it can read
higher than the discount actually charged.

Amounts are Decimal and are never rounded inside the engine; callers use
quantize_money() when rendering.
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..errors import ValidationError
from ..models import BulkDiscountTier, CartLine, Product, to_decimal


HUNDRED = Decimal("100")
CENT = Decimal("0.01")
DEFAULT_TAX_PERCENT = Decimal("10")
ONLINE_PAYMENT_DISCOUNT = Decimal("50")


@dataclass(frozen=True)
class PricedLine:
    product: Product
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    applied_tier: Optional[BulkDiscountTier]
    total_discount_percent: Decimal
    savings: Decimal

    def to_dict(self) -> dict:
        return {
            "product_id": self.product.id,
            "name": self.product.name,
            "quantity": self.quantity,
            "base_price": str(quantize_money(self.product.base_price)),
            "unit_price": str(quantize_money(self.unit_price)),
            "line_total": str(quantize_money(self.line_total)),
            "bulk_discount_percent": (
                str(self.applied_tier.discount_percent) if self.applied_tier else None
            ),
            "total_discount_percent": badge_percent(self.total_discount_percent),
            "savings": str(quantize_money(self.savings)),
        }


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def badge_percent(value: Decimal) -> int:
    """Whole-number percent for '% OFF' badges (half rounds up)."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("invalid quantity", details={"quantity": quantity})
    if quantity < 1:
        raise ValidationError("invalid quantity", details={"quantity": quantity})
    return quantity


def select_bulk_tier(product: Product, quantity: int) -> Optional[BulkDiscountTier]:
    """
    Pick the bulk tier that applies at `quantity`.

    The highest discount among qualifying tiers wins; on an exact tie the
    first tier in storage order is kept.
    """
    validate_quantity(quantity)
    selected = None
    for tier in product.bulk_discounts:
        if quantity < tier.min_quantity:
            continue
        if selected is None or tier.discount_percent > selected.discount_percent:
            selected = tier
    return selected


def homepage_discount_percent(product: Product) -> Decimal:
    if not product.has_homepage_discount or product.base_price <= 0:
        return Decimal("0")
    return (product.base_price - product.discounted_price) / product.base_price * HUNDRED


def effective_unit_price(product: Product, quantity: int) -> Decimal:
    base = product.display_price
    tier = select_bulk_tier(product, quantity)
    if tier is None:
        return base
    return base * (1 - tier.discount_percent / HUNDRED)


def line_total(product: Product, quantity: int) -> Decimal:
    return effective_unit_price(product, quantity) * quantity


def total_discount_percent(product: Product, quantity: int) -> Decimal:
    """Badge percent: homepage % plus the applied tier %, summed not compounded."""
    tier = select_bulk_tier(product, quantity)
    bulk = tier.discount_percent if tier else Decimal("0")
    return homepage_discount_percent(product) + bulk


def savings(product: Product, quantity: int) -> Decimal:
    return product.base_price * quantity - line_total(product, quantity)


def price_line(product: Product, quantity: int) -> PricedLine:
    tier = select_bulk_tier(product, quantity)
    unit = effective_unit_price(product, quantity)
    total = unit * quantity
    return PricedLine(
        product=product,
        quantity=quantity,
        unit_price=unit,
        line_total=total,
        applied_tier=tier,
        total_discount_percent=total_discount_percent(product, quantity),
        savings=product.base_price * quantity - total,
    )


def display_tiers(product: Product) -> list[BulkDiscountTier]:
    """Tiers for the 'Buy N or more' list, smallest threshold first."""
    return sorted(product.bulk_discounts, key=lambda tier: tier.min_quantity)


def cart_total(lines: Iterable[CartLine]) -> Decimal:
    total = Decimal("0")
    for line in lines:
        total += line_total(line.product, line.quantity)
    return total


def total_tax(lines: Iterable[CartLine], default_tax_percent=DEFAULT_TAX_PERCENT) -> Decimal:
    """
    Tax over all lines at each product's own rate, else `default_tax_percent`.

    Pass 0 as the default for catalogs that carry no tax.
    """
    default_rate = to_decimal(default_tax_percent, "default_tax_percent")
    tax = Decimal("0")
    for line in lines:
        rate = line.product.tax_percent if line.product.tax_percent is not None else default_rate
        tax += effective_unit_price(line.product, line.quantity) * line.quantity * rate / HUNDRED
    return tax


def online_payment_total(grand_total, discount=ONLINE_PAYMENT_DISCOUNT) -> Decimal:
    """Amount charged when paying online: a flat discount off the grand total."""
    grand_total = to_decimal(grand_total, "grand_total")
    discount = to_decimal(discount, "discount")
    if grand_total > discount:
        return grand_total - discount
    return Decimal("0")
