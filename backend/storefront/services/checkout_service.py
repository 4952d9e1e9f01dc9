"""
Checkout: summary totals, order payload, and placing the order.

Prices computed here are what the customer sees. The remote store re-prices
every order, so the payload's productPrice values are advisory only.

Payment methods:
- "cod":    cash on delivery, amount due = grand total
- "online": gateway payment, amount due = grand total minus the flat
            online-payment discount (never below zero)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..clients.payment_gateway import PaymentCancelled, PaymentGateway
from ..errors import PaymentCancelledError, ValidationError
from ..models import CartLine, ShippingAddress
from . import pricing_service
from .pricing_service import quantize_money


PAYMENT_COD = "cod"
PAYMENT_ONLINE = "online"
PAYMENT_METHODS = (PAYMENT_COD, PAYMENT_ONLINE)

SHIPPING_FIELDS = ("full_name", "email", "address", "city", "zip_code")


@dataclass(frozen=True)
class CheckoutSummary:
    subtotal: Decimal
    tax: Decimal
    grand_total: Decimal
    payment_method: str
    amount_due: Decimal
    total_items: int

    def to_dict(self) -> dict:
        return {
            "subtotal": str(quantize_money(self.subtotal)),
            "tax": str(quantize_money(self.tax)),
            "grand_total": str(quantize_money(self.grand_total)),
            "payment_method": self.payment_method,
            "amount_due": str(quantize_money(self.amount_due)),
            "total_items": self.total_items,
        }


def _normalize_method(payment_method: str) -> str:
    method = (payment_method or "").strip().lower()
    if method not in PAYMENT_METHODS:
        raise ValidationError(
            f"Invalid payment method '{payment_method}'. Must be one of: {', '.join(PAYMENT_METHODS)}"
        )
    return method


def build_summary(
    lines: Iterable[CartLine],
    payment_method: str = PAYMENT_COD,
    default_tax_percent=pricing_service.DEFAULT_TAX_PERCENT,
    online_discount=pricing_service.ONLINE_PAYMENT_DISCOUNT,
) -> CheckoutSummary:
    lines = list(lines)
    if not lines:
        raise ValidationError("cart is empty")
    method = _normalize_method(payment_method)

    subtotal = pricing_service.cart_total(lines)
    tax = pricing_service.total_tax(lines, default_tax_percent)
    grand_total = subtotal + tax
    if method == PAYMENT_ONLINE:
        amount_due = pricing_service.online_payment_total(grand_total, online_discount)
    else:
        amount_due = grand_total

    return CheckoutSummary(
        subtotal=subtotal,
        tax=tax,
        grand_total=grand_total,
        payment_method=method,
        amount_due=amount_due,
        total_items=sum(line.quantity for line in lines),
    )


def validate_shipping(shipping: ShippingAddress) -> None:
    missing = [name for name in SHIPPING_FIELDS if not getattr(shipping, name)]
    if missing:
        raise ValidationError(
            f"Missing shipping fields: {', '.join(missing)}",
            details={"missing": missing},
        )


def build_order_payload(
    lines: Iterable[CartLine],
    shipping: ShippingAddress,
    payment_marker: dict,
) -> dict:
    validate_shipping(shipping)
    items = []
    for line in lines:
        unit = pricing_service.effective_unit_price(line.product, line.quantity)
        items.append({
            "product": line.product.id,
            "productName": line.product.name,
            "productPrice": float(quantize_money(unit)),
            "quantity": line.quantity,
        })
    if not items:
        raise ValidationError("cart is empty")
    return {
        "items": items,
        "shippingAddress": shipping.to_dict(),
        "paymentInfo": payment_marker,
    }


def place_order(
    client,
    session,
    shipping: ShippingAddress,
    payment_method: str,
    *,
    gateway: Optional[PaymentGateway] = None,
    default_tax_percent=pricing_service.DEFAULT_TAX_PERCENT,
    online_discount=pricing_service.ONLINE_PAYMENT_DISCOUNT,
    order_token: Optional[str] = None,
) -> dict:
    """
    Validate the cart, take payment if paying online, then create the order.

    Nothing is sent to the store if validation fails or the customer closes
    the payment window. The session cart is cleared only after the store
    accepts the order.

    Raises:
        ValidationError: empty cart, bad method, missing shipping fields
        PaymentCancelledError: customer dismissed the payment window
        NotFoundError / TransportError / AuthorizationError: from the store
    """
    lines = session.cart.lines
    summary = build_summary(lines, payment_method, default_tax_percent, online_discount)
    validate_shipping(shipping)

    if summary.payment_method == PAYMENT_ONLINE and summary.amount_due == 0:
        # Online discount covers the whole order; nothing to charge
        payment_marker = {"method": PAYMENT_ONLINE}
    elif summary.payment_method == PAYMENT_ONLINE:
        if gateway is None:
            raise ValidationError("Online payment is not available")
        token = order_token or f"order_{uuid.uuid4().hex[:14]}"
        result = gateway.initiate_payment(summary.amount_due, token)
        if isinstance(result, PaymentCancelled):
            raise PaymentCancelledError("Payment cancelled", details={"reason": result.reason})
        payment_marker = {
            "method": PAYMENT_ONLINE,
            "paymentId": result.payment_id,
            "orderToken": result.order_token,
            "signature": result.signature,
        }
    else:
        payment_marker = {"method": PAYMENT_COD}

    payload = build_order_payload(lines, shipping, payment_marker)
    order_id = client.create_order(payload)
    session.cart.clear()

    return {
        "orderId": order_id,
        "summary": summary.to_dict(),
        "payment": payment_marker,
    }
