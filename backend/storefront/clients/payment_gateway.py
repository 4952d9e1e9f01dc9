# Overview: Payment gateway collaborator contract and checkout-window options.

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol, Union


@dataclass(frozen=True)
class PaymentConfirmation:
    payment_id: str
    order_token: str
    signature: str = ""


@dataclass(frozen=True)
class PaymentCancelled:
    reason: str = "dismissed"


PaymentResult = Union[PaymentConfirmation, PaymentCancelled]


class PaymentGateway(Protocol):
    """
    External checkout window.

    Opens the gateway's payment UI for `amount` against an opaque order
    token and reports either a confirmation (payment id + signature) or a
    cancellation when the customer dismisses the window.
    """

    def initiate_payment(self, amount: Decimal, order_token: str) -> PaymentResult:
        ...


class RelayedPayment:
    """
    Gateway result that already happened in the customer's browser.

    The checkout window runs client-side; its callback posts the
    confirmation (or nothing, on dismissal) along with the order.
    """

    def __init__(self, payment: Optional[dict]):
        self.payment = payment or {}

    def initiate_payment(self, amount: Decimal, order_token: str) -> PaymentResult:
        payment_id = self.payment.get("paymentId")
        if not payment_id:
            return PaymentCancelled(reason=self.payment.get("reason") or "dismissed")
        return PaymentConfirmation(
            payment_id=payment_id,
            order_token=self.payment.get("orderToken") or order_token,
            signature=self.payment.get("signature") or "",
        )


def to_minor_units(amount: Decimal) -> int:
    """Gateways take integer paise/cents."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def checkout_options(
    amount: Decimal,
    order_token: str,
    *,
    key_id: str,
    currency: str = "INR",
    merchant_name: str = "Illuminate",
    description: str = "Order payment",
    prefill: Optional[dict] = None,
    theme_color: str = "#06b6d4",
) -> dict:
    """Options handed to the gateway's checkout window."""
    options = {
        "key": key_id,
        "amount": to_minor_units(amount),
        "currency": currency,
        "name": merchant_name,
        "description": description,
        "order_id": order_token,
        "theme": {"color": theme_color},
    }
    if prefill:
        options["prefill"] = {k: v for k, v in prefill.items() if v}
    return options
