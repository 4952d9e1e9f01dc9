# Overview: Immutable storefront records and their wire (camelCase JSON) shapes.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from .errors import ValidationError
from .time_utils import parse_iso_datetime, to_utc_z


# Display-only product fields seen across catalog generations (lamp specs
# vs. décor attributes). Pricing never reads them.
VARIANT_FIELDS = (
    "wattage",
    "lumens",
    "colorTemp",
    "lifespan",
    "material",
    "lightModes",
    "charging",
    "workingTime",
    "touchControl",
    "battery",
    "idealFor",
    "height",
    "specifications",
    "averageRating",
    "totalRatings",
    "sortOrder",
)


def to_decimal(value: Any, field_name: str = "value") -> Decimal:
    """Coerce JSON numbers/strings to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number")
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def _optional_decimal(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return to_decimal(value, field_name)


def _optional_text(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    # zip codes and tracking numbers sometimes arrive as JSON numbers
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value.strip() or None


def _wire_number(value: Optional[Decimal]):
    # Integral amounts go out as ints so the remote API sees 800, not 800.00
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


class OrderStatus(str, Enum):
    ORDER_PLACED = "Order Placed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value: Any) -> "OrderStatus":
        if isinstance(value, cls):
            return value
        label = str(value or "").strip()
        for status in cls:
            if status.value == label:
                return status
        raise ValidationError(
            f"Invalid status '{label}'. Must be one of: {', '.join(s.value for s in cls)}"
        )

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


@dataclass(frozen=True)
class BulkDiscountTier:
    min_quantity: int
    discount_percent: Decimal

    def to_dict(self) -> dict:
        return {"minQuantity": self.min_quantity, "discount": _wire_number(self.discount_percent)}

    @classmethod
    def from_dict(cls, data: dict) -> "BulkDiscountTier":
        try:
            min_quantity = int(data["minQuantity"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("bulk discount minQuantity must be an integer")
        return cls(
            min_quantity=min_quantity,
            discount_percent=to_decimal(data.get("discount"), "bulk discount"),
        )


@dataclass(frozen=True)
class Product:
    """
    A catalog product as far as pricing and display are concerned.

    Only base_price, discounted_price, bulk_discounts and tax_percent feed the
    price engine; schema-variant fields ride along in `attributes`.
    """
    id: str
    name: str
    base_price: Decimal
    discounted_price: Optional[Decimal] = None
    bulk_discounts: tuple[BulkDiscountTier, ...] = ()
    tax_percent: Optional[Decimal] = None
    in_stock: bool = True
    stock: int = 0
    category: str = ""
    description: str = ""
    images: tuple[str, ...] = ()
    attributes: dict = field(default_factory=dict, compare=False)

    @property
    def has_homepage_discount(self) -> bool:
        # Storefront falls back to list price whenever the promo price is falsy
        return bool(self.discounted_price)

    @property
    def display_price(self) -> Decimal:
        return self.discounted_price if self.has_homepage_discount else self.base_price

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": _wire_number(self.base_price),
            "discountedPrice": _wire_number(self.discounted_price),
            "bulkDiscounts": [tier.to_dict() for tier in self.bulk_discounts],
            "tax": _wire_number(self.tax_percent),
            "inStock": self.in_stock,
            "stock": self.stock,
            "category": self.category,
            "images": list(self.images),
        }
        data.update(self.attributes)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        if not isinstance(data, dict):
            raise ValidationError("Invalid product payload")
        if "price" not in data:
            raise ValidationError("product price is required")
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            name=data.get("name", ""),
            base_price=to_decimal(data["price"], "price"),
            discounted_price=_optional_decimal(data.get("discountedPrice"), "discountedPrice"),
            bulk_discounts=tuple(
                BulkDiscountTier.from_dict(tier) for tier in (data.get("bulkDiscounts") or [])
            ),
            tax_percent=_optional_decimal(data.get("tax"), "tax"),
            in_stock=bool(data.get("inStock", True)),
            stock=int(data.get("stock") or 0),
            category=data.get("category") or "",
            description=data.get("description") or "",
            images=tuple(data.get("images") or ()),
            attributes={k: data[k] for k in VARIANT_FIELDS if k in data},
        )


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str = ""
    is_admin: bool = False

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email, "name": self.name, "isAdmin": self.is_admin}

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        if not isinstance(data, dict):
            raise ValidationError("Invalid user payload")
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            email=data.get("email", ""),
            name=data.get("name", ""),
            is_admin=bool(data.get("isAdmin", False)),
        )


@dataclass(frozen=True)
class ShippingAddress:
    full_name: str
    email: str
    address: str
    city: str
    zip_code: str

    def to_dict(self) -> dict:
        return {
            "fullName": self.full_name,
            "email": self.email,
            "address": self.address,
            "city": self.city,
            "zipCode": self.zip_code,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShippingAddress":
        if not isinstance(data, dict):
            raise ValidationError("shippingAddress must be an object")
        return cls(
            full_name=_optional_text(data.get("fullName"), "fullName") or "",
            email=_optional_text(data.get("email"), "email") or "",
            address=_optional_text(data.get("address"), "address") or "",
            city=_optional_text(data.get("city"), "city") or "",
            zip_code=_optional_text(data.get("zipCode"), "zipCode") or "",
        )


@dataclass(frozen=True)
class OrderLine:
    product_ref: str
    product_name: str
    quantity: int
    product_price: Optional[Decimal] = None

    def to_dict(self) -> dict:
        data = {
            "product": self.product_ref,
            "productName": self.product_name,
            "quantity": self.quantity,
        }
        if self.product_price is not None:
            data["productPrice"] = _wire_number(self.product_price)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "OrderLine":
        product = data.get("product")
        if isinstance(product, dict):
            product = product.get("_id") or product.get("id")
        return cls(
            product_ref=str(product or ""),
            product_name=data.get("productName", ""),
            quantity=int(data.get("quantity") or 0),
            product_price=_optional_decimal(data.get("productPrice"), "productPrice"),
        )


@dataclass(frozen=True)
class StatusEntry:
    status: OrderStatus
    description: str
    date: datetime
    location: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "status": self.status.value,
            "description": self.description,
            "date": to_utc_z(self.date),
        }
        if self.location:
            data["location"] = self.location
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "StatusEntry":
        return cls(
            status=OrderStatus.parse(data.get("status")),
            description=data.get("description", ""),
            date=parse_iso_datetime(data.get("date")),
            location=data.get("location") or None,
        )


@dataclass(frozen=True)
class TrackingDetails:
    current_location: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    carrier: Optional[str] = None
    tracking_number: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not any(
            (self.current_location, self.estimated_delivery, self.carrier, self.tracking_number)
        )

    def to_dict(self) -> dict:
        data = {
            "currentLocation": self.current_location,
            "estimatedDelivery": to_utc_z(self.estimated_delivery),
            "carrier": self.carrier,
            "trackingNumber": self.tracking_number,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict) -> "TrackingDetails":
        if not isinstance(data, dict):
            raise ValidationError("trackingDetails must be an object")
        try:
            estimated_delivery = parse_iso_datetime(data.get("estimatedDelivery") or None)
        except ValueError:
            raise ValidationError("estimatedDelivery must be an ISO date")
        return cls(
            current_location=_optional_text(data.get("currentLocation"), "currentLocation"),
            estimated_delivery=estimated_delivery,
            carrier=_optional_text(data.get("carrier"), "carrier"),
            tracking_number=_optional_text(data.get("trackingNumber"), "trackingNumber"),
        )


@dataclass(frozen=True)
class Order:
    id: str
    status: OrderStatus
    status_history: tuple[StatusEntry, ...] = ()
    order_id: Optional[str] = None
    items: tuple[OrderLine, ...] = ()
    tracking_details: Optional[TrackingDetails] = None
    total_amount: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    shipping_address: Optional[ShippingAddress] = None
    created_at: Optional[datetime] = None

    @property
    def display_id(self) -> str:
        return self.order_id or self.id

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "orderId": self.order_id,
            "items": [item.to_dict() for item in self.items],
            "totalAmount": _wire_number(self.total_amount),
            "tax": _wire_number(self.tax),
            "shippingAddress": self.shipping_address.to_dict() if self.shipping_address else None,
            "status": self.status.value,
            "statusHistory": [entry.to_dict() for entry in self.status_history],
            "trackingDetails": self.tracking_details.to_dict() if self.tracking_details else None,
            "createdAt": to_utc_z(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        if not isinstance(data, dict):
            raise ValidationError("Invalid order payload")
        tracking = data.get("trackingDetails")
        shipping = data.get("shippingAddress")
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            order_id=data.get("orderId") or None,
            status=OrderStatus.parse(data.get("status")),
            status_history=tuple(
                StatusEntry.from_dict(entry) for entry in (data.get("statusHistory") or [])
            ),
            items=tuple(OrderLine.from_dict(item) for item in (data.get("items") or [])),
            tracking_details=TrackingDetails.from_dict(tracking) if tracking else None,
            total_amount=_optional_decimal(data.get("totalAmount"), "totalAmount"),
            tax=_optional_decimal(data.get("tax"), "tax"),
            shipping_address=ShippingAddress.from_dict(shipping) if shipping else None,
            created_at=parse_iso_datetime(data.get("createdAt")),
        )
