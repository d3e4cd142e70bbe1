"""Domain models for the storefront."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class View(str, Enum):
    """Screens the storefront can show."""

    RESTAURANTS = "restaurants"
    MENU = "menu"
    CART = "cart"
    CHECKOUT = "checkout"
    CONFIRMATION = "confirmation"


class PaymentMethod(str, Enum):
    """Accepted payment methods; the value is the label stored with the order."""

    CASH_ON_DELIVERY = "貨到付款"
    CREDIT_CARD = "信用卡"
    LINE_PAY = "LINE Pay"


@dataclass(frozen=True)
class Restaurant:
    """A restaurant listing produced by the data supplier."""

    id: str
    name: str
    category: str
    rating: float
    reviews: int
    delivery_time: str
    min_order: int
    image: str = ""


@dataclass(frozen=True)
class MenuItem:
    """An orderable dish belonging to one restaurant."""

    id: str
    name: str
    price: float
    restaurant_name: str = ""


@dataclass
class CartItem:
    """A menu item held in the cart with its quantity."""

    item: MenuItem
    quantity: int = 1

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def price(self) -> float:
        return self.item.price

    @property
    def line_total(self) -> float:
        return self.item.price * self.quantity


@dataclass(frozen=True)
class OrderDetails:
    """Customer-entered checkout details."""

    customer_name: str
    customer_phone: str
    delivery_address: str
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    order_notes: str = ""

    def missing_fields(self) -> list[str]:
        """Return the names of required fields left blank."""
        required = ("customer_name", "customer_phone", "delivery_address")
        return [name for name in required if not getattr(self, name).strip()]


@dataclass(frozen=True)
class Confirmation:
    """Order number and delivery estimate assigned at confirmation time."""

    order_number: str
    estimated_delivery_time: str


@dataclass(frozen=True)
class OrderedItem:
    """Name and quantity copied out of the cart when the order is placed."""

    name: str
    quantity: int


@dataclass(frozen=True)
class ConfirmedOrder:
    """A submitted order; read-only once created."""

    customer_name: str
    customer_phone: str
    delivery_address: str
    payment_method: PaymentMethod
    order_notes: str
    order_number: str
    estimated_delivery_time: str
    items: tuple[OrderedItem, ...]
    subtotal: float
    shipping_fee: float
    total: float
