"""Build confirmed orders from cart contents and checkout details."""

from __future__ import annotations

import time
from typing import Iterable

from storefront.config import FALLBACK_DELIVERY_TIME, FALLBACK_ORDER_PREFIX, SHIPPING_FEE
from storefront.models import CartItem, Confirmation, ConfirmedOrder, OrderDetails, OrderedItem


def fallback_confirmation(now: float | None = None) -> Confirmation:
    """Confirmation used when the supplier cannot produce one."""
    millis = int((time.time() if now is None else now) * 1000)
    return Confirmation(
        order_number=f"{FALLBACK_ORDER_PREFIX}{str(millis)[-6:]}",
        estimated_delivery_time=FALLBACK_DELIVERY_TIME,
    )


def cart_subtotal(cart: Iterable[CartItem]) -> float:
    return sum(entry.price * entry.quantity for entry in cart)


def assemble_order(
    details: OrderDetails,
    cart: Iterable[CartItem],
    confirmation: Confirmation,
    shipping_fee: float = SHIPPING_FEE,
) -> ConfirmedOrder:
    """Snapshot the cart into a ConfirmedOrder with subtotal, fee and total."""
    entries = list(cart)
    if not entries:
        raise ValueError("Cannot assemble an order from an empty cart")

    subtotal = cart_subtotal(entries)
    return ConfirmedOrder(
        customer_name=details.customer_name,
        customer_phone=details.customer_phone,
        delivery_address=details.delivery_address,
        payment_method=details.payment_method,
        order_notes=details.order_notes,
        order_number=confirmation.order_number,
        estimated_delivery_time=confirmation.estimated_delivery_time,
        items=tuple(OrderedItem(name=entry.name, quantity=entry.quantity) for entry in entries),
        subtotal=subtotal,
        shipping_fee=shipping_fee,
        total=subtotal + shipping_fee,
    )


def format_items_line(order: ConfirmedOrder) -> str:
    """Flatten ordered items as ``name xQty`` joined by commas."""
    return ", ".join(f"{item.name} x{item.quantity}" for item in order.items)
