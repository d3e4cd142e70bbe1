"""Rendering helpers for restaurants, menus, cart lines and orders."""

from __future__ import annotations

from rich.text import Text

from storefront.models import CartItem, ConfirmedOrder, MenuItem, Restaurant
from storefront.notifications import Notification, NotificationKind


def badge_style(kind: NotificationKind) -> str:
    """Return a consistent badge style for notification kinds."""
    if kind is NotificationKind.ERROR:
        return "bold #ffffff on #b23a48"
    return "bold #0b1f0f on #5fbf72"


def format_price(amount: float) -> str:
    if float(amount).is_integer():
        return f"NT$ {int(amount)}"
    return f"NT$ {amount:.2f}"


def star_counts(rating: float) -> tuple[int, bool, int]:
    """Split a 0-5 rating into (full stars, half star, empty stars)."""
    rating = min(5.0, max(0.0, rating))
    full = int(rating)
    half = rating % 1 >= 0.5
    empty = 5 - full - (1 if half else 0)
    return full, half, empty


def star_rating(rating: float) -> Text:
    full, half, empty = star_counts(rating)
    text = Text()
    text.append("★" * full, style="bold #f5c518")
    if half:
        text.append("⯪", style="bold #f5c518")
    text.append("☆" * empty, style="#f5c518")
    return text


def format_restaurant(restaurant: Restaurant) -> Text:
    """Render a restaurant row: name, category, stars and delivery info."""
    text = Text()
    text.append(restaurant.name, style="bold")
    text.append(f"  {restaurant.category}  ", style="dim")
    text.append_text(star_rating(restaurant.rating))
    text.append(f" {restaurant.rating:.1f} ({restaurant.reviews})")
    text.append(f"  {restaurant.delivery_time}  最低 {format_price(restaurant.min_order)}", style="dim")
    return text


def format_menu_item(item: MenuItem) -> Text:
    text = Text()
    text.append(item.name)
    text.append(f"  {format_price(item.price)}", style="bold #e05a47")
    return text


def format_cart_line(entry: CartItem) -> Text:
    text = Text()
    text.append(entry.name)
    text.append(f"  x{entry.quantity}", style="bold")
    text.append(f"  {format_price(entry.line_total)}", style="dim")
    return text


def format_totals(subtotal: float, shipping_fee: float) -> Text:
    text = Text()
    text.append(f"小計 {format_price(subtotal)}\n")
    text.append(f"運費 {format_price(shipping_fee)}\n")
    text.append(f"總計 {format_price(subtotal + shipping_fee)}", style="bold")
    return text


def format_confirmation(order: ConfirmedOrder) -> Text:
    """Render the confirmation summary for a submitted order."""
    text = Text()
    text.append("訂單編號 ", style="dim")
    text.append(order.order_number, style="bold")
    text.append("\n預計送達 ", style="dim")
    text.append(order.estimated_delivery_time, style="bold")
    text.append(f"\n\n{order.customer_name}  {order.customer_phone}\n{order.delivery_address}\n")
    text.append(f"付款方式：{order.payment_method.value}\n")
    if order.order_notes:
        text.append(f"備註：{order.order_notes}\n")
    text.append("\n")
    for item in order.items:
        text.append(f"  {item.name} x{item.quantity}\n")
    text.append("\n")
    text.append_text(format_totals(order.subtotal, order.shipping_fee))
    return text


def format_notification(notification: Notification) -> Text:
    text = Text()
    label = "OK" if notification.kind is NotificationKind.SUCCESS else "!!"
    text.append(f" {label} ", style=badge_style(notification.kind))
    text.append(f" {notification.message}")
    return text
