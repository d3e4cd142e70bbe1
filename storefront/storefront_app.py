"""Main Textual app class."""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.widgets import Header, Static

from storefront.api_key_modal import ApiKeyModal
from storefront.checkout_modal import CheckoutModal
from storefront.config import NOTIFICATION_TIMEOUT_SECONDS
from storefront.constant import (
    MSG_API_KEY_SAVED,
    PLACEHOLDER_EMPTY_CART,
    PLACEHOLDER_EMPTY_MENU,
    PLACEHOLDER_LOADING_CONFIRMATION,
    PLACEHOLDER_LOADING_MENU,
    PLACEHOLDER_LOADING_RESTAURANTS,
    PLACEHOLDER_PICK_RESTAURANT,
    PLACEHOLDER_SUBMITTING,
)
from storefront.controller import Storefront, StorefrontSnapshot
from storefront.credentials import load_api_key, save_api_key
from storefront.models import OrderDetails, View
from storefront.rendering import (
    format_cart_line,
    format_confirmation,
    format_menu_item,
    format_notification,
    format_price,
    format_restaurant,
    format_totals,
)
from storefront.supplier import DataSupplier, GeminiSupplier

logger = logging.getLogger(__name__)

_TITLES = {
    View.RESTAURANTS: "餐廳列表",
    View.MENU: "菜單",
    View.CART: "購物車",
    View.CHECKOUT: "結帳",
    View.CONFIRMATION: "訂單確認",
}

_HELP = {
    View.RESTAURANTS: "J/K/↑/↓ move. Enter open menu. C cart. R reload. Ctrl+Q quit.",
    View.MENU: "J/K/↑/↓ move. Enter add to cart. C cart. Esc/B back. H home.",
    View.CART: "J/K/↑/↓ move. +/- quantity. D remove. O checkout. Esc/B back.",
    View.CHECKOUT: "Enter edit details. Esc/B back to cart.",
    View.CONFIRMATION: "N new order. H home.",
}


class StorefrontApp(App):
    """A Textual app for browsing restaurants, building a cart and placing orders."""

    TITLE = "Storefront"
    SUB_TITLE = "美食外送"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #view-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #cart-pane {
        width: 1fr;
        border: round $secondary;
        padding: 1;
    }

    #view-body {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #notice {
        height: 1;
        padding: 0 1;
    }

    #help {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    selected_index = reactive(0)

    BINDINGS = [
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("j", "move_cursor(1)", "Next"),
        ("enter", "activate", "Select"),
        ("c", "open_cart", "Cart"),
        ("escape", "back", "Back"),
        ("b", "back", "Back"),
        ("h", "home", "Home"),
        ("plus", "change_quantity(1)", "More"),
        ("minus", "change_quantity(-1)", "Less"),
        ("d", "remove_item", "Remove"),
        ("o", "checkout", "Checkout"),
        ("n", "new_order", "New order"),
        ("r", "reload", "Reload"),
        ("x", "dismiss_notice", "Dismiss"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        controller: Storefront | None = None,
        api_key_loader: Callable[[], str | None] = load_api_key,
        api_key_saver: Callable[[str], object] = save_api_key,
        supplier_factory: Callable[[str], DataSupplier] = lambda key: GeminiSupplier(api_key=key),
    ) -> None:
        super().__init__()
        self.controller = controller or Storefront()
        self._api_key_loader = api_key_loader
        self._api_key_saver = api_key_saver
        self._supplier_factory = supplier_factory
        self._last_view = self.controller.view
        self._timed_notification_id: int | None = None
        self._last_details: OrderDetails | None = None
        self.controller.subscribe(self._on_state)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="view-pane"):
                yield Static(id="view-title", classes="pane-title")
                yield Static(id="view-body")
            with Vertical(id="cart-pane"):
                yield Static("購物車", classes="pane-title")
                yield Static(id="cart-summary")
        yield Static(id="notice")
        yield Static(id="help")

    def on_mount(self) -> None:
        if self.controller.supplier is None:
            api_key = self._api_key_loader()
            if api_key:
                self.controller.configure_supplier(self._supplier_factory(api_key))

        if self.controller.needs_credential:
            logger.info("no API key found; prompting")
            self._refresh_all()
            self.push_screen(ApiKeyModal(), callback=self._on_api_key)
            return

        self._refresh_all()
        self._start_restaurant_load()

    def _on_api_key(self, api_key: str | None) -> None:
        if not api_key:
            self.push_screen(ApiKeyModal(), callback=self._on_api_key)
            return
        try:
            self._api_key_saver(api_key)
        except (OSError, ValueError) as exc:
            logger.warning("could not store API key error=%r", exc)
        self.controller.configure_supplier(self._supplier_factory(api_key))
        self.controller.notifications.success(MSG_API_KEY_SAVED)
        self._start_restaurant_load()

    def _start_restaurant_load(self) -> None:
        self.run_worker(self.controller.load_restaurants(), group="catalog")

    def _modal_open(self) -> bool:
        return isinstance(self.screen, (ApiKeyModal, CheckoutModal))

    def _busy(self) -> bool:
        return self._modal_open() or self.controller.snapshot().loading

    def _on_state(self, snapshot: StorefrontSnapshot) -> None:
        if snapshot.view is not self._last_view:
            self._last_view = snapshot.view
            self.selected_index = 0

        notification = snapshot.notification
        if notification is not None and notification.id != self._timed_notification_id:
            self._timed_notification_id = notification.id
            self.set_timer(
                NOTIFICATION_TIMEOUT_SECONDS,
                partial(self.controller.notifications.dismiss, notification.id),
            )
        self._refresh_all(snapshot)

    def watch_selected_index(self) -> None:
        self._refresh_all()

    # Actions

    def action_move_cursor(self, delta: int) -> None:
        if self._modal_open():
            return
        rows = self._row_count(self.controller.snapshot())
        if not rows:
            self.selected_index = 0
            return
        self.selected_index = (self.selected_index + delta) % rows

    def action_activate(self) -> None:
        if self._busy():
            return
        snapshot = self.controller.snapshot()

        if snapshot.view is View.RESTAURANTS:
            if not snapshot.restaurants:
                return
            restaurant = snapshot.restaurants[min(self.selected_index, len(snapshot.restaurants) - 1)]
            self.run_worker(self.controller.select_restaurant(restaurant), group="catalog")
            return

        if snapshot.view is View.MENU:
            if not snapshot.menu:
                return
            self.controller.add_item(snapshot.menu[min(self.selected_index, len(snapshot.menu) - 1)])
            return

        if snapshot.view is View.CART:
            self.action_checkout()
            return

        if snapshot.view is View.CHECKOUT:
            self._open_checkout_form()
            return

        if snapshot.view is View.CONFIRMATION:
            self.action_new_order()

    def action_open_cart(self) -> None:
        if self._busy():
            return
        self.controller.open_cart()

    def action_back(self) -> None:
        if self._busy():
            return
        view = self.controller.view
        if view is View.MENU:
            self.controller.back_to_restaurants()
        elif view is View.CART:
            self.controller.back_from_cart()
        elif view is View.CHECKOUT:
            self.controller.back_to_cart()

    def action_home(self) -> None:
        if self._modal_open() or self.controller.snapshot().submitting:
            return
        self.controller.home()

    def action_change_quantity(self, delta: int) -> None:
        if self._busy() or self.controller.view is not View.CART:
            return
        entry = self._selected_cart_entry()
        if entry is None:
            return
        self.controller.set_quantity(entry.id, entry.quantity + delta)

    def action_remove_item(self) -> None:
        if self._busy() or self.controller.view is not View.CART:
            return
        entry = self._selected_cart_entry()
        if entry is None:
            return
        self.controller.remove_item(entry.id)

    def action_checkout(self) -> None:
        if self._busy() or self.controller.view is not View.CART:
            return
        if self.controller.proceed_to_checkout() is View.CHECKOUT:
            self._open_checkout_form()

    def action_new_order(self) -> None:
        if self._busy() or self.controller.view is not View.CONFIRMATION:
            return
        self.controller.new_order()

    def action_reload(self) -> None:
        if self._busy() or self.controller.view is not View.RESTAURANTS:
            return
        if self.controller.needs_credential:
            self.push_screen(ApiKeyModal(), callback=self._on_api_key)
            return
        self._start_restaurant_load()

    def action_dismiss_notice(self) -> None:
        self.controller.notifications.dismiss()

    def _open_checkout_form(self) -> None:
        self.push_screen(CheckoutModal(self._last_details), callback=self._on_checkout_details)

    def _on_checkout_details(self, details: OrderDetails | None) -> None:
        if details is None:
            if self.controller.view is View.CHECKOUT:
                self.controller.back_to_cart()
            return
        self._last_details = details
        self.run_worker(self._submit(details), group="checkout", exclusive=True)

    async def _submit(self, details: OrderDetails) -> None:
        result = await self.controller.checkout(details)
        if result.ok:
            self._last_details = None

    # Rendering

    def _selected_cart_entry(self):
        cart = self.controller.snapshot().cart
        if not cart:
            return None
        return cart[min(self.selected_index, len(cart) - 1)]

    def _row_count(self, snapshot: StorefrontSnapshot) -> int:
        if snapshot.view is View.RESTAURANTS:
            return len(snapshot.restaurants)
        if snapshot.view is View.MENU:
            return len(snapshot.menu)
        if snapshot.view is View.CART:
            return len(snapshot.cart)
        return 0

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _render_rows(self, widget: Static, rows: list[Text]) -> Text:
        selected = min(self.selected_index, len(rows) - 1)
        start, end = self._window_bounds(len(rows), self._visible_rows(widget), selected)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append("➤ " if idx == selected else "  ")
            lines.append_text(rows[idx])
        if end < len(rows):
            lines.append("\n⋮", style="dim")
        return lines

    def _refresh_all(self, snapshot: StorefrontSnapshot | None = None) -> None:
        snapshot = snapshot or self.controller.snapshot()
        try:
            title = self.query_one("#view-title", Static)
            body = self.query_one("#view-body", Static)
            cart_summary = self.query_one("#cart-summary", Static)
            notice = self.query_one("#notice", Static)
            help_line = self.query_one("#help", Static)
        except NoMatches:
            return

        title.update(self._title_for(snapshot))
        body.update(self._body_for(snapshot, body))
        cart_summary.update(self._cart_summary_for(snapshot))
        notice.update(format_notification(snapshot.notification) if snapshot.notification else "")
        help_line.update(_HELP[snapshot.view])

    def _title_for(self, snapshot: StorefrontSnapshot) -> str:
        if snapshot.view is View.MENU and snapshot.selected_restaurant is not None:
            return f"{snapshot.selected_restaurant.name} · {_TITLES[View.MENU]}"
        return _TITLES[snapshot.view]

    def _body_for(self, snapshot: StorefrontSnapshot, body: Static) -> Text | str:
        view = snapshot.view

        if view is View.RESTAURANTS:
            if snapshot.loading_restaurants:
                return PLACEHOLDER_LOADING_RESTAURANTS
            if not snapshot.restaurants:
                return ""
            return self._render_rows(body, [format_restaurant(r) for r in snapshot.restaurants])

        if view is View.MENU:
            if snapshot.selected_restaurant is None:
                return PLACEHOLDER_PICK_RESTAURANT
            if snapshot.loading_menu:
                return PLACEHOLDER_LOADING_MENU
            if not snapshot.menu:
                return PLACEHOLDER_EMPTY_MENU
            return self._render_rows(body, [format_menu_item(item) for item in snapshot.menu])

        if view is View.CART:
            if not snapshot.cart:
                return PLACEHOLDER_EMPTY_CART
            lines = self._render_rows(body, [format_cart_line(entry) for entry in snapshot.cart])
            lines.append("\n\n")
            lines.append_text(format_totals(snapshot.subtotal, snapshot.shipping_fee))
            return lines

        if view is View.CHECKOUT:
            if snapshot.submitting:
                return PLACEHOLDER_SUBMITTING
            text = Text()
            for entry in snapshot.cart:
                text.append_text(format_cart_line(entry))
                text.append("\n")
            text.append("\n")
            text.append_text(format_totals(snapshot.subtotal, snapshot.shipping_fee))
            return text

        if snapshot.confirmed_order is None:
            return PLACEHOLDER_LOADING_CONFIRMATION
        return format_confirmation(snapshot.confirmed_order)

    def _cart_summary_for(self, snapshot: StorefrontSnapshot) -> Text:
        text = Text()
        text.append(f"{snapshot.item_count} 件商品\n", style="bold")
        text.append(format_price(snapshot.subtotal))
        return text
