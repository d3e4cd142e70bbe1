"""Screen navigation state machine."""

from __future__ import annotations

import logging

from storefront.models import ConfirmedOrder, View

logger = logging.getLogger(__name__)


class InvalidTransition(ValueError):
    """Raised when a navigation command is not legal from the current view."""

    def __init__(self, command: str, view: View) -> None:
        super().__init__(f"cannot {command} from {view.value}")
        self.command = command
        self.view = view


class Navigator:
    """Tracks the visible view and only allows the legal transitions between views."""

    def __init__(self) -> None:
        self.view = View.RESTAURANTS

    def _require(self, command: str, *allowed: View) -> None:
        if self.view not in allowed:
            raise InvalidTransition(command, self.view)

    def _go(self, command: str, target: View) -> View:
        logger.debug("navigate command=%s %s -> %s", command, self.view.value, target.value)
        self.view = target
        return target

    def select_restaurant(self) -> View:
        self._require("select a restaurant", View.RESTAURANTS)
        return self._go("select_restaurant", View.MENU)

    def back_to_restaurants(self) -> View:
        self._require("go back to restaurants", View.MENU)
        return self._go("back_to_restaurants", View.RESTAURANTS)

    def home(self) -> View:
        """Return to the restaurant list from any view."""
        return self._go("home", View.RESTAURANTS)

    def open_cart(self) -> View:
        """Show the cart; reachable from every view."""
        return self._go("open_cart", View.CART)

    def back_from_cart(self, has_restaurant: bool) -> View:
        """Return to the menu, or to the restaurant list when nothing is selected."""
        self._require("leave the cart", View.CART)
        if has_restaurant:
            return self._go("back_from_cart", View.MENU)
        return self._go("back_from_cart", View.RESTAURANTS)

    def proceed_to_checkout(self, cart_empty: bool) -> View:
        self._require("check out", View.CART)
        if cart_empty:
            raise InvalidTransition("check out with an empty cart", self.view)
        return self._go("proceed_to_checkout", View.CHECKOUT)

    def back_to_cart(self) -> View:
        self._require("go back to the cart", View.CHECKOUT)
        return self._go("back_to_cart", View.CART)

    def confirm(self, order: ConfirmedOrder | None) -> View:
        self._require("confirm an order", View.CHECKOUT)
        if order is None:
            raise InvalidTransition("confirm without an order", self.view)
        return self._go("confirm", View.CONFIRMATION)

    def new_order(self) -> View:
        self._require("start a new order", View.CONFIRMATION)
        return self._go("new_order", View.RESTAURANTS)
