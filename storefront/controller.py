"""Order lifecycle controller that owns cart, catalog, navigation and notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from storefront.assembler import assemble_order, fallback_confirmation
from storefront.cart import CartLedger
from storefront.catalog import CatalogCache, StaleResponse
from storefront.config import SHIPPING_FEE
from storefront.constant import (
    FIELD_LABELS,
    MSG_API_KEY_MISSING,
    MSG_CART_EMPTY,
    MSG_CHECKOUT_MISSING_FIELDS,
    MSG_ITEM_ADDED,
    MSG_ITEM_REMOVED,
    MSG_MENU_UNAVAILABLE,
    MSG_ORDER_FAILED,
    MSG_ORDER_SUBMITTED,
    MSG_ORDER_UNKNOWN_ERROR,
    MSG_RESTAURANTS_UNAVAILABLE,
)
from storefront.gateway import SheetGateway
from storefront.models import CartItem, Confirmation, ConfirmedOrder, MenuItem, OrderDetails, Restaurant, View
from storefront.navigation import InvalidTransition, Navigator
from storefront.notifications import Notification, NotificationChannel
from storefront.results import Fault, FaultKind, Ok, Result
from storefront.supplier import DataSupplier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorefrontSnapshot:
    """Read-only view of the controller state for presentation layers."""

    view: View
    restaurants: tuple[Restaurant, ...]
    selected_restaurant: Restaurant | None
    menu: tuple[MenuItem, ...]
    cart: tuple[CartItem, ...]
    item_count: int
    subtotal: float
    shipping_fee: float
    confirmed_order: ConfirmedOrder | None
    loading_restaurants: bool
    loading_menu: bool
    submitting: bool
    notification: Notification | None
    needs_credential: bool

    @property
    def loading(self) -> bool:
        return self.loading_restaurants or self.loading_menu or self.submitting


Listener = Callable[[StorefrontSnapshot], None]


class Storefront:
    """
    Single owner of the order lifecycle.

    Presentation code issues commands (select a restaurant, add an item,
    check out, ...) and renders the snapshots passed to subscribers. All
    collaborator faults are turned into notifications here; nothing raises
    past these methods except ``InvalidTransition`` for illegal navigation.
    Navigation commands are ignored while an order is being submitted.
    """

    def __init__(
        self,
        supplier: DataSupplier | None = None,
        gateway: SheetGateway | None = None,
        notifications: NotificationChannel | None = None,
        shipping_fee: float = SHIPPING_FEE,
    ) -> None:
        self.cart = CartLedger()
        self.catalog = CatalogCache(supplier)
        self.navigator = Navigator()
        self.gateway = gateway or SheetGateway()
        self.notifications = notifications or NotificationChannel()
        self.shipping_fee = shipping_fee
        self.confirmed_order: ConfirmedOrder | None = None
        self.loading_restaurants = False
        self.loading_menu = False
        self.submitting = False
        self._listeners: list[Listener] = []
        self.notifications.subscribe(lambda _notification: self._emit())

    @property
    def supplier(self) -> DataSupplier | None:
        return self.catalog.supplier

    @property
    def view(self) -> View:
        return self.navigator.view

    @property
    def needs_credential(self) -> bool:
        return self.catalog.supplier is None

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> StorefrontSnapshot:
        return StorefrontSnapshot(
            view=self.navigator.view,
            restaurants=tuple(self.catalog.restaurants),
            selected_restaurant=self.catalog.selected,
            menu=tuple(self.catalog.menu),
            cart=self.cart.items(),
            item_count=self.cart.item_count(),
            subtotal=self.cart.subtotal(),
            shipping_fee=self.shipping_fee,
            confirmed_order=self.confirmed_order,
            loading_restaurants=self.loading_restaurants,
            loading_menu=self.loading_menu,
            submitting=self.submitting,
            notification=self.notifications.active,
            needs_credential=self.needs_credential,
        )

    def _emit(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def configure_supplier(self, supplier: DataSupplier) -> None:
        self.catalog.supplier = supplier
        self._emit()

    # Catalog

    async def load_restaurants(self) -> Result[list[Restaurant]]:
        if self.needs_credential:
            self.notifications.error(MSG_API_KEY_MISSING)
            return Fault(FaultKind.MISSING_CREDENTIAL, "no API key configured")

        self.loading_restaurants = True
        self._emit()
        try:
            result = await self.catalog.load_restaurants()
        except Exception as exc:
            logger.exception("load_restaurants crashed")
            result = Fault(FaultKind.SUPPLIER_FAULT, str(exc))

        if isinstance(result, StaleResponse):
            return result

        self.loading_restaurants = False
        if not isinstance(result, Ok):
            logger.warning("load_restaurants failed kind=%s detail=%r", result.kind.value, result.detail)
            self.notifications.error(MSG_RESTAURANTS_UNAVAILABLE)
        self._emit()
        return result

    async def select_restaurant(self, restaurant: Restaurant) -> Result[list[MenuItem]]:
        """Show the menu screen for ``restaurant`` and load its menu."""
        if self.needs_credential:
            self.notifications.error(MSG_API_KEY_MISSING)
            return Fault(FaultKind.MISSING_CREDENTIAL, "no API key configured")
        self.navigator.select_restaurant()
        self.loading_menu = True
        self.catalog.select(restaurant)
        self._emit()
        try:
            result = await self.catalog.load_menu(restaurant)
        except Exception as exc:
            logger.exception("load_menu crashed restaurant=%r", restaurant.name)
            result = Fault(FaultKind.SUPPLIER_FAULT, str(exc))

        if isinstance(result, StaleResponse):
            return result

        self.loading_menu = False
        if not isinstance(result, Ok):
            logger.warning(
                "load_menu failed restaurant=%r kind=%s detail=%r", restaurant.name, result.kind.value, result.detail
            )
            self.notifications.error(MSG_MENU_UNAVAILABLE.format(restaurant=restaurant.name))
        self._emit()
        return result

    # Navigation

    def _navigation_locked(self) -> bool:
        if self.submitting:
            logger.debug("navigation ignored while an order is being submitted view=%s", self.navigator.view.value)
        return self.submitting

    def back_to_restaurants(self) -> View:
        if self._navigation_locked():
            return self.navigator.view
        view = self.navigator.back_to_restaurants()
        self._leave_restaurant()
        return view

    def home(self) -> View:
        if self._navigation_locked():
            return self.navigator.view
        view = self.navigator.home()
        self._leave_restaurant()
        return view

    def open_cart(self) -> View:
        if self._navigation_locked():
            return self.navigator.view
        view = self.navigator.open_cart()
        self._emit()
        return view

    def back_from_cart(self) -> View:
        if self._navigation_locked():
            return self.navigator.view
        view = self.navigator.back_from_cart(has_restaurant=self.catalog.selected is not None)
        self._emit()
        return view

    def proceed_to_checkout(self) -> View:
        if self._navigation_locked():
            return self.navigator.view
        if self.cart.is_empty():
            self.notifications.error(MSG_CART_EMPTY)
            return self.navigator.view
        view = self.navigator.proceed_to_checkout(cart_empty=False)
        self._emit()
        return view

    def back_to_cart(self) -> View:
        if self._navigation_locked():
            return self.navigator.view
        view = self.navigator.back_to_cart()
        self._emit()
        return view

    def new_order(self) -> View:
        """Leave the confirmation screen and start over from the restaurant list."""
        if self._navigation_locked():
            return self.navigator.view
        view = self.navigator.new_order()
        self.confirmed_order = None
        self._leave_restaurant()
        return view

    def _leave_restaurant(self) -> None:
        self.catalog.clear_selection()
        self.loading_menu = False
        self._emit()

    # Cart

    def add_item(self, item: MenuItem) -> CartItem:
        entry = self.cart.add_item(item)
        self.notifications.success(MSG_ITEM_ADDED.format(item=item.name))
        self._emit()
        return entry

    def set_quantity(self, item_id: str, quantity: int) -> CartItem | None:
        if quantity <= 0:
            return self.remove_item(item_id)
        entry = self.cart.set_quantity(item_id, quantity)
        self._emit()
        return entry

    def remove_item(self, item_id: str) -> CartItem | None:
        removed = self.cart.remove_item(item_id)
        if removed is not None:
            self.notifications.success(MSG_ITEM_REMOVED.format(item=removed.name))
            self._emit()
        return removed

    # Checkout

    async def checkout(self, details: OrderDetails) -> Result[ConfirmedOrder]:
        """
        Confirm, assemble and persist the order.

        On success the cart is cleared and the view moves to CONFIRMATION.
        Any failure leaves the view on CHECKOUT with the cart intact.
        """
        if self.navigator.view is not View.CHECKOUT:
            raise InvalidTransition("submit an order", self.navigator.view)
        if self.submitting:
            return Fault(FaultKind.INVALID_INPUT, "order submission already in progress")

        missing = details.missing_fields()
        if missing:
            labels = "、".join(FIELD_LABELS.get(name, name) for name in missing)
            self.notifications.error(MSG_CHECKOUT_MISSING_FIELDS.format(fields=labels))
            return Fault(FaultKind.INVALID_INPUT, f"missing fields: {', '.join(missing)}")

        cart_items = self.cart.items()
        if not cart_items:
            self.notifications.error(MSG_CART_EMPTY)
            return Fault(FaultKind.INVALID_INPUT, "cart is empty")

        self.submitting = True
        self._emit()
        try:
            confirmation = await self._confirm(details, cart_items)
            order = assemble_order(details, cart_items, confirmation, self.shipping_fee)
            saved = await self._save(order)
        finally:
            self.submitting = False

        if not isinstance(saved, Ok):
            reason = saved.detail or MSG_ORDER_UNKNOWN_ERROR
            logger.error("checkout failed order=%s reason=%r", order.order_number, reason)
            self.notifications.error(MSG_ORDER_FAILED.format(reason=reason))
            self._emit()
            return saved

        self.navigator.confirm(order)
        self.confirmed_order = order
        self.cart.clear()
        logger.info("checkout confirmed order=%s total=%s", order.order_number, order.total)
        self.notifications.success(MSG_ORDER_SUBMITTED)
        self._emit()
        return Ok(order)

    async def _confirm(self, details: OrderDetails, cart_items: tuple[CartItem, ...]) -> Confirmation:
        supplier = self.catalog.supplier
        if supplier is None:
            return fallback_confirmation()
        try:
            result = await supplier.confirm_order(details, cart_items)
        except Exception as exc:
            logger.error("confirm_order raised error=%r", exc)
            return fallback_confirmation()
        if isinstance(result, Ok):
            return result.value
        logger.warning("confirm_order fell back kind=%s detail=%r", result.kind.value, result.detail)
        return fallback_confirmation()

    async def _save(self, order: ConfirmedOrder) -> Result[str]:
        try:
            return await self.gateway.save_order(order)
        except Exception as exc:
            logger.error("save_order raised order=%s error=%r", order.order_number, exc)
            return Fault(FaultKind.GATEWAY_FAULT, str(exc))
