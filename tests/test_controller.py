import asyncio
import re

import pytest

from storefront.constant import MSG_API_KEY_MISSING, MSG_ORDER_SUBMITTED
from storefront.controller import Storefront
from storefront.models import OrderDetails, View
from storefront.navigation import InvalidTransition
from storefront.notifications import NotificationChannel, NotificationKind
from storefront.results import Fault, FaultKind, Ok

from fakes import DETAILS, DUMPLINGS, FRIED_RICE, RAMEN, RESTAURANT_A, RESTAURANT_B, FakeGateway, FakeSupplier


def _go_to_checkout(storefront, *items):
    for item in items:
        storefront.add_item(item)
    storefront.open_cart()
    storefront.proceed_to_checkout()


def test_load_restaurants_fills_catalog(storefront):
    result = asyncio.run(storefront.load_restaurants())

    assert isinstance(result, Ok)
    assert storefront.snapshot().restaurants == (RESTAURANT_A, RESTAURANT_B)
    assert storefront.snapshot().loading_restaurants is False


def test_empty_restaurant_list_notifies_and_leaves_cache_empty(clock):
    storefront = Storefront(
        supplier=FakeSupplier(restaurants=[]),
        gateway=FakeGateway(),
        notifications=NotificationChannel(clock=clock),
    )
    result = asyncio.run(storefront.load_restaurants())

    assert isinstance(result, Fault)
    assert storefront.snapshot().restaurants == ()
    assert storefront.notifications.active.kind is NotificationKind.ERROR


def test_supplier_exception_degrades_to_empty_list(clock):
    storefront = Storefront(
        supplier=FakeSupplier(restaurants=RuntimeError("network down")),
        gateway=FakeGateway(),
        notifications=NotificationChannel(clock=clock),
    )
    result = asyncio.run(storefront.load_restaurants())

    assert result.kind is FaultKind.SUPPLIER_FAULT
    assert storefront.snapshot().restaurants == ()
    assert storefront.notifications.active.kind is NotificationKind.ERROR


def test_missing_credential_blocks_data_operations(clock):
    storefront = Storefront(gateway=FakeGateway(), notifications=NotificationChannel(clock=clock))
    result = asyncio.run(storefront.load_restaurants())

    assert storefront.needs_credential is True
    assert result.kind is FaultKind.MISSING_CREDENTIAL
    assert storefront.notifications.active.kind is NotificationKind.ERROR


def test_select_restaurant_loads_menu(storefront):
    result = asyncio.run(storefront.select_restaurant(RESTAURANT_A))

    snapshot = storefront.snapshot()
    assert isinstance(result, Ok)
    assert snapshot.view is View.MENU
    assert snapshot.selected_restaurant == RESTAURANT_A
    assert snapshot.menu == (FRIED_RICE, DUMPLINGS)


def test_empty_menu_still_enters_menu_view(storefront, supplier):
    asyncio.run(storefront.select_restaurant(RESTAURANT_B))
    storefront.back_to_restaurants()
    supplier.menus["Restaurant A"] = []

    asyncio.run(storefront.select_restaurant(RESTAURANT_A))

    snapshot = storefront.snapshot()
    assert snapshot.view is View.MENU
    assert snapshot.menu == ()
    assert snapshot.notification.kind is NotificationKind.ERROR
    assert "Restaurant A" in snapshot.notification.message


def test_stale_menu_response_is_discarded(clock):
    release_a = asyncio.Event()

    class SlowSupplier(FakeSupplier):
        async def list_menu(self, restaurant_name):
            if restaurant_name == "Restaurant A":
                await release_a.wait()
            return await super().list_menu(restaurant_name)

    supplier = SlowSupplier(menus={"Restaurant A": [FRIED_RICE], "Restaurant B": [RAMEN]})
    storefront = Storefront(supplier=supplier, gateway=FakeGateway(), notifications=NotificationChannel(clock=clock))

    async def scenario():
        slow = asyncio.create_task(storefront.select_restaurant(RESTAURANT_A))
        await asyncio.sleep(0)
        storefront.home()
        await storefront.select_restaurant(RESTAURANT_B)
        release_a.set()
        return await slow

    stale = asyncio.run(scenario())

    snapshot = storefront.snapshot()
    assert isinstance(stale, Fault)
    assert snapshot.selected_restaurant == RESTAURANT_B
    assert snapshot.menu == (RAMEN,)
    assert snapshot.loading_menu is False


def test_stale_restaurant_load_keeps_loading_flag_for_newer_load(clock):
    gates = []

    class GatedSupplier(FakeSupplier):
        async def list_restaurants(self):
            gate = asyncio.Event()
            gates.append(gate)
            await gate.wait()
            return await super().list_restaurants()

    storefront = Storefront(
        supplier=GatedSupplier(restaurants=[RESTAURANT_A]),
        gateway=FakeGateway(),
        notifications=NotificationChannel(clock=clock),
    )

    async def scenario():
        first = asyncio.create_task(storefront.load_restaurants())
        second = asyncio.create_task(storefront.load_restaurants())
        await asyncio.sleep(0)
        gates[0].set()
        stale = await first
        still_loading = storefront.snapshot().loading_restaurants
        gates[1].set()
        await second
        return stale, still_loading

    stale, still_loading = asyncio.run(scenario())

    assert isinstance(stale, Fault)
    assert still_loading is True
    assert storefront.snapshot().loading_restaurants is False
    assert storefront.snapshot().restaurants == (RESTAURANT_A,)


def test_select_restaurant_without_credential_stays_on_list(clock):
    storefront = Storefront(gateway=FakeGateway(), notifications=NotificationChannel(clock=clock))

    result = asyncio.run(storefront.select_restaurant(RESTAURANT_A))

    assert result.kind is FaultKind.MISSING_CREDENTIAL
    assert storefront.view is View.RESTAURANTS
    assert storefront.snapshot().selected_restaurant is None
    assert storefront.snapshot().loading_menu is False
    assert storefront.notifications.active.message == MSG_API_KEY_MISSING


def test_add_item_notifies_with_item_name(storefront):
    storefront.add_item(FRIED_RICE)
    storefront.add_item(FRIED_RICE)

    assert storefront.snapshot().item_count == 2
    assert len(storefront.snapshot().cart) == 1
    assert "Fried Rice" in storefront.notifications.active.message


def test_remove_absent_item_emits_nothing(storefront):
    storefront.add_item(FRIED_RICE)
    storefront.notifications.dismiss()

    assert storefront.remove_item("missing") is None
    assert storefront.notifications.active is None
    assert storefront.snapshot().item_count == 1


def test_set_quantity_zero_removes_and_notifies(storefront):
    storefront.add_item(FRIED_RICE)
    storefront.set_quantity("m1", 0)

    assert storefront.snapshot().cart == ()
    assert storefront.notifications.active.kind is NotificationKind.SUCCESS
    assert "Fried Rice" in storefront.notifications.active.message


def test_cannot_checkout_empty_cart(storefront):
    storefront.open_cart()

    assert storefront.proceed_to_checkout() is View.CART
    assert storefront.notifications.active.kind is NotificationKind.ERROR


def test_successful_checkout_confirms_and_clears_cart(storefront, gateway):
    _go_to_checkout(storefront, FRIED_RICE, FRIED_RICE)

    result = asyncio.run(storefront.checkout(DETAILS))

    snapshot = storefront.snapshot()
    assert isinstance(result, Ok)
    assert snapshot.view is View.CONFIRMATION
    assert snapshot.cart == ()
    assert snapshot.confirmed_order is result.value
    assert result.value.subtotal == 240
    assert result.value.total == 270
    assert result.value.order_number == "AB12CD34"
    assert gateway.saved == [result.value]
    assert snapshot.notification.message == MSG_ORDER_SUBMITTED


def test_failed_save_keeps_checkout_and_cart(clock, supplier):
    gateway = FakeGateway(result=Fault(FaultKind.GATEWAY_FAULT, "sheet offline"))
    storefront = Storefront(supplier=supplier, gateway=gateway, notifications=NotificationChannel(clock=clock))
    _go_to_checkout(storefront, FRIED_RICE)

    result = asyncio.run(storefront.checkout(DETAILS))

    snapshot = storefront.snapshot()
    assert result.kind is FaultKind.GATEWAY_FAULT
    assert snapshot.view is View.CHECKOUT
    assert snapshot.item_count == 1
    assert snapshot.confirmed_order is None
    assert snapshot.notification.kind is NotificationKind.ERROR
    assert "sheet offline" in snapshot.notification.message


def test_gateway_exception_is_a_failed_checkout(clock, supplier):
    gateway = FakeGateway(result=ConnectionError("reset"))
    storefront = Storefront(supplier=supplier, gateway=gateway, notifications=NotificationChannel(clock=clock))
    _go_to_checkout(storefront, DUMPLINGS)

    result = asyncio.run(storefront.checkout(DETAILS))

    assert result.kind is FaultKind.GATEWAY_FAULT
    assert storefront.view is View.CHECKOUT
    assert storefront.snapshot().item_count == 1


def test_retry_after_failure_succeeds(clock, supplier):
    gateway = FakeGateway(result=Fault(FaultKind.GATEWAY_FAULT, "later"))
    storefront = Storefront(supplier=supplier, gateway=gateway, notifications=NotificationChannel(clock=clock))
    _go_to_checkout(storefront, FRIED_RICE)

    asyncio.run(storefront.checkout(DETAILS))
    gateway.result = Ok("saved")
    result = asyncio.run(storefront.checkout(DETAILS))

    assert isinstance(result, Ok)
    assert storefront.view is View.CONFIRMATION


def test_navigation_is_ignored_while_order_is_submitting(clock, supplier):
    release = asyncio.Event()

    class SlowGateway(FakeGateway):
        async def save_order(self, order):
            await release.wait()
            return await super().save_order(order)

    gateway = SlowGateway()
    storefront = Storefront(supplier=supplier, gateway=gateway, notifications=NotificationChannel(clock=clock))
    _go_to_checkout(storefront, FRIED_RICE)

    async def scenario():
        pending = asyncio.create_task(storefront.checkout(DETAILS))
        while not storefront.submitting:
            await asyncio.sleep(0)
        views = [storefront.home(), storefront.back_to_cart(), storefront.open_cart()]
        release.set()
        return views, await pending

    views, result = asyncio.run(scenario())

    snapshot = storefront.snapshot()
    assert views == [View.CHECKOUT, View.CHECKOUT, View.CHECKOUT]
    assert isinstance(result, Ok)
    assert snapshot.view is View.CONFIRMATION
    assert snapshot.confirmed_order is result.value
    assert snapshot.cart == ()
    assert gateway.saved == [result.value]
    assert snapshot.notification.message == MSG_ORDER_SUBMITTED


@pytest.mark.parametrize("confirmation", [None, RuntimeError("quota exceeded")])
def test_confirmation_fault_uses_local_fallback(clock, gateway, confirmation):
    supplier = FakeSupplier(confirmation=confirmation)
    storefront = Storefront(supplier=supplier, gateway=gateway, notifications=NotificationChannel(clock=clock))
    _go_to_checkout(storefront, FRIED_RICE)

    result = asyncio.run(storefront.checkout(DETAILS))

    assert isinstance(result, Ok)
    assert re.fullmatch(r"ORD-\d{6}", result.value.order_number)
    assert result.value.estimated_delivery_time
    assert storefront.view is View.CONFIRMATION


def test_checkout_rejects_missing_details(storefront, gateway):
    _go_to_checkout(storefront, FRIED_RICE)
    incomplete = OrderDetails(customer_name="王小明", customer_phone=" ", delivery_address="")

    result = asyncio.run(storefront.checkout(incomplete))

    assert result.kind is FaultKind.INVALID_INPUT
    assert gateway.saved == []
    assert storefront.view is View.CHECKOUT
    assert storefront.notifications.active.kind is NotificationKind.ERROR


def test_checkout_outside_checkout_view_is_illegal(storefront):
    storefront.add_item(FRIED_RICE)
    with pytest.raises(InvalidTransition):
        asyncio.run(storefront.checkout(DETAILS))


def test_new_order_resets_selection_and_confirmation(storefront):
    asyncio.run(storefront.select_restaurant(RESTAURANT_A))
    _go_to_checkout(storefront, FRIED_RICE)
    asyncio.run(storefront.checkout(DETAILS))

    assert storefront.new_order() is View.RESTAURANTS
    snapshot = storefront.snapshot()
    assert snapshot.confirmed_order is None
    assert snapshot.selected_restaurant is None
    assert snapshot.menu == ()


def test_back_from_cart_uses_selected_restaurant(storefront):
    asyncio.run(storefront.select_restaurant(RESTAURANT_A))
    storefront.open_cart()
    assert storefront.back_from_cart() is View.MENU

    storefront.back_to_restaurants()
    storefront.open_cart()
    assert storefront.back_from_cart() is View.RESTAURANTS


def test_subscribers_receive_snapshots(storefront):
    snapshots = []
    storefront.subscribe(snapshots.append)
    storefront.add_item(FRIED_RICE)

    assert snapshots
    assert snapshots[-1].item_count == 1
