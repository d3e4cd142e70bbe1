from __future__ import annotations

from storefront.models import MenuItem, OrderDetails, PaymentMethod, Restaurant
from storefront.results import Fault, FaultKind, Ok


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSupplier:
    def __init__(self, restaurants=None, menus=None, confirmation=None) -> None:
        self.restaurants = restaurants
        self.menus = menus or {}
        self.confirmation = confirmation
        self.confirm_calls = []

    async def list_restaurants(self):
        if isinstance(self.restaurants, Exception):
            raise self.restaurants
        if not self.restaurants:
            return Fault(FaultKind.SUPPLIER_EMPTY, "empty")
        return Ok(list(self.restaurants))

    async def list_menu(self, restaurant_name):
        items = self.menus.get(restaurant_name, [])
        if not items:
            return Fault(FaultKind.SUPPLIER_EMPTY, "empty")
        return Ok(list(items))

    async def confirm_order(self, details, cart):
        self.confirm_calls.append((details, tuple(cart)))
        if isinstance(self.confirmation, Exception):
            raise self.confirmation
        if self.confirmation is None:
            return Fault(FaultKind.SUPPLIER_FAULT, "boom")
        return Ok(self.confirmation)


class FakeGateway:
    def __init__(self, result=None) -> None:
        self.result = result if result is not None else Ok("saved")
        self.saved = []

    async def save_order(self, order):
        self.saved.append(order)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


RESTAURANT_A = Restaurant(
    id="r1", name="Restaurant A", category="台式料理", rating=4.5, reviews=120,
    delivery_time="20-30 分鐘", min_order=150, image="https://example.com/a.jpg",
)
RESTAURANT_B = Restaurant(
    id="r2", name="Restaurant B", category="日式料理", rating=3.8, reviews=45,
    delivery_time="30-40 分鐘", min_order=200,
)
FRIED_RICE = MenuItem(id="m1", name="Fried Rice", price=120, restaurant_name="Restaurant A")
DUMPLINGS = MenuItem(id="m2", name="Dumplings", price=80, restaurant_name="Restaurant A")
RAMEN = MenuItem(id="m3", name="Ramen", price=220, restaurant_name="Restaurant B")

DETAILS = OrderDetails(
    customer_name="王小明",
    customer_phone="0912345678",
    delivery_address="台北市信義區市府路1號",
    payment_method=PaymentMethod.LINE_PAY,
    order_notes="不要辣",
)


