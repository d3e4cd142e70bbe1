from __future__ import annotations

import pytest

from storefront.controller import Storefront
from storefront.models import Confirmation
from storefront.notifications import NotificationChannel

from fakes import DUMPLINGS, FRIED_RICE, RAMEN, RESTAURANT_A, RESTAURANT_B, FakeClock, FakeGateway, FakeSupplier


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def supplier():
    return FakeSupplier(
        restaurants=[RESTAURANT_A, RESTAURANT_B],
        menus={"Restaurant A": [FRIED_RICE, DUMPLINGS], "Restaurant B": [RAMEN]},
        confirmation=Confirmation(order_number="AB12CD34", estimated_delivery_time="12:45"),
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def storefront(supplier, gateway, clock):
    return Storefront(supplier=supplier, gateway=gateway, notifications=NotificationChannel(clock=clock))
