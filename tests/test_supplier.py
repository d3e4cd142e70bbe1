import asyncio
import json
from types import SimpleNamespace

import pytest

from storefront.models import CartItem
from storefront.results import Fault, FaultKind, Ok
from storefront.supplier import GeminiSupplier, parse_restaurant

from fakes import DETAILS, FRIED_RICE


class FakeModels:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)


def _supplier(*replies):
    models = FakeModels(replies)
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return GeminiSupplier(client=client), models


RESTAURANT_ROW = {
    "id": "r1",
    "name": "鼎泰豐",
    "category": "台式料理",
    "rating": 4.8,
    "reviews": 2150,
    "deliveryTime": "25-35 分鐘",
    "minOrder": 300,
    "image": "https://example.com/dtf.jpg",
}


def test_requires_key_or_client():
    with pytest.raises(ValueError):
        GeminiSupplier()


def test_list_restaurants_parses_rows():
    supplier, models = _supplier(json.dumps([RESTAURANT_ROW, dict(RESTAURANT_ROW, id="r2", name="春水堂")]))

    result = asyncio.run(supplier.list_restaurants())

    assert isinstance(result, Ok)
    assert [r.name for r in result.value] == ["鼎泰豐", "春水堂"]
    assert result.value[0].delivery_time == "25-35 分鐘"
    assert result.value[0].min_order == 300
    assert models.calls[0]["model"] == "gemini-2.5-flash"
    assert models.calls[0]["config"].response_mime_type == "application/json"


@pytest.mark.parametrize(("raw_rating", "expected"), [(1.2, 3.5), (4.2, 4.2), (9, 5.0)])
def test_rating_is_kept_within_display_range(raw_rating, expected):
    restaurant = parse_restaurant(dict(RESTAURANT_ROW, rating=raw_rating))

    assert restaurant.rating == expected


def test_list_restaurants_drops_duplicate_ids():
    supplier, _ = _supplier(json.dumps([RESTAURANT_ROW, RESTAURANT_ROW]))

    result = asyncio.run(supplier.list_restaurants())

    assert len(result.value) == 1


def test_empty_restaurant_list_is_supplier_empty():
    supplier, _ = _supplier("[]")

    assert asyncio.run(supplier.list_restaurants()) == Fault(FaultKind.SUPPLIER_EMPTY, "no restaurants returned")


def test_api_error_is_supplier_fault():
    supplier, _ = _supplier(RuntimeError("429 quota"))

    result = asyncio.run(supplier.list_restaurants())

    assert result == Fault(FaultKind.SUPPLIER_FAULT, "429 quota")


def test_malformed_json_is_supplier_fault():
    supplier, _ = _supplier("not json")

    assert asyncio.run(supplier.list_menu("鼎泰豐")).kind is FaultKind.SUPPLIER_FAULT


def test_list_menu_attaches_restaurant_name():
    supplier, models = _supplier(json.dumps([{"id": "m1", "name": "小籠包", "price": 250}]))

    result = asyncio.run(supplier.list_menu("鼎泰豐"))

    assert result.value[0].restaurant_name == "鼎泰豐"
    assert result.value[0].price == 250
    assert "鼎泰豐" in models.calls[0]["contents"]


def test_menu_item_with_non_positive_price_is_rejected():
    supplier, _ = _supplier(json.dumps([{"id": "m1", "name": "Free", "price": 0}]))

    assert asyncio.run(supplier.list_menu("鼎泰豐")).kind is FaultKind.SUPPLIER_FAULT


def test_confirm_order_returns_confirmation():
    reply = json.dumps({"orderNumber": "A1B2C3D4", "estimatedDeliveryTime": "30-40 分鐘"})
    supplier, models = _supplier(reply)

    result = asyncio.run(supplier.confirm_order(DETAILS, [CartItem(item=FRIED_RICE, quantity=2)]))

    assert result.value.order_number == "A1B2C3D4"
    assert result.value.estimated_delivery_time == "30-40 分鐘"
    prompt = models.calls[0]["contents"]
    assert "Fried Rice (x2)" in prompt
    assert DETAILS.customer_name in prompt
    assert DETAILS.delivery_address in prompt


def test_confirm_order_with_blank_fields_is_empty():
    supplier, _ = _supplier(json.dumps({"orderNumber": " ", "estimatedDeliveryTime": ""}))

    result = asyncio.run(supplier.confirm_order(DETAILS, []))

    assert result.kind is FaultKind.SUPPLIER_EMPTY
