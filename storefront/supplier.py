"""Gemini-backed supplier of restaurants, menus and order confirmations."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Iterable, Protocol
from zoneinfo import ZoneInfo

from google import genai
from google.genai import types

from storefront.config import GEMINI_MODEL, ORDER_TIMEZONE
from storefront.constant import PROMPT_CONFIRMATION, PROMPT_MENU, PROMPT_RESTAURANTS
from storefront.models import CartItem, Confirmation, MenuItem, OrderDetails, Restaurant
from storefront.results import Fault, FaultKind, Ok, Result

logger = logging.getLogger(__name__)


class DataSupplier(Protocol):
    async def list_restaurants(self) -> Result[list[Restaurant]]: ...

    async def list_menu(self, restaurant_name: str) -> Result[list[MenuItem]]: ...

    async def confirm_order(self, details: OrderDetails, cart: Iterable[CartItem]) -> Result[Confirmation]: ...


RESTAURANT_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "id": types.Schema(type=types.Type.STRING, description="Unique identifier for the restaurant"),
        "name": types.Schema(type=types.Type.STRING),
        "category": types.Schema(type=types.Type.STRING, description="e.g., '日式料理', '美式速食', '健康餐盒'"),
        "rating": types.Schema(type=types.Type.NUMBER, description="A realistic rating between 3.5 and 5.0"),
        "reviews": types.Schema(type=types.Type.INTEGER, description="Number of reviews"),
        "deliveryTime": types.Schema(type=types.Type.STRING, description="e.g., '20-30 分鐘'"),
        "minOrder": types.Schema(type=types.Type.INTEGER, description="Minimum order value in TWD"),
        "image": types.Schema(type=types.Type.STRING, description="A public URL for an image of the restaurant or its food."),
    },
    required=["id", "name", "category", "rating", "reviews", "deliveryTime", "minOrder", "image"],
)

MENU_ITEM_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "id": types.Schema(type=types.Type.STRING, description="Unique identifier for the menu item"),
        "name": types.Schema(type=types.Type.STRING),
        "price": types.Schema(type=types.Type.NUMBER, description="Price in TWD"),
    },
    required=["id", "name", "price"],
)

CONFIRMATION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "orderNumber": types.Schema(type=types.Type.STRING, description="An 8-character alphanumeric order number."),
        "estimatedDeliveryTime": types.Schema(
            type=types.Type.STRING,
            description="The estimated time of arrival, e.g., '30-40 分鐘' or a specific time like '12:45 PM'.",
        ),
    },
    required=["orderNumber", "estimatedDeliveryTime"],
)

_MIN_RATING = 3.5
_MAX_RATING = 5.0


def parse_restaurant(raw: dict[str, Any]) -> Restaurant:
    return Restaurant(
        id=str(raw["id"]),
        name=str(raw["name"]),
        category=str(raw["category"]),
        rating=min(_MAX_RATING, max(_MIN_RATING, float(raw["rating"]))),
        reviews=int(raw["reviews"]),
        delivery_time=str(raw["deliveryTime"]),
        min_order=int(raw["minOrder"]),
        image=str(raw.get("image") or ""),
    )


def parse_menu_item(raw: dict[str, Any], restaurant_name: str) -> MenuItem:
    price = float(raw["price"])
    if price <= 0:
        raise ValueError(f"menu item {raw.get('id')!r} has non-positive price {price}")
    return MenuItem(id=str(raw["id"]), name=str(raw["name"]), price=price, restaurant_name=restaurant_name)


def _dedupe_by_id(rows: list[Any]) -> list[Any]:
    seen: set[str] = set()
    unique = []
    for row in rows:
        if row.id in seen:
            continue
        seen.add(row.id)
        unique.append(row)
    return unique


class GeminiSupplier:
    """
    Asks Gemini for structured JSON and turns it into domain models.

    Every operation returns a tagged result; network errors, safety blocks and
    malformed JSON all become ``Fault(SUPPLIER_FAULT)`` and an empty list
    becomes ``Fault(SUPPLIER_EMPTY)``.
    """

    def __init__(self, api_key: str | None = None, client: Any = None, model: str = GEMINI_MODEL) -> None:
        if client is None:
            if not api_key:
                raise ValueError("api_key is required when no client is given")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model = model

    async def _generate_json(self, prompt: str, schema: types.Schema) -> Any:
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        text = (response.text or "").strip()
        return json.loads(text)

    async def list_restaurants(self) -> Result[list[Restaurant]]:
        try:
            rows = await self._generate_json(PROMPT_RESTAURANTS, types.Schema(type=types.Type.ARRAY, items=RESTAURANT_SCHEMA))
            restaurants = _dedupe_by_id([parse_restaurant(row) for row in rows])
        except Exception as exc:
            logger.error("list_restaurants failed error=%r", exc)
            return Fault(FaultKind.SUPPLIER_FAULT, str(exc))

        if not restaurants:
            return Fault(FaultKind.SUPPLIER_EMPTY, "no restaurants returned")
        logger.info("list_restaurants count=%d", len(restaurants))
        return Ok(restaurants)

    async def list_menu(self, restaurant_name: str) -> Result[list[MenuItem]]:
        try:
            rows = await self._generate_json(
                PROMPT_MENU.format(restaurant=restaurant_name),
                types.Schema(type=types.Type.ARRAY, items=MENU_ITEM_SCHEMA),
            )
            items = _dedupe_by_id([parse_menu_item(row, restaurant_name) for row in rows])
        except Exception as exc:
            logger.error("list_menu failed restaurant=%r error=%r", restaurant_name, exc)
            return Fault(FaultKind.SUPPLIER_FAULT, str(exc))

        if not items:
            return Fault(FaultKind.SUPPLIER_EMPTY, f"no menu for {restaurant_name}")
        logger.info("list_menu restaurant=%r count=%d", restaurant_name, len(items))
        return Ok(items)

    async def confirm_order(self, details: OrderDetails, cart: Iterable[CartItem]) -> Result[Confirmation]:
        items = ", ".join(f"{entry.name} (x{entry.quantity})" for entry in cart)
        now = datetime.now(ZoneInfo(ORDER_TIMEZONE)).strftime("%H:%M:%S")
        prompt = PROMPT_CONFIRMATION.format(
            customer=details.customer_name,
            items=items,
            address=details.delivery_address,
            now=now,
        )
        try:
            raw = await self._generate_json(prompt, CONFIRMATION_SCHEMA)
            confirmation = Confirmation(
                order_number=str(raw["orderNumber"]).strip(),
                estimated_delivery_time=str(raw["estimatedDeliveryTime"]).strip(),
            )
        except Exception as exc:
            logger.error("confirm_order failed customer=%r error=%r", details.customer_name, exc)
            return Fault(FaultKind.SUPPLIER_FAULT, str(exc))

        if not confirmation.order_number or not confirmation.estimated_delivery_time:
            return Fault(FaultKind.SUPPLIER_EMPTY, "confirmation is missing fields")
        return Ok(confirmation)
