"""Persist confirmed orders to the Google Sheets webhook."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import requests

from storefront.assembler import format_items_line
from storefront.config import GATEWAY_TIMEOUT_SECONDS, ORDER_TIMEZONE, SCRIPT_URL
from storefront.constant import (
    MSG_GATEWAY_NOT_CONFIGURED,
    MSG_GATEWAY_REJECTED,
    MSG_GATEWAY_STATUS,
    MSG_GATEWAY_UNKNOWN,
)
from storefront.models import ConfirmedOrder
from storefront.results import Fault, FaultKind, Ok, Result

logger = logging.getLogger(__name__)


def format_order_time(moment: datetime | None = None) -> str:
    """Render a timestamp the way zh-TW locales do, e.g. ``2026/10/16 下午9:56:00``."""
    tz = ZoneInfo(ORDER_TIMEZONE)
    local = datetime.now(tz) if moment is None else moment.astimezone(tz)
    period = "上午" if local.hour < 12 else "下午"
    hour = local.hour % 12 or 12
    return f"{local.year}/{local.month}/{local.day} {period}{hour}:{local.minute:02d}:{local.second:02d}"


def build_sheet_payload(order: ConfirmedOrder, moment: datetime | None = None) -> dict[str, Any]:
    """Flatten an order into the row the sheet script expects."""
    return {
        "orderNumber": order.order_number,
        "customerName": order.customer_name,
        "customerPhone": order.customer_phone,
        "deliveryAddress": order.delivery_address,
        "paymentMethod": order.payment_method.value,
        "orderNotes": order.order_notes,
        "items": format_items_line(order),
        "subtotal": order.subtotal,
        "shippingFee": order.shipping_fee,
        "total": order.total,
        "orderTime": format_order_time(moment),
    }


class SheetGateway:
    """Posts orders to an Apps Script URL and normalizes its replies."""

    def __init__(
        self,
        script_url: str = SCRIPT_URL,
        session: requests.Session | None = None,
        timeout: float = GATEWAY_TIMEOUT_SECONDS,
    ) -> None:
        self.script_url = script_url
        self.session = session or requests.Session()
        self.timeout = timeout

    async def save_order(self, order: ConfirmedOrder) -> Result[str]:
        """Persist ``order`` without blocking the event loop."""
        return await asyncio.to_thread(self.save_order_sync, order)

    def save_order_sync(self, order: ConfirmedOrder) -> Result[str]:
        if not self.script_url:
            return Fault(FaultKind.GATEWAY_FAULT, MSG_GATEWAY_NOT_CONFIGURED)

        body = json.dumps({"orderData": build_sheet_payload(order)}, ensure_ascii=False)
        try:
            response = self.session.post(
                self.script_url,
                params={"action": "saveOrder"},
                data=body.encode("utf-8"),
                headers={"Content-Type": "text/plain;charset=utf-8"},
                allow_redirects=True,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("save_order transport error order=%s error=%r", order.order_number, exc)
            return Fault(FaultKind.GATEWAY_FAULT, str(exc) or MSG_GATEWAY_UNKNOWN)

        if not response.ok:
            logger.error("save_order bad status order=%s status=%s", order.order_number, response.status_code)
            return Fault(FaultKind.GATEWAY_FAULT, MSG_GATEWAY_STATUS.format(status=response.status_code))

        try:
            result = response.json()
        except ValueError as exc:
            logger.error("save_order unreadable reply order=%s error=%r", order.order_number, exc)
            return Fault(FaultKind.GATEWAY_FAULT, MSG_GATEWAY_UNKNOWN)

        if not isinstance(result, dict) or not result.get("success"):
            error = result.get("error") if isinstance(result, dict) else None
            logger.error("save_order rejected order=%s error=%r", order.order_number, error)
            return Fault(FaultKind.GATEWAY_FAULT, error or MSG_GATEWAY_REJECTED)

        logger.info("save_order stored order=%s", order.order_number)
        return Ok(str(result.get("message") or ""))
