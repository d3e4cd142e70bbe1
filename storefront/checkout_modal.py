"""Checkout details entry modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from storefront.constant import FIELD_LABELS, MSG_CHECKOUT_MISSING_FIELDS
from storefront.models import OrderDetails, PaymentMethod

_TEXT_FIELDS = ("customer_name", "customer_phone", "delivery_address", "order_notes")
_PAYMENT_FIELD = "payment_method"
_FIELD_ORDER = ("customer_name", "customer_phone", "delivery_address", _PAYMENT_FIELD, "order_notes")
_MAX_FIELD_LENGTH = 120


class CheckoutModal(ModalScreen[OrderDetails | None]):
    """Collect customer name, phone, address, payment method and notes."""

    CSS = """
    CheckoutModal {
        align: center middle;
        background: $background 60%;
    }

    #checkout-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #checkout-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #checkout-fields {
        color: white;
        margin-bottom: 1;
    }

    #checkout-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #checkout-help {
        color: #dddddd;
    }
    """

    def __init__(self, initial: OrderDetails | None = None) -> None:
        super().__init__()
        self.values: dict[str, str] = {name: "" for name in _TEXT_FIELDS}
        self.payment_method = PaymentMethod.CASH_ON_DELIVERY
        if initial is not None:
            for name in _TEXT_FIELDS:
                self.values[name] = getattr(initial, name)
            self.payment_method = initial.payment_method
        self.cursor_index = 0
        self.error = ""

    @property
    def current_field(self) -> str:
        return _FIELD_ORDER[self.cursor_index]

    def compose(self) -> ComposeResult:
        with Container(id="checkout-dialog"):
            yield Static("填寫外送資訊", id="checkout-title")
            yield Static(id="checkout-fields")
            yield Static(id="checkout-error")
            yield Static(
                "↑/↓ move. ←/→ change payment. Enter next / submit. Ctrl+S submit. Esc cancel.",
                id="checkout-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self.dismiss(None)
            event.stop()
            return

        if event.key == "ctrl+s":
            self._submit()
            event.stop()
            return

        if event.key == "enter":
            if self.cursor_index == len(_FIELD_ORDER) - 1:
                self._submit()
            else:
                self._move(1)
            event.stop()
            return

        if event.key in {"down", "tab"}:
            self._move(1)
            event.stop()
            return

        if event.key in {"up", "shift+tab"}:
            self._move(-1)
            event.stop()
            return

        if self.current_field == _PAYMENT_FIELD:
            if event.key in {"left", "right", "space"}:
                self._cycle_payment(-1 if event.key == "left" else 1)
            event.stop()
            return

        if event.key == "backspace":
            value = self.values[self.current_field]
            if value:
                self.values[self.current_field] = value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if len(self.values[self.current_field]) < _MAX_FIELD_LENGTH:
                self.values[self.current_field] += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _move(self, delta: int) -> None:
        self.cursor_index = (self.cursor_index + delta) % len(_FIELD_ORDER)
        self._refresh_content()

    def _cycle_payment(self, delta: int) -> None:
        methods = list(PaymentMethod)
        idx = methods.index(self.payment_method)
        self.payment_method = methods[(idx + delta) % len(methods)]
        self._refresh_content()

    def build_details(self) -> OrderDetails:
        return OrderDetails(
            customer_name=self.values["customer_name"].strip(),
            customer_phone=self.values["customer_phone"].strip(),
            delivery_address=self.values["delivery_address"].strip(),
            payment_method=self.payment_method,
            order_notes=self.values["order_notes"].strip(),
        )

    def _submit(self) -> None:
        details = self.build_details()
        missing = details.missing_fields()
        if missing:
            self.error = MSG_CHECKOUT_MISSING_FIELDS.format(fields="、".join(FIELD_LABELS[name] for name in missing))
            self.cursor_index = _FIELD_ORDER.index(missing[0])
            self._refresh_content()
            return
        self.dismiss(details)

    def _refresh_content(self) -> None:
        fields_widget = self.query_one("#checkout-fields", Static)
        error_widget = self.query_one("#checkout-error", Static)

        content = Text(style="white")
        for idx, name in enumerate(_FIELD_ORDER):
            if idx > 0:
                content.append("\n")
            active = idx == self.cursor_index
            pointer = "➤ " if active else "  "
            if name == _PAYMENT_FIELD:
                content.append(f"{pointer}付款方式: ", style="bold white" if active else "white")
                content.append(f"‹ {self.payment_method.value} ›", style="bold white" if active else "white")
                continue
            cursor = "|" if active else ""
            content.append(f"{pointer}{FIELD_LABELS[name]}: ", style="bold white" if active else "white")
            content.append(f"{self.values[name]}{cursor}")

        fields_widget.update(content)
        error_widget.update(self.error or "")
