"""API key entry modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

_MAX_KEY_LENGTH = 200


class ApiKeyModal(ModalScreen[str]):
    """Blocking prompt for the Gemini API key; there is no way to skip it."""

    CSS = """
    ApiKeyModal {
        align: center middle;
        background: $background 60%;
    }

    #api-key-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #api-key-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #api-key-prompt {
        color: white;
        margin-bottom: 1;
    }

    #api-key-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #api-key-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #api-key-help {
        color: #dddddd;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self.value = ""
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="api-key-dialog"):
            yield Static("Gemini API Key", id="api-key-title")
            yield Static("請輸入 Google Gemini API 金鑰以開始使用。", id="api-key-prompt")
            yield Static(id="api-key-value")
            yield Static(id="api-key-error")
            yield Static("Enter confirm. Backspace delete. Ctrl+Q quit.", id="api-key-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and not event.character.isspace():
            if len(self.value) < _MAX_KEY_LENGTH:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        if not self.value.strip():
            self.error = "API 金鑰不可空白。"
            self._refresh_content()
            return
        self.dismiss(self.value.strip())

    def _refresh_content(self) -> None:
        value_widget = self.query_one("#api-key-value", Static)
        error_widget = self.query_one("#api-key-error", Static)
        masked = "•" * max(0, len(self.value) - 4) + self.value[-4:]
        value_widget.update(masked)
        error_widget.update(self.error or "")
