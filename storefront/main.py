"""Entry point for the storefront Textual app."""

from __future__ import annotations

import logging
from pathlib import Path

from storefront.config import DEBUG_LOG_PATH
from storefront.storefront_app import StorefrontApp


def configure_logging(path: str | Path = DEBUG_LOG_PATH, level: int = logging.DEBUG) -> None:
    """Send log records to a file; the terminal belongs to the UI."""
    log_file = Path(path)
    root = logging.getLogger()
    root.setLevel(level)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        # Logging must never interfere with app flow.
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.addHandler(handler)


def main() -> None:
    configure_logging()
    logging.getLogger(__name__).info("app_init")
    StorefrontApp().run()


if __name__ == "__main__":
    main()
