"""Runtime configuration defaults for the storefront and its collaborators."""

from __future__ import annotations

import os

SHIPPING_FEE = 30
NOTIFICATION_TIMEOUT_SECONDS = 3.0

GEMINI_MODEL = "gemini-2.5-flash"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")
CREDENTIAL_PATH = os.environ.get("STOREFRONT_CREDENTIAL_PATH", "data/credentials.json")

# Google Apps Script deployment that appends orders to the sheet.
SCRIPT_URL = os.environ.get("STOREFRONT_SCRIPT_URL", "")
GATEWAY_TIMEOUT_SECONDS = 15
ORDER_TIMEZONE = "Asia/Taipei"

FALLBACK_DELIVERY_TIME = "30-45 分鐘"
FALLBACK_ORDER_PREFIX = "ORD-"

DEBUG_LOG_PATH = os.environ.get("STOREFRONT_DEBUG_LOG", "/tmp/storefront-debug.log")
