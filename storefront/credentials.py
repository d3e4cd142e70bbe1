"""Locate and store the Gemini API key."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from storefront.config import API_KEY_ENV_VARS, CREDENTIAL_PATH

logger = logging.getLogger(__name__)


def load_api_key(path: str | Path = CREDENTIAL_PATH) -> str | None:
    """Return the key from the environment, else from the local credential file."""
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value

    cred_file = Path(path)
    if not cred_file.exists():
        return None
    try:
        data = json.loads(cred_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("credential file unreadable path=%s error=%r", cred_file, exc)
        return None
    if not isinstance(data, dict):
        return None
    value = str(data.get("api_key") or "").strip()
    return value or None


def save_api_key(api_key: str, path: str | Path = CREDENTIAL_PATH) -> Path:
    """Persist ``api_key`` to the local credential file."""
    normalized = api_key.strip()
    if not normalized:
        raise ValueError("api_key must not be blank")

    cred_file = Path(path)
    cred_file.parent.mkdir(parents=True, exist_ok=True)
    cred_file.write_text(json.dumps({"api_key": normalized}), encoding="utf-8")
    try:
        cred_file.chmod(0o600)
    except OSError as exc:
        logger.warning("could not restrict credential file permissions path=%s error=%r", cred_file, exc)
    logger.info("credential saved path=%s", cred_file)
    return cred_file
