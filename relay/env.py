from __future__ import annotations

import logging
import os
from datetime import timedelta

from dotenv import load_dotenv

from sas.provider import SharedAccessSignatureTokenProvider

from .constants import (
    DEBUG_ENV,
    DEFAULT_TTL_SECONDS,
    ENV_FILE,
    KEY_ENV,
    KEY_NAME_ENV,
    LOGGER,
    TTL_ENV,
)


_ENABLED_VALUES = {"1", "true", "yes", "on"}


def debug_enabled() -> bool:
    return os.getenv(DEBUG_ENV, "1").strip().lower() in _ENABLED_VALUES


def load_env() -> None:
    if not ENV_FILE.exists():
        return
    load_dotenv(ENV_FILE, override=True)


def get_time_to_live() -> timedelta:
    raw = os.getenv(TTL_ENV, "").strip()
    if not raw:
        return timedelta(seconds=DEFAULT_TTL_SECONDS)
    try:
        return timedelta(seconds=int(raw))
    except (OverflowError, ValueError) as exc:
        raise RuntimeError(f"{TTL_ENV} must be an integer number of seconds.") from exc


def validate_env() -> None:
    required = (KEY_NAME_ENV, KEY_ENV)
    missing = [key for key in required if not os.getenv(key, "").strip()]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    if get_time_to_live() <= timedelta(0):
        LOGGER.warning("%s is not positive; issued tokens will already be expired.", TTL_ENV)


def load_provider() -> SharedAccessSignatureTokenProvider:
    validate_env()
    return SharedAccessSignatureTokenProvider(
        os.getenv(KEY_NAME_ENV, "").strip(),
        os.getenv(KEY_ENV, "").strip(),
    )


def setup_logging() -> bool:
    """Send the relay.sas logger to stderr at INFO unless RELAY_SAS_DEBUG is off."""
    enabled = debug_enabled()
    if enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return enabled
