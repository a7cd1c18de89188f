from __future__ import annotations

from pathlib import Path

from sas.constants import LOGGER

APP_VERSION = "0.1.0"

KEY_NAME_ENV = "RELAY_SAS_KEY_NAME"
KEY_ENV = "RELAY_SAS_KEY"
TTL_ENV = "RELAY_SAS_TTL_SECONDS"
DEBUG_ENV = "RELAY_SAS_DEBUG"

DEFAULT_TTL_SECONDS = 3600
DEFAULT_AUTH_HEADER = "Authorization"

ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
