from __future__ import annotations

import logging
from datetime import datetime, timezone

LOGGER = logging.getLogger("relay.sas")

SHARED_ACCESS_SIGNATURE = "SharedAccessSignature"
SIGNED_RESOURCE = "sr"
SIGNATURE = "sig"
SIGNED_EXPIRY = "se"
SIGNED_KEY_NAME = "skn"

# Checked in this order when validating a parsed token.
REQUIRED_FIELDS = (SIGNATURE, SIGNED_EXPIRY, SIGNED_KEY_NAME, SIGNED_RESOURCE)

KEY_VALUE_SEPARATOR = "="
PAIR_SEPARATOR = "&"

MAX_KEY_NAME_LENGTH = 256
MAX_KEY_LENGTH = 256

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
