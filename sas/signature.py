from __future__ import annotations

import base64
import hashlib
import hmac
from datetime import datetime, timedelta, timezone

from .constants import (
    EPOCH,
    SHARED_ACCESS_SIGNATURE,
    SIGNATURE,
    SIGNED_EXPIRY,
    SIGNED_KEY_NAME,
    SIGNED_RESOURCE,
)
from .encoding import url_encode
from .token import validate


def build_expires_on(time_to_live: timedelta, *, now: datetime | None = None) -> str:
    """Return the expiry as whole seconds since the Unix epoch.

    The fractional part is truncated, never rounded.
    """
    current = datetime.now(timezone.utc) if now is None else now
    expires_on = current + time_to_live
    return str(int((expires_on - EPOCH).total_seconds()))


def sign(string_to_sign: str, encoded_key: bytes) -> str:
    digest = hmac.new(encoded_key, string_to_sign.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def build_signature(
    key_name: str,
    encoded_key: bytes,
    resource: str,
    time_to_live: timedelta,
    *,
    now: datetime | None = None,
) -> str:
    """Build a ``SharedAccessSignature`` token for ``resource``.

    The resource is not normalized; its casing can be significant to the
    service verifying the token. The signed string is the encoded resource
    and the expiry joined by a newline, e.g.::

        https%3A%2F%2Fns.example.com%2Fpath
        1609462800
    """
    expires_on = build_expires_on(time_to_live, now=now)
    audience_uri = url_encode(resource)
    signature = sign("\n".join((audience_uri, expires_on)), encoded_key)

    return (
        f"{SHARED_ACCESS_SIGNATURE} "
        f"{SIGNED_RESOURCE}={audience_uri}"
        f"&{SIGNATURE}={url_encode(signature)}"
        f"&{SIGNED_EXPIRY}={url_encode(expires_on)}"
        f"&{SIGNED_KEY_NAME}={url_encode(key_name)}"
    )


def verify_signature(token: str, encoded_key: bytes) -> bool:
    """Check that ``token`` was signed with ``encoded_key``. Expiry is not checked."""
    fields = validate(token)
    expected = sign("\n".join((fields[SIGNED_RESOURCE], fields[SIGNED_EXPIRY])), encoded_key)
    return hmac.compare_digest(expected.encode("ascii"), fields[SIGNATURE].encode("utf-8"))
