from __future__ import annotations

import urllib.parse
from typing import Callable

KeyEncoder = Callable[[str], bytes]

# Form encoding as the relay service computes it: "-_.!*()" stay literal,
# "~" is escaped and spaces become "+".
_FORM_SAFE = "!*()"


def url_encode(value: str) -> str:
    return urllib.parse.quote_plus(value, safe=_FORM_SAFE).replace("~", "%7E")


def url_decode(value: str) -> str:
    return urllib.parse.unquote_plus(value)


def utf8_key_encoder(key: str) -> bytes:
    """Default key encoder: the secret's UTF-8 bytes are the HMAC key."""
    return key.encode("utf-8")
