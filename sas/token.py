from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Mapping

from .constants import (
    EPOCH,
    KEY_VALUE_SEPARATOR,
    PAIR_SEPARATOR,
    REQUIRED_FIELDS,
    SHARED_ACCESS_SIGNATURE,
    SIGNATURE,
    SIGNED_EXPIRY,
    SIGNED_KEY_NAME,
    SIGNED_RESOURCE,
)
from .encoding import url_decode
from .errors import MalformedTokenError


def extract_field_values(token: str) -> dict[str, str]:
    """Split a token string into its ``key=value`` fields.

    Keys are lower-cased, so ``SIG`` and ``sig`` name the same field and the
    last occurrence wins. The ``sr`` value is returned still URL-encoded: the
    signature covers the encoded form, including the casing of its escapes.
    Every other value is URL-decoded.
    """
    if not isinstance(token, str):
        raise MalformedTokenError("Shared access signature must be a string.")

    # Every whitespace character separates, so doubled or surrounding
    # whitespace yields extra empty segments.
    segments = re.split(r"\s", token)
    if len(segments) != 2 or segments[0].lower() != SHARED_ACCESS_SIGNATURE.lower():
        raise MalformedTokenError(
            f"Shared access signature must have the form '{SHARED_ACCESS_SIGNATURE} <fields>'."
        )

    fields: dict[str, str] = {}
    for fragment in segments[1].split(PAIR_SEPARATOR):
        if not fragment:
            continue
        key, separator, value = fragment.partition(KEY_VALUE_SEPARATOR)
        if not separator:
            raise MalformedTokenError(f"Shared access signature field '{key}' has no value.")
        key = key.lower()
        fields[key] = value if key == SIGNED_RESOURCE else url_decode(value)
    return fields


def validate(token: str) -> dict[str, str]:
    fields = extract_field_values(token)
    for name in REQUIRED_FIELDS:
        if name not in fields:
            raise MalformedTokenError(
                f"Shared access signature is missing the '{name}' field.", field=name
            )
    return fields


@dataclass(frozen=True)
class SharedAccessSignatureToken:
    value: str
    fields: Mapping[str, str] = field(repr=False, compare=False)

    @classmethod
    def parse(cls, value: str) -> "SharedAccessSignatureToken":
        return cls(value=value, fields=MappingProxyType(validate(value)))

    def __str__(self) -> str:
        return self.value

    @property
    def encoded_audience(self) -> str:
        return self.fields[SIGNED_RESOURCE]

    @property
    def audience(self) -> str:
        return url_decode(self.fields[SIGNED_RESOURCE])

    @property
    def signature(self) -> str:
        return self.fields[SIGNATURE]

    @property
    def key_name(self) -> str:
        return self.fields[SIGNED_KEY_NAME]

    @property
    def expiry_seconds(self) -> int:
        raw = self.fields[SIGNED_EXPIRY]
        try:
            return int(raw)
        except ValueError as exc:
            raise MalformedTokenError(
                f"Shared access signature expiry '{raw}' is not an integer.",
                field=SIGNED_EXPIRY,
            ) from exc

    @property
    def expires_at(self) -> datetime:
        seconds = self.expiry_seconds
        try:
            return EPOCH + timedelta(seconds=seconds)
        except (OverflowError, ValueError) as exc:
            raise MalformedTokenError(
                f"Shared access signature expiry {seconds} is out of range.",
                field=SIGNED_EXPIRY,
            ) from exc

    def is_expired(self, now: datetime | None = None) -> bool:
        current = datetime.now(timezone.utc) if now is None else now
        return current >= self.expires_at
