from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from .constants import LOGGER, MAX_KEY_LENGTH, MAX_KEY_NAME_LENGTH
from .encoding import KeyEncoder, utf8_key_encoder
from .errors import ArgumentTooLongError, InvalidArgumentError
from .signature import build_signature
from .token import SharedAccessSignatureToken, validate


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SharedAccessSignatureTokenProvider:
    """Issues SAS tokens from a shared access key, or hands out a fixed signature.

    The key is encoded once at construction and never logged or repr'd.
    """

    def __init__(
        self,
        key_name: str,
        shared_access_key: str,
        key_encoder: KeyEncoder | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not key_name or not shared_access_key:
            raise InvalidArgumentError("key_name" if not key_name else "shared_access_key")
        if len(key_name) > MAX_KEY_NAME_LENGTH:
            raise ArgumentTooLongError("key_name", key_name, MAX_KEY_NAME_LENGTH)
        if len(shared_access_key) > MAX_KEY_LENGTH:
            raise ArgumentTooLongError("shared_access_key", shared_access_key, MAX_KEY_LENGTH)

        encoder = key_encoder or utf8_key_encoder
        self._key_name: str | None = key_name
        self._encoded_key: bytes | None = encoder(shared_access_key)
        self._signature: str | None = None
        self._clock = clock or _utcnow

    @classmethod
    def from_signature(cls, shared_access_signature: str) -> "SharedAccessSignatureTokenProvider":
        if not shared_access_signature:
            raise InvalidArgumentError("shared_access_signature")
        validate(shared_access_signature)

        provider = cls.__new__(cls)
        provider._key_name = None
        provider._encoded_key = None
        provider._signature = shared_access_signature
        provider._clock = _utcnow
        return provider

    @property
    def key_name(self) -> str | None:
        return self._key_name

    def __repr__(self) -> str:
        if self._signature is not None:
            return f"{type(self).__name__}(signature=...)"
        return f"{type(self).__name__}(key_name={self._key_name!r})"

    def build_signature(self, resource: str, valid_for: timedelta) -> str:
        if self._signature is not None:
            return self._signature

        LOGGER.debug("Building shared access signature for %s (key %s)", resource, self._key_name)
        return build_signature(
            self._key_name,
            self._encoded_key,
            resource,
            valid_for,
            now=self._clock(),
        )

    async def get_token(self, resource: str, valid_for: timedelta) -> SharedAccessSignatureToken:
        return SharedAccessSignatureToken.parse(self.build_signature(resource, valid_for))
