from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Mapping

from starlette.requests import Request
from starlette.responses import JSONResponse

from sas.encoding import KeyEncoder, utf8_key_encoder
from sas.errors import MalformedTokenError
from sas.signature import verify_signature
from sas.token import SharedAccessSignatureToken

from .constants import DEFAULT_AUTH_HEADER, LOGGER
from .http import extract_sas_token


class UnauthorizedRequestError(RuntimeError):
    def __init__(self, message: str = "Unauthorized request.") -> None:
        super().__init__(message)
        self.status_code = 401


class SharedAccessSignatureVerifier:
    """Verify incoming SAS tokens on the side that holds the shared keys.

    ``keys`` maps each accepted key name to its secret.
    """

    def __init__(
        self,
        keys: Mapping[str, str],
        *,
        key_encoder: KeyEncoder | None = None,
        header_name: str = DEFAULT_AUTH_HEADER,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        encoder = key_encoder or utf8_key_encoder
        self._keys = {name: encoder(secret) for name, secret in keys.items()}
        self._header_name = header_name
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def verify(self, token: str, *, audience: str | None = None) -> SharedAccessSignatureToken:
        try:
            parsed = SharedAccessSignatureToken.parse(token)
            expired = parsed.is_expired(self._clock())
        except MalformedTokenError as exc:
            raise self._reject("malformed token: %s", exc) from exc

        encoded_key = self._keys.get(parsed.key_name)
        if encoded_key is None:
            raise self._reject("unknown key name %s", parsed.key_name)
        if not verify_signature(token, encoded_key):
            raise self._reject("signature mismatch for key %s", parsed.key_name)
        if expired:
            raise self._reject("token for %s expired at %s", parsed.audience, parsed.expires_at.isoformat())
        if audience is not None and parsed.audience != audience:
            raise self._reject("audience %s does not match %s", parsed.audience, audience)
        return parsed

    async def authenticate(
        self, request: Request, *, audience: str | None = None
    ) -> SharedAccessSignatureToken:
        token = extract_sas_token(request.headers.get(self._header_name))
        if token is None:
            raise self._reject("missing %s header on %s", self._header_name, request.url.path)
        return self.verify(token, audience=audience)

    def _reject(self, reason: str, *args) -> UnauthorizedRequestError:
        LOGGER.warning("Rejected shared access signature: " + reason, *args)
        return UnauthorizedRequestError("Invalid or expired shared access signature.")


def unauthorized_response(exc: UnauthorizedRequestError) -> JSONResponse:
    return JSONResponse(
        {"error": "unauthorized", "error_description": str(exc)},
        status_code=exc.status_code,
        headers={"WWW-Authenticate": "SharedAccessSignature"},
    )
