from __future__ import annotations

from datetime import timedelta
from typing import Generator

import httpx

from sas.constants import SHARED_ACCESS_SIGNATURE
from sas.provider import SharedAccessSignatureTokenProvider

from .constants import DEFAULT_AUTH_HEADER, DEFAULT_TTL_SECONDS, LOGGER


def extract_sas_token(header_value: str | None) -> str | None:
    if not header_value:
        return None
    value = header_value.strip()
    marker, _, rest = value.partition(" ")
    if marker.lower() != SHARED_ACCESS_SIGNATURE.lower() or not rest.strip():
        return None
    return value


def request_audience(url: httpx.URL) -> str:
    return str(url).partition("?")[0]


class SharedAccessSignatureAuth(httpx.Auth):
    """Sign outgoing httpx requests with a fresh SAS token.

    Without an explicit ``resource`` the token is scoped to the request URL,
    minus its query string.
    """

    def __init__(
        self,
        provider: SharedAccessSignatureTokenProvider,
        resource: str | None = None,
        *,
        valid_for: timedelta = timedelta(seconds=DEFAULT_TTL_SECONDS),
        header_name: str = DEFAULT_AUTH_HEADER,
    ) -> None:
        self._provider = provider
        self._resource = resource
        self._valid_for = valid_for
        self._header_name = header_name

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        resource = self._resource or request_audience(request.url)
        request.headers[self._header_name] = self._provider.build_signature(resource, self._valid_for)
        response = yield request
        if response.status_code == 401:
            LOGGER.warning(
                "Shared access signature rejected (%s %s)",
                request.method,
                request.url,
            )
