from __future__ import annotations

from collections.abc import Generator

import httpx


class BearerAuth(httpx.Auth):
    """Static bearer-credential authentication.

    The credential is supplied by the caller; obtaining or refreshing it is
    out of scope for this package.

    Example:
        >>> auth = BearerAuth("sk-...")
        >>> client = AsyncApiClient(config, auth=auth)
    """

    def __init__(self, token: str, header_name: str = "Authorization") -> None:
        if not token:
            raise ValueError("Bearer token must not be empty")
        self._token = token
        self._header_name = header_name

    def __repr__(self) -> str:
        return f"BearerAuth(header_name={self._header_name!r}, token=***)"

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        """Attach the credential (used by both sync and async flows)."""
        request.headers[self._header_name] = f"Bearer {self._token}"
        yield request
