"""Thin aiohttp wrapper speaking JSON to a single API host."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

import aiohttp

from scaleway_baremetal.observability.logger import logger

QueryParams: TypeAlias = Mapping[str, str] | Sequence[tuple[str, str]]
JSONBody: TypeAlias = dict[str, Any] | list[Any]

_ERROR_BODY_PREVIEW = 500

# ─── Errors ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class HttpError(Exception):
    """Non-2xx answer, or status 0 when no answer came back at all."""

    status: int
    body: str

    def __str__(self) -> str:
        return f"HTTP {self.status}: {self.body}"


# ─── Auth ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TokenAuth:
    """Scaleway secret key, sent as X-Auth-Token."""

    secret_key: str

    def __repr__(self) -> str:
        return "TokenAuth(secret_key='***')"

    async def headers(self) -> dict[str, str]:
        return {"X-Auth-Token": self.secret_key, "Accept": "application/json"}


# ─── Client ──────────────────────────────────────────────────────────


class HttpClient:
    """Lazily opened aiohttp session bound to one base URL.

    Example:
        async with HttpClient("https://api.scaleway.com", TokenAuth(key)) as http:
            data = await http.request("GET", "/baremetal/v1alpha1/zones/fr-par-1/servers")
    """

    def __init__(
        self,
        base_url: str,
        auth: TokenAuth | None = None,
        *,
        timeout: float = 30,
        default_headers: Mapping[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = dict(default_headers or {})
        self._session: aiohttp.ClientSession | None = None
        self._log = logger.bind(component="http")

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers=self._headers,
            )
        return self._session

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: JSONBody | None = None,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send one request and return its decoded JSON body.

        An empty body decodes to None.

        Raises:
            HttpError: For any status >= 400, and with status 0 when the
                connection itself fails.
        """
        merged = await self._auth.headers() if self._auth else {}
        merged.update(headers or {})
        self._log.trace("{method} {path} params={params}", method=method, path=path, params=params)

        try:
            async with self.session.request(
                method, f"{self._base_url}{path}", json=json, params=params, headers=merged,
            ) as resp:
                raw = await resp.read()
                if resp.status >= 400:
                    text = raw.decode(errors="replace")
                    self._log.warning(
                        "{method} {path} -> {status}: {body}",
                        method=method, path=path, status=resp.status,
                        body=text[:_ERROR_BODY_PREVIEW],
                    )
                    raise HttpError(resp.status, text)
                if not raw.strip():
                    return None
                return await resp.json(content_type=None)
        except aiohttp.ClientError as e:
            raise HttpError(0, str(e)) from e

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()
