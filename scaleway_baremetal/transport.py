"""Transport layer: request descriptor, Transport protocol and the HTTP client.

BaremetalAPI only depends on the Transport protocol, so tests and callers
can swap ScalewayClient for anything that can execute a ScalewayRequest.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from . import __version__
from .config import ClientConfig, load_config
from .errors import ConfigurationError, ResponseError
from .infra.http import HttpClient, HttpError, TokenAuth
from .infra.retry import on_status_code, retrying
from .observability.logger import logger
from .query import Query

USER_AGENT = f"scaleway-baremetal-python/{__version__}"


@dataclass(frozen=True, slots=True)
class ScalewayRequest:
    """A fully assembled API call."""

    method: str
    path: str
    query: Query = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] | None = None


@runtime_checkable
class Transport(Protocol):
    """What BaremetalAPI needs from a client.

    `do` executes a request and returns the decoded JSON body (None when
    the response has none). The three defaults are None when unset.
    """

    @property
    def default_zone(self) -> str | None: ...

    @property
    def default_organization_id(self) -> str | None: ...

    @property
    def default_page_size(self) -> int | None: ...

    async def do(self, request: ScalewayRequest) -> Any: ...


def _error_message(body: str) -> str | None:
    try:
        data = json.loads(body)
    except ValueError:
        return None
    match data:
        case {"message": str() as message}:
            return message
        case _:
            return None


class ScalewayClient:
    """Async HTTP transport for the Scaleway API.

    Example:
        async with ScalewayClient.from_env() as client:
            api = BaremetalAPI(client)
            servers = await api.list_servers(ListServersRequest())
    """

    def __init__(self, config: ClientConfig) -> None:
        if not config.secret_key:
            raise ConfigurationError(
                "Scaleway secret key not found. Set SCW_SECRET_KEY environment "
                "variable or pass secret_key to the client config."
            )
        self._config = config
        self._log = logger.bind(component="client")
        self._http = HttpClient(
            config.api_url,
            TokenAuth(config.secret_key),
            timeout=config.request_timeout,
            default_headers={"User-Agent": USER_AGENT},
        )

    @classmethod
    def from_config(cls, config: ClientConfig) -> ScalewayClient:
        return cls(config)

    @classmethod
    def from_env(cls, **overrides: Any) -> ScalewayClient:
        """Build a client from the config file, SCW_* variables and overrides."""
        return cls(load_config(**overrides))

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def default_zone(self) -> str | None:
        return self._config.default_zone

    @property
    def default_organization_id(self) -> str | None:
        return self._config.default_organization_id

    @property
    def default_page_size(self) -> int | None:
        return self._config.default_page_size

    async def do(self, request: ScalewayRequest) -> Any:
        headers = dict(request.headers)
        if request.body is not None:
            headers.setdefault("Content-Type", "application/json")

        try:
            async for attempt in retrying(
                on=on_status_code(429, 503),
                max_attempts=self._config.max_retries,
                base_delay=self._config.retry_base_delay,
            ):
                with attempt:
                    return await self._http.request(
                        request.method,
                        request.path,
                        json=request.body,
                        params=request.query or None,
                        headers=headers,
                    )
        except HttpError as e:
            self._log.warning(
                "API error {method} {path}: {status}",
                method=request.method, path=request.path, status=e.status,
            )
            raise ResponseError(e.status, e.body, _error_message(e.body)) from e

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> ScalewayClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()
