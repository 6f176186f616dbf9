from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeAlias

import pytest

from scaleway_baremetal import BaremetalAPI, ScalewayRequest

Responder: TypeAlias = Callable[[ScalewayRequest], Any]


class RecordingTransport:
    """In-memory transport: records every request and answers from a script.

    `responses` items are either a decoded JSON value, an exception to
    raise, or a callable receiving the request.
    """

    def __init__(
        self,
        *responses: Any,
        default_zone: str | None = "fr-par-1",
        default_organization_id: str | None = "org-default",
        default_page_size: int | None = None,
    ) -> None:
        self.requests: list[ScalewayRequest] = []
        self._responses = list(responses)
        self._default_zone = default_zone
        self._default_organization_id = default_organization_id
        self._default_page_size = default_page_size

    @property
    def default_zone(self) -> str | None:
        return self._default_zone

    @property
    def default_organization_id(self) -> str | None:
        return self._default_organization_id

    @property
    def default_page_size(self) -> int | None:
        return self._default_page_size

    def queue(self, *responses: Any) -> None:
        self._responses.extend(responses)

    async def do(self, request: ScalewayRequest) -> Any:
        self.requests.append(request)
        if not self._responses:
            return {}
        response = self._responses.pop(0)
        match response:
            case BaseException():
                raise response
            case _ if callable(response):
                return response(request)
            case _:
                return response

    @property
    def last(self) -> ScalewayRequest:
        return self.requests[-1]


class FakeClock:
    """Clock whose time only moves when the code under test sleeps."""

    def __init__(self, start: float = 1000.0) -> None:
        self._now = start
        self.start = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self._now += seconds

    @property
    def elapsed(self) -> float:
        return self._now - self.start


def server_json(
    server_id: str = "srv-1",
    *,
    status: str = "ready",
    install: dict[str, Any] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": server_id,
        "organization_id": "org-default",
        "name": f"name-{server_id}",
        "description": "",
        "status": status,
        "offer_id": "offer-1",
        "tags": [],
        "ips": [],
        "zone": "fr-par-1",
    }
    if install is not None:
        data["install"] = install
    data.update(extra)
    return data


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def api(transport: RecordingTransport, clock: FakeClock) -> BaremetalAPI:
    return BaremetalAPI(transport, clock=clock)
