"""Bare-metal API: typed operations and wait helpers.

Each operation resolves zone, organization and page size from the
transport defaults when the request leaves them empty, validates the
fields that end up in the path, then dispatches one request. Nothing is
sent when validation fails. Transport errors propagate unchanged.
"""

from __future__ import annotations

from typing import Any, Final

from .errors import FieldRequiredError, InstallNotStartedError, WaitError
from .observability.logger import logger
from .pagination import fetch_all_pages
from .query import Query, add_to_query
from .requests import (
    AttachIPFailoversRequest,
    CreateIPFailoverRequest,
    CreateRemoteServerAccessRequest,
    CreateServerRequest,
    DeleteIPFailoverRequest,
    DeleteRemoteServerAccessRequest,
    DeleteServerRequest,
    DetachIPFailoversRequest,
    GetIPFailoverRequest,
    GetOfferRequest,
    GetOSRequest,
    GetRemoteServerAccessRequest,
    GetServerMetricsRequest,
    GetServerRequest,
    InstallServerRequest,
    ListIPFailoverEventsRequest,
    ListIPFailoversRequest,
    ListOffersRequest,
    ListOSRequest,
    ListServerEventsRequest,
    ListServersRequest,
    RebootServerRequest,
    StartServerRequest,
    StopServerRequest,
    UpdateIPFailoverRequest,
    UpdateIPRequest,
    UpdateServerRequest,
    WaitForServerInstallRequest,
    WaitForServerRequest,
)
from .transport import ScalewayRequest, Transport
from .types import (
    IP,
    OS,
    IPFailover,
    ListIPFailoverEventsResponse,
    ListIPFailoversResponse,
    ListOffersResponse,
    ListOSResponse,
    ListServerEventsResponse,
    ListServersResponse,
    Offer,
    RemoteServerAccess,
    Server,
    ServerInstallStatus,
    ServerMetrics,
    ServerStatus,
    failovers_from_dict,
)
from .wait import Clock, linear_interval, wait_for

API_PREFIX: Final = "/baremetal/v1alpha1/zones"

SERVER_TERMINAL_STATUSES: Final = frozenset({
    ServerStatus.READY,
    ServerStatus.STOPPED,
    ServerStatus.ERROR,
    ServerStatus.LOCKED,
    ServerStatus.UNKNOWN,
})

INSTALL_TERMINAL_STATUSES: Final = frozenset({
    ServerInstallStatus.COMPLETED,
    ServerInstallStatus.ERROR,
    ServerInstallStatus.UNKNOWN,
})

SERVER_RETRY_INTERVAL: Final = 5.0
INSTALL_RETRY_INTERVAL: Final = 15.0


def _require(field: str, value: str | None) -> str:
    if not value:
        raise FieldRequiredError(field)
    return value


class BaremetalAPI:
    """Manage bare-metal servers.

    Example:
        async with ScalewayClient.from_env(default_zone="fr-par-1") as client:
            api = BaremetalAPI(client)
            server = await api.create_server(
                CreateServerRequest(offer_id="...", name="node-1")
            )
            server = await api.wait_for_server(WaitForServerRequest(server.id))
    """

    def __init__(self, transport: Transport, *, clock: Clock | None = None) -> None:
        self._transport = transport
        self._clock = clock
        self._log = logger.bind(component="api")

    # =========================================================================
    # Default Resolution
    # =========================================================================

    def _zone(self, zone: str) -> str:
        return _require("zone", zone or self._transport.default_zone)

    def _organization_id(self, organization_id: str) -> str:
        return _require(
            "organization_id",
            organization_id or self._transport.default_organization_id,
        )

    def _page_size(self, page_size: int | None) -> int | None:
        return page_size or self._transport.default_page_size or None

    def _server_path(self, zone: str, server_id: str, *parts: str) -> str:
        path = f"{API_PREFIX}/{zone}/servers/{_require('server_id', server_id)}"
        return "/".join((path, *parts)) if parts else path

    async def _do(
        self,
        method: str,
        path: str,
        *,
        query: Query | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        self._log.debug("{method} {path}", method=method, path=path)
        return await self._transport.do(
            ScalewayRequest(method=method, path=path, query=query or [], body=body)
        )

    # =========================================================================
    # Servers
    # =========================================================================

    async def list_servers(
        self, request: ListServersRequest, *, all_pages: bool = False,
    ) -> ListServersResponse:
        """List servers matching the filters.

        With `all_pages`, every page from `request.page` on is fetched
        and folded into a single response.
        """
        if all_pages:
            return await fetch_all_pages(self._list_servers_page, request)
        return await self._list_servers_page(request)

    async def _list_servers_page(self, request: ListServersRequest) -> ListServersResponse:
        zone = self._zone(request.zone)
        query: Query = []
        add_to_query(query, "page", request.page)
        add_to_query(query, "page_size", self._page_size(request.page_size))
        add_to_query(query, "order_by", request.order_by)
        add_to_query(query, "tags", request.tags)
        add_to_query(query, "status", request.status)
        add_to_query(query, "name", request.name)
        add_to_query(query, "organization_id", request.organization_id)

        data = await self._do("GET", f"{API_PREFIX}/{zone}/servers", query=query)
        return ListServersResponse.from_dict(data or {})

    async def get_server(self, request: GetServerRequest) -> Server:
        zone = self._zone(request.zone)
        data = await self._do("GET", self._server_path(zone, request.server_id))
        return Server.from_dict(data or {})

    async def create_server(self, request: CreateServerRequest) -> Server:
        """Create a server. Once created, you probably want to install an OS."""
        zone = self._zone(request.zone)
        organization_id = self._organization_id(request.organization_id)
        body = {
            "offer_id": request.offer_id,
            "organization_id": organization_id,
            "name": request.name,
            "description": request.description,
            "tags": list(request.tags),
        }
        data = await self._do("POST", f"{API_PREFIX}/{zone}/servers", body=body)
        return Server.from_dict(data or {})

    async def update_server(self, request: UpdateServerRequest) -> Server:
        zone = self._zone(request.zone)
        path = self._server_path(zone, request.server_id)
        body: dict[str, Any] = {}
        if request.name is not None:
            body["name"] = request.name
        if request.description is not None:
            body["description"] = request.description
        if request.tags is not None:
            body["tags"] = list(request.tags)
        data = await self._do("PATCH", path, body=body)
        return Server.from_dict(data or {})

    async def install_server(self, request: InstallServerRequest) -> Server:
        """Install an OS on a server."""
        zone = self._zone(request.zone)
        path = self._server_path(zone, request.server_id, "install")
        body = {
            "os_id": request.os_id,
            "hostname": request.hostname,
            "ssh_key_ids": list(request.ssh_key_ids),
        }
        data = await self._do("POST", path, body=body)
        return Server.from_dict(data or {})

    async def get_server_metrics(self, request: GetServerMetricsRequest) -> ServerMetrics:
        """Ping statistics of a server."""
        zone = self._zone(request.zone)
        data = await self._do("GET", self._server_path(zone, request.server_id, "metrics"))
        return ServerMetrics.from_dict(data or {})

    async def delete_server(self, request: DeleteServerRequest) -> Server:
        zone = self._zone(request.zone)
        data = await self._do("DELETE", self._server_path(zone, request.server_id))
        return Server.from_dict(data or {})

    async def reboot_server(self, request: RebootServerRequest) -> Server:
        """Reboot a server, in rescue mode when `boot_type` is RESCUE."""
        zone = self._zone(request.zone)
        path = self._server_path(zone, request.server_id, "reboot")
        data = await self._do("POST", path, body={"boot_type": str(request.boot_type)})
        return Server.from_dict(data or {})

    async def start_server(self, request: StartServerRequest) -> Server:
        zone = self._zone(request.zone)
        data = await self._do("POST", self._server_path(zone, request.server_id, "start"), body={})
        return Server.from_dict(data or {})

    async def stop_server(self, request: StopServerRequest) -> Server:
        zone = self._zone(request.zone)
        data = await self._do("POST", self._server_path(zone, request.server_id, "stop"), body={})
        return Server.from_dict(data or {})

    async def list_server_events(
        self, request: ListServerEventsRequest, *, all_pages: bool = False,
    ) -> ListServerEventsResponse:
        if all_pages:
            return await fetch_all_pages(self._list_server_events_page, request)
        return await self._list_server_events_page(request)

    async def _list_server_events_page(
        self, request: ListServerEventsRequest,
    ) -> ListServerEventsResponse:
        zone = self._zone(request.zone)
        path = self._server_path(zone, request.server_id, "events")
        query: Query = []
        add_to_query(query, "page", request.page)
        add_to_query(query, "page_size", self._page_size(request.page_size))
        add_to_query(query, "order_by", request.order_by)

        data = await self._do("GET", path, query=query)
        return ListServerEventsResponse.from_dict(data or {})

    # =========================================================================
    # Remote Access
    # =========================================================================

    async def create_remote_server_access(
        self, request: CreateRemoteServerAccessRequest,
    ) -> RemoteServerAccess:
        """Open console access for `request.ip`.

        Remote access becomes available one hour after the server is installed.
        """
        zone = self._zone(request.zone)
        path = self._server_path(zone, request.server_id, "remote-access")
        data = await self._do("POST", path, body={"ip": request.ip})
        return RemoteServerAccess.from_dict(data or {})

    async def get_remote_server_access(
        self, request: GetRemoteServerAccessRequest,
    ) -> RemoteServerAccess:
        zone = self._zone(request.zone)
        data = await self._do("GET", self._server_path(zone, request.server_id, "remote-access"))
        return RemoteServerAccess.from_dict(data or {})

    async def delete_remote_server_access(
        self, request: DeleteRemoteServerAccessRequest,
    ) -> None:
        zone = self._zone(request.zone)
        await self._do("DELETE", self._server_path(zone, request.server_id, "remote-access"))

    # =========================================================================
    # IPs
    # =========================================================================

    async def update_ip(self, request: UpdateIPRequest) -> IP:
        """Configure an IP of a server, e.g. to set its reverse DNS."""
        zone = self._zone(request.zone)
        path = self._server_path(zone, request.server_id, "ips", _require("ip_id", request.ip_id))
        body: dict[str, Any] = {}
        if request.reverse is not None:
            body["reverse"] = request.reverse
        data = await self._do("PATCH", path, body=body)
        return IP.from_dict(data or {})

    # =========================================================================
    # IP Failovers
    # =========================================================================

    def _failover_path(self, zone: str, ip_failover_id: str, *parts: str) -> str:
        path = f"{API_PREFIX}/{zone}/ip-failovers/{_require('ip_failover_id', ip_failover_id)}"
        return "/".join((path, *parts)) if parts else path

    async def create_ip_failover(self, request: CreateIPFailoverRequest) -> IPFailover:
        """Order a failover IP, routable to any server of the zone."""
        zone = self._zone(request.zone)
        organization_id = self._organization_id(request.organization_id)
        body: dict[str, Any] = {
            "organization_id": organization_id,
            "description": request.description,
            "tags": list(request.tags),
            "mac_type": str(request.mac_type),
        }
        if request.duplicate_mac_from is not None:
            body["duplicate_mac_from"] = request.duplicate_mac_from
        data = await self._do("POST", f"{API_PREFIX}/{zone}/ip-failovers", body=body)
        return IPFailover.from_dict(data or {})

    async def get_ip_failover(self, request: GetIPFailoverRequest) -> IPFailover:
        zone = self._zone(request.zone)
        data = await self._do("GET", self._failover_path(zone, request.ip_failover_id))
        return IPFailover.from_dict(data or {})

    async def list_ip_failovers(
        self, request: ListIPFailoversRequest, *, all_pages: bool = False,
    ) -> ListIPFailoversResponse:
        if all_pages:
            return await fetch_all_pages(self._list_ip_failovers_page, request)
        return await self._list_ip_failovers_page(request)

    async def _list_ip_failovers_page(
        self, request: ListIPFailoversRequest,
    ) -> ListIPFailoversResponse:
        zone = self._zone(request.zone)
        query: Query = []
        add_to_query(query, "page", request.page)
        add_to_query(query, "page_size", self._page_size(request.page_size))
        add_to_query(query, "order_by", request.order_by)
        add_to_query(query, "tags", request.tags)
        add_to_query(query, "status", request.status)
        add_to_query(query, "server_ids", request.server_ids)
        add_to_query(query, "organization_id", request.organization_id)

        data = await self._do("GET", f"{API_PREFIX}/{zone}/ip-failovers", query=query)
        return ListIPFailoversResponse.from_dict(data or {})

    async def delete_ip_failover(self, request: DeleteIPFailoverRequest) -> IPFailover:
        zone = self._zone(request.zone)
        data = await self._do("DELETE", self._failover_path(zone, request.ip_failover_id))
        return IPFailover.from_dict(data or {})

    async def update_ip_failover(self, request: UpdateIPFailoverRequest) -> IPFailover:
        zone = self._zone(request.zone)
        path = self._failover_path(zone, request.ip_failover_id)
        body: dict[str, Any] = {}
        if request.description is not None:
            body["description"] = request.description
        if request.tags is not None:
            body["tags"] = list(request.tags)
        if request.mac_type is not None:
            body["mac_type"] = str(request.mac_type)
        if request.duplicate_mac_from is not None:
            body["duplicate_mac_from"] = request.duplicate_mac_from
        if request.reverse is not None:
            body["reverse"] = request.reverse
        data = await self._do("PATCH", path, body=body)
        return IPFailover.from_dict(data or {})

    async def attach_ip_failovers(
        self, request: AttachIPFailoversRequest,
    ) -> tuple[IPFailover, ...]:
        """Route the failover IPs to `request.server_id`."""
        zone = self._zone(request.zone)
        body = {
            "ip_failover_ids": list(request.ip_failover_ids),
            "server_id": request.server_id,
        }
        data = await self._do("POST", f"{API_PREFIX}/{zone}/ip-failovers/attach", body=body)
        return failovers_from_dict(data or {})

    async def detach_ip_failovers(
        self, request: DetachIPFailoversRequest,
    ) -> tuple[IPFailover, ...]:
        zone = self._zone(request.zone)
        body = {"ip_failover_ids": list(request.ip_failover_ids)}
        data = await self._do("POST", f"{API_PREFIX}/{zone}/ip-failovers/detach", body=body)
        return failovers_from_dict(data or {})

    async def list_ip_failover_events(
        self, request: ListIPFailoverEventsRequest, *, all_pages: bool = False,
    ) -> ListIPFailoverEventsResponse:
        if all_pages:
            return await fetch_all_pages(self._list_ip_failover_events_page, request)
        return await self._list_ip_failover_events_page(request)

    async def _list_ip_failover_events_page(
        self, request: ListIPFailoverEventsRequest,
    ) -> ListIPFailoverEventsResponse:
        zone = self._zone(request.zone)
        path = self._failover_path(zone, request.ip_failover_id, "events")
        query: Query = []
        add_to_query(query, "page", request.page)
        add_to_query(query, "page_size", self._page_size(request.page_size))
        add_to_query(query, "order_by", request.order_by)

        data = await self._do("GET", path, query=query)
        return ListIPFailoverEventsResponse.from_dict(data or {})

    # =========================================================================
    # Catalog
    # =========================================================================

    async def list_offers(
        self, request: ListOffersRequest, *, all_pages: bool = False,
    ) -> ListOffersResponse:
        if all_pages:
            return await fetch_all_pages(self._list_offers_page, request)
        return await self._list_offers_page(request)

    async def _list_offers_page(self, request: ListOffersRequest) -> ListOffersResponse:
        zone = self._zone(request.zone)
        query: Query = []
        add_to_query(query, "page", request.page)
        add_to_query(query, "page_size", self._page_size(request.page_size))
        data = await self._do("GET", f"{API_PREFIX}/{zone}/offers", query=query)
        return ListOffersResponse.from_dict(data or {})

    async def get_offer(self, request: GetOfferRequest) -> Offer:
        zone = self._zone(request.zone)
        offer_id = _require("offer_id", request.offer_id)
        data = await self._do("GET", f"{API_PREFIX}/{zone}/offers/{offer_id}")
        return Offer.from_dict(data or {})

    async def list_os(
        self, request: ListOSRequest, *, all_pages: bool = False,
    ) -> ListOSResponse:
        """List the operating systems that can be installed on a server."""
        if all_pages:
            return await fetch_all_pages(self._list_os_page, request)
        return await self._list_os_page(request)

    async def _list_os_page(self, request: ListOSRequest) -> ListOSResponse:
        zone = self._zone(request.zone)
        query: Query = []
        add_to_query(query, "page", request.page)
        add_to_query(query, "page_size", self._page_size(request.page_size))
        data = await self._do("GET", f"{API_PREFIX}/{zone}/os", query=query)
        return ListOSResponse.from_dict(data or {})

    async def get_os(self, request: GetOSRequest) -> OS:
        zone = self._zone(request.zone)
        os_id = _require("os_id", request.os_id)
        data = await self._do("GET", f"{API_PREFIX}/{zone}/os/{os_id}")
        return OS.from_dict(data or {})

    # =========================================================================
    # Waits
    # =========================================================================

    async def wait_for_server(self, request: WaitForServerRequest) -> Server:
        """Poll a server until it reaches a terminal status.

        Terminal statuses are ready, stopped, error, locked and unknown.
        An unrecognised status decodes to unknown, so a newer API never
        leaves the caller waiting forever.

        Raises:
            WaitError: Wrapping the timeout or any error from get_server.
        """
        get = GetServerRequest(server_id=request.server_id, zone=request.zone)

        async def poll() -> tuple[Server, bool]:
            server = await self.get_server(get)
            return server, server.status in SERVER_TERMINAL_STATUSES

        try:
            return await wait_for(
                poll,
                interval=linear_interval(request.retry_interval or SERVER_RETRY_INTERVAL),
                timeout=request.timeout,
                clock=self._clock,
                description=f"server {request.server_id}",
            )
        except Exception as e:
            raise WaitError("waiting for server failed", e) from e

    async def wait_for_server_install(self, request: WaitForServerInstallRequest) -> Server:
        """Poll a server until its OS installation reaches a terminal status.

        Terminal install statuses are completed, error and unknown.

        Raises:
            WaitError: Wrapping InstallNotStartedError when the server has
                no installation, the timeout, or any error from get_server.
        """
        get = GetServerRequest(server_id=request.server_id, zone=request.zone)

        async def poll() -> tuple[Server, bool]:
            server = await self.get_server(get)
            if server.install is None:
                raise InstallNotStartedError(server.id or request.server_id)
            return server, server.install.status in INSTALL_TERMINAL_STATUSES

        try:
            return await wait_for(
                poll,
                interval=linear_interval(request.retry_interval or INSTALL_RETRY_INTERVAL),
                timeout=request.timeout,
                clock=self._clock,
                description=f"server {request.server_id} installation",
            )
        except Exception as e:
            raise WaitError("waiting for server installation failed", e) from e
