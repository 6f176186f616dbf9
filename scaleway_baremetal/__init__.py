"""Async client for the Scaleway bare-metal API.

Example:
    import asyncio
    import scaleway_baremetal as bm

    async def main():
        async with bm.ScalewayClient.from_env(default_zone="fr-par-1") as client:
            api = bm.BaremetalAPI(client)
            servers = await api.list_servers(bm.ListServersRequest(), all_pages=True)
            for server in servers.servers:
                print(server.name, server.status)

    asyncio.run(main())
"""

__version__ = "0.1.0"

from .api import (
    INSTALL_RETRY_INTERVAL,
    INSTALL_TERMINAL_STATUSES,
    SERVER_RETRY_INTERVAL,
    SERVER_TERMINAL_STATUSES,
    BaremetalAPI,
)
from .config import ClientConfig, load_config
from .errors import (
    BaremetalError,
    ConfigurationError,
    FieldRequiredError,
    InstallNotStartedError,
    ResponseError,
    TypeMismatchError,
    WaitError,
    WaitTimeoutError,
)
from .observability.logger import logger
from .pagination import Paginated, fetch_all_pages
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
from .transport import ScalewayClient, ScalewayRequest, Transport
from .types import (
    CPU,
    IP,
    OS,
    Disk,
    IPFailover,
    IPFailoverEvent,
    IPFailoverEventAction,
    IPFailoverMACType,
    IPFailoverStatus,
    IPReverseStatus,
    IPVersion,
    ListIPFailoverEventsOrderBy,
    ListIPFailoverEventsResponse,
    ListIPFailoversOrderBy,
    ListIPFailoversResponse,
    ListOffersResponse,
    ListOSResponse,
    ListServerEventsOrderBy,
    ListServerEventsResponse,
    ListServersOrderBy,
    ListServersResponse,
    Memory,
    Money,
    Offer,
    OfferStock,
    RebootBootType,
    RemoteServerAccess,
    Server,
    ServerBootType,
    ServerEvent,
    ServerInstall,
    ServerInstallStatus,
    ServerMetrics,
    ServerStatus,
    TimeSeries,
)
from .wait import (
    DEFAULT_TIMEOUT,
    Clock,
    IntervalStrategy,
    MonotonicClock,
    exponential_interval,
    linear_interval,
    wait_for,
)

__all__ = [
    "__version__",
    # API
    "BaremetalAPI",
    "SERVER_TERMINAL_STATUSES",
    "INSTALL_TERMINAL_STATUSES",
    "SERVER_RETRY_INTERVAL",
    "INSTALL_RETRY_INTERVAL",
    # Transport
    "Transport",
    "ScalewayClient",
    "ScalewayRequest",
    "ClientConfig",
    "load_config",
    # Requests
    "ListServersRequest",
    "GetServerRequest",
    "CreateServerRequest",
    "UpdateServerRequest",
    "InstallServerRequest",
    "GetServerMetricsRequest",
    "DeleteServerRequest",
    "RebootServerRequest",
    "StartServerRequest",
    "StopServerRequest",
    "ListServerEventsRequest",
    "CreateRemoteServerAccessRequest",
    "GetRemoteServerAccessRequest",
    "DeleteRemoteServerAccessRequest",
    "UpdateIPRequest",
    "CreateIPFailoverRequest",
    "GetIPFailoverRequest",
    "ListIPFailoversRequest",
    "DeleteIPFailoverRequest",
    "UpdateIPFailoverRequest",
    "AttachIPFailoversRequest",
    "DetachIPFailoversRequest",
    "ListIPFailoverEventsRequest",
    "ListOffersRequest",
    "GetOfferRequest",
    "ListOSRequest",
    "GetOSRequest",
    "WaitForServerRequest",
    "WaitForServerInstallRequest",
    # Types
    "Server",
    "ServerInstall",
    "ServerEvent",
    "IP",
    "RemoteServerAccess",
    "IPFailover",
    "IPFailoverEvent",
    "Offer",
    "Money",
    "CPU",
    "Disk",
    "Memory",
    "OS",
    "TimeSeries",
    "ServerMetrics",
    "ServerStatus",
    "ServerInstallStatus",
    "ServerBootType",
    "RebootBootType",
    "IPVersion",
    "IPReverseStatus",
    "ListServersOrderBy",
    "ListServerEventsOrderBy",
    "OfferStock",
    "IPFailoverStatus",
    "IPFailoverMACType",
    "IPFailoverEventAction",
    "ListIPFailoversOrderBy",
    "ListIPFailoverEventsOrderBy",
    "ListServersResponse",
    "ListServerEventsResponse",
    "ListOffersResponse",
    "ListOSResponse",
    "ListIPFailoversResponse",
    "ListIPFailoverEventsResponse",
    # Pagination
    "Paginated",
    "fetch_all_pages",
    # Waiting
    "wait_for",
    "linear_interval",
    "exponential_interval",
    "IntervalStrategy",
    "Clock",
    "MonotonicClock",
    "DEFAULT_TIMEOUT",
    # Errors
    "BaremetalError",
    "ConfigurationError",
    "FieldRequiredError",
    "ResponseError",
    "TypeMismatchError",
    "InstallNotStartedError",
    "WaitTimeoutError",
    "WaitError",
    # Logging
    "logger",
]
