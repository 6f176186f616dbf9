"""Typed request records.

A request left with an empty `zone` (or `organization_id`, or a zero
`page_size` on list requests) is completed from the transport defaults
when the operation runs. The record itself is never modified.

Fields documented as "not updated if None" are left out of the request
body when None, which leaves the remote value untouched.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .types import (
    IPFailoverMACType,
    ListIPFailoverEventsOrderBy,
    ListIPFailoversOrderBy,
    ListServerEventsOrderBy,
    ListServersOrderBy,
    RebootBootType,
)

# =============================================================================
# Servers
# =============================================================================


@dataclass(frozen=True, slots=True)
class ListServersRequest:
    zone: str = ""
    page: int | None = None
    page_size: int | None = None
    order_by: ListServersOrderBy = ListServersOrderBy.CREATED_AT_ASC
    tags: Sequence[str] = ()
    status: Sequence[str] = ()
    name: str | None = None
    organization_id: str | None = None


@dataclass(frozen=True, slots=True)
class GetServerRequest:
    server_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class CreateServerRequest:
    offer_id: str
    name: str
    zone: str = ""
    organization_id: str = ""
    description: str = ""
    tags: Sequence[str] = ()


@dataclass(frozen=True, slots=True)
class UpdateServerRequest:
    """Partial update: name, description and tags are not updated if None."""

    server_id: str
    zone: str = ""
    name: str | None = None
    description: str | None = None
    tags: Sequence[str] | None = None


@dataclass(frozen=True, slots=True)
class InstallServerRequest:
    server_id: str
    os_id: str
    hostname: str
    zone: str = ""
    ssh_key_ids: Sequence[str] = ()


@dataclass(frozen=True, slots=True)
class DeleteServerRequest:
    server_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class RebootServerRequest:
    server_id: str
    zone: str = ""
    boot_type: RebootBootType = RebootBootType.NORMAL


@dataclass(frozen=True, slots=True)
class StartServerRequest:
    server_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class StopServerRequest:
    server_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class GetServerMetricsRequest:
    server_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class ListServerEventsRequest:
    server_id: str
    zone: str = ""
    page: int | None = None
    page_size: int | None = None
    order_by: ListServerEventsOrderBy = ListServerEventsOrderBy.CREATED_AT_ASC


# =============================================================================
# Remote Access
# =============================================================================


@dataclass(frozen=True, slots=True)
class CreateRemoteServerAccessRequest:
    server_id: str
    ip: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class GetRemoteServerAccessRequest:
    server_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class DeleteRemoteServerAccessRequest:
    server_id: str
    zone: str = ""


# =============================================================================
# IPs
# =============================================================================


@dataclass(frozen=True, slots=True)
class UpdateIPRequest:
    """Set the reverse DNS of a server IP. `reverse` is not updated if None."""

    server_id: str
    ip_id: str
    zone: str = ""
    reverse: str | None = None


# =============================================================================
# IP Failovers
# =============================================================================


@dataclass(frozen=True, slots=True)
class CreateIPFailoverRequest:
    """Order a failover IP.

    `duplicate_mac_from` names an existing failover whose MAC address is
    reused, for `mac_type=DUPLICATE`.
    """

    zone: str = ""
    organization_id: str = ""
    description: str = ""
    tags: Sequence[str] = ()
    mac_type: IPFailoverMACType = IPFailoverMACType.UNKNOWN_MAC_TYPE
    duplicate_mac_from: str | None = None


@dataclass(frozen=True, slots=True)
class GetIPFailoverRequest:
    ip_failover_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class ListIPFailoversRequest:
    zone: str = ""
    page: int | None = None
    page_size: int | None = None
    order_by: ListIPFailoversOrderBy = ListIPFailoversOrderBy.CREATED_AT_ASC
    tags: Sequence[str] = ()
    status: Sequence[str] = ()
    server_ids: Sequence[str] = ()
    organization_id: str | None = None


@dataclass(frozen=True, slots=True)
class DeleteIPFailoverRequest:
    ip_failover_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class UpdateIPFailoverRequest:
    """Partial update: every field but the id and zone is not updated if None."""

    ip_failover_id: str
    zone: str = ""
    description: str | None = None
    tags: Sequence[str] | None = None
    mac_type: IPFailoverMACType | None = None
    duplicate_mac_from: str | None = None
    reverse: str | None = None


@dataclass(frozen=True, slots=True)
class AttachIPFailoversRequest:
    ip_failover_ids: Sequence[str]
    server_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class DetachIPFailoversRequest:
    ip_failover_ids: Sequence[str]
    zone: str = ""


@dataclass(frozen=True, slots=True)
class ListIPFailoverEventsRequest:
    ip_failover_id: str
    zone: str = ""
    page: int | None = None
    page_size: int | None = None
    order_by: ListIPFailoverEventsOrderBy = ListIPFailoverEventsOrderBy.CREATED_AT_ASC


# =============================================================================
# Catalog
# =============================================================================


@dataclass(frozen=True, slots=True)
class ListOffersRequest:
    zone: str = ""
    page: int | None = None
    page_size: int | None = None


@dataclass(frozen=True, slots=True)
class GetOfferRequest:
    offer_id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class ListOSRequest:
    zone: str = ""
    page: int | None = None
    page_size: int | None = None


@dataclass(frozen=True, slots=True)
class GetOSRequest:
    os_id: str
    zone: str = ""


# =============================================================================
# Waits
# =============================================================================


@dataclass(frozen=True, slots=True)
class WaitForServerRequest:
    """Poll a server until its status is terminal.

    `timeout` and `retry_interval` are in seconds. None (or 0 for the
    timeout) selects the defaults.
    """

    server_id: str
    zone: str = ""
    timeout: float | None = None
    retry_interval: float | None = None


@dataclass(frozen=True, slots=True)
class WaitForServerInstallRequest:
    server_id: str
    zone: str = ""
    timeout: float | None = None
    retry_interval: float | None = None
