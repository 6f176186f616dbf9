"""Bare-metal API types.

Enums decode unknown or empty wire values to their documented default,
so a server that grows new states never breaks an older client.
Records are immutable and built from decoded JSON with `from_dict`.
List responses are mutable: the pagination driver folds pages into them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, ClassVar, Self, TypeAlias

from .errors import TypeMismatchError

JSON: TypeAlias = Mapping[str, Any]

# =============================================================================
# Enums
# =============================================================================


class _OpenEnum(StrEnum):
    """StrEnum that maps any unrecognised value to a default member."""

    # Override hook: every subclass names its default member.
    @classmethod
    def default(cls) -> Self:
        raise NotImplementedError(f"{cls.__name__} must define default()")

    @classmethod
    def _missing_(cls, value: object) -> Self:
        return cls.default()

    @classmethod
    def canonical(cls, value: object) -> Self:
        """Decode a wire value, falling back to the default member."""
        if value is None or value == "":
            return cls.default()
        return cls(value)


class ServerStatus(_OpenEnum):
    UNKNOWN = "unknown"
    UNDELIVERED = "undelivered"
    READY = "ready"
    STOPPING = "stopping"
    STOPPED = "stopped"
    STARTING = "starting"
    ERROR = "error"
    DELETING = "deleting"
    LOCKED = "locked"

    @classmethod
    def default(cls) -> ServerStatus:
        return cls.UNKNOWN


class ServerInstallStatus(_OpenEnum):
    UNKNOWN = "unknown"
    COMPLETED = "completed"
    INSTALLING = "installing"
    TO_INSTALL = "to_install"
    ERROR = "error"

    @classmethod
    def default(cls) -> ServerInstallStatus:
        return cls.UNKNOWN


class ServerBootType(_OpenEnum):
    NORMAL = "normal"
    RESCUE = "rescue"

    @classmethod
    def default(cls) -> ServerBootType:
        return cls.NORMAL


class RebootBootType(_OpenEnum):
    NORMAL = "normal"
    RESCUE = "rescue"

    @classmethod
    def default(cls) -> RebootBootType:
        return cls.NORMAL


class IPVersion(_OpenEnum):
    IPV4 = "Ipv4"
    IPV6 = "Ipv6"

    @classmethod
    def default(cls) -> IPVersion:
        return cls.IPV4


class IPReverseStatus(_OpenEnum):
    UNKNOWN = "unknown"
    PENDING = "pending"
    ACTIVE = "active"
    ERROR = "error"

    @classmethod
    def default(cls) -> IPReverseStatus:
        return cls.UNKNOWN


class ListServersOrderBy(_OpenEnum):
    CREATED_AT_ASC = "created_at_asc"
    CREATED_AT_DESC = "created_at_desc"

    @classmethod
    def default(cls) -> ListServersOrderBy:
        return cls.CREATED_AT_ASC


class ListServerEventsOrderBy(_OpenEnum):
    CREATED_AT_ASC = "created_at_asc"
    CREATED_AT_DESC = "created_at_desc"

    @classmethod
    def default(cls) -> ListServerEventsOrderBy:
        return cls.CREATED_AT_ASC


class OfferStock(_OpenEnum):
    EMPTY = "empty"
    LOW = "low"
    AVAILABLE = "available"

    @classmethod
    def default(cls) -> OfferStock:
        return cls.EMPTY


class IPFailoverStatus(_OpenEnum):
    UNKNOWN = "unknown"
    DELIVERING = "delivering"
    READY = "ready"
    UPDATING = "updating"
    ERROR = "error"
    DELETING = "deleting"
    LOCKED = "locked"

    @classmethod
    def default(cls) -> IPFailoverStatus:
        return cls.UNKNOWN


class IPFailoverMACType(_OpenEnum):
    UNKNOWN_MAC_TYPE = "unknown_mac_type"
    NONE = "none"
    DUPLICATE = "duplicate"
    VMWARE = "vmware"
    XEN = "xen"
    KVM = "kvm"

    @classmethod
    def default(cls) -> IPFailoverMACType:
        return cls.UNKNOWN_MAC_TYPE


class IPFailoverEventAction(_OpenEnum):
    UNKNOWN = "unknown"
    BILLING_START = "billing_start"
    BILLING_STOP = "billing_stop"
    ORDER_FAIL = "order_fail"
    UPDATE_IP = "update_ip"
    UPDATE_IP_FAIL = "update_ip_fail"

    @classmethod
    def default(cls) -> IPFailoverEventAction:
        return cls.UNKNOWN


class ListIPFailoversOrderBy(_OpenEnum):
    CREATED_AT_ASC = "created_at_asc"
    CREATED_AT_DESC = "created_at_desc"

    @classmethod
    def default(cls) -> ListIPFailoversOrderBy:
        return cls.CREATED_AT_ASC


class ListIPFailoverEventsOrderBy(_OpenEnum):
    CREATED_AT_ASC = "created_at_asc"
    CREATED_AT_DESC = "created_at_desc"

    @classmethod
    def default(cls) -> ListIPFailoverEventsOrderBy:
        return cls.CREATED_AT_ASC


# =============================================================================
# Decoding helpers
# =============================================================================


def parse_time(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp. Sub-microsecond digits are truncated."""
    if not value:
        return None
    return datetime.fromisoformat(value)


def _strings(value: Any) -> tuple[str, ...]:
    return tuple(str(v) for v in value or ())


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True, slots=True)
class IP:
    id: str
    address: str
    reverse: str = ""
    version: IPVersion = IPVersion.IPV4
    reverse_status: IPReverseStatus = IPReverseStatus.UNKNOWN
    reverse_status_message: str | None = None

    @classmethod
    def from_dict(cls, data: JSON) -> IP:
        return cls(
            id=data.get("id") or "",
            address=data.get("address") or "",
            reverse=data.get("reverse") or "",
            version=IPVersion.canonical(data.get("version")),
            reverse_status=IPReverseStatus.canonical(data.get("reverse_status")),
            reverse_status_message=data.get("reverse_status_message"),
        )


@dataclass(frozen=True, slots=True)
class ServerInstall:
    os_id: str
    hostname: str
    ssh_key_ids: tuple[str, ...] = ()
    status: ServerInstallStatus = ServerInstallStatus.UNKNOWN

    @classmethod
    def from_dict(cls, data: JSON) -> ServerInstall:
        return cls(
            os_id=data.get("os_id") or "",
            hostname=data.get("hostname") or "",
            ssh_key_ids=_strings(data.get("ssh_key_ids")),
            status=ServerInstallStatus.canonical(data.get("status")),
        )


@dataclass(frozen=True, slots=True)
class Server:
    """A bare-metal server as seen by the API."""

    id: str
    organization_id: str = ""
    name: str = ""
    description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    status: ServerStatus = ServerStatus.UNKNOWN
    offer_id: str = ""
    install: ServerInstall | None = None
    tags: tuple[str, ...] = ()
    ips: tuple[IP, ...] = ()
    domain: str = ""
    boot_type: ServerBootType = ServerBootType.NORMAL
    zone: str = ""

    @classmethod
    def from_dict(cls, data: JSON) -> Server:
        install = data.get("install")
        return cls(
            id=data.get("id") or "",
            organization_id=data.get("organization_id") or "",
            name=data.get("name") or "",
            description=data.get("description") or "",
            created_at=parse_time(data.get("created_at")),
            updated_at=parse_time(data.get("updated_at")),
            status=ServerStatus.canonical(data.get("status")),
            offer_id=data.get("offer_id") or "",
            install=ServerInstall.from_dict(install) if install is not None else None,
            tags=_strings(data.get("tags")),
            ips=tuple(IP.from_dict(ip) for ip in data.get("ips") or ()),
            domain=data.get("domain") or "",
            boot_type=ServerBootType.canonical(data.get("boot_type")),
            zone=data.get("zone") or "",
        )


@dataclass(frozen=True, slots=True)
class ServerEvent:
    id: str
    action: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: JSON) -> ServerEvent:
        return cls(
            id=data.get("id") or "",
            action=data.get("action") or "",
            created_at=parse_time(data.get("created_at")),
            updated_at=parse_time(data.get("updated_at")),
        )


@dataclass(frozen=True, slots=True)
class RemoteServerAccess:
    """Short-lived console credentials, valid strictly before expires_at."""

    url: str
    login: str
    password: str
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(self.expires_at.tzinfo)
        return now >= self.expires_at

    @classmethod
    def from_dict(cls, data: JSON) -> RemoteServerAccess:
        return cls(
            url=data.get("url") or "",
            login=data.get("login") or "",
            password=data.get("password") or "",
            expires_at=parse_time(data.get("expires_at")),
        )


# =============================================================================
# IP Failovers
# =============================================================================


@dataclass(frozen=True, slots=True)
class IPFailover:
    """A movable public IP that can be attached to one server at a time.

    `server_id` is empty while the failover is detached.
    """

    id: str
    organization_id: str = ""
    description: str = ""
    tags: tuple[str, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None
    status: IPFailoverStatus = IPFailoverStatus.UNKNOWN
    ip_address: str = ""
    mac_address: str = ""
    server_id: str = ""
    mac_type: IPFailoverMACType = IPFailoverMACType.UNKNOWN_MAC_TYPE
    reverse: str = ""
    reverse_status: IPReverseStatus = IPReverseStatus.UNKNOWN
    reverse_status_message: str | None = None
    zone: str = ""

    @classmethod
    def from_dict(cls, data: JSON) -> IPFailover:
        return cls(
            id=data.get("id") or "",
            organization_id=data.get("organization_id") or "",
            description=data.get("description") or "",
            tags=_strings(data.get("tags")),
            created_at=parse_time(data.get("created_at")),
            updated_at=parse_time(data.get("updated_at")),
            status=IPFailoverStatus.canonical(data.get("status")),
            ip_address=data.get("ip_address") or "",
            mac_address=data.get("mac_address") or "",
            server_id=data.get("server_id") or "",
            mac_type=IPFailoverMACType.canonical(data.get("mac_type")),
            reverse=data.get("reverse") or "",
            reverse_status=IPReverseStatus.canonical(data.get("reverse_status")),
            reverse_status_message=data.get("reverse_status_message"),
            zone=data.get("zone") or "",
        )


@dataclass(frozen=True, slots=True)
class IPFailoverEvent:
    id: str
    action: IPFailoverEventAction = IPFailoverEventAction.UNKNOWN
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: JSON) -> IPFailoverEvent:
        return cls(
            id=data.get("id") or "",
            action=IPFailoverEventAction.canonical(data.get("action")),
            created_at=parse_time(data.get("created_at")),
            updated_at=parse_time(data.get("updated_at")),
        )


def failovers_from_dict(data: JSON) -> tuple[IPFailover, ...]:
    """Decode the `failovers` list of attach/detach answers."""
    return tuple(IPFailover.from_dict(f) for f in data.get("failovers") or ())


# =============================================================================
# Catalog
# =============================================================================


@dataclass(frozen=True, slots=True)
class Money:
    currency_code: str
    units: int = 0
    nanos: int = 0

    def as_decimal(self) -> Decimal:
        return Decimal(self.units) + Decimal(self.nanos) / Decimal(1_000_000_000)

    @classmethod
    def from_dict(cls, data: JSON | None) -> Money | None:
        if not data:
            return None
        return cls(
            currency_code=data.get("currency_code") or "",
            units=int(data.get("units") or 0),
            nanos=int(data.get("nanos") or 0),
        )


@dataclass(frozen=True, slots=True)
class CPU:
    name: str
    cores: int = 0
    threads: int = 0
    frequency: int = 0

    @classmethod
    def from_dict(cls, data: JSON) -> CPU:
        return cls(
            name=data.get("name") or "",
            cores=int(data.get("cores") or 0),
            threads=int(data.get("threads") or 0),
            frequency=int(data.get("frequency") or 0),
        )


@dataclass(frozen=True, slots=True)
class Disk:
    capacity: int
    type: str

    @classmethod
    def from_dict(cls, data: JSON) -> Disk:
        return cls(capacity=int(data.get("capacity") or 0), type=data.get("type") or "")


@dataclass(frozen=True, slots=True)
class Memory:
    capacity: int
    type: str
    frequency: int = 0
    ecc: bool = False

    @classmethod
    def from_dict(cls, data: JSON) -> Memory:
        return cls(
            capacity=int(data.get("capacity") or 0),
            type=data.get("type") or "",
            frequency=int(data.get("frequency") or 0),
            ecc=bool(data.get("ecc", False)),
        )


@dataclass(frozen=True, slots=True)
class Offer:
    """A catalog entry describing a class of bare-metal machine."""

    id: str
    name: str
    stock: OfferStock = OfferStock.EMPTY
    bandwidth: int = 0
    commercial_range: str = ""
    price_per_sixty_minutes: Money | None = None
    price_per_month: Money | None = None
    disks: tuple[Disk, ...] = ()
    enable: bool = False
    cpus: tuple[CPU, ...] = ()
    memories: tuple[Memory, ...] = ()
    quota_name: str = ""
    # Deprecated by the API in favour of price_per_sixty_minutes / price_per_month.
    price_by_minute: Money | None = None
    price_by_month: Money | None = None

    @classmethod
    def from_dict(cls, data: JSON) -> Offer:
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            stock=OfferStock.canonical(data.get("stock")),
            bandwidth=int(data.get("bandwidth") or 0),
            commercial_range=data.get("commercial_range") or "",
            price_per_sixty_minutes=Money.from_dict(data.get("price_per_sixty_minutes")),
            price_per_month=Money.from_dict(data.get("price_per_month")),
            disks=tuple(Disk.from_dict(d) for d in data.get("disk") or ()),
            enable=bool(data.get("enable", False)),
            cpus=tuple(CPU.from_dict(c) for c in data.get("cpu") or ()),
            memories=tuple(Memory.from_dict(m) for m in data.get("memory") or ()),
            quota_name=data.get("quota_name") or "",
            price_by_minute=Money.from_dict(data.get("price_by_minute")),
            price_by_month=Money.from_dict(data.get("price_by_month")),
        )


@dataclass(frozen=True, slots=True)
class OS:
    id: str
    name: str
    version: str = ""

    @classmethod
    def from_dict(cls, data: JSON) -> OS:
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            version=data.get("version") or "",
        )


@dataclass(frozen=True, slots=True)
class TimeSeries:
    name: str
    points: tuple[tuple[datetime, float], ...] = ()
    metadata: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: JSON) -> TimeSeries:
        points: list[tuple[datetime, float]] = []
        for raw in data.get("points") or ():
            match raw:
                case [str() as ts, value]:
                    when = parse_time(ts)
                    if when is not None:
                        points.append((when, float(value)))
                case _:
                    continue
        return cls(
            name=data.get("name") or "",
            points=tuple(points),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True, slots=True)
class ServerMetrics:
    pings: TimeSeries | None = None

    @classmethod
    def from_dict(cls, data: JSON) -> ServerMetrics:
        pings = data.get("pings")
        return cls(pings=TimeSeries.from_dict(pings) if pings else None)


# =============================================================================
# List Responses
# =============================================================================


@dataclass(slots=True)
class _ListResponse:
    """Base for paginated responses.

    `append` is meant for the pagination driver: it folds another page
    of the same kind into this one and bumps `total_count` by the number
    of items appended.
    """

    items_field: ClassVar[str]
    wire_field: ClassVar[str]

    total_count: int = 0

    def _items(self) -> list[Any]:
        return getattr(self, self.items_field)

    def append(self, other: object) -> int:
        if type(other) is not type(self):
            raise TypeMismatchError(type(self), type(other))
        added: list[Any] = other._items()  # type: ignore[attr-defined]
        self._items().extend(added)
        self.total_count += len(added)
        return len(added)

    def __len__(self) -> int:
        return len(self._items())


@dataclass(slots=True)
class ListServersResponse(_ListResponse):
    items_field: ClassVar[str] = "servers"
    wire_field: ClassVar[str] = "servers"

    servers: list[Server] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JSON) -> ListServersResponse:
        return cls(
            total_count=int(data.get("total_count") or 0),
            servers=[Server.from_dict(s) for s in data.get(cls.wire_field) or ()],
        )


@dataclass(slots=True)
class ListServerEventsResponse(_ListResponse):
    items_field: ClassVar[str] = "events"
    wire_field: ClassVar[str] = "event"

    events: list[ServerEvent] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JSON) -> ListServerEventsResponse:
        return cls(
            total_count=int(data.get("total_count") or 0),
            events=[ServerEvent.from_dict(e) for e in data.get(cls.wire_field) or ()],
        )


@dataclass(slots=True)
class ListOffersResponse(_ListResponse):
    items_field: ClassVar[str] = "offers"
    wire_field: ClassVar[str] = "offers"

    offers: list[Offer] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JSON) -> ListOffersResponse:
        return cls(
            total_count=int(data.get("total_count") or 0),
            offers=[Offer.from_dict(o) for o in data.get(cls.wire_field) or ()],
        )


@dataclass(slots=True)
class ListOSResponse(_ListResponse):
    items_field: ClassVar[str] = "os"
    wire_field: ClassVar[str] = "os"

    os: list[OS] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JSON) -> ListOSResponse:
        return cls(
            total_count=int(data.get("total_count") or 0),
            os=[OS.from_dict(o) for o in data.get(cls.wire_field) or ()],
        )


@dataclass(slots=True)
class ListIPFailoversResponse(_ListResponse):
    items_field: ClassVar[str] = "failovers"
    wire_field: ClassVar[str] = "failovers"

    failovers: list[IPFailover] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JSON) -> ListIPFailoversResponse:
        return cls(
            total_count=int(data.get("total_count") or 0),
            failovers=[IPFailover.from_dict(f) for f in data.get(cls.wire_field) or ()],
        )


@dataclass(slots=True)
class ListIPFailoverEventsResponse(_ListResponse):
    items_field: ClassVar[str] = "events"
    wire_field: ClassVar[str] = "event"

    events: list[IPFailoverEvent] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: JSON) -> ListIPFailoverEventsResponse:
        return cls(
            total_count=int(data.get("total_count") or 0),
            events=[IPFailoverEvent.from_dict(e) for e in data.get(cls.wire_field) or ()],
        )
