from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from scaleway_baremetal import (
    IPFailover,
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
    ListServerEventsResponse,
    ListServersResponse,
    Money,
    Offer,
    OfferStock,
    RebootBootType,
    RemoteServerAccess,
    Server,
    ServerBootType,
    ServerInstallStatus,
    ServerMetrics,
    ServerStatus,
    ListServerEventsOrderBy,
    ListServersOrderBy,
    TypeMismatchError,
)
from tests.conftest import server_json

pytestmark = [pytest.mark.unit]


# ─── Enums ───────────────────────────────────────────────────────────


ALL_ENUMS = [
    ServerStatus,
    ServerInstallStatus,
    ServerBootType,
    RebootBootType,
    IPVersion,
    IPReverseStatus,
    ListServersOrderBy,
    ListServerEventsOrderBy,
    OfferStock,
    IPFailoverStatus,
    IPFailoverMACType,
    IPFailoverEventAction,
    ListIPFailoversOrderBy,
    ListIPFailoverEventsOrderBy,
]


class TestEnums:
    def test_known_value(self):
        assert ServerStatus.canonical("ready") is ServerStatus.READY

    @pytest.mark.parametrize("value", [None, "", "rebuilding"])
    def test_empty_or_unknown_maps_to_default(self, value):
        assert ServerStatus.canonical(value) is ServerStatus.UNKNOWN

    def test_unknown_via_constructor(self):
        assert ServerInstallStatus("brand_new_state") is ServerInstallStatus.UNKNOWN

    def test_offer_stock_defaults_to_empty(self):
        assert OfferStock.canonical(None) is OfferStock.EMPTY

    def test_ip_version_keeps_wire_casing(self):
        assert IPVersion.canonical("Ipv6") is IPVersion.IPV6
        assert str(IPVersion.IPV4) == "Ipv4"

    def test_str_is_wire_value(self):
        assert str(ServerStatus.STOPPED) == "stopped"

    @pytest.mark.parametrize("enum_cls", ALL_ENUMS, ids=lambda c: c.__name__)
    def test_every_member_round_trips_and_unknowns_fall_back(self, enum_cls):
        for member in enum_cls:
            assert enum_cls.canonical(str(member)) is member
        assert enum_cls.canonical("") is enum_cls.default()
        assert enum_cls.canonical("zzz") is enum_cls.default()
        assert enum_cls.default() in enum_cls

    def test_failover_mac_type_default_wire_value(self):
        assert str(IPFailoverMACType.canonical(None)) == "unknown_mac_type"


# ─── Records ─────────────────────────────────────────────────────────


class TestServer:
    def test_from_dict(self):
        server = Server.from_dict(server_json(
            status="starting",
            created_at="2024-03-01T10:00:00Z",
            tags=["a", "b"],
            ips=[{"id": "ip-1", "address": "51.15.0.1", "version": "Ipv4"}],
            install={
                "os_id": "os-1",
                "hostname": "node",
                "ssh_key_ids": ["k1"],
                "status": "installing",
            },
        ))

        assert server.id == "srv-1"
        assert server.status is ServerStatus.STARTING
        assert server.created_at == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)
        assert server.tags == ("a", "b")
        assert server.ips[0].address == "51.15.0.1"
        assert server.install is not None
        assert server.install.status is ServerInstallStatus.INSTALLING
        assert server.install.ssh_key_ids == ("k1",)
        assert server.zone == "fr-par-1"

    def test_missing_install_is_none(self):
        assert Server.from_dict(server_json()).install is None

    def test_null_install_is_none(self):
        assert Server.from_dict({**server_json(), "install": None}).install is None

    def test_empty_install_object_is_an_install(self):
        server = Server.from_dict(server_json(install={}))

        assert server.install is not None
        assert server.install.status is ServerInstallStatus.UNKNOWN
        assert server.install.os_id == ""

    def test_explicit_nulls_decode_to_empty_strings(self):
        server = Server.from_dict({
            "id": None, "name": None, "description": None, "zone": None, "tags": None,
        })

        assert server.id == ""
        assert server.name == ""
        assert server.description == ""
        assert server.zone == ""
        assert server.tags == ()

    def test_unknown_status(self):
        assert Server.from_dict(server_json(status="reticulating")).status is ServerStatus.UNKNOWN

    def test_sub_microsecond_timestamp_is_truncated(self):
        server = Server.from_dict(server_json(updated_at="2024-03-01T10:00:00.123456789Z"))
        assert server.updated_at == datetime(2024, 3, 1, 10, 0, 0, 123456, tzinfo=UTC)

    def test_records_are_immutable(self):
        server = Server.from_dict(server_json())
        with pytest.raises(AttributeError):
            server.name = "other"  # type: ignore[misc]


class TestRemoteServerAccess:
    def test_valid_strictly_before_expiry(self):
        expires = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        access = RemoteServerAccess(url="u", login="l", password="p", expires_at=expires)

        assert not access.is_expired(expires - timedelta(seconds=1))
        assert access.is_expired(expires)

    def test_from_dict(self):
        access = RemoteServerAccess.from_dict({
            "url": "https://console",
            "login": "root",
            "password": "secret",
            "expires_at": "2024-01-01T12:00:00+00:00",
        })
        assert access.login == "root"
        assert access.expires_at == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class TestOffer:
    def test_from_dict(self):
        offer = Offer.from_dict({
            "id": "offer-1",
            "name": "GP-BM1-S",
            "stock": "low",
            "bandwidth": 1_000_000_000,
            "price_per_month": {"currency_code": "EUR", "units": 99, "nanos": 990_000_000},
            "cpu": [{"name": "Xeon", "cores": 8, "threads": 16, "frequency": 3_000}],
            "disk": [{"capacity": 500_000_000_000, "type": "SSD"}],
            "memory": [{"capacity": 32_000_000_000, "type": "DDR4", "ecc": True}],
        })

        assert offer.stock is OfferStock.LOW
        assert offer.price_per_month == Money("EUR", 99, 990_000_000)
        assert offer.price_per_month.as_decimal() == Decimal("99.99")
        assert offer.price_per_sixty_minutes is None
        assert offer.cpus[0].threads == 16
        assert offer.disks[0].type == "SSD"
        assert offer.memories[0].ecc is True

    def test_deprecated_prices(self):
        offer = Offer.from_dict({
            "id": "offer-1",
            "name": None,
            "price_by_minute": {"currency_code": "EUR", "units": 0, "nanos": 2_000_000},
            "price_by_month": {"currency_code": "EUR", "units": 59, "nanos": 0},
        })

        assert offer.name == ""
        assert offer.price_by_minute == Money("EUR", 0, 2_000_000)
        assert offer.price_by_month is not None
        assert offer.price_by_month.as_decimal() == Decimal("59")

    def test_deprecated_prices_absent(self):
        offer = Offer.from_dict({"id": "offer-1"})
        assert offer.price_by_minute is None
        assert offer.price_by_month is None


class TestIPFailover:
    def test_from_dict(self):
        failover = IPFailover.from_dict({
            "id": "f1",
            "organization_id": "org-1",
            "description": "front",
            "tags": ["web"],
            "created_at": "2024-03-01T10:00:00Z",
            "status": "ready",
            "ip_address": "212.47.0.10",
            "mac_address": "52:54:00:aa:bb:cc",
            "server_id": "srv-1",
            "mac_type": "vmware",
            "reverse": "vip.example",
            "reverse_status": "active",
            "zone": "fr-par-1",
        })

        assert failover.status is IPFailoverStatus.READY
        assert failover.mac_type is IPFailoverMACType.VMWARE
        assert failover.reverse_status is IPReverseStatus.ACTIVE
        assert failover.tags == ("web",)
        assert failover.created_at == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)
        assert failover.server_id == "srv-1"

    def test_detached_and_unknown_values(self):
        failover = IPFailover.from_dict({"id": "f1", "server_id": None, "status": "migrating"})

        assert failover.server_id == ""
        assert failover.status is IPFailoverStatus.UNKNOWN
        assert failover.mac_type is IPFailoverMACType.UNKNOWN_MAC_TYPE


class TestServerMetrics:
    def test_pings(self):
        metrics = ServerMetrics.from_dict({
            "pings": {
                "name": "pings",
                "points": [["2024-01-01T00:00:00Z", 1.0], ["2024-01-01T00:01:00Z", 0.0]],
                "metadata": {"unit": "bool"},
            }
        })
        assert metrics.pings is not None
        assert [v for _, v in metrics.pings.points] == [1.0, 0.0]
        assert metrics.pings.metadata == {"unit": "bool"}

    def test_no_pings(self):
        assert ServerMetrics.from_dict({}).pings is None


# ─── List responses ──────────────────────────────────────────────────


def servers_page(*ids: str, total: int) -> ListServersResponse:
    return ListServersResponse.from_dict({
        "total_count": total,
        "servers": [server_json(i) for i in ids],
    })


class TestAppend:
    def test_appends_items_and_adds_their_count(self):
        acc = servers_page("a", "b", total=5)
        added = acc.append(servers_page("c", "d", total=5))

        assert added == 2
        assert [s.id for s in acc.servers] == ["a", "b", "c", "d"]
        assert acc.total_count == 7

    def test_empty_page_adds_nothing(self):
        acc = servers_page("a", total=1)
        assert acc.append(ListServersResponse()) == 0
        assert acc.total_count == 1
        assert len(acc) == 1

    def test_fresh_accumulator_counts_items(self):
        acc = ListServersResponse()
        acc.append(servers_page("a", "b", total=3))
        acc.append(servers_page("c", total=3))
        assert acc.total_count == len(acc) == 3

    def test_mismatched_type_leaves_receiver_untouched(self):
        acc = servers_page("a", total=1)

        with pytest.raises(TypeMismatchError) as exc_info:
            acc.append(ListOffersResponse(total_count=1))

        assert str(exc_info.value) == (
            "ListOffersResponse type cannot be appended to type ListServersResponse"
        )
        assert acc.total_count == 1
        assert len(acc) == 1

    def test_mismatch_is_a_type_error(self):
        with pytest.raises(TypeError):
            ListServersResponse().append(object())

    def test_events_use_singular_wire_key(self):
        events = ListServerEventsResponse.from_dict({
            "total_count": 1,
            "event": [{"id": "ev-1", "action": "reboot"}],
        })
        assert events.events[0].action == "reboot"

    def test_three_pages_into_non_empty_receiver(self):
        a = servers_page("a1", "a2", total=5)
        b = servers_page("b1", "b2", total=5)
        c = servers_page("c1", total=5)

        a.append(b)
        a.append(c)

        assert a.total_count == 5 + 2 + 1
        assert [s.id for s in a.servers] == ["a1", "a2", "b1", "b2", "c1"]
        assert len(b) == 2
        assert len(c) == 1

    def test_failover_pages(self):
        acc = ListIPFailoversResponse()
        acc.append(ListIPFailoversResponse.from_dict({
            "total_count": 2, "failovers": [{"id": "f1"}, {"id": "f2"}],
        }))

        assert [f.id for f in acc.failovers] == ["f1", "f2"]
        assert acc.total_count == 2

        with pytest.raises(TypeMismatchError):
            acc.append(ListIPFailoverEventsResponse())

    def test_failover_events_use_singular_wire_key(self):
        events = ListIPFailoverEventsResponse.from_dict({
            "total_count": 1,
            "event": [{"id": "ev-1", "action": "billing_stop"}],
        })
        assert events.events[0].action is IPFailoverEventAction.BILLING_STOP
