"""Unit tests for the static geolocation resolver."""

from riskgate.collaborators import LoggingNotifier, ResolvedOrigin, StaticGeoResolver
from riskgate.core.types import DeliveryStatus


def test_known_address_resolves_to_location():
    resolver = StaticGeoResolver({"198.51.100.10": "Lisbon, Portugal"})
    assert resolver.resolve("198.51.100.10") == ResolvedOrigin("198.51.100.10", "Lisbon, Portugal")


def test_unknown_address_keeps_address():
    resolver = StaticGeoResolver()
    resolved = resolver.resolve("203.0.113.5")

    assert resolved.network_address == "203.0.113.5"
    assert resolved.location == "Unknown Location"


def test_missing_origin_falls_back_to_loopback():
    resolved = StaticGeoResolver().resolve(None)
    assert resolved == ResolvedOrigin("127.0.0.1", "Unknown Location")


def test_add_registers_location():
    resolver = StaticGeoResolver()
    resolver.add("192.0.2.1", "Porto, Portugal")
    assert resolver.resolve("192.0.2.1").location == "Porto, Portugal"


def test_logging_notifier_masks_recipient(caplog):
    caplog.set_level("DEBUG", logger="riskgate.collaborators.notifier")

    status = LoggingNotifier().send(
        "alice@example.com", {"kind": "one_time_code", "code": "123456"}
    )

    assert status == DeliveryStatus.DELIVERED
    assert "alice@example.com" not in caplog.text
