"""Geolocation resolver - request origin to network address and location.

The lookup itself belongs to the surrounding application; the core only
consumes the resulting strings.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from riskgate.common.constants import OriginConstants


@dataclass(frozen=True)
class ResolvedOrigin:
    network_address: str
    location: str


class GeoResolver(Protocol):

    def resolve(self, origin: Optional[str]) -> ResolvedOrigin:
        ...


class StaticGeoResolver:
    """Resolves origins from a fixed table.

    Unknown origins keep their address and get ``Unknown Location``;
    a missing origin falls back to the loopback address.
    """

    def __init__(self, locations: Optional[Dict[str, str]] = None):
        self._locations = dict(locations or {})

    def add(self, network_address: str, location: str) -> None:
        self._locations[network_address] = location

    def resolve(self, origin: Optional[str]) -> ResolvedOrigin:
        if not origin:
            return ResolvedOrigin(
                network_address=OriginConstants.UNKNOWN_ADDRESS,
                location=OriginConstants.UNKNOWN_LOCATION,
            )
        return ResolvedOrigin(
            network_address=origin,
            location=self._locations.get(origin, OriginConstants.UNKNOWN_LOCATION),
        )
