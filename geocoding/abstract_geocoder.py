"""Geocoding abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class GeocoderUnavailable(Exception):
    """The upstream provider failed or answered with something unusable."""


@dataclass(frozen=True)
class GeocodeResult:
    lat: float
    lon: float
    label: str


@dataclass(frozen=True)
class IpLocation:
    lat: float
    lon: float
    city: str | None = None
    region: str | None = None


class AbstractGeocoder(ABC):
    """Interface for geocoding backends."""

    @abstractmethod
    def search(self, query: str) -> GeocodeResult | None:
        """Return the best match for a free-text address, or None."""

    @abstractmethod
    def reverse(self, lat: float, lon: float) -> GeocodeResult:
        """Return a label for a coordinate pair (empty when unknown)."""

    @abstractmethod
    def locate_ip(self) -> IpLocation | None:
        """Return a coarse location for the caller's public IP, or None."""

    def close(self) -> None:
        """Release any held connections."""
