"""Geocoding providers."""

from .abstract_geocoder import (
    AbstractGeocoder,
    GeocodeResult,
    GeocoderUnavailable,
    IpLocation,
)
from .nominatim import NominatimGeocoder

__all__ = [
    "AbstractGeocoder",
    "GeocodeResult",
    "GeocoderUnavailable",
    "IpLocation",
    "NominatimGeocoder",
]
