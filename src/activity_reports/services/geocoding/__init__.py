"""Reverse geocoding services."""

from functools import lru_cache

from .nominatim import GeocodeService, NominatimClient
from .resolver import GeocodeResolver, address_label, parse_coordinates


@lru_cache(maxsize=1)
def get_geocode_resolver() -> GeocodeResolver:
    """Process-wide resolver so resolved addresses are shared across requests."""
    return GeocodeResolver(NominatimClient())


__all__ = [
    "GeocodeResolver",
    "GeocodeService",
    "NominatimClient",
    "address_label",
    "get_geocode_resolver",
    "parse_coordinates",
]
