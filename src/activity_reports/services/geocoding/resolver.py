"""Coordinate-to-address resolution with a per-session cache."""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Iterable, Optional

from ...config import settings
from ...errors import GeocodeUnavailable, InvalidCoordinate
from ...models.domain import GeoAddress
from .nominatim import GeocodeService

NO_LOCATION = "No location"
INVALID_FORMAT = "Invalid location format"
INVALID_COORDINATES = "Invalid coordinates"
LOCATION_NOT_FOUND = "Location not found"
FAILED_TO_LOAD = "Failed to load"

_LOCALITY_KEYS = ("neighbourhood", "suburb", "village", "town", "city")

logger = logging.getLogger(__name__)


def parse_coordinates(value: str) -> tuple[float, float]:
    """Split a "lat,lng" string into floats, validating both fields."""

    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 2:
        raise InvalidCoordinate(f"Expected 'lat,lng', got '{value}'", malformed=True)
    try:
        lat, lng = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise InvalidCoordinate(f"Non-numeric coordinate in '{value}'") from exc
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinate(f"Non-finite coordinate in '{value}'")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        raise InvalidCoordinate(f"Coordinate out of range in '{value}'")
    return lat, lng


def address_label(payload: dict) -> Optional[str]:
    """Pick a short display label from a reverse-geocoding payload."""

    if not isinstance(payload, dict):
        return None
    if payload.get("error"):
        return None
    addr = payload.get("address")
    if isinstance(addr, dict):
        road = addr.get("road") or addr.get("building") or addr.get("amenity")
        locality = next((addr[key] for key in _LOCALITY_KEYS if addr.get(key)), None)
        if road and locality:
            return f"{road}, {locality}"
        if locality or road:
            return locality or road

    display_name = payload.get("display_name")
    if isinstance(display_name, str) and display_name.strip():
        return ",".join(display_name.split(",")[:2]).strip()
    return None


class GeocodeResolver:
    """Resolve coordinate strings to addresses, caching successes by exact key.

    Failures degrade to sentinel strings and are not cached.
    """

    def __init__(self, service: GeocodeService) -> None:
        self.service = service
        self._cache: dict[str, GeoAddress] = {}
        self._lock = threading.Lock()

    def cached(self, coordinate_key: str) -> Optional[GeoAddress]:
        with self._lock:
            return self._cache.get(coordinate_key)

    def resolve(self, coordinate: Optional[str]) -> str:
        if coordinate is None or not coordinate.strip():
            return NO_LOCATION

        hit = self.cached(coordinate)
        if hit is not None:
            return hit.address

        try:
            lat, lng = parse_coordinates(coordinate)
        except InvalidCoordinate as exc:
            logger.debug(f"Rejecting location '{coordinate}': {exc}")
            return INVALID_FORMAT if exc.malformed else INVALID_COORDINATES

        try:
            payload = self.service.reverse(lat, lng)
        except (GeocodeUnavailable, ConnectionError, TimeoutError, ValueError) as exc:
            logger.warning(f"Geocoding unavailable for {coordinate}: {exc}")
            return FAILED_TO_LOAD

        label = address_label(payload)
        if not label:
            return LOCATION_NOT_FOUND

        with self._lock:
            self._cache[coordinate] = GeoAddress(
                coordinate_key=coordinate,
                address=label,
                resolved_at=datetime.now(timezone.utc),
            )
        return label

    def resolve_many(self, coordinates: Iterable[Optional[str]], *, max_workers: int | None = None) -> dict[str, str]:
        """Resolve distinct coordinate keys concurrently."""
        keys = list(dict.fromkeys(c for c in coordinates if c))
        if not keys:
            return {}
        workers = max(1, min(max_workers or settings.max_parallel_requests, len(keys)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return dict(zip(keys, executor.map(self.resolve, keys)))
