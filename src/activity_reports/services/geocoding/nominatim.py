"""Reverse geocoding against a Nominatim-compatible service."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from ...config import settings
from ...errors import GeocodeUnavailable

logger = logging.getLogger(__name__)


class GeocodeService(Protocol):
    def reverse(self, latitude: float, longitude: float) -> dict:
        """Return the provider's address payload or raise GeocodeUnavailable."""
        ...


class NominatimClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoding_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.geocoding_timeout_seconds
        self.user_agent = user_agent or settings.geocoding_user_agent
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout),
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    def reverse(self, latitude: float, longitude: float) -> dict:
        params = {
            "format": "json",
            "lat": latitude,
            "lon": longitude,
            "addressdetails": 1,
        }
        client = self._get_client()
        try:
            response = client.get(f"{self.base_url}/reverse", params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise GeocodeUnavailable(f"Reverse geocoding failed for {latitude},{longitude}: {e}") from e
        except ValueError as e:
            raise GeocodeUnavailable(f"Reverse geocoding returned invalid JSON for {latitude},{longitude}") from e
        finally:
            client.close()

        if not isinstance(data, dict):
            raise GeocodeUnavailable(f"Unexpected reverse geocoding payload for {latitude},{longitude}")
        return data
