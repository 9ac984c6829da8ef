"""Geocoding adapter using the Google Geocoding API."""

import logging
from typing import Protocol

import httpx

from backend.app.config import Settings, get_settings
from backend.app.errors import GeocodingError
from backend.app.models.common import Location

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    """Resolve a free-text destination to coordinates."""

    async def geocode(self, destination: str) -> Location:
        """Geocode a destination.

        Raises:
            GeocodingError: If the provider fails or finds nothing
        """
        ...


class GoogleGeocoder:
    """Geocoder backed by the Google Geocoding REST endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://maps.googleapis.com/maps/api/geocode/json",
        timeout: float = 4.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize geocoder.

        Args:
            api_key: Google Maps API key
            base_url: Geocoding endpoint
            timeout: Per-request timeout in seconds
            client: Optional httpx client (for testing with mocks)
        """
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client = client

    async def geocode(self, destination: str) -> Location:
        """Geocode a destination, returning the first match."""
        params = {"address": destination, "key": self._api_key}

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_client = True

        try:
            response = await client.get(self._base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GeocodingError(f"Failed to geocode destination: {destination}") from e
        finally:
            if close_client:
                await client.aclose()

        # Response structure: {status, results: [{formatted_address, place_id, geometry: {location: {lat, lng}}}]}
        status = data.get("status", "OK")
        results = data.get("results") or []
        if status not in ("OK", "ZERO_RESULTS"):
            raise GeocodingError(f"Geocoding provider returned status {status} for {destination}")
        if not results:
            raise GeocodingError(f"Could not find location: {destination}")

        first = results[0]
        try:
            location = first["geometry"]["location"]
            return Location(
                lat=location["lat"],
                lng=location["lng"],
                formatted_address=first.get("formatted_address") or destination,
                place_id=first.get("place_id"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Malformed geocoding result for {destination}") from e


class UnconfiguredGeocoder:
    """Geocoder used when no API key is configured; always fails."""

    async def geocode(self, destination: str) -> Location:
        raise GeocodingError("Geocoding API key not configured")


def get_geocoder(settings: Settings | None = None) -> Geocoder:
    """Factory function to get a geocoder based on config."""
    settings = settings or get_settings()
    api_key = settings.google_maps_api_key

    if api_key and api_key.get_secret_value():
        return GoogleGeocoder(
            api_key=api_key.get_secret_value(),
            base_url=settings.geocode_base_url,
            timeout=settings.geocode_timeout_seconds,
        )

    logger.warning("No Google Maps API key configured, geocoding will degrade to placeholders")
    return UnconfiguredGeocoder()
