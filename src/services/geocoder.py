"""Geocoding service for MapQuest integration."""

import logging
from dataclasses import dataclass

import httpx

from src.config import get_settings

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised when an address or zipcode cannot be resolved."""


@dataclass(frozen=True)
class GeocodedLocation:
    latitude: float
    longitude: float
    formatted_address: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None


class Geocoder:
    """Resolves free-form addresses and zipcodes to coordinates."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.base_url = self.settings.geocoder_base_url
        self.api_key = self.settings.geocoder_api_key
        self.timeout = 10.0

    async def geocode(self, query: str) -> GeocodedLocation:
        """Geocode an address and return the best match."""
        if not self.api_key:
            raise GeocodingError("Geocoder API key not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.base_url,
                    params={"key": self.api_key, "location": query, "maxResults": 1},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling geocoder: {e}")
            raise GeocodingError(f"Geocoding request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Geocoder returned a non-JSON body: {e}")
            raise GeocodingError("Geocoding response could not be parsed") from e

        return self._parse(query, data)

    @staticmethod
    def _parse(query: str, data: dict) -> GeocodedLocation:
        if not isinstance(data, dict):
            raise GeocodingError("Geocoding response could not be parsed")
        results = data.get("results") or []
        locations = results[0].get("locations", []) if results else []
        if not locations:
            logger.warning(f"No geocoding results for '{query}'")
            raise GeocodingError(f"No location found for '{query}'")

        loc = locations[0]
        lat_lng = loc.get("latLng") or loc.get("displayLatLng") or {}
        if "lat" not in lat_lng or "lng" not in lat_lng:
            raise GeocodingError(f"No coordinates returned for '{query}'")

        street = loc.get("street") or None
        city = loc.get("adminArea5") or None
        state = loc.get("adminArea3") or None
        zipcode = loc.get("postalCode") or None
        country = loc.get("adminArea1") or None
        formatted = ", ".join(part for part in (street, city, state, zipcode, country) if part)

        return GeocodedLocation(
            latitude=float(lat_lng["lat"]),
            longitude=float(lat_lng["lng"]),
            formatted_address=formatted or None,
            street=street,
            city=city,
            state=state,
            zipcode=zipcode,
            country=country,
        )


def get_geocoder() -> Geocoder:
    """Get a geocoder instance."""
    return Geocoder()
