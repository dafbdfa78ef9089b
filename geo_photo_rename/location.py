"""
Reverse geocoding and location text derivation.
"""

from typing import Any, Dict, NamedTuple, Optional

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from .metadata import GPSCoordinate

ADDRESS_FIELDS = ('road', 'city', 'town', 'village', 'state', 'country', 'country_code')
UNKNOWN_COUNTRY_CODE = 'unknown'


class LocationLookupError(Exception):
    """Raised when coordinates could not be resolved to an address."""


class Address(NamedTuple):
    road: Optional[str] = None
    city: Optional[str] = None
    town: Optional[str] = None
    village: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> 'Address':
        """Keep the known string fields, treating empty values as absent."""
        fields = {}
        for name in ADDRESS_FIELDS:
            value = raw.get(name)
            if isinstance(value, str) and value:
                fields[name] = value
        return cls(**fields)


class GeocodeResult(NamedTuple):
    display_name: str
    address: Address

    @classmethod
    def from_raw(cls, raw: Any) -> 'GeocodeResult':
        if not isinstance(raw, dict):
            raise LocationLookupError("Malformed geocoder response")
        display_name = raw.get('display_name')
        address = raw.get('address')
        if not isinstance(display_name, str) or not isinstance(address, dict):
            raise LocationLookupError("Geocoder response is missing display_name or address")
        return cls(display_name=display_name, address=Address.from_raw(address))

    @property
    def country_code(self) -> str:
        return (self.address.country_code or UNKNOWN_COUNTRY_CODE).upper()


class MapsCo(Nominatim):
    """
    Nominatim-compatible reverse geocoder served by geocode.maps.co.

    The service is the Nominatim API plus a mandatory ``api_key`` query
    parameter.
    """

    reverse_path = '/reverse'

    def __init__(self, api_key: str, *, domain: str = 'geocode.maps.co', **kwargs):
        super().__init__(domain=domain, **kwargs)
        self.api_key = api_key

    def _construct_url(self, base_api, params):
        params['api_key'] = self.api_key
        return super()._construct_url(base_api, params)


def derive_location_text(result: GeocodeResult) -> str:
    """
    Pick the display location from a geocode result.

    Place name (town, city, village) then road, joined with ", ". Falls
    back to the country alone, then to the full display name. The state
    is never used.
    """
    address = result.address
    parts = []

    place = address.town or address.city or address.village
    if place:
        parts.append(place)
    if address.road:
        parts.append(address.road)

    if not parts and address.country:
        parts.append(address.country)

    if not parts:
        return result.display_name
    return ', '.join(parts)


class LocationResolver:
    """Resolve coordinates to a GeocodeResult with one request per call."""

    def __init__(self, geocoder, language: str = 'en', timeout: int = 10):
        self.geocoder = geocoder
        self.language = language
        self.timeout = timeout

    def resolve(self, coordinate: GPSCoordinate) -> GeocodeResult:
        try:
            location = self.geocoder.reverse(
                (coordinate.latitude, coordinate.longitude),
                exactly_one=True,
                language=self.language,
                timeout=self.timeout,
            )
        except (GeopyError, ValueError) as e:
            raise LocationLookupError(f"Geocoding failed: {e}") from e

        if location is None:
            raise LocationLookupError("No address found for coordinates")
        return GeocodeResult.from_raw(location.raw)
