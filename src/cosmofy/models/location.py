from __future__ import annotations

from pydantic import BaseModel

from cosmofy.models.common import ApiModel

# Address keys in the order they are preferred for a short place name.
_PLACE_KEYS = ("city", "town", "village", "suburb", "municipality", "county", "state")


class UpstreamAddress(BaseModel):
    city: str | None = None
    town: str | None = None
    village: str | None = None
    suburb: str | None = None
    municipality: str | None = None
    county: str | None = None
    state: str | None = None
    country: str | None = None


class UpstreamReverseGeocode(BaseModel):
    """Nominatim ``/reverse`` response.

    Nominatim answers 200 with only ``error`` set when nothing is at the
    coordinates (open ocean, poles).
    """

    display_name: str | None = None
    address: UpstreamAddress | None = None
    error: str | None = None


class LocationInfo(ApiModel):
    latitude: float
    longitude: float
    city: str | None = None
    display_name: str | None = None
    country: str | None = None

    @classmethod
    def from_upstream(
        cls, latitude: float, longitude: float, payload: UpstreamReverseGeocode
    ) -> LocationInfo:
        address = payload.address or UpstreamAddress()
        place = next(
            (value for key in _PLACE_KEYS if (value := getattr(address, key))),
            None,
        )
        city = f"{place}, {address.country}" if place and address.country else place
        return cls(
            latitude=latitude,
            longitude=longitude,
            city=city,
            display_name=payload.display_name,
            country=address.country,
        )

    def coordinates_label(self) -> str:
        return f"{self.latitude:.2f}°, {self.longitude:.2f}°"
