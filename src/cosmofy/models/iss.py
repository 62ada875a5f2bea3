from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel

from cosmofy.models.common import ApiModel, Source

# Mean ISS figures used for every position record; open-notify only reports
# latitude and longitude.
ISS_MEAN_ALTITUDE_KM = 408.0
ISS_MEAN_VELOCITY_KMH = 27600.0


class UpstreamIssCoordinates(BaseModel):
    # open-notify sends these as decimal strings
    latitude: float
    longitude: float


class UpstreamIssNow(BaseModel):
    """open-notify ``iss-now.json``."""

    iss_position: UpstreamIssCoordinates
    timestamp: int
    message: str = "success"


class UpstreamIssPassRequest(BaseModel):
    latitude: float
    longitude: float
    passes: int = 5


class UpstreamIssPassWindow(BaseModel):
    duration: int
    risetime: int


class UpstreamIssPasses(BaseModel):
    """open-notify ``iss-pass.json``."""

    request: UpstreamIssPassRequest
    response: list[UpstreamIssPassWindow]
    message: str = "success"


class UpstreamAstronaut(BaseModel):
    name: str
    craft: str


class UpstreamAstros(BaseModel):
    """open-notify ``astros.json``."""

    people: list[UpstreamAstronaut]
    number: int | None = None
    message: str = "success"


class IssPosition(ApiModel):
    latitude: float
    longitude: float
    altitude: float = ISS_MEAN_ALTITUDE_KM
    velocity: float = ISS_MEAN_VELOCITY_KMH
    timestamp: datetime
    location: str | None = None
    source: Source = "live"

    @classmethod
    def from_upstream(cls, payload: UpstreamIssNow) -> IssPosition:
        return cls(
            latitude=payload.iss_position.latitude,
            longitude=payload.iss_position.longitude,
            timestamp=datetime.fromtimestamp(payload.timestamp, tz=UTC),
        )


class IssPass(ApiModel):
    latitude: float
    longitude: float
    risetime: datetime
    duration: int  # seconds
    max_elevation: float | None = None
    source: Source = "live"


class CrewMember(ApiModel):
    name: str
    craft: str
