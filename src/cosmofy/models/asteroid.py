from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from cosmofy.models.common import ApiModel


class UpstreamDiameterRange(BaseModel):
    estimated_diameter_min: float
    estimated_diameter_max: float


class UpstreamEstimatedDiameter(BaseModel):
    kilometers: UpstreamDiameterRange


class UpstreamRelativeVelocity(BaseModel):
    # NeoWs sends velocities and distances as decimal strings
    kilometers_per_second: float


class UpstreamMissDistance(BaseModel):
    astronomical: float
    kilometers: float


class UpstreamCloseApproach(BaseModel):
    close_approach_date: date
    relative_velocity: UpstreamRelativeVelocity
    miss_distance: UpstreamMissDistance
    orbiting_body: str = "Earth"


class UpstreamNeo(BaseModel):
    id: str
    neo_reference_id: str
    name: str
    absolute_magnitude_h: float
    estimated_diameter: UpstreamEstimatedDiameter
    is_potentially_hazardous_asteroid: bool
    close_approach_data: list[UpstreamCloseApproach] = []
    nasa_jpl_url: str | None = None


class UpstreamNeoFeed(BaseModel):
    """NASA NeoWs ``/neo/rest/v1/feed``: objects grouped by approach date."""

    element_count: int
    near_earth_objects: dict[str, list[UpstreamNeo]]


class Asteroid(ApiModel):
    """A near-Earth object with its next close approach."""

    id: str
    name: str
    absolute_magnitude: float
    estimated_diameter_min_km: float
    estimated_diameter_max_km: float
    is_potentially_hazardous: bool
    close_approach_date: date
    relative_velocity_kps: float
    miss_distance_au: float
    miss_distance_km: float
    orbiting_body: str
    nasa_jpl_url: str | None = None

    @classmethod
    def from_upstream(cls, neo: UpstreamNeo) -> Asteroid | None:
        """Build from the first listed approach; None when there is none."""
        if not neo.close_approach_data:
            return None
        approach = neo.close_approach_data[0]
        diameter = neo.estimated_diameter.kilometers
        return cls(
            id=neo.neo_reference_id,
            name=neo.name.strip(),
            absolute_magnitude=neo.absolute_magnitude_h,
            estimated_diameter_min_km=diameter.estimated_diameter_min,
            estimated_diameter_max_km=diameter.estimated_diameter_max,
            is_potentially_hazardous=neo.is_potentially_hazardous_asteroid,
            close_approach_date=approach.close_approach_date,
            relative_velocity_kps=approach.relative_velocity.kilometers_per_second,
            miss_distance_au=approach.miss_distance.astronomical,
            miss_distance_km=approach.miss_distance.kilometers,
            orbiting_body=approach.orbiting_body,
            nasa_jpl_url=neo.nasa_jpl_url,
        )
