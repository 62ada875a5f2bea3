"""Deterministic fallback values computed from the clock.

When no live upstream value is available, the ISS and sky-condition
endpoints serve approximations from closed-form formulas instead of failing.
They are for UI continuity only, not measured data: every record built here
carries ``source="synthesized"`` so callers can tell them apart from
upstream data.

All functions are pure in their arguments; ``at`` is never read from the
clock here.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

from cosmofy.models.iss import IssPass, IssPosition
from cosmofy.models.sky import SkyConditions

ISS_INCLINATION_DEG = 51.6
ISS_ORBITAL_PERIOD_MINUTES = 92.68
SIDEREAL_DAY_MINUTES = 1436.07
# Ground-track drift: the orbit advances eastward while Earth turns under it.
ISS_LONGITUDE_RATE_DEG_PER_MIN = 360.0 / ISS_ORBITAL_PERIOD_MINUTES - 360.0 / SIDEREAL_DAY_MINUTES

SYNODIC_MONTH_DAYS = 29.5
MOON_PHASES = (
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
)

NORTHERN_CONSTELLATIONS = (
    "orion",
    "ursa-major",
    "cassiopeia",
    "perseus",
    "andromeda",
    "lyra",
    "cygnus",
    "draco",
)
SOUTHERN_CONSTELLATIONS = (
    "orion",
    "crux",
    "centaurus",
    "carina",
    "vela",
    "scorpius",
    "sagittarius",
)


def _as_utc(at: datetime) -> datetime:
    # Naive datetimes are taken to be UTC rather than server-local time.
    if at.tzinfo is None:
        return at.replace(tzinfo=UTC)
    return at.astimezone(UTC)


def wrap_longitude(degrees: float) -> float:
    """Wrap any angle into [-180, 180)."""
    return (degrees + 180.0) % 360.0 - 180.0


def region_label(latitude: float, longitude: float) -> str:
    """Coarse region name for a sub-satellite point."""
    if -10 < longitude < 50 and 35 < latitude < 70:
        return "Over Europe"
    if -130 < longitude < -60 and 25 < latitude < 50:
        return "Over North America"
    return "Over Ocean"


# ---------------------------------------------------------------------------
# ISS
# ---------------------------------------------------------------------------


def orbital_angle(at: datetime) -> float:
    """Mean orbital angle in degrees, advancing 360° per ISS orbital period."""
    minutes = _as_utc(at).timestamp() / 60.0
    return (minutes / ISS_ORBITAL_PERIOD_MINUTES * 360.0) % 360.0


def synthesize_iss_position(at: datetime) -> IssPosition:
    at = _as_utc(at)
    minutes = at.timestamp() / 60.0
    latitude = round(math.sin(math.radians(orbital_angle(at))) * ISS_INCLINATION_DEG, 4)
    # Re-wrap after rounding so 179.99996 cannot become 180.0.
    longitude = wrap_longitude(round(wrap_longitude(minutes * ISS_LONGITUDE_RATE_DEG_PER_MIN), 4))
    return IssPosition(
        latitude=latitude,
        longitude=longitude,
        timestamp=at,
        location=region_label(latitude, longitude),
        source="synthesized",
    )


def synthesize_iss_passes(
    latitude: float, longitude: float, count: int, at: datetime
) -> list[IssPass]:
    """Pass predictions spaced one orbit apart, offset per observer location."""
    at = _as_utc(at)
    seed = int(abs(latitude) * 100 + abs(longitude) * 100)
    passes = []
    for i in range(count):
        offset_minutes = (seed + i * 17) % 30
        risetime = at + timedelta(minutes=i * ISS_ORBITAL_PERIOD_MINUTES + offset_minutes)
        passes.append(
            IssPass(
                latitude=latitude,
                longitude=longitude,
                risetime=risetime.replace(microsecond=0),
                duration=300 + (seed + i * 97) % 301,
                max_elevation=45.0,
                source="synthesized",
            )
        )
    return passes


# ---------------------------------------------------------------------------
# Moon and sky
# ---------------------------------------------------------------------------


def day_of_year(at: datetime) -> int:
    return at.timetuple().tm_yday


def lunar_cycle(day: float) -> float:
    """Fraction of the synodic month elapsed, in [0, 1)."""
    return (day % SYNODIC_MONTH_DAYS) / SYNODIC_MONTH_DAYS


def moon_phase_index(day: float) -> int:
    return min(int(lunar_cycle(day) * len(MOON_PHASES)), len(MOON_PHASES) - 1)


def moon_phase(day: float) -> tuple[str, int]:
    """Return (phase name, illumination percent) for a day-of-year."""
    cycle = lunar_cycle(day)
    illumination = math.floor(abs(50 + 50 * math.cos(2 * math.pi * cycle)))
    return MOON_PHASES[moon_phase_index(day)], illumination


def local_solar_hour(at: datetime, longitude: float) -> int:
    at = _as_utc(at)
    hours = at.hour + at.minute / 60.0 + longitude / 15.0
    return int(hours % 24)


def synthesize_sky_conditions(latitude: float, longitude: float, at: datetime) -> SkyConditions:
    at = _as_utc(at)
    northern = latitude > 0
    day = day_of_year(at)
    phase, illumination = moon_phase(day)

    constellations = NORTHERN_CONSTELLATIONS if northern else SOUTHERN_CONSTELLATIONS
    visible = list(constellations[: 5 + day % 3])

    hour = local_solar_hour(at, longitude)
    conditions = (
        "Good viewing conditions" if hour >= 20 or hour <= 4 else "Daylight - not visible"
    )

    return SkyConditions(
        visible_constellations=visible,
        moon_phase=phase,
        moon_illumination=illumination,
        best_viewing_time="21:00 - 02:00" if northern else "20:00 - 01:00",
        conditions=conditions,
        source="synthesized",
    )
