"""Unit tests for cosmofy.synthesis."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from cosmofy.synthesis import (
    ISS_INCLINATION_DEG,
    ISS_ORBITAL_PERIOD_MINUTES,
    MOON_PHASES,
    local_solar_hour,
    moon_phase,
    moon_phase_index,
    orbital_angle,
    region_label,
    synthesize_iss_passes,
    synthesize_iss_position,
    synthesize_sky_conditions,
    wrap_longitude,
)

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestWrapLongitude:
    @pytest.mark.parametrize(
        ("degrees", "expected"),
        [(0.0, 0.0), (190.0, -170.0), (-190.0, 170.0), (180.0, -180.0), (720.5, 0.5)],
    )
    def test_wraps(self, degrees: float, expected: float) -> None:
        assert wrap_longitude(degrees) == pytest.approx(expected)


class TestRegionLabel:
    def test_europe(self) -> None:
        assert region_label(48.85, 2.35) == "Over Europe"

    def test_north_america(self) -> None:
        assert region_label(40.7, -74.0) == "Over North America"

    def test_ocean(self) -> None:
        assert region_label(-30.0, -140.0) == "Over Ocean"


# ---------------------------------------------------------------------------
# ISS
# ---------------------------------------------------------------------------


class TestIssPosition:
    def test_deterministic(self) -> None:
        assert synthesize_iss_position(T0) == synthesize_iss_position(T0)

    def test_naive_datetime_is_utc(self) -> None:
        naive = T0.replace(tzinfo=None)
        assert synthesize_iss_position(naive) == synthesize_iss_position(T0)

    def test_within_inclination_band_over_a_day(self) -> None:
        for step in range(0, 24 * 60 * 60, 97):
            position = synthesize_iss_position(T0 + timedelta(seconds=step))
            assert abs(position.latitude) <= ISS_INCLINATION_DEG
            assert -180.0 <= position.longitude < 180.0

    def test_labelled_synthesized(self) -> None:
        position = synthesize_iss_position(T0)
        assert position.source == "synthesized"
        assert position.altitude == 408.0
        assert position.velocity == 27600.0
        assert position.location in {"Over Europe", "Over North America", "Over Ocean"}
        assert position.timestamp == T0

    def test_orbital_angle_repeats_each_period(self) -> None:
        later = T0 + timedelta(minutes=ISS_ORBITAL_PERIOD_MINUTES)
        delta = (orbital_angle(later) - orbital_angle(T0)) % 360.0
        assert min(delta, 360.0 - delta) == pytest.approx(0.0, abs=1e-6)


class TestIssPasses:
    def test_count_and_spacing(self) -> None:
        passes = synthesize_iss_passes(40.7, -74.0, 3, T0)
        assert len(passes) == 3
        assert all(p.source == "synthesized" for p in passes)
        assert all(300 <= p.duration <= 600 for p in passes)
        assert passes[0].risetime >= T0.replace(microsecond=0)
        assert [p.risetime for p in passes] == sorted(p.risetime for p in passes)

    def test_deterministic_per_location(self) -> None:
        first = synthesize_iss_passes(40.7, -74.0, 5, T0)
        assert first == synthesize_iss_passes(40.7, -74.0, 5, T0)
        assert first != synthesize_iss_passes(-33.9, 151.2, 5, T0)


# ---------------------------------------------------------------------------
# Moon and sky
# ---------------------------------------------------------------------------


class TestMoonPhase:
    def test_new_moon_at_cycle_start(self) -> None:
        assert moon_phase(0) == ("New Moon", 100)

    def test_full_moon_mid_cycle(self) -> None:
        name, illumination = moon_phase(14.75)
        assert name == "Full Moon"
        assert illumination == 0

    def test_cycle_boundary_is_adjacent(self) -> None:
        first, last = moon_phase_index(0), moon_phase_index(29)
        assert (first, last) == (0, 7)
        assert (first - last) % len(MOON_PHASES) == 1

    def test_index_in_range_all_year(self) -> None:
        for day in range(1, 367):
            assert 0 <= moon_phase_index(day) < len(MOON_PHASES)
            _, illumination = moon_phase(day)
            assert 0 <= illumination <= 100

    def test_consecutive_days_are_adjacent_phases(self) -> None:
        for day in range(1, 366):
            step = (moon_phase_index(day + 1) - moon_phase_index(day)) % len(MOON_PHASES)
            assert step in {0, 1}


class TestSkyConditions:
    def test_northern_hemisphere(self) -> None:
        sky = synthesize_sky_conditions(48.85, 2.35, T0)
        assert sky.visible_constellations[:2] == ["orion", "ursa-major"]
        assert 5 <= len(sky.visible_constellations) <= 7
        assert sky.best_viewing_time == "21:00 - 02:00"
        assert sky.source == "synthesized"

    def test_southern_hemisphere(self) -> None:
        sky = synthesize_sky_conditions(-33.9, 151.2, T0)
        assert "crux" in sky.visible_constellations
        assert sky.best_viewing_time == "20:00 - 01:00"

    def test_daylight_at_local_noon(self) -> None:
        noon = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
        assert synthesize_sky_conditions(51.5, 0.0, noon).conditions == "Daylight - not visible"

    def test_night_by_local_solar_time(self) -> None:
        noon_utc = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
        # 150°E is ten hours ahead of UTC: 22:00 local.
        assert local_solar_hour(noon_utc, 150.0) == 22
        sky = synthesize_sky_conditions(-33.9, 150.0, noon_utc)
        assert sky.conditions == "Good viewing conditions"

    def test_json_uses_camel_case(self) -> None:
        body = synthesize_sky_conditions(48.85, 2.35, T0).to_json()
        assert set(body) == {
            "visibleConstellations",
            "moonPhase",
            "moonIllumination",
            "bestViewingTime",
            "conditions",
            "source",
        }
