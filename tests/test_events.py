"""Tests for rise/set/culmination and new/full Moon event search."""

from __future__ import annotations

import math

import pytest

from skyclock.astrometry import AnalyticAstrometry, Body, HorizonCoordinates, Observer, SkyPosition
from skyclock.events import (
    EventFinder,
    EventKind,
    LunarEventKind,
    MoonPhase,
    apparent_radius_degrees,
    classify_hour_angle,
    local_hour_angle,
    local_sidereal_time,
    moon_phase,
)
from skyclock.timescale import TimeScale
from skyclock.utils import normalize

T0 = 2460000.5
MOON_DISTANCE_AU = 0.00257
SYNODIC_DAYS = 29.5


class DailyAstrometry:
    """A body that circles the sky once per UTC day.

    Its local hour angle is ``24 * (t - T0)`` hours for an observer at
    longitude 0 and its elevation ``30 * cos(2 pi (t - T0))`` degrees, so it
    culminates at T0, sets at T0 + 0.25, passes lower culmination at
    T0 + 0.5 and rises at T0 + 0.75.
    """

    supported_bodies = (Body.SUN,)

    def apparent_position(self, instant, body, observer=None):
        return SkyPosition(ra_hours=0.0, dec_degrees=0.0, distance_au=1.0e6)

    def horizon_coordinates(self, instant, position, observer, polar_motion=(0.0, 0.0), refraction=True):
        angle = 2.0 * math.pi * (instant.utc - T0)
        return HorizonCoordinates(
            zenith_distance=90.0 - 30.0 * math.cos(angle),
            azimuth=180.0 + 90.0 * math.sin(angle),
            refracted_ra=position.ra_hours,
            refracted_dec=position.dec_degrees,
        )

    def apparent_sidereal_time(self, instant):
        return normalize(24.0 * (instant.utc - T0), 24.0)

    def equatorial_to_ecliptic(self, instant, ra_hours, dec_degrees):
        return normalize(ra_hours * 15.0, 360.0), dec_degrees


class LunarAstrometry(DailyAstrometry):
    """Sun fixed at the equinox, Moon on the equator at a given elongation [deg]."""

    supported_bodies = (Body.SUN, Body.MOON)

    def __init__(self, elongation):
        self.elongation = elongation

    def apparent_position(self, instant, body, observer=None):
        if body is Body.SUN:
            return SkyPosition(ra_hours=0.0, dec_degrees=0.0, distance_au=1.0)
        ra = normalize(self.elongation(instant.utc) / 15.0, 24.0)
        return SkyPosition(ra_hours=ra, dec_degrees=0.0, distance_au=MOON_DISTANCE_AU)


@pytest.fixture()
def ts() -> TimeScale:
    return TimeScale()


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassification:
    @pytest.mark.parametrize(
        "lha, kind",
        [
            (0.0, EventKind.UPPER_CULMINATION),
            (6.0, EventKind.SET),
            (12.0, EventKind.LOWER_CULMINATION),
            (18.0, EventKind.RISE),
            (23.995, EventKind.UPPER_CULMINATION),
            (0.005, EventKind.UPPER_CULMINATION),
            (11.995, EventKind.LOWER_CULMINATION),
            (12.02, EventKind.RISE),
            (11.98, EventKind.SET),
        ],
    )
    def test_classify_hour_angle(self, lha, kind):
        assert classify_hour_angle(lha) is kind

    def test_local_sidereal_time_wraps(self):
        assert local_sidereal_time(23.0, 30.0) == pytest.approx(1.0)
        assert local_sidereal_time(1.0, -30.0) == pytest.approx(23.0)

    def test_local_hour_angle_wraps(self):
        assert local_hour_angle(1.0, 23.0) == pytest.approx(2.0)
        assert local_hour_angle(23.0, 1.0) == pytest.approx(22.0)

    def test_apparent_radius_of_sun(self):
        assert apparent_radius_degrees(1391978.0, 149597870.7) == pytest.approx(0.2666, abs=1e-3)


# ---------------------------------------------------------------------------
# Rise, set and culmination with a synthetic body
# ---------------------------------------------------------------------------


class TestPlanetaryEventsSynthetic:
    @pytest.fixture()
    def finder(self, ts) -> EventFinder:
        return EventFinder(ts, DailyAstrometry())

    def test_one_day(self, finder):
        events = finder.find_planetary_events(T0 + 0.0625, T0 + 1.0625, Body.SUN, Observer(0.0, 0.0))
        kinds = [e.kind for e in events]
        assert kinds == [
            EventKind.SET,
            EventKind.LOWER_CULMINATION,
            EventKind.RISE,
            EventKind.UPPER_CULMINATION,
        ]
        times = [e.instant_utc.utc for e in events]
        assert times == pytest.approx([T0 + 0.25, T0 + 0.5, T0 + 0.75, T0 + 1.0], abs=1e-8)

    def test_sample_on_culmination_gives_one_event(self, finder):
        # The azimuth grid (4/day) samples T0 exactly, where the body culminates
        events = finder.find_planetary_events(T0 - 0.5, T0 + 0.5, Body.SUN, Observer(0.0, 0.0))
        assert [e.kind for e in events] == [
            EventKind.RISE,
            EventKind.UPPER_CULMINATION,
            EventKind.SET,
        ]
        assert events[1].instant_utc.utc == T0

    def test_event_records(self, finder):
        events = finder.find_planetary_events(T0 + 0.0625, T0 + 1.0625, Body.SUN, Observer(0.0, 0.0))
        set_event, lower = events[0], events[1]
        assert set_event.horizon.elevation == pytest.approx(0.0, abs=1e-6)
        assert lower.horizon.azimuth == pytest.approx(180.0, abs=1e-6)
        assert lower.horizon.elevation == pytest.approx(-30.0, abs=1e-6)
        assert set_event.position.distance_au == 1.0e6

    def test_short_interval_without_events(self, finder):
        assert finder.find_planetary_events(T0 + 0.3, T0 + 0.45, Body.SUN, Observer(0.0, 0.0)) == []

    def test_empty_interval_raises(self, finder):
        with pytest.raises(ValueError):
            finder.find_planetary_events(T0 + 1.0, T0, Body.SUN, Observer(0.0, 0.0))

    def test_elevation_includes_radius(self, finder):
        elevation = finder.elevation(T0 + 0.25, Body.SUN, Observer(0.0, 0.0))
        radius = apparent_radius_degrees(Body.SUN.diameter_km, 1.0e6 * 149597870.7)
        assert elevation == pytest.approx(radius, abs=1e-12)

    def test_azimuth_function(self, finder):
        assert finder.azimuth(T0 + 0.25, Body.SUN, Observer(0.0, 0.0)) == pytest.approx(90.0)

    def test_custom_tolerance(self, ts):
        finder = EventFinder(ts, DailyAstrometry(), tolerance=1e-3)
        assert finder.tolerance == 1e-3
        events = finder.find_planetary_events(T0 + 0.0625, T0 + 1.0625, Body.SUN, Observer(0.0, 0.0))
        assert events[0].instant_utc.utc == pytest.approx(T0 + 0.25, abs=1e-3)


# ---------------------------------------------------------------------------
# Lunar phase with a synthetic Moon
# ---------------------------------------------------------------------------


class TestMoonPhaseSynthetic:
    def _phase(self, ts, elongation):
        astro = LunarAstrometry(lambda jd: elongation)
        return moon_phase(astro, ts.from_utc(T0).resolve())

    def test_full_moon(self, ts):
        info = self._phase(ts, 180.0)
        assert info.phase is MoonPhase.FULL
        assert info.phase_longitude == pytest.approx(0.0, abs=1e-6)
        assert info.phase_angle == pytest.approx(0.0, abs=1e-5)
        assert info.illumination == pytest.approx(1.0, abs=1e-9)

    def test_new_moon(self, ts):
        info = self._phase(ts, 0.0)
        assert info.phase is MoonPhase.NEW
        assert abs(info.phase_longitude) == pytest.approx(180.0, abs=1e-6)
        assert info.phase_angle == pytest.approx(180.0, abs=1e-5)
        assert info.illumination == pytest.approx(0.0, abs=1e-9)

    def test_first_quarter(self, ts):
        info = self._phase(ts, 90.0)
        assert info.phase is MoonPhase.FIRST_QUARTER
        # The Sun is 0.15 deg off the Earth's direction as seen from the Moon
        assert info.phase_longitude == pytest.approx(89.85, abs=0.01)
        assert info.illumination == pytest.approx(0.5, abs=0.01)
        assert info.phase_latitude == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize(
        "elongation, phase",
        [
            (45.0, MoonPhase.WAXING_CRESCENT),
            (135.0, MoonPhase.WAXING_GIBBOUS),
            (225.0, MoonPhase.WANING_GIBBOUS),
            (270.0, MoonPhase.LAST_QUARTER),
            (315.0, MoonPhase.WANING_CRESCENT),
        ],
    )
    def test_named_phases(self, ts, elongation, phase):
        assert self._phase(ts, elongation).phase is phase


class TestLunarEventsSynthetic:
    def test_full_then_new(self, ts):
        astro = LunarAstrometry(lambda jd: 360.0 * (jd - T0) / SYNODIC_DAYS)
        finder = EventFinder(ts, astro)
        events = finder.find_new_and_full_moons(T0 + 1.1, T0 + 31.1)

        assert [e.kind for e in events] == [LunarEventKind.FULL_MOON, LunarEventKind.NEW_MOON]
        assert events[0].instant_utc.utc == pytest.approx(T0 + SYNODIC_DAYS / 2.0, abs=1e-6)
        assert events[1].instant_utc.utc == pytest.approx(T0 + SYNODIC_DAYS, abs=1e-6)
        assert events[0].phase.illumination == pytest.approx(1.0, abs=1e-6)
        assert events[1].phase.illumination == pytest.approx(0.0, abs=1e-6)

    def test_phase_longitude(self, ts):
        astro = LunarAstrometry(lambda jd: 360.0 * (jd - T0) / SYNODIC_DAYS)
        finder = EventFinder(ts, astro)
        assert finder.phase_longitude(T0 + SYNODIC_DAYS / 4.0) == pytest.approx(89.85, abs=0.01)


# ---------------------------------------------------------------------------
# Analytic Sun and Moon
# ---------------------------------------------------------------------------


def _hours_into_day(jd: float) -> float:
    return normalize(jd - 0.5, 1.0) * 24.0


class TestAnalyticEvents:
    def test_sun_at_greenwich_on_equinox(self, ts):
        finder = EventFinder(ts, AnalyticAstrometry())
        start = ts.from_iso8601("2024-03-20")
        events = finder.find_planetary_events(
            start.utc, start.utc + 1.0, Body.SUN, Observer(51.48, 0.0)
        )

        assert [e.kind for e in events] == [
            EventKind.LOWER_CULMINATION,
            EventKind.RISE,
            EventKind.UPPER_CULMINATION,
            EventKind.SET,
        ]
        lower, rise, upper, sunset = (_hours_into_day(e.instant_utc.utc) for e in events)
        assert lower == pytest.approx(0.125, abs=0.2)
        assert rise == pytest.approx(6.04, abs=0.2)
        assert upper == pytest.approx(12.125, abs=0.2)
        assert sunset == pytest.approx(18.22, abs=0.2)

        rise_event = events[1]
        assert rise_event.horizon.elevation == pytest.approx(-0.27, abs=0.05)
        assert rise_event.horizon.azimuth == pytest.approx(89.5, abs=2.0)

    def test_moons_of_march_2024(self, ts):
        finder = EventFinder(ts, AnalyticAstrometry())
        start = ts.from_iso8601("2024-03")
        events = finder.find_new_and_full_moons(start.utc, start.next_month_start().utc)

        assert [e.kind for e in events] == [LunarEventKind.NEW_MOON, LunarEventKind.FULL_MOON]
        # 2024-03-10 09:00 UTC and 2024-03-25 07:00 UTC
        assert events[0].instant_utc.utc == pytest.approx(ts.from_iso8601("2024-03-10T09:00:00Z").utc, abs=0.125)
        assert events[1].instant_utc.utc == pytest.approx(ts.from_iso8601("2024-03-25T07:00:00Z").utc, abs=0.125)
        assert events[1].phase.phase is MoonPhase.FULL
        assert events[1].phase.illumination > 0.99

    def test_moon_phase_at_instant(self, ts):
        finder = EventFinder(ts, AnalyticAstrometry())
        # One day after first quarter (2024-03-17 04:11 UTC)
        info = finder.moon_phase(ts.from_iso8601("2024-03-18"))
        assert info.phase is MoonPhase.FIRST_QUARTER
        assert 0.5 < info.illumination < 0.75
