"""Tests for the analytic Sun/Moon astrometry provider and its transforms."""

from __future__ import annotations

import math

import jax.numpy as jnp
import pytest

from skyclock.astrometry import (
    AnalyticAstrometry,
    Astrometry,
    Body,
    HorizonCoordinates,
    Observer,
    SkyPosition,
    UnsupportedBodyError,
)
from skyclock.astrometry._ephemerides import mean_obliquity, moon_position, sun_position
from skyclock.astrometry._transforms import (
    equatorial_to_ecliptic,
    gmst_hours,
    horizon_to_equatorial,
    julian_centuries,
    radec_to_vector,
    refraction_degrees,
    site_position,
    vector_to_radec,
)
from skyclock.constants import RAD2DEG
from skyclock.timescale import TimeScale
from skyclock.utils import normalize

GREENWICH = Observer(latitude=51.48, longitude=0.0)


@pytest.fixture()
def ts() -> TimeScale:
    return TimeScale()


@pytest.fixture()
def astro() -> AnalyticAstrometry:
    return AnalyticAstrometry()


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class TestBody:
    def test_from_name(self):
        assert Body.from_name("Moon") is Body.MOON
        assert Body.from_name(" sun ") is Body.SUN

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown body"):
            Body.from_name("vulcan")

    def test_ids(self):
        assert Body.MERCURY.value == 1
        assert Body.PLUTO.value == 9
        assert Body.SUN.value == 10
        assert Body.MOON.value == 11

    def test_diameters(self):
        assert Body.SUN.diameter_km == 1391978.0
        assert Body.MOON.diameter_km == 3474.0
        assert Body.EARTH.diameter_km == pytest.approx((12713.6 + 12756.2) / 2.0)


class TestTypes:
    def test_observer_defaults(self):
        observer = Observer(10.0, 20.0)
        assert observer.height == 0.0
        assert observer.temperature == 10.0
        assert observer.pressure == 1010.0

    def test_elevation(self):
        horizon = HorizonCoordinates(zenith_distance=60.0, azimuth=90.0, refracted_ra=1.0, refracted_dec=2.0)
        assert horizon.elevation == 30.0

    def test_provider_satisfies_protocol(self, astro):
        provider: Astrometry = astro
        assert Body.SUN in provider.supported_bodies


# ---------------------------------------------------------------------------
# Ephemerides
# ---------------------------------------------------------------------------


class TestEphemerides:
    def test_sun_distance(self):
        r = sun_position(jnp.float64(0.24))
        assert float(jnp.linalg.norm(r)) / 149597870700.0 == pytest.approx(1.0, abs=0.02)

    def test_moon_distance(self):
        r = moon_position(jnp.float64(0.24))
        assert 356.0e6 < float(jnp.linalg.norm(r)) < 407.0e6

    def test_mean_obliquity_j2000(self):
        assert float(mean_obliquity(0.0)) * RAD2DEG == pytest.approx(23.43929111)

    def test_julian_centuries(self):
        assert julian_centuries(2451545.0) == 0.0
        assert julian_centuries(2451545.0 + 36525.0) == 1.0


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------


class TestTransforms:
    def test_gmst_j2000(self):
        assert gmst_hours(2451545.0) == pytest.approx(18.697374558, abs=1e-8)

    def test_gmst_vallado_example(self):
        # Vallado, Example 3-5
        assert gmst_hours(2448855.009722) * 15.0 == pytest.approx(152.578787886, abs=1e-5)

    def test_radec_vector_roundtrip(self):
        ra, dec, norm = vector_to_radec(radec_to_vector(13.5, -23.25, 2.0))
        assert ra == pytest.approx(13.5)
        assert dec == pytest.approx(-23.25)
        assert norm == pytest.approx(2.0)

    def test_site_on_equator(self):
        r = site_position(0.0, 0.0, 0.0)
        assert float(r[0]) == pytest.approx(6378137.0)
        assert float(r[1]) == pytest.approx(0.0, abs=1e-6)

    def test_site_at_pole(self):
        r = site_position(90.0, 0.0, 0.0)
        assert float(r[2]) == pytest.approx(6356752.314, abs=1e-3)

    def test_refraction_at_horizon(self):
        assert refraction_degrees(0.0, 10.0, 1010.0) == pytest.approx(0.483, abs=0.002)

    def test_refraction_scales_with_pressure(self):
        full = refraction_degrees(5.0, 10.0, 1010.0)
        assert refraction_degrees(5.0, 10.0, 505.0) == pytest.approx(full / 2.0)

    def test_refraction_below_limit(self):
        assert refraction_degrees(-1.5, 10.0, 1010.0) == 0.0

    def test_refraction_steps_at_limit(self):
        # The cutoff is a step, not a smooth fade to zero
        assert refraction_degrees(-1.0, 10.0, 1010.0) == pytest.approx(0.647, abs=0.005)
        assert refraction_degrees(-1.0001, 10.0, 1010.0) == 0.0

    def test_horizon_to_equatorial_meridian(self):
        hour_angle, dec = horizon_to_equatorial(40.0, 180.0, 50.0)
        assert hour_angle == pytest.approx(0.0, abs=1e-9)
        assert dec == pytest.approx(0.0, abs=1e-9)

    def test_ecliptic_pole(self):
        obliquity = 23.4 / RAD2DEG
        lon, lat = equatorial_to_ecliptic(18.0, 90.0 - 23.4, obliquity)
        assert lat == pytest.approx(90.0, abs=1e-5)

    def test_ecliptic_of_solstice(self):
        obliquity = 23.4 / RAD2DEG
        lon, lat = equatorial_to_ecliptic(6.0, 23.4, obliquity)
        assert lon == pytest.approx(90.0, abs=1e-9)
        assert lat == pytest.approx(0.0, abs=1e-9)


# ---------------------------------------------------------------------------
# AnalyticAstrometry
# ---------------------------------------------------------------------------


class TestAnalyticAstrometry:
    def test_supported_bodies(self, astro):
        assert astro.supported_bodies == (Body.SUN, Body.MOON)

    def test_unsupported_body(self, ts, astro):
        instant = ts.from_iso8601("2024-03-20").resolve()
        with pytest.raises(UnsupportedBodyError, match="Mars"):
            astro.apparent_position(instant, Body.MARS)

    def test_unsupported_body_is_value_error(self):
        assert issubclass(UnsupportedBodyError, ValueError)

    def test_sun_at_march_equinox(self, ts, astro):
        instant = ts.from_iso8601("2024-03-20T03:06:00Z").resolve()
        pos = astro.apparent_position(instant, Body.SUN)
        assert isinstance(pos, SkyPosition)
        assert min(pos.ra_hours, 24.0 - pos.ra_hours) < 0.02
        assert pos.dec_degrees == pytest.approx(0.0, abs=0.05)

        lon, lat = astro.equatorial_to_ecliptic(instant, pos.ra_hours, pos.dec_degrees)
        assert min(lon, 360.0 - lon) < 0.05
        assert lat == pytest.approx(0.0, abs=1e-6)

    def test_sun_perihelion_and_aphelion(self, ts, astro):
        perihelion = astro.apparent_position(ts.from_iso8601("2024-01-03").resolve(), Body.SUN)
        aphelion = astro.apparent_position(ts.from_iso8601("2024-07-05").resolve(), Body.SUN)
        assert perihelion.distance_au == pytest.approx(0.9833, abs=0.001)
        assert aphelion.distance_au == pytest.approx(1.0167, abs=0.001)

    def test_moon_distance(self, ts, astro):
        pos = astro.apparent_position(ts.from_iso8601("2024-03-20").resolve(), Body.MOON)
        assert 0.0023 < pos.distance_au < 0.0028

    def test_topocentric_moon(self, ts, astro):
        instant = ts.from_iso8601("2024-03-20T20:00:00Z").resolve()
        geocentric = astro.apparent_position(instant, Body.MOON)
        topocentric = astro.apparent_position(instant, Body.MOON, GREENWICH)
        assert abs(topocentric.distance_au - geocentric.distance_au) < 4.3e-5
        assert (abs(topocentric.ra_hours - geocentric.ra_hours) > 1e-4
                or abs(topocentric.dec_degrees - geocentric.dec_degrees) > 1e-3)

    def test_sidereal_time_j2000(self, ts, astro):
        gast = astro.apparent_sidereal_time(ts.from_utc(2451545.0).resolve())
        assert gast == pytest.approx(18.6974, abs=0.001)

    def test_ecliptic_of_date(self, ts, astro):
        instant = ts.from_iso8601("2024-03-20").resolve()
        obliquity = float(mean_obliquity(julian_centuries(instant.tt))) * RAD2DEG
        lon, lat = astro.equatorial_to_ecliptic(instant, 6.0, obliquity)
        assert lon == pytest.approx(90.0, abs=1e-6)
        assert lat == pytest.approx(0.0, abs=1e-6)


class TestHorizonCoordinates:
    def _last(self, astro, instant, observer) -> float:
        return normalize(astro.apparent_sidereal_time(instant) + observer.longitude / 15.0, 24.0)

    def test_zenith(self, ts, astro):
        observer = Observer(40.0, -75.0)
        instant = ts.from_iso8601("2024-06-01T04:00:00Z").resolve()
        position = SkyPosition(self._last(astro, instant, observer), 40.0, 1.0)
        horizon = astro.horizon_coordinates(instant, position, observer, (0.0, 0.0), False)
        assert horizon.zenith_distance == pytest.approx(0.0, abs=1e-5)
        assert horizon.refracted_ra == position.ra_hours

    def test_western_horizon(self, ts, astro):
        observer = Observer(0.0, 0.0)
        instant = ts.from_iso8601("2024-06-01").resolve()
        ra = normalize(self._last(astro, instant, observer) - 6.0, 24.0)
        horizon = astro.horizon_coordinates(instant, SkyPosition(ra, 0.0, 1.0), observer, (0.0, 0.0), False)
        assert horizon.elevation == pytest.approx(0.0, abs=1e-6)
        assert horizon.azimuth == pytest.approx(270.0, abs=1e-6)

    def test_refraction_raises_body(self, ts, astro):
        observer = Observer(0.0, 0.0)
        instant = ts.from_iso8601("2024-06-01").resolve()
        ra = normalize(self._last(astro, instant, observer) - 6.0, 24.0)
        position = SkyPosition(ra, 0.0, 1.0)
        horizon = astro.horizon_coordinates(instant, position, observer, (0.0, 0.0), True)
        assert horizon.elevation == pytest.approx(0.483, abs=0.002)
        # Lifting a body on the western horizon reduces its hour angle
        assert normalize(horizon.refracted_ra - ra, 24.0) == pytest.approx(horizon.elevation / 15.0, abs=1e-4)

    def test_sun_near_noon(self, ts, astro):
        instant = ts.from_iso8601("2024-03-20T12:07:00Z").resolve()
        position = astro.apparent_position(instant, Body.SUN, GREENWICH)
        horizon = astro.horizon_coordinates(instant, position, GREENWICH)
        assert horizon.azimuth == pytest.approx(180.0, abs=3.0)
        assert horizon.elevation == pytest.approx(90.0 - 51.48, abs=0.5)

    def test_polar_motion_shifts_zenith(self, ts, astro):
        observer = Observer(40.0, 0.0)
        instant = ts.from_iso8601("2024-06-01").resolve()
        position = SkyPosition(self._last(astro, instant, observer), 40.0, 1.0)
        horizon = astro.horizon_coordinates(instant, position, observer, (3.6, 0.0), False)
        # x = 3.6 arcsec at longitude 0 moves the latitude by 0.001 deg
        assert horizon.zenith_distance == pytest.approx(0.001, abs=1e-5)
        assert not math.isnan(horizon.azimuth)
