"""Lunar phase from geocentric Sun and Moon places.

The phase is described from the Moon's centre: the directions to the Sun
and to the Earth are converted to ecliptic coordinates and differenced.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import jax.numpy as jnp

from skyclock.astrometry import Astrometry, Body
from skyclock.astrometry._transforms import radec_to_vector, vector_to_radec
from skyclock.constants import RAD2DEG
from skyclock.events._types import MoonPhase, MoonPhaseInfo
from skyclock.utils import normalize, signed_degrees

if TYPE_CHECKING:
    from skyclock.timescale import ResolvedInstant


def _angle_between(a, b) -> float:
    """Angle between two vectors [deg]."""
    cos_angle = jnp.dot(a, b) / (jnp.linalg.norm(a) * jnp.linalg.norm(b))
    return float(jnp.arccos(jnp.clip(cos_angle, -1.0, 1.0)) * RAD2DEG)


def phase_index(sun_lon: float, earth_lon: float) -> int:
    """Index of the named phase for Sun and Earth longitudes seen from the Moon."""
    # normalize() can round up to exactly 360
    return int(math.floor(normalize(sun_lon - earth_lon + 22.5, 360.0) / 45.0)) % 8


def moon_phase(astrometry: Astrometry, instant: ResolvedInstant) -> MoonPhaseInfo:
    """Compute the lunar phase at an instant.

    Args:
        astrometry: Astrometry provider for the geocentric Sun and Moon.
        instant: Resolved instant.

    Returns:
        MoonPhaseInfo: Phase angle, phase longitude and latitude,
            illuminated fraction and named phase.
    """
    sun = astrometry.apparent_position(instant, Body.SUN)
    moon = astrometry.apparent_position(instant, Body.MOON)

    earth_sun = radec_to_vector(sun.ra_hours, sun.dec_degrees, sun.distance_au)
    # Earth-to-Moon reversed: Moon-to-Earth
    moon_earth = -radec_to_vector(moon.ra_hours, moon.dec_degrees, moon.distance_au)
    moon_sun = earth_sun + moon_earth

    phase_angle = _angle_between(moon_earth, moon_sun)

    earth_ra, earth_dec, _ = vector_to_radec(moon_earth)
    earth_lon, earth_lat = astrometry.equatorial_to_ecliptic(instant, earth_ra, earth_dec)

    sun_ra, sun_dec, _ = vector_to_radec(moon_sun)
    sun_lon, sun_lat = astrometry.equatorial_to_ecliptic(instant, sun_ra, sun_dec)

    return MoonPhaseInfo(
        phase_angle=phase_angle,
        phase_longitude=signed_degrees(sun_lon - earth_lon),
        phase_latitude=sun_lat - earth_lat,
        illumination=(1.0 + math.cos(math.radians(phase_angle))) / 2.0,
        phase=MoonPhase(phase_index(sun_lon, earth_lon)),
    )
