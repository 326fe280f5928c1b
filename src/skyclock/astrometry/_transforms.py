"""Frame and coordinate transformations for the analytic provider.

Covers the observer site vector, Greenwich sidereal time, equatorial <->
horizon and equatorial -> ecliptic conversions and atmospheric refraction.
Angles are taken and returned in degrees (hours for right ascension and
sidereal time) unless noted.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array

from skyclock.config import get_dtype
from skyclock.constants import AS2RAD, DEG2RAD, JD_J2000, RAD2DEG, WGS84_a, WGS84_f

# First eccentricity squared of the WGS84 ellipsoid
ECC2 = WGS84_f * (2.0 - WGS84_f)

# Refraction is not applied this far below the horizon [deg]
_REFRACTION_LIMIT = -1.0


def julian_centuries(jd: float) -> float:
    """Julian centuries from J2000.0."""
    return (jd - JD_J2000) / 36525.0


def site_position(latitude: float, longitude: float, height: float) -> Array:
    """Earth-fixed position of a site on the WGS84 ellipsoid.

    Args:
        latitude: Geodetic latitude [deg].
        longitude: East longitude [deg].
        height: Height above the ellipsoid [m].

    Returns:
        jax.Array: ECEF position ``[x, y, z]`` in *m*.
    """
    _float = get_dtype()
    lat = _float(latitude * DEG2RAD)
    lon = _float(longitude * DEG2RAD)

    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    N = WGS84_a / jnp.sqrt(1.0 - ECC2 * sin_lat * sin_lat)

    x = (N + height) * cos_lat * jnp.cos(lon)
    y = (N + height) * cos_lat * jnp.sin(lon)
    z = ((1.0 - ECC2) * N + height) * sin_lat

    return jnp.array([x, y, z])


def earth_rotation(r_ecef: Array, sidereal_hours: float) -> Array:
    """Rotate an Earth-fixed vector into the equator-of-date frame."""
    theta = jnp.asarray(sidereal_hours * 15.0 * DEG2RAD, dtype=r_ecef.dtype)
    c = jnp.cos(theta)
    s = jnp.sin(theta)
    # Rz(-theta)
    R = jnp.array([[c, -s, 0.0],
                   [s, c, 0.0],
                   [0.0, 0.0, 1.0]])
    return R @ r_ecef


def gmst_hours(jd_ut1: float) -> float:
    """Greenwich Mean Sidereal Time using the IAU 1982 model.

    Evaluated in float64 regardless of the configured dtype: the result
    advances 360 degrees per day, so it needs the full precision of the
    Julian Date.

    Args:
        jd_ut1: UT1 Julian Date.

    Returns:
        float: GMST [hours] in ``[0, 24)``.

    References:

        1. D. Vallado, *Fundamentals of Astrodynamics and Applications
           (4th Ed.)*, 2010.
    """
    t_ut1 = jnp.float64(julian_centuries(jd_ut1))

    # GMST in seconds of time (polynomial in Julian centuries from J2000)
    gmst_sec = (67310.54841
                + (876600.0 * 3600.0 + 8640184.812866) * t_ut1
                + 0.093104 * t_ut1 * t_ut1
                - 6.2e-6 * t_ut1 * t_ut1 * t_ut1)

    return float(jnp.mod(gmst_sec, 86400.0)) / 3600.0


def equation_of_equinoxes_hours(jd_tt: float) -> float:
    """Low-precision equation of the equinoxes (nutation in right ascension).

    Uses the four largest nutation terms in longitude; accurate to ~0.5
    arcsec.

    Args:
        jd_tt: TT Julian Date.

    Returns:
        float: GAST - GMST [hours].

    References:

        1. J. Meeus, *Astronomical Algorithms (2nd Ed.)*, 1998, ch. 22.
    """
    T = jnp.float64(julian_centuries(jd_tt))

    omega = (125.04452 - 1934.136261 * T) * DEG2RAD
    L_sun = (280.4665 + 36000.7698 * T) * DEG2RAD
    L_moon = (218.3165 + 481267.8813 * T) * DEG2RAD

    # Nutation in longitude [arcsec]
    dpsi = (-17.20 * jnp.sin(omega)
            - 1.32 * jnp.sin(2.0 * L_sun)
            - 0.23 * jnp.sin(2.0 * L_moon)
            + 0.21 * jnp.sin(2.0 * omega))

    eps = (23.43929111 - 0.0130042 * T) * DEG2RAD
    return float(dpsi * jnp.cos(eps)) / 15.0 / 3600.0


def radec_to_vector(ra_hours: float, dec_degrees: float, distance: float = 1.0) -> Array:
    """Cartesian vector of an equatorial direction."""
    _float = get_dtype()
    ra = _float(ra_hours * 15.0 * DEG2RAD)
    dec = _float(dec_degrees * DEG2RAD)
    return distance * jnp.array([
        jnp.cos(dec) * jnp.cos(ra),
        jnp.cos(dec) * jnp.sin(ra),
        jnp.sin(dec),
    ])


def vector_to_radec(r: Array) -> tuple[float, float, float]:
    """Right ascension [hours], declination [deg] and norm of a Cartesian vector."""
    norm = jnp.linalg.norm(r)
    ra = jnp.mod(jnp.arctan2(r[1], r[0]) * RAD2DEG / 15.0, 24.0)
    dec = jnp.arcsin(r[2] / norm) * RAD2DEG
    return float(ra), float(dec), float(norm)


def polar_motion_site(
    latitude: float,
    longitude: float,
    x_arcsec: float,
    y_arcsec: float,
) -> tuple[float, float]:
    """Shift site coordinates for polar motion.

    Args:
        latitude: Geodetic latitude [deg].
        longitude: East longitude [deg].
        x_arcsec: Polar motion x [arcsec].
        y_arcsec: Polar motion y [arcsec].

    Returns:
        tuple: (latitude, longitude) [deg] referred to the instantaneous
            pole.

    References:

        1. P. K. Seidelmann (ed.), *Explanatory Supplement to the
           Astronomical Almanac*, 1992, sec. 3.27.
    """
    lon = longitude * DEG2RAD
    lat = latitude * DEG2RAD
    x = x_arcsec * AS2RAD
    y = y_arcsec * AS2RAD

    dlat = x * jnp.cos(lon) - y * jnp.sin(lon)
    dlon = (x * jnp.sin(lon) + y * jnp.cos(lon)) * jnp.tan(lat)

    return latitude + float(dlat) * RAD2DEG, longitude + float(dlon) * RAD2DEG


def refraction_degrees(altitude: float, temperature: float, pressure: float) -> float:
    """Atmospheric refraction for a true (geometric) altitude.

    Uses Saemundsson's formula scaled to the local temperature and pressure.
    Zero more than one degree below the horizon, so the result steps from
    about 0.65 degrees to zero at -1 degree under standard conditions.

    Args:
        altitude: True altitude [deg].
        temperature: Ambient temperature [deg C].
        pressure: Ambient pressure [mbar].

    Returns:
        float: Refraction [deg], to be added to the true altitude.

    References:

        1. J. Meeus, *Astronomical Algorithms (2nd Ed.)*, 1998, eq. 16.4.
    """
    if altitude < _REFRACTION_LIMIT:
        return 0.0

    # Refraction [arcmin] at 10 C and 1010 mbar
    r = 1.02 / jnp.tan((altitude + 10.3 / (altitude + 5.11)) * DEG2RAD)
    r = r * (pressure / 1010.0) * (283.0 / (273.0 + temperature))

    return float(r) / 60.0


def equatorial_to_horizon(
    hour_angle_hours: float,
    dec_degrees: float,
    latitude: float,
) -> tuple[float, float]:
    """Convert hour angle and declination to altitude and azimuth.

    Returns:
        tuple: (altitude, azimuth) [deg]; azimuth from north through east
            in ``[0, 360)``.
    """
    _float = get_dtype()
    H = _float(hour_angle_hours * 15.0 * DEG2RAD)
    dec = _float(dec_degrees * DEG2RAD)
    lat = _float(latitude * DEG2RAD)

    sin_alt = jnp.sin(lat) * jnp.sin(dec) + jnp.cos(lat) * jnp.cos(dec) * jnp.cos(H)
    alt = jnp.arcsin(jnp.clip(sin_alt, -1.0, 1.0))

    az = jnp.arctan2(
        -jnp.cos(dec) * jnp.sin(H),
        jnp.sin(dec) * jnp.cos(lat) - jnp.cos(dec) * jnp.cos(H) * jnp.sin(lat),
    )
    az = jnp.mod(az * RAD2DEG, 360.0)

    return float(alt * RAD2DEG), float(az)


def horizon_to_equatorial(
    altitude: float,
    azimuth: float,
    latitude: float,
) -> tuple[float, float]:
    """Convert altitude and azimuth to hour angle and declination.

    Returns:
        tuple: (hour angle [hours], declination [deg]).
    """
    _float = get_dtype()
    alt = _float(altitude * DEG2RAD)
    az = _float(azimuth * DEG2RAD)
    lat = _float(latitude * DEG2RAD)

    sin_dec = jnp.sin(lat) * jnp.sin(alt) + jnp.cos(lat) * jnp.cos(alt) * jnp.cos(az)
    dec = jnp.arcsin(jnp.clip(sin_dec, -1.0, 1.0))

    H = jnp.arctan2(
        -jnp.sin(az) * jnp.cos(alt) * jnp.cos(lat),
        jnp.sin(alt) - jnp.sin(lat) * sin_dec,
    )

    return float(H * RAD2DEG) / 15.0, float(dec * RAD2DEG)


def equatorial_to_ecliptic(
    ra_hours: float,
    dec_degrees: float,
    obliquity: float,
) -> tuple[float, float]:
    """Convert an equatorial direction to ecliptic longitude and latitude.

    Args:
        ra_hours: Right ascension [hours].
        dec_degrees: Declination [deg].
        obliquity: Obliquity of the ecliptic [rad].

    Returns:
        tuple: (longitude in ``[0, 360)``, latitude) [deg].
    """
    r = radec_to_vector(ra_hours, dec_degrees)
    c = jnp.cos(obliquity)
    s = jnp.sin(obliquity)

    # Rx(epsilon)
    x = r[0]
    y = c * r[1] + s * r[2]
    z = -s * r[1] + c * r[2]

    lon = jnp.mod(jnp.arctan2(y, x) * RAD2DEG, 360.0)
    lat = jnp.arcsin(jnp.clip(z, -1.0, 1.0)) * RAD2DEG
    return float(lon), float(lat)
