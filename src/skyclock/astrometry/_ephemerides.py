"""Low-precision analytical ephemerides for the Sun and Moon.

Provides geocentric position vectors referred to the mean equator and
equinox of date, using the analytical models from Montenbruck & Gill.
Accuracy is ~0.01 deg for the Sun and ~0.1 deg for the Moon, enough for
rise, set and phase times to about a minute.

All positions are in metres. The time argument is Julian centuries of TT
from J2000.0; the float dtype of the computation follows
:func:`skyclock.config.get_dtype`.

References:
    1. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, 2012, sec. 3.3.2.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array

from skyclock.config import get_dtype
from skyclock.constants import AS2RAD, DEG2RAD

# Obliquity of the J2000 ecliptic [deg] and its rate [deg/century]
_EPSILON_J2000 = 23.43929111
_EPSILON_RATE = -0.0130042

# General precession in longitude [deg/century]
_PRECESSION_RATE = 1.3972


def mean_obliquity(T: Array) -> Array:
    """Mean obliquity of the ecliptic of date [rad]."""
    return (_EPSILON_J2000 + _EPSILON_RATE * T) * DEG2RAD


def _frac(x):
    """Fractional part of x: ``x - floor(x)``."""
    return x - jnp.floor(x)


def _ecliptic_to_equatorial(T: Array, r: Array, L: Array, B: Array) -> Array:
    """Rotate spherical ecliptic coordinates of date to a Cartesian equatorial vector."""
    # Refer the J2000 longitude to the equinox of date
    L = L + _PRECESSION_RATE * DEG2RAD * T

    r_ecliptic = jnp.array([
        r * jnp.cos(L) * jnp.cos(B),
        r * jnp.sin(L) * jnp.cos(B),
        r * jnp.sin(B),
    ])

    # Rx(-epsilon)
    eps = mean_obliquity(T)
    c = jnp.cos(eps)
    s = jnp.sin(eps)
    R = jnp.array([[1.0, 0.0, 0.0],
                   [0.0, c, -s],
                   [0.0, s, c]])
    return R @ r_ecliptic


@jax.jit
def sun_position(T: Array) -> Array:
    """Geocentric position of the Sun.

    Args:
        T: Julian centuries of TT from J2000.0.

    Returns:
        3-element Sun position vector in metres, mean equator and equinox
        of date.

    Examples:
        ```python
        r_sun = sun_position(jnp.float64(0.24))
        float(jnp.linalg.norm(r_sun))  # ~1 AU
        ```
    """
    _float = get_dtype()
    pi2 = _float(2.0) * jnp.pi

    # Mean anomaly [rad]
    M = pi2 * _frac(_float(0.9931267) + _float(99.9973583) * T)

    # Ecliptic longitude [rad]
    L = pi2 * _frac(
        _float(0.7859444)
        + M / pi2
        + (_float(6892.0) * jnp.sin(M) + _float(72.0) * jnp.sin(_float(2.0) * M))
        / _float(1296.0e3)
    )

    # Distance [m]
    r = (
        _float(149.619e9)
        - _float(2.499e9) * jnp.cos(M)
        - _float(0.021e9) * jnp.cos(_float(2.0) * M)
    )

    return _ecliptic_to_equatorial(T, r, L, _float(0.0))


@jax.jit
def moon_position(T: Array) -> Array:
    """Geocentric position of the Moon.

    Args:
        T: Julian centuries of TT from J2000.0.

    Returns:
        3-element Moon position vector in metres, mean equator and equinox
        of date.
    """
    _float = get_dtype()
    pi2 = _float(2.0) * jnp.pi

    # Mean elements of the lunar orbit
    L_0 = _frac(_float(0.606433) + _float(1336.851344) * T)        # Mean longitude [rev]
    l_m = pi2 * _frac(_float(0.374897) + _float(1325.552410) * T)  # Moon mean anomaly [rad]
    lp = pi2 * _frac(_float(0.993133) + _float(99.997361) * T)     # Sun mean anomaly [rad]
    D = pi2 * _frac(_float(0.827361) + _float(1236.853086) * T)    # Elongation [rad]
    F = pi2 * _frac(_float(0.259086) + _float(1342.227825) * T)    # Argument of latitude [rad]

    two = _float(2.0)

    # Ecliptic longitude perturbation [arcsec]
    dL = (
        _float(22640.0) * jnp.sin(l_m)
        - _float(4586.0) * jnp.sin(l_m - two * D)
        + _float(2370.0) * jnp.sin(two * D)
        + _float(769.0) * jnp.sin(two * l_m)
        - _float(668.0) * jnp.sin(lp)
        - _float(412.0) * jnp.sin(two * F)
        - _float(212.0) * jnp.sin(two * l_m - two * D)
        - _float(206.0) * jnp.sin(l_m + lp - two * D)
        + _float(192.0) * jnp.sin(l_m + two * D)
        - _float(165.0) * jnp.sin(lp - two * D)
        - _float(125.0) * jnp.sin(D)
        - _float(110.0) * jnp.sin(l_m + lp)
        + _float(148.0) * jnp.sin(l_m - lp)
        - _float(55.0) * jnp.sin(two * F - two * D)
    )

    L = pi2 * _frac(L_0 + dL / _float(1296.0e3))

    # Ecliptic latitude [rad]
    S = F + (dL + _float(412.0) * jnp.sin(two * F) + _float(541.0) * jnp.sin(lp)) * _float(AS2RAD)
    h = F - two * D
    N = (
        -_float(526.0) * jnp.sin(h)
        + _float(44.0) * jnp.sin(l_m + h)
        - _float(31.0) * jnp.sin(-l_m + h)
        - _float(23.0) * jnp.sin(lp + h)
        + _float(11.0) * jnp.sin(-lp + h)
        - _float(25.0) * jnp.sin(-two * l_m + F)
        + _float(21.0) * jnp.sin(-l_m + F)
    )
    B = (_float(18520.0) * jnp.sin(S) + N) * _float(AS2RAD)

    # Distance [m]
    r = (
        _float(385000e3)
        - _float(20905e3) * jnp.cos(l_m)
        - _float(3699e3) * jnp.cos(two * D - l_m)
        - _float(2956e3) * jnp.cos(two * D)
        - _float(570e3) * jnp.cos(two * l_m)
        + _float(246e3) * jnp.cos(two * l_m - two * D)
        - _float(205e3) * jnp.cos(lp - two * D)
        - _float(171e3) * jnp.cos(l_m + two * D)
        - _float(152e3) * jnp.cos(l_m + lp - two * D)
    )

    return _ecliptic_to_equatorial(T, r, L, B)
