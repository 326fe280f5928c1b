"""Periodic normalization and sexagesimal helpers for angles and hour values."""

import math

from skyclock.constants import SECONDS_PER_HOUR


def normalize(value: float, period: float) -> float:
    """Wrap *value* into ``[0, period)``.

    Args:
        value (float): Value to wrap.
        period (float): Period, e.g. ``360.0`` for degrees or ``24.0`` for hours.

    Returns:
        float: ``value`` modulo ``period``, always non-negative.
    """
    quot = value / period
    return period * (quot - math.floor(quot))


def normalize_degrees(angle: float) -> float:
    """Wrap an angle in degrees into ``[0, 360)``."""
    return normalize(angle, 360.0)


def signed_degrees(angle: float) -> float:
    """Wrap an angle in degrees into ``(-180, 180]``."""
    wrapped = normalize(angle, 360.0)
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


def hours_to_hms(hours: float) -> tuple[int, int, float]:
    """Split an hour angle into hours, minutes and seconds.

    Args:
        hours (float): Hour value; wrapped into ``[0, 24)`` first.

    Returns:
        tuple[int, int, float]: Whole hours, whole minutes and seconds.

    Examples:
        ```python
        hours_to_hms(12.5)  # (12, 30, 0.0)
        ```
    """
    seconds = normalize(hours, 24.0) * SECONDS_PER_HOUR
    h = int(seconds // SECONDS_PER_HOUR)
    seconds -= h * SECONDS_PER_HOUR
    m = int(seconds // 60.0)
    return h, m, seconds - m * 60.0


def degrees_to_dms(angle: float) -> tuple[int, int, int, float]:
    """Split an angle into sign, degrees, arcminutes and arcseconds.

    The sign is carried separately so that angles between -1 and 0 degrees
    keep it.

    Args:
        angle (float): Angle in degrees.

    Returns:
        tuple[int, int, int, float]: Sign (``1`` or ``-1``), whole degrees,
            whole arcminutes and arcseconds, all but the sign non-negative.

    Examples:
        ```python
        degrees_to_dms(-0.5)  # (-1, 0, 30, 0.0)
        ```
    """
    sign = -1 if angle < 0.0 else 1
    arcsec = abs(angle) * 3600.0
    d = int(arcsec // 3600.0)
    arcsec -= d * 3600.0
    m = int(arcsec // 60.0)
    return sign, d, m, arcsec - m * 60.0
