"""Calendar <-> Julian Date conversions and fixed-width time rendering.

All functions operate on Python scalars in double precision.  Julian Dates
near 2.45e6 carry ~40 microseconds of resolution in float64, which is the
precision floor for every time-scale value in skyclock.
"""

from __future__ import annotations

import calendar
import math

from .constants import JD_MJD_OFFSET, SECONDS_PER_DAY

# Rendered fractional seconds resolution (1e-8 s ticks)
_FRACTION_DIGITS = 8
_TICKS_PER_SECOND = 10**_FRACTION_DIGITS
_TICKS_PER_DAY = 86400 * _TICKS_PER_SECOND
_MIN_FRACTION_DIGITS = 3


def caldate_to_mjd(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
) -> float:
    """Convert a calendar date to Modified Julian Date. Algorithm is only valid from year 1583 onward.

    Args:
        year (int): Year of the calendar date.
        month (int): Month of the calendar date.
        day (int): Day of the calendar date.
        hour (int): Hour of the calendar date. Default: ``0``
        minute (int): Minute of the calendar date. Default: ``0``
        second (float): Second of the calendar date. Default: ``0.0``

    Returns:
        Modified Julian Date.

    References:

        1. Montenbruck, O., & Gill, E. (2012). *Satellite Orbits: Models, Methods and Applications*. Springer Science & Business Media.
    """
    if month <= 2:
        year -= 1
        month += 12

    b = year // 400 - year // 100 + year // 4

    mjd = 365 * year - 679004 + b + math.floor(30.6001 * (month + 1)) + day

    frac_day = (hour + (minute + second / 60.0) / 60.0) / 24.0

    return mjd + frac_day


def caldate_to_jd(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
) -> float:
    """Convert a calendar date to Julian Date.

    The integer-day part is added to the MJD offset before the fraction of
    day so that no precision is lost to the large JD magnitude.

    Args:
        year (int): Year of the calendar date.
        month (int): Month of the calendar date.
        day (int): Day of the calendar date.
        hour (int): Hour of the calendar date. Default: ``0``
        minute (int): Minute of the calendar date. Default: ``0``
        second (float): Second of the calendar date. Default: ``0.0``

    Returns:
        Julian Date.
    """
    mjd_day = caldate_to_mjd(year, month, day)
    frac_day = (hour * 3600.0 + minute * 60.0 + second) / SECONDS_PER_DAY
    return (JD_MJD_OFFSET + mjd_day) + frac_day


def jd_to_mjd(jd: float) -> float:
    """Convert Julian Date to Modified Julian Date."""
    return jd - JD_MJD_OFFSET


def mjd_to_jd(mjd: float) -> float:
    """Convert Modified Julian Date to Julian Date."""
    return mjd + JD_MJD_OFFSET


def _civil_date(z: int) -> tuple[int, int, int]:
    """Return (year, month, day) for the civil day starting at JD ``z - 0.5``."""
    # Julian/Gregorian calendar switchover at JD 2299161.
    # Scaled integer arithmetic: (z - 1867216.25)/36524.25
    alpha = (100 * z - 186721625) // 3652425
    a = z if z < 2299161 else z + 1 + alpha - alpha // 4

    b = a + 1524
    c = (100 * b - 12210) // 36525
    d = (36525 * c) // 100
    e = ((b - d) * 10000) // 306001

    day = b - d - (306001 * e) // 10000
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715
    return year, month, day


def jd_to_caldate(jd: float) -> tuple[int, int, int, int, int, float]:
    """Convert Julian Date to calendar date.

    Uses the algorithm from Montenbruck & Gill for Gregorian calendar dates.
    Before JD 2299160.5 (1582-10-15) the date is in the Julian calendar, while
    :func:`caldate_to_jd` always reads Gregorian dates, so dates before 1583
    do not round-trip.

    Args:
        jd (float): Julian Date.

    Returns:
        tuple: (year, month, day, hour, minute, second) where second
            includes the fractional part.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and
           Applications*, 2012, p. 322.
    """
    jd_shifted = jd + 0.5
    z = math.floor(jd_shifted)
    year, month, day = _civil_date(z)

    civil_time = (jd_shifted - z) * SECONDS_PER_DAY
    hour = int(civil_time // 3600)
    civil_time -= hour * 3600
    minute = int(civil_time // 60)
    second = civil_time - minute * 60

    return year, month, day, hour, minute, second


def validate_caldate(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
) -> None:
    """Check that calendar components are in range.

    Raises:
        ValueError: If any component is out of range or the year is before
            1583. ``second`` may reach 60.x to allow a leap second.
    """
    if year < 1583:
        raise ValueError(f"year {year} before 1583; only Gregorian calendar dates are accepted")
    if not 1 <= month <= 12:
        raise ValueError(f"month {month} out of range 1-12")
    last_day = calendar.monthrange(year, month)[1]
    if not 1 <= day <= last_day:
        raise ValueError(f"day {day} out of range 1-{last_day} for {year:04d}-{month:02d}")
    if not 0 <= hour <= 23:
        raise ValueError(f"hour {hour} out of range 0-23")
    if not 0 <= minute <= 59:
        raise ValueError(f"minute {minute} out of range 0-59")
    if not 0.0 <= second < 61.0:
        raise ValueError(f"second {second} out of range [0, 61)")


def format_jd(jd: float, separator: str = " ") -> str:
    """Render a Julian Date as ``YYYY-MM-DD HH:MM:SS.fff``.

    Fractional seconds are rounded to 8 digits, then trailing zeros are
    stripped down to a minimum of 3 digits.  Rounding carries into the
    seconds, minutes, hours and date.

    Args:
        jd (float): Julian Date to render.
        separator (str): Text between the date and the time of day.

    Returns:
        str: Fixed-width rendering of the calendar instant.
    """
    jd_shifted = jd + 0.5
    z = math.floor(jd_shifted)
    ticks = round((jd_shifted - z) * _TICKS_PER_DAY)
    if ticks >= _TICKS_PER_DAY:
        z += 1
        ticks -= _TICKS_PER_DAY

    year, month, day = _civil_date(z)

    whole_seconds, fraction_ticks = divmod(ticks, _TICKS_PER_SECOND)
    hour, remainder = divmod(whole_seconds, 3600)
    minute, second = divmod(remainder, 60)

    fraction = f"{fraction_ticks:0{_FRACTION_DIGITS}d}".rstrip("0")
    fraction = fraction.ljust(_MIN_FRACTION_DIGITS, "0")

    return (f"{year:04d}-{month:02d}-{day:02d}{separator}"
            f"{hour:02d}:{minute:02d}:{second:02d}.{fraction}")
