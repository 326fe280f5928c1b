"""EOP interpolation and query functions.

A query at ``jd_utc`` is answered from the tabulated record at the start of
the containing day (keys are tabulated at ``MJD + 2400000.5``, i.e. UTC
midnight) and the record after it, linearly interpolated. Lookups use
``jnp.searchsorted`` over the float64 ``julian_utc`` column.
"""

from __future__ import annotations

import math

import jax.numpy as jnp

from skyclock.eop._types import EarthOrientationRecord, EarthOrientationTable

_KEY_TOLERANCE = 0.001
"""Maximum distance [days] between a lookup key and a tabulated instant."""

_NUMERIC_FIELDS = (
    "pm_x",
    "pm_x_err",
    "pm_y",
    "pm_y_err",
    "ut1_minus_utc",
    "ut1_minus_utc_err",
)

_OPTIONAL_FIELDS = (
    "nutation_psi",
    "nutation_psi_err",
    "nutation_epsilon",
    "nutation_epsilon_err",
)


def _day_key(jd_utc: float) -> float:
    key = math.floor(jd_utc) + 0.5
    if jd_utc < key:
        key -= 1.0
    return key


def _find_start(table: EarthOrientationTable, key: float) -> int | None:
    """Return the index of the record tabulated at *key*, if it has a successor."""
    n = table.julian_utc.shape[0]
    if n < 2:
        return None
    idx = int(jnp.searchsorted(table.julian_utc, key - _KEY_TOLERANCE, side="left"))
    if idx >= n - 1:
        return None
    if abs(float(table.julian_utc[idx]) - key) >= _KEY_TOLERANCE:
        return None
    return idx


def _mix(factor: float, start: float, end: float) -> float:
    return start + factor * (end - start)


def value_at(table: EarthOrientationTable, jd_utc: float) -> EarthOrientationRecord:
    """Interpolate the EOP record at a UTC Julian Date.

    Args:
        table: EOP table.
        jd_utc: UTC Julian Date to query.

    Returns:
        Record with ``julian_utc`` set to *jd_utc* and every numeric field
        linearly interpolated between the bracketing daily records.
        Prediction flags come from the earlier record. Nutation values absent
        from either record are ``None``. Outside the table the "no data"
        record is returned.

    Examples:
        ```python
        from skyclock.eop import static_eop, value_at
        eop = static_eop(ut1_minus_utc=0.1)
        rec = value_at(eop, 2459000.75)  # rec.ut1_minus_utc == 0.1
        ```
    """
    jd_utc = float(jd_utc)
    idx = _find_start(table, _day_key(jd_utc))
    if idx is None:
        return EarthOrientationRecord.no_data()

    start_jd = float(table.julian_utc[idx])
    end_jd = float(table.julian_utc[idx + 1])
    if end_jd <= start_jd:
        return EarthOrientationRecord.no_data()
    factor = (jd_utc - start_jd) / (end_jd - start_jd)

    values: dict[str, float | bool | None] = {}
    for name in _NUMERIC_FIELDS:
        column = getattr(table, name)
        values[name] = _mix(factor, float(column[idx]), float(column[idx + 1]))
    for name in _OPTIONAL_FIELDS:
        column = getattr(table, name)
        mixed = _mix(factor, float(column[idx]), float(column[idx + 1]))
        values[name] = None if math.isnan(mixed) else mixed

    return EarthOrientationRecord(
        julian_utc=jd_utc,
        pm_is_prediction=bool(table.pm_is_prediction[idx]),
        ut1_is_prediction=bool(table.ut1_is_prediction[idx]),
        **values,
    )


def get_ut1_utc(table: EarthOrientationTable, jd_utc: float) -> float:
    """Query UT1-UTC at the given UTC Julian Date.

    Args:
        table: EOP table.
        jd_utc: UTC Julian Date to query.

    Returns:
        UT1-UTC offset [seconds]; ``0.0`` outside the table.
    """
    return value_at(table, jd_utc).ut1_minus_utc


def get_pm(table: EarthOrientationTable, jd_utc: float) -> tuple[float, float]:
    """Query polar motion components at the given UTC Julian Date.

    Args:
        table: EOP table.
        jd_utc: UTC Julian Date to query.

    Returns:
        Tuple of (pm_x, pm_y) [arcsec]; zeros outside the table.
    """
    return value_at(table, jd_utc).polar_motion
