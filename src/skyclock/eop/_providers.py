"""Factory functions for creating EarthOrientationTable instances.

Provides convenience constructors for common EOP configurations:

- :func:`empty_eop`: No records; every lookup returns the "no data" record
  (equivalent to ignoring Earth orientation corrections).
- :func:`static_eop`: Constant values over a range of days (useful for
  testing or when specific values are known).
- :func:`load_eop_from_text` / :func:`load_eop_from_file`: Parse IERS
  finals data.
- :func:`load_cached_eop`: Load from a local cache, downloading fresh data
  from IERS when stale.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Sequence

import jax.numpy as jnp

from skyclock.constants import JD_MJD_OFFSET
from skyclock.eop._download import FINALS_FILENAME, download_finals_file
from skyclock.eop._parsers import parse_finals_text
from skyclock.eop._types import EarthOrientationRecord, EarthOrientationTable
from skyclock.utils.caching import get_eop_cache_dir, is_file_stale

logger = logging.getLogger(__name__)

_DEFAULT_MAX_AGE_DAYS: float = 7.0
"""Default maximum age for cached EOP data in days."""

_STATIC_MJD_MIN: float = 41317.0
"""1972-01-01, the start of the leap second era."""

_STATIC_MJD_MAX: float = 73050.0
"""2059-01-01."""


def _optional(value: float | None) -> float:
    return math.nan if value is None else value


def _table_from_records(records: Sequence[EarthOrientationRecord]) -> EarthOrientationTable:
    # Overlapping files repeat days; the first record for a day wins
    unique: dict[float, EarthOrientationRecord] = {}
    for record in records:
        unique.setdefault(record.julian_utc, record)
    records = sorted(unique.values(), key=lambda r: r.julian_utc)
    f64 = jnp.float64

    def column(name: str):
        return jnp.array([getattr(r, name) for r in records], dtype=f64)

    def optional_column(name: str):
        return jnp.array([_optional(getattr(r, name)) for r in records], dtype=f64)

    return EarthOrientationTable(
        julian_utc=column("julian_utc"),
        pm_x=column("pm_x"),
        pm_x_err=column("pm_x_err"),
        pm_y=column("pm_y"),
        pm_y_err=column("pm_y_err"),
        pm_is_prediction=jnp.array([r.pm_is_prediction for r in records], dtype=bool),
        ut1_minus_utc=column("ut1_minus_utc"),
        ut1_minus_utc_err=column("ut1_minus_utc_err"),
        ut1_is_prediction=jnp.array([r.ut1_is_prediction for r in records], dtype=bool),
        nutation_psi=optional_column("nutation_psi"),
        nutation_psi_err=optional_column("nutation_psi_err"),
        nutation_epsilon=optional_column("nutation_epsilon"),
        nutation_epsilon_err=optional_column("nutation_epsilon_err"),
    )


def empty_eop() -> EarthOrientationTable:
    """Create an EarthOrientationTable with no records.

    Every lookup returns the "no data" record, so UT1-UTC and polar motion
    are treated as zero.

    Returns:
        Empty EarthOrientationTable.
    """
    return _table_from_records([])


def static_eop(
    pm_x: float = 0.0,
    pm_y: float = 0.0,
    ut1_minus_utc: float = 0.0,
    mjd_min: float = _STATIC_MJD_MIN,
    mjd_max: float = _STATIC_MJD_MAX,
) -> EarthOrientationTable:
    """Create an EarthOrientationTable with constant daily values.

    One record is tabulated at each UTC midnight from *mjd_min* to
    *mjd_max* inclusive, so lookups anywhere in ``[mjd_min, mjd_max)``
    return the constants.

    Args:
        pm_x: Polar motion x-component [arcsec]. Default: 0.0.
        pm_y: Polar motion y-component [arcsec]. Default: 0.0.
        ut1_minus_utc: UT1-UTC offset [seconds]. Default: 0.0.
        mjd_min: First tabulated MJD. Default: 41317 (1972-01-01).
        mjd_max: Last tabulated MJD. Default: 73050 (2059-01-01).

    Returns:
        EarthOrientationTable with constant values.

    Examples:
        ```python
        from skyclock.eop import static_eop, get_ut1_utc
        eop = static_eop(ut1_minus_utc=0.1)
        val = get_ut1_utc(eop, 2459000.5)  # returns 0.1
        ```
    """
    f64 = jnp.float64
    mjd = jnp.arange(math.floor(mjd_min), math.floor(mjd_max) + 1, dtype=f64)
    n = mjd.shape[0]

    def const(value: float):
        return jnp.full((n,), value, dtype=f64)

    return EarthOrientationTable(
        julian_utc=mjd + JD_MJD_OFFSET,
        pm_x=const(pm_x),
        pm_x_err=const(0.0),
        pm_y=const(pm_y),
        pm_y_err=const(0.0),
        pm_is_prediction=jnp.zeros((n,), dtype=bool),
        ut1_minus_utc=const(ut1_minus_utc),
        ut1_minus_utc_err=const(0.0),
        ut1_is_prediction=jnp.zeros((n,), dtype=bool),
        nutation_psi=const(math.nan),
        nutation_psi_err=const(math.nan),
        nutation_epsilon=const(math.nan),
        nutation_epsilon_err=const(math.nan),
    )


def load_eop_from_text(text: str) -> EarthOrientationTable:
    """Parse IERS finals text into an EarthOrientationTable.

    Args:
        text: Contents of a ``finals.data`` / ``finals.all`` file.

    Returns:
        EarthOrientationTable ready for lookups.

    Raises:
        EOPFormatError: If the text is not in the finals format.
    """
    records = parse_finals_text(text)
    table = _table_from_records(records)
    logger.debug(
        "Parsed %d EOP records (JD %.1f to %.1f)",
        len(records),
        records[0].julian_utc,
        records[-1].julian_utc,
    )
    return table


def load_eop_from_file(filepath: str | Path) -> EarthOrientationTable:
    """Load EOP data from an IERS finals file.

    Args:
        filepath: Path to the file (e.g. ``finals.data``).

    Returns:
        EarthOrientationTable ready for lookups.

    Raises:
        FileNotFoundError: If the file does not exist.
        EOPFormatError: If no valid EOP data is found.

    Examples:
        ```python
        from skyclock.eop import load_eop_from_file, get_ut1_utc
        eop = load_eop_from_file("path/to/finals.data")
        val = get_ut1_utc(eop, 2459000.5)
        ```
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"EOP file not found: {filepath}")

    logger.info("Loading EOP data from %s", filepath)
    return load_eop_from_text(filepath.read_text(encoding="utf-8"))


def load_cached_eop(
    filepath: str | Path | None = None,
    *,
    max_age_days: float = _DEFAULT_MAX_AGE_DAYS,
) -> EarthOrientationTable:
    """Load EOP data from a local cache, downloading fresh data when stale.

    Checks whether the cached file at *filepath* exists and is younger than
    *max_age_days*. If the file is missing or stale, a fresh copy of
    ``finals.data`` is downloaded from IERS. If the download fails a stale
    copy is still used when present. With no usable file, or one that cannot
    be parsed, an empty table is returned so this function never raises on
    network issues.

    Args:
        filepath: Path to the cached EOP file. When ``None`` (the default),
            uses ``<cache_dir>/eop/finals.data``.
        max_age_days: Maximum acceptable age of the cached file in days.
            Defaults to 7.

    Returns:
        EarthOrientationTable loaded from the cached (or freshly
        downloaded) file, or :func:`empty_eop` as a fallback.
    """
    if filepath is None:
        filepath = get_eop_cache_dir() / FINALS_FILENAME
    else:
        filepath = Path(filepath)

    max_age_seconds = max_age_days * 86400.0

    if is_file_stale(filepath, max_age_seconds):
        try:
            download_finals_file(filepath)
        except Exception:
            logger.warning(
                "Failed to download EOP data; continuing without EOP corrections.",
                exc_info=True,
            )
            if not filepath.exists():
                return empty_eop()

    try:
        return load_eop_from_file(filepath)
    except Exception:
        logger.warning(
            "Failed to parse cached EOP file %s; continuing without EOP corrections.",
            filepath,
            exc_info=True,
        )
        return empty_eop()
