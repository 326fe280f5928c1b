"""Leap second table: TAI-UTC as a step function of the UTC Julian Date.

The default table is the IERS Bulletin C list from 1972-01-01 through
2017-01-01.  Lookups use ``jnp.searchsorted`` over a float64 array of
effective dates, so a query is O(log n).
"""

from __future__ import annotations

from typing import NamedTuple, Sequence

import jax.numpy as jnp

from . import config  # noqa: F401  (enables float64)


class LeapSecondEntry(NamedTuple):
    """A single step of the TAI-UTC table.

    Attributes:
        effective_jd: UTC Julian Date (midnight) at which the offset applies.
        tai_minus_utc: TAI-UTC from that date on [seconds].
    """

    effective_jd: float
    tai_minus_utc: float


# Source: IERS Bulletin C, https://hpiers.obspm.fr/iers/bul/bulc/bulletinc.dat
DEFAULT_LEAP_SECONDS: tuple[LeapSecondEntry, ...] = (
    LeapSecondEntry(2441317.5, 10.0),  # 1972-01-01
    LeapSecondEntry(2441499.5, 11.0),  # 1972-07-01
    LeapSecondEntry(2441683.5, 12.0),  # 1973-01-01
    LeapSecondEntry(2442048.5, 13.0),  # 1974-01-01
    LeapSecondEntry(2442413.5, 14.0),  # 1975-01-01
    LeapSecondEntry(2442778.5, 15.0),  # 1976-01-01
    LeapSecondEntry(2443144.5, 16.0),  # 1977-01-01
    LeapSecondEntry(2443509.5, 17.0),  # 1978-01-01
    LeapSecondEntry(2443874.5, 18.0),  # 1979-01-01
    LeapSecondEntry(2444239.5, 19.0),  # 1980-01-01
    LeapSecondEntry(2444786.5, 20.0),  # 1981-07-01
    LeapSecondEntry(2445151.5, 21.0),  # 1982-07-01
    LeapSecondEntry(2445516.5, 22.0),  # 1983-07-01
    LeapSecondEntry(2446247.5, 23.0),  # 1985-07-01
    LeapSecondEntry(2447161.5, 24.0),  # 1988-01-01
    LeapSecondEntry(2447892.5, 25.0),  # 1990-01-01
    LeapSecondEntry(2448257.5, 26.0),  # 1991-01-01
    LeapSecondEntry(2448804.5, 27.0),  # 1992-07-01
    LeapSecondEntry(2449169.5, 28.0),  # 1993-07-01
    LeapSecondEntry(2449534.5, 29.0),  # 1994-07-01
    LeapSecondEntry(2450083.5, 30.0),  # 1996-01-01
    LeapSecondEntry(2450630.5, 31.0),  # 1997-07-01
    LeapSecondEntry(2451179.5, 32.0),  # 1999-01-01
    LeapSecondEntry(2453736.5, 33.0),  # 2006-01-01
    LeapSecondEntry(2454832.5, 34.0),  # 2009-01-01
    LeapSecondEntry(2456109.5, 35.0),  # 2012-07-01
    LeapSecondEntry(2457204.5, 36.0),  # 2015-07-01
    LeapSecondEntry(2457754.5, 37.0),  # 2017-01-01
)


class LeapSecondTable:
    """Ordered TAI-UTC step table.

    Args:
        entries: Leap second entries, strictly increasing in both
            ``effective_jd`` and ``tai_minus_utc``. Defaults to
            :data:`DEFAULT_LEAP_SECONDS`.

    Raises:
        ValueError: If *entries* is empty or not strictly increasing.
    """

    __slots__ = ("_entries", "_jd", "_offsets")

    def __init__(self, entries: Sequence[LeapSecondEntry] = DEFAULT_LEAP_SECONDS) -> None:
        entries = tuple(LeapSecondEntry(*entry) for entry in entries)
        if not entries:
            raise ValueError("Leap second table requires at least one entry")
        for prev, curr in zip(entries, entries[1:]):
            if not (curr.effective_jd > prev.effective_jd
                    and curr.tai_minus_utc > prev.tai_minus_utc):
                raise ValueError(
                    f"Leap second entries must be strictly increasing: {prev} -> {curr}"
                )
        self._entries = entries
        self._jd = jnp.array([e.effective_jd for e in entries], dtype=jnp.float64)
        self._offsets = jnp.array([e.tai_minus_utc for e in entries], dtype=jnp.float64)

    @property
    def entries(self) -> tuple[LeapSecondEntry, ...]:
        return self._entries

    def tai_minus_utc(self, jd_utc: float) -> float:
        """Return TAI-UTC (cumulative leap seconds) at a UTC Julian Date.

        Before 1972-01-01 (the first entry) leap seconds did not exist and 0
        is returned.  At or after the last entry the last offset is applied:
        leap seconds announced after the table was built are not known, so
        later instants are under-corrected by the unknown steps.

        Args:
            jd_utc: UTC Julian Date.

        Returns:
            TAI-UTC in seconds.
        """
        # searchsorted(side='right') is the index of the first entry > jd,
        # so idx-1 is the last entry <= jd.
        idx = int(jnp.searchsorted(self._jd, jnp.float64(jd_utc), side="right"))
        if idx == 0:
            return 0.0
        return float(self._offsets[idx - 1])

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        last = self._entries[-1]
        return f"LeapSecondTable(n={len(self._entries)}, last={last.effective_jd}:{last.tai_minus_utc})"


_DEFAULT_TABLE: LeapSecondTable | None = None


def default_leap_second_table() -> LeapSecondTable:
    """Return a shared table built from :data:`DEFAULT_LEAP_SECONDS`."""
    global _DEFAULT_TABLE
    if _DEFAULT_TABLE is None:
        _DEFAULT_TABLE = LeapSecondTable()
    return _DEFAULT_TABLE
