"""Conversions between the UTC, TT, UT1 and TDB time scales.

A :class:`TimeScale` bundles the data the conversions depend on (the leap
second table, the Earth orientation table and the TDB-TT correction) and
builds immutable :class:`Instant` values. An ``Instant`` carries UTC, TT and
TDB Julian Dates; UT1 needs an EOP lookup and is produced on request by
:meth:`Instant.resolve` as a :class:`ResolvedInstant`.

Conversion chain::

    UTC --(+ leap seconds)--> TAI --(+ 32.184 s)--> TT --(+ periodic)--> TDB
    UTC --(+ UT1-UTC from EOP)--> UT1

All Julian Dates are Python floats (float64).

Typical usage::

    from skyclock.timescale import TimeScale
    ts = TimeScale()
    t = ts.from_iso8601("2018-02-23T03:05:45.5Z")
    print(t.tt_str())
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from .constants import SECONDS_PER_DAY, TT_MINUS_TAI
from .eop import EarthOrientationRecord, EarthOrientationTable, empty_eop, value_at
from .leap_seconds import LeapSecondTable, default_leap_second_table
from .tdb import tdb_minus_tt as _novas_tdb_minus_tt
from .time import caldate_to_jd, format_jd, jd_to_caldate, validate_caldate

_TT_MINUS_TAI_DAYS = TT_MINUS_TAI / SECONDS_PER_DAY

# Accepted ISO 8601 forms, keyed by string length. The date-time form is
# selected for any length >= 20 ("YYYY-MM-DDTHH:MM:SSZ").
_ISO_MONTH = re.compile(r'^(\d{4})-(\d{2})$')
_ISO_DATE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
_ISO_DATETIME = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2}(?:\.\d+)?)Z$'
)
_ISO_DATETIME_MIN_LENGTH = 20

# Serializes the system clock to calendar decomposition in now()
_CLOCK_LOCK = threading.Lock()


class TimeFormatError(ValueError):
    """Raised when a time string is not in a supported ISO 8601 form."""


def _shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


class TimeScale:
    """Context for time scale conversions.

    Args:
        leap_seconds: TAI-UTC table. Defaults to the built-in table.
        eop: Earth orientation table used for UT1. Defaults to an empty
            table (UT1 = UTC).
        tdb_minus_tt: Function returning TDB-TT in seconds at a Julian Date.
            Defaults to :func:`skyclock.tdb.tdb_minus_tt`.

    Examples:
        ```python
        from skyclock.eop import load_eop_from_file
        ts = TimeScale(eop=load_eop_from_file("finals.data"))
        t = ts.from_utc(2458172.62900463)
        ```
    """

    def __init__(
        self,
        leap_seconds: LeapSecondTable | None = None,
        eop: EarthOrientationTable | None = None,
        tdb_minus_tt: Callable[[float], float] | None = None,
    ) -> None:
        self.leap_seconds = leap_seconds if leap_seconds is not None else default_leap_second_table()
        self.eop = eop if eop is not None else empty_eop()
        self.tdb_minus_tt = tdb_minus_tt if tdb_minus_tt is not None else _novas_tdb_minus_tt

    # Scale conversions

    def tai_minus_utc(self, jd_utc: float) -> float:
        """Return TAI-UTC [seconds] at a UTC Julian Date."""
        return self.leap_seconds.tai_minus_utc(jd_utc)

    def utc_to_tt(self, jd_utc: float) -> float:
        """Convert a UTC Julian Date to TT."""
        return jd_utc + (self.tai_minus_utc(jd_utc) + TT_MINUS_TAI) / SECONDS_PER_DAY

    def tt_to_utc(self, jd_tt: float) -> float:
        """Convert a TT Julian Date to UTC.

        The leap second offset is looked up twice, first at TAI and then at
        the UTC estimate it gives. Inside the one-second insertion window the
        two disagree and the second lookup wins.

        Args:
            jd_tt (float): TT Julian Date.

        Returns:
            float: UTC Julian Date.
        """
        jd_tai = jd_tt - _TT_MINUS_TAI_DAYS
        leap_tai = self.tai_minus_utc(jd_tai)
        leap = self.tai_minus_utc(jd_tai - leap_tai / SECONDS_PER_DAY)
        return jd_tt - (leap + TT_MINUS_TAI) / SECONDS_PER_DAY

    def tt_to_tdb(self, jd_tt: float) -> float:
        """Convert a TT Julian Date to TDB."""
        return jd_tt + self.tdb_minus_tt(jd_tt) / SECONDS_PER_DAY

    def tdb_to_tt(self, jd_tdb: float) -> float:
        """Convert a TDB Julian Date to TT.

        The correction is evaluated at the TDB date without iterating; the
        resulting error is far below the series accuracy.
        """
        return jd_tdb - self.tdb_minus_tt(jd_tdb) / SECONDS_PER_DAY

    # Instant constructors

    def from_utc(self, jd_utc: float) -> Instant:
        """Create an Instant from a UTC Julian Date."""
        jd_utc = float(jd_utc)
        jd_tt = self.utc_to_tt(jd_utc)
        return Instant(utc=jd_utc, tt=jd_tt, tdb=self.tt_to_tdb(jd_tt), timescale=self)

    def from_tt(self, jd_tt: float) -> Instant:
        """Create an Instant from a TT Julian Date."""
        jd_tt = float(jd_tt)
        return Instant(
            utc=self.tt_to_utc(jd_tt), tt=jd_tt, tdb=self.tt_to_tdb(jd_tt), timescale=self
        )

    def from_tdb(self, jd_tdb: float) -> Instant:
        """Create an Instant from a TDB Julian Date."""
        jd_tdb = float(jd_tdb)
        jd_tt = self.tdb_to_tt(jd_tdb)
        return Instant(utc=self.tt_to_utc(jd_tt), tt=jd_tt, tdb=jd_tdb, timescale=self)

    def from_ut1(self, jd_ut1: float) -> Instant:
        """Create an Instant from a UT1 Julian Date.

        The EOP table is queried at the UT1 date, which stands in for the
        unknown UTC date (they differ by less than a second). The UT1 value
        and the EOP record are kept on the instant, so :meth:`Instant.resolve`
        returns exactly *jd_ut1*.

        Args:
            jd_ut1 (float): UT1 Julian Date.

        Returns:
            Instant: The corresponding instant.
        """
        jd_ut1 = float(jd_ut1)
        eop = value_at(self.eop, jd_ut1)
        jd_utc = jd_ut1 - eop.ut1_minus_utc / SECONDS_PER_DAY
        jd_tt = self.utc_to_tt(jd_utc)
        return Instant(
            utc=jd_utc,
            tt=jd_tt,
            tdb=self.tt_to_tdb(jd_tt),
            timescale=self,
            seed_ut1=jd_ut1,
            seed_eop=eop,
        )

    def from_calendar(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: float = 0.0,
    ) -> Instant:
        """Create an Instant from UTC calendar components.

        Raises:
            ValueError: If a component is out of range.
        """
        validate_caldate(year, month, day, hour, minute, second)
        return self.from_utc(caldate_to_jd(year, month, day, hour, minute, second))

    def from_iso8601(self, text: str) -> Instant:
        """Create an Instant from an ISO 8601 UTC string.

        Supported formats:
            - ``YYYY-MM`` (first day of the month)
            - ``YYYY-MM-DD``
            - ``YYYY-MM-DDTHH:MM:SSZ`` / ``YYYY-MM-DDTHH:MM:SS.fff...Z``

        Args:
            text (str): ISO 8601 string, UTC implied.

        Returns:
            Instant: The parsed instant.

        Raises:
            TimeFormatError: If the string has another shape or an out of
                range component.
        """
        length = len(text)
        if length == 7:
            m = _ISO_MONTH.match(text)
        elif length == 10:
            m = _ISO_DATE.match(text)
        elif length >= _ISO_DATETIME_MIN_LENGTH:
            m = _ISO_DATETIME.match(text)
        else:
            m = None

        if m is None:
            raise TimeFormatError(f'Invalid time string: "{text}" is not a supported ISO 8601 form')

        groups = m.groups()
        year = int(groups[0])
        month = int(groups[1])
        day = int(groups[2]) if len(groups) >= 3 else 1

        hour = 0
        minute = 0
        second = 0.0
        if len(groups) == 6:
            hour = int(groups[3])
            minute = int(groups[4])
            second = float(groups[5])

        try:
            return self.from_calendar(year, month, day, hour, minute, second)
        except ValueError as exc:
            raise TimeFormatError(f'Invalid time string: "{text}": {exc}') from exc

    def now(self) -> Instant:
        """Create an Instant for the current system time."""
        with _CLOCK_LOCK:
            current = datetime.now(timezone.utc)
            parts = (
                current.year,
                current.month,
                current.day,
                current.hour,
                current.minute,
                current.second + current.microsecond * 1.0e-6,
            )
        return self.from_calendar(*parts)

    def __repr__(self) -> str:
        return (f"TimeScale(leap_seconds={self.leap_seconds!r}, "
                f"eop_records={int(self.eop.julian_utc.shape[0])})")


@dataclass(frozen=True)
class Instant:
    """An immutable instant expressed on the UTC, TT and TDB scales.

    Attributes:
        utc: UTC Julian Date.
        tt: TT Julian Date.
        tdb: TDB Julian Date.
        timescale: The :class:`TimeScale` that created the instant.
        seed_ut1: UT1 Julian Date, set only by :meth:`TimeScale.from_ut1`.
        seed_eop: EOP record used by :meth:`TimeScale.from_ut1`.
    """

    utc: float
    tt: float
    tdb: float
    timescale: TimeScale = field(repr=False, compare=False)
    seed_ut1: float | None = field(default=None, repr=False, compare=False)
    seed_eop: EarthOrientationRecord | None = field(default=None, repr=False, compare=False)

    def resolve(self) -> ResolvedInstant:
        """Look up UT1 and the Earth orientation for this instant.

        Each call performs the lookup again and returns an equal value.

        Returns:
            ResolvedInstant: The instant with UT1, the EOP record and
                delta T (TT-UT1).
        """
        ts = self.timescale
        if self.seed_ut1 is not None and self.seed_eop is not None:
            eop = self.seed_eop
            ut1 = self.seed_ut1
        else:
            eop = value_at(ts.eop, self.utc)
            ut1 = self.utc + eop.ut1_minus_utc / SECONDS_PER_DAY
        delta_t = TT_MINUS_TAI + ts.tai_minus_utc(self.utc) - eop.ut1_minus_utc
        return ResolvedInstant(instant=self, ut1=ut1, eop=eop, delta_t=delta_t)

    # Calendar

    def caldate(self) -> tuple[int, int, int, int, int, float]:
        """Return the UTC calendar date as (year, month, day, hour, minute, second)."""
        return jd_to_caldate(self.utc)

    def _month_start(self, months: int) -> Instant:
        year, month = self.caldate()[:2]
        year, month = _shift_month(year, month, months)
        return self.timescale.from_calendar(year, month, 1)

    def _year_start(self, years: int) -> Instant:
        return self.timescale.from_calendar(self.caldate()[0] + years, 1, 1)

    def prev_month_start(self) -> Instant:
        """Midnight UTC on the first day of the previous month."""
        return self._month_start(-1)

    def month_start(self) -> Instant:
        """Midnight UTC on the first day of this month."""
        return self._month_start(0)

    def next_month_start(self) -> Instant:
        """Midnight UTC on the first day of the next month."""
        return self._month_start(1)

    def month_after_next_month_start(self) -> Instant:
        """Midnight UTC on the first day of the month after next."""
        return self._month_start(2)

    def prev_year_start(self) -> Instant:
        """Midnight UTC on January 1st of the previous year."""
        return self._year_start(-1)

    def year_start(self) -> Instant:
        """Midnight UTC on January 1st of this year."""
        return self._year_start(0)

    def next_year_start(self) -> Instant:
        """Midnight UTC on January 1st of the next year."""
        return self._year_start(1)

    def year_after_next_year_start(self) -> Instant:
        """Midnight UTC on January 1st of the year after next."""
        return self._year_start(2)

    # String representations

    def utc_str(self) -> str:
        return format_jd(self.utc) + " UTC"

    def tt_str(self) -> str:
        return format_jd(self.tt) + " TT"

    def tdb_str(self) -> str:
        return format_jd(self.tdb) + " TDB"

    def ut1_str(self) -> str:
        return self.resolve().ut1_str()

    def iso8601(self) -> str:
        """Render the UTC date as ``YYYY-MM-DDTHH:MM:SS.fffZ``."""
        return format_jd(self.utc, "T") + "Z"

    def __str__(self) -> str:
        return self.utc_str()


@dataclass(frozen=True)
class ResolvedInstant:
    """An :class:`Instant` together with its UT1 date and Earth orientation.

    Attributes:
        instant: The resolved instant.
        ut1: UT1 Julian Date.
        eop: EOP record at the instant (the "no data" record outside the
            table).
        delta_t: TT-UT1 [seconds].
    """

    instant: Instant
    ut1: float
    eop: EarthOrientationRecord
    delta_t: float

    @property
    def utc(self) -> float:
        return self.instant.utc

    @property
    def tt(self) -> float:
        return self.instant.tt

    @property
    def tdb(self) -> float:
        return self.instant.tdb

    @property
    def polar_motion(self) -> tuple[float, float]:
        """Polar motion ``(x, y)`` [arcsec], zero outside the EOP table."""
        return self.eop.polar_motion

    def ut1_str(self) -> str:
        return format_jd(self.ut1) + " UT1"

    def __str__(self) -> str:
        return self.instant.utc_str()
