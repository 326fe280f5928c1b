"""Earth Orientation Parameters (EOP) parsed from IERS finals data.

Provides the daily EOP table, point interpolation, and loaders with an
on-disk cache. Lookups outside the table return the "no data" record,
which callers treat as zero UT1-UTC and zero polar motion.

Typical usage::

    from skyclock.eop import load_cached_eop, get_ut1_utc
    eop = load_cached_eop()
    ut1_utc = get_ut1_utc(eop, 2459000.5)
"""

from skyclock.eop._download import IERS_FINALS_URL, download_finals_file
from skyclock.eop._lookup import get_pm, get_ut1_utc, value_at
from skyclock.eop._parsers import EOPFormatError, parse_finals_line, parse_finals_text
from skyclock.eop._providers import (
    empty_eop,
    load_cached_eop,
    load_eop_from_file,
    load_eop_from_text,
    static_eop,
)
from skyclock.eop._types import EarthOrientationRecord, EarthOrientationTable

__all__ = [
    "EOPFormatError",
    "EarthOrientationRecord",
    "EarthOrientationTable",
    "IERS_FINALS_URL",
    "download_finals_file",
    "empty_eop",
    "get_pm",
    "get_ut1_utc",
    "load_cached_eop",
    "load_eop_from_file",
    "load_eop_from_text",
    "parse_finals_line",
    "parse_finals_text",
    "static_eop",
    "value_at",
]
