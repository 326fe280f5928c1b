"""
skyclock converts instants between the UTC, TT, UT1 and TDB time scales and finds rise, set, culmination and lunar phase events.
"""

from .config import set_dtype, get_dtype, get_finder_tolerance

from .constants import (
    DEG2RAD,
    RAD2DEG,
    AS2RAD,
    JD_MJD_OFFSET,
    JD_J2000,
    SECONDS_PER_DAY,
    TT_MINUS_TAI,
    AU_KM,
    WGS84_a,
    WGS84_f,
)

from .time import (
    caldate_to_jd,
    caldate_to_mjd,
    jd_to_caldate,
    jd_to_mjd,
    mjd_to_jd,
)

from .leap_seconds import (
    LeapSecondEntry,
    LeapSecondTable,
    default_leap_second_table,
)

from .tdb import tdb_minus_tt

from .timescale import (
    Instant,
    ResolvedInstant,
    TimeFormatError,
    TimeScale,
)

from .rootfinding import (
    Bracket,
    MaxIterationsError,
    RootFindingError,
    RootNotBracketedError,
    brent,
    find_brackets,
    find_roots,
)

from .astrometry import (
    AnalyticAstrometry,
    Astrometry,
    Body,
    Observer,
    UnsupportedBodyError,
)

from .events import (
    EventFinder,
    EventKind,
    LunarEventKind,
    MoonPhase,
)

__version__ = "0.1.0"
