"""Rise, set, culmination and lunar phase event search.

Typical usage::

    from skyclock.astrometry import AnalyticAstrometry
    from skyclock.events import EventFinder
    from skyclock.timescale import TimeScale

    ts = TimeScale()
    finder = EventFinder(ts, AnalyticAstrometry())
    start = ts.from_iso8601("2024-03")
    moons = finder.find_new_and_full_moons(start.utc, start.next_month_start().utc)
"""

from skyclock.events._classify import classify_hour_angle, local_hour_angle, local_sidereal_time
from skyclock.events._finder import EventFinder, apparent_radius_degrees
from skyclock.events._moon import moon_phase
from skyclock.events._types import (
    EventKind,
    LunarEventKind,
    LunarPhaseEvent,
    MoonPhase,
    MoonPhaseInfo,
    PlanetaryEvent,
)

__all__ = [
    "EventFinder",
    "EventKind",
    "LunarEventKind",
    "LunarPhaseEvent",
    "MoonPhase",
    "MoonPhaseInfo",
    "PlanetaryEvent",
    "apparent_radius_degrees",
    "classify_hour_angle",
    "local_hour_angle",
    "local_sidereal_time",
    "moon_phase",
]
