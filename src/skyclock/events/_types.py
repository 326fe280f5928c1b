"""Event and lunar phase records produced by the event finder."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from skyclock.astrometry import HorizonCoordinates, SkyPosition

if TYPE_CHECKING:
    from skyclock.timescale import Instant


class EventKind(enum.Enum):
    """Kind of a planetary horizon or meridian event."""

    RISE = "rise"
    SET = "set"
    UPPER_CULMINATION = "upper_culmination"
    LOWER_CULMINATION = "lower_culmination"


class LunarEventKind(enum.Enum):
    """Kind of a principal lunar phase event."""

    NEW_MOON = "new_moon"
    FULL_MOON = "full_moon"


class MoonPhase(enum.Enum):
    """The eight named phases, in order of increasing phase index.

    The index is ``floor(normalize(sun_lon - earth_lon + 22.5, 360) / 45)``
    with the longitudes seen from the Moon, so index 0 is a full Moon.
    """

    FULL = 0
    WAXING_GIBBOUS = 1
    FIRST_QUARTER = 2
    WAXING_CRESCENT = 3
    NEW = 4
    WANING_CRESCENT = 5
    LAST_QUARTER = 6
    WANING_GIBBOUS = 7


@dataclass(frozen=True)
class MoonPhaseInfo:
    """Lunar phase at an instant.

    Attributes:
        phase_angle: Sun-Moon-Earth angle [deg]; 0 at full Moon.
        phase_longitude: Ecliptic longitude of the Sun minus that of the
            Earth, both seen from the Moon [deg], in ``(-180, 180]``.
        phase_latitude: The corresponding latitude difference [deg].
        illumination: Illuminated fraction of the disc, ``(1 + cos(phase_angle)) / 2``.
        phase: Named phase.
    """

    phase_angle: float
    phase_longitude: float
    phase_latitude: float
    illumination: float
    phase: MoonPhase


@dataclass(frozen=True)
class PlanetaryEvent:
    """A rise, set or culmination.

    Attributes:
        instant_utc: Instant of the event.
        kind: Event kind.
        horizon: Horizon coordinates of the body at the event.
        position: Topocentric place of the body at the event.
    """

    instant_utc: Instant
    kind: EventKind
    horizon: HorizonCoordinates
    position: SkyPosition


@dataclass(frozen=True)
class LunarPhaseEvent:
    """A new or full Moon.

    Attributes:
        instant_utc: Instant of the event.
        kind: New or full Moon.
        phase: Full lunar phase record at the event.
    """

    instant_utc: Instant
    kind: LunarEventKind
    phase: MoonPhaseInfo
