"""Search for rise, set, culmination and principal lunar phase events.

Each event is a root of a scalar function of the UTC Julian Date:

- elevation of the body's upper limb above the horizon (rise and set),
- azimuth minus 180 degrees (culminations),
- lunar phase longitude (new and full Moon).

The functions are sampled on an even grid, bracketed and refined with
Brent's method (:mod:`skyclock.rootfinding`), then each root is classified.
"""

from __future__ import annotations

import logging
import math
import sys

from skyclock.astrometry import Astrometry, Body, HorizonCoordinates, Observer, SkyPosition
from skyclock.config import get_finder_tolerance
from skyclock.constants import AU_KM
from skyclock.events._classify import classify_hour_angle, local_hour_angle, local_sidereal_time
from skyclock.events._moon import moon_phase as _moon_phase
from skyclock.events._types import (
    LunarEventKind,
    LunarPhaseEvent,
    MoonPhaseInfo,
    PlanetaryEvent,
)
from skyclock.rootfinding import brent, find_brackets
from skyclock.timescale import Instant, TimeScale

logger = logging.getLogger(__name__)

# Sampling density of the bracket search
ELEVATION_STEPS_PER_DAY = 8
AZIMUTH_STEPS_PER_DAY = 4
LUNAR_PHASE_STEPS = 120

# Phase longitude magnitude below which a root is a full Moon [deg]
_FULL_MOON_LIMIT = 90.0


def apparent_radius_degrees(diameter_km: float, distance_km: float) -> float:
    """Apparent angular radius [deg] of a disc at a distance."""
    return math.degrees(2.0 * math.atan(diameter_km / (2.0 * distance_km))) / 2.0


def _steps(span_days: float, per_day: int) -> int:
    return max(1, int(math.floor(per_day * span_days)))


def _drop_duplicates(roots: list[float], tolerance: float) -> list[float]:
    """Sort *roots* and drop any within *tolerance* of the previous kept root.

    A sample that lands exactly on a root opens a bracket on both sides of
    it, and both refine to the same instant.
    """
    kept: list[float] = []
    for root in sorted(roots):
        if kept and root - kept[-1] <= tolerance + 4.0 * sys.float_info.epsilon * abs(root):
            continue
        kept.append(root)
    return kept


class EventFinder:
    """Locate events for a body and observer within a UTC interval.

    Args:
        timescale: Time scale used to build instants from the search
            variable (UTC Julian Date).
        astrometry: Astrometry provider.
        tolerance: Absolute refinement tolerance [days]. Defaults to
            :func:`skyclock.config.get_finder_tolerance`.

    Examples:
        ```python
        from skyclock.astrometry import AnalyticAstrometry, Body, Observer
        from skyclock.timescale import TimeScale

        ts = TimeScale()
        finder = EventFinder(ts, AnalyticAstrometry())
        begin = ts.from_iso8601("2024-03-20")
        events = finder.find_planetary_events(
            begin.utc, begin.utc + 1.0, Body.SUN, Observer(51.48, 0.0)
        )
        ```
    """

    def __init__(
        self,
        timescale: TimeScale,
        astrometry: Astrometry,
        tolerance: float | None = None,
    ) -> None:
        self.timescale = timescale
        self.astrometry = astrometry
        self.tolerance = tolerance if tolerance is not None else get_finder_tolerance()

    # Target functions

    def horizon_at(
        self,
        jd_utc: float,
        body: Body,
        observer: Observer,
    ) -> tuple[HorizonCoordinates, SkyPosition]:
        """Refracted horizon coordinates and topocentric place of *body*."""
        instant = self.timescale.from_utc(jd_utc).resolve()
        position = self.astrometry.apparent_position(instant, body, observer)
        horizon = self.astrometry.horizon_coordinates(
            instant, position, observer, instant.polar_motion, True
        )
        return horizon, position

    def elevation(self, jd_utc: float, body: Body, observer: Observer) -> float:
        """Elevation of the upper limb [deg]; zero when it touches the horizon."""
        horizon, position = self.horizon_at(jd_utc, body, observer)
        radius = apparent_radius_degrees(body.diameter_km, position.distance_au * AU_KM)
        return horizon.elevation + radius

    def azimuth(self, jd_utc: float, body: Body, observer: Observer) -> float:
        """Azimuth minus 180 [deg]; changes sign on the meridian."""
        horizon, _ = self.horizon_at(jd_utc, body, observer)
        return horizon.azimuth - 180.0

    def moon_phase(self, instant: Instant) -> MoonPhaseInfo:
        """Lunar phase at an instant."""
        return _moon_phase(self.astrometry, instant.resolve())

    def phase_longitude(self, jd_utc: float) -> float:
        """Lunar phase longitude [deg] in ``(-180, 180]``."""
        return self.moon_phase(self.timescale.from_utc(jd_utc)).phase_longitude

    # Searches

    def _refine_all(self, f, begin_utc: float, end_utc: float, steps: int) -> list[float]:
        brackets = find_brackets(f, begin_utc, end_utc, steps)
        roots = [brent(f, lo, hi, self.tolerance) for lo, hi in brackets]
        return _drop_duplicates(roots, self.tolerance)

    def classify(self, jd_utc: float, body: Body, observer: Observer) -> PlanetaryEvent:
        """Build the event record for a root of the elevation or azimuth function."""
        instant = self.timescale.from_utc(jd_utc)
        resolved = instant.resolve()
        position = self.astrometry.apparent_position(resolved, body, observer)
        horizon = self.astrometry.horizon_coordinates(
            resolved, position, observer, resolved.polar_motion, True
        )

        last = local_sidereal_time(
            self.astrometry.apparent_sidereal_time(resolved), observer.longitude
        )
        kind = classify_hour_angle(local_hour_angle(last, horizon.refracted_ra))

        return PlanetaryEvent(instant_utc=instant, kind=kind, horizon=horizon, position=position)

    def find_planetary_events(
        self,
        begin_utc: float,
        end_utc: float,
        body: Body,
        observer: Observer,
    ) -> list[PlanetaryEvent]:
        """Find rises, sets and culminations of *body* in ``[begin_utc, end_utc]``.

        Args:
            begin_utc: Start of the interval (UTC Julian Date).
            end_utc: End of the interval (UTC Julian Date).
            body: Body to follow.
            observer: Observing site.

        Returns:
            list[PlanetaryEvent]: Events sorted by time.

        Raises:
            ValueError: If ``end_utc <= begin_utc``.
        """
        span = end_utc - begin_utc

        def elevation(jd: float) -> float:
            return self.elevation(jd, body, observer)

        def azimuth(jd: float) -> float:
            return self.azimuth(jd, body, observer)

        roots = self._refine_all(
            elevation, begin_utc, end_utc, _steps(span, ELEVATION_STEPS_PER_DAY)
        )
        roots += self._refine_all(
            azimuth, begin_utc, end_utc, _steps(span, AZIMUTH_STEPS_PER_DAY)
        )
        roots = _drop_duplicates(roots, self.tolerance)

        events = [self.classify(jd, body, observer) for jd in roots]
        logger.debug(
            "Found %d events for %s between JD %.5f and %.5f",
            len(events), body.name.lower(), begin_utc, end_utc,
        )
        return events

    def find_new_and_full_moons(self, begin_utc: float, end_utc: float) -> list[LunarPhaseEvent]:
        """Find new and full Moons in ``[begin_utc, end_utc]``.

        The phase longitude is zero at full Moon and jumps from +180 to
        -180 degrees at new Moon, so both show up as sign changes; the
        magnitude of the phase longitude at the root tells them apart.

        Args:
            begin_utc: Start of the interval (UTC Julian Date).
            end_utc: End of the interval (UTC Julian Date).

        Returns:
            list[LunarPhaseEvent]: Events sorted by time.

        Raises:
            ValueError: If ``end_utc <= begin_utc``.
        """
        roots = self._refine_all(self.phase_longitude, begin_utc, end_utc, LUNAR_PHASE_STEPS)

        events: list[LunarPhaseEvent] = []
        for jd in roots:
            instant = self.timescale.from_utc(jd)
            phase = self.moon_phase(instant)
            if abs(phase.phase_longitude) < _FULL_MOON_LIMIT:
                kind = LunarEventKind.FULL_MOON
            else:
                kind = LunarEventKind.NEW_MOON
            events.append(LunarPhaseEvent(instant_utc=instant, kind=kind, phase=phase))

        logger.debug(
            "Found %d lunar phase events between JD %.5f and %.5f",
            len(events), begin_utc, end_utc,
        )
        return events
