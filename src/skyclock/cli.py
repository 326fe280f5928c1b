"""Command line interface for skyclock.

Prints time scale conversions, geocentric positions, new and full Moons, and
rise/set/culmination times as JSON.

Usage:
    skyclock [--eop PATH | --cached-eop] [--verbose] COMMAND [OPTIONS]

Examples:
    # All time scales of an instant
    skyclock convert 2018-02-23T03:05:45.5Z

    # Where the Sun and Moon are right now
    skyclock positions

    # New and full Moons in March 2024
    skyclock moon-phases --month 2024-03

    # Sunrise and sunset at Greenwich, with IERS data from a local file
    SKYCLOCK_EOP_FILE=finals.data skyclock rise-set --date 2024-03-20 --lat 51.48 --lon 0.0
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, List, Optional

import typer

from skyclock.astrometry import AnalyticAstrometry, Body, Observer
from skyclock.eop import empty_eop, load_cached_eop, load_eop_from_file
from skyclock.constants import AU_KM
from skyclock.events import EventFinder, EventKind, LunarPhaseEvent, PlanetaryEvent, apparent_radius_degrees
from skyclock.rootfinding import RootFindingError
from skyclock.timescale import Instant, TimeScale
from skyclock.utils import degrees_to_dms, hours_to_hms, normalize_degrees

logger = logging.getLogger(__name__)

app = typer.Typer(help="Astronomical time scales and rise/set/lunar phase events.")

_state: dict[str, Any] = {}


def _timescale() -> TimeScale:
    return _state.get("timescale") or TimeScale()


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _fail(exc: Exception) -> None:
    logger.debug("Command failed", exc_info=True)
    _emit({"error": str(exc)})
    raise typer.Exit(code=1)


def _instant_json(instant: Instant) -> dict[str, Any]:
    resolved = instant.resolve()
    return {
        "iso8601": instant.iso8601(),
        "utc": instant.utc_str(),
        "tt": instant.tt_str(),
        "ut1": resolved.ut1_str(),
        "tdb": instant.tdb_str(),
        "jd": {
            "utc": instant.utc,
            "tt": instant.tt,
            "ut1": resolved.ut1,
            "tdb": instant.tdb,
        },
        "tai_minus_utc": instant.timescale.tai_minus_utc(instant.utc),
        "ut1_minus_utc": resolved.eop.ut1_minus_utc,
        "delta_t": resolved.delta_t,
        "eop_available": resolved.eop.available,
    }


def _planetary_event_json(event: PlanetaryEvent, body: Body, finder: EventFinder) -> dict[str, Any]:
    distance_km = event.position.distance_au * AU_KM
    payload = {
        "time": event.instant_utc.iso8601(),
        "jd_utc": event.instant_utc.utc,
        "kind": event.kind.value,
        "elevation": event.horizon.elevation,
        "azimuth": event.horizon.azimuth,
        "ra": event.position.ra_hours,
        "dec": event.position.dec_degrees,
        "distance_au": event.position.distance_au,
        "distance_km": distance_km,
        "apparent_size": 2.0 * apparent_radius_degrees(body.diameter_km, distance_km),
    }
    if body is Body.MOON and event.kind is EventKind.UPPER_CULMINATION:
        phase = finder.moon_phase(event.instant_utc)
        payload["phase"] = phase.phase.name.lower()
        payload["illumination"] = phase.illumination
    return payload


def _lunar_event_json(event: LunarPhaseEvent) -> dict[str, Any]:
    return {
        "time": event.instant_utc.iso8601(),
        "jd_utc": event.instant_utc.utc,
        "kind": event.kind.value,
        "phase": event.phase.phase.name.lower(),
        "phase_angle": event.phase.phase_angle,
        "illumination": event.phase.illumination,
    }


@app.callback()
def main(
    eop: Annotated[
        Optional[Path],
        typer.Option(
            envvar="SKYCLOCK_EOP_FILE",
            help="IERS finals file for UT1-UTC and polar motion (or set SKYCLOCK_EOP_FILE)",
        ),
    ] = None,
    cached_eop: Annotated[
        bool, typer.Option(help="Use the IERS finals file from the local cache, downloading when stale")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Astronomical time scales and rise/set/lunar phase events."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if eop is not None:
            table = load_eop_from_file(eop)
        elif cached_eop:
            table = load_cached_eop()
        else:
            table = empty_eop()
    except (OSError, ValueError) as exc:
        _fail(exc)

    _state["timescale"] = TimeScale(eop=table)


@app.command()
def convert(
    when: Annotated[
        Optional[str],
        typer.Argument(help="ISO 8601 UTC time (YYYY-MM, YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS[.fff]Z); default now"),
    ] = None,
    jd: Annotated[Optional[float], typer.Option(help="Julian Date instead of an ISO string")] = None,
    scale: Annotated[str, typer.Option(help="Time scale of --jd: utc, tt, ut1 or tdb")] = "utc",
) -> None:
    """Show an instant on every time scale."""
    ts = _timescale()
    try:
        if jd is not None:
            constructors = {
                "utc": ts.from_utc,
                "tt": ts.from_tt,
                "ut1": ts.from_ut1,
                "tdb": ts.from_tdb,
            }
            if scale.lower() not in constructors:
                raise ValueError(f"Unknown time scale '{scale}'. Must be one of: utc, tt, ut1, tdb")
            instant = constructors[scale.lower()](jd)
        elif when is not None:
            instant = ts.from_iso8601(when)
        else:
            instant = ts.now()
    except ValueError as exc:
        _fail(exc)

    _emit(_instant_json(instant))


@app.command("moon-phases")
def moon_phases(
    month: Annotated[Optional[str], typer.Option(help="Month to search (YYYY-MM); default current month")] = None,
    months: Annotated[int, typer.Option(min=1, help="Number of months to search")] = 1,
) -> None:
    """List new and full Moons in one or more calendar months."""
    ts = _timescale()
    try:
        start = ts.from_iso8601(month).month_start() if month is not None else ts.now().month_start()
        end = start
        for _ in range(months):
            end = end.next_month_start()

        finder = EventFinder(ts, AnalyticAstrometry())
        events = finder.find_new_and_full_moons(start.utc, end.utc)
        current = finder.moon_phase(start)
    except (ValueError, RootFindingError) as exc:
        _fail(exc)

    _emit({
        "start": start.iso8601(),
        "end": end.iso8601(),
        "phase_at_start": current.phase.name.lower(),
        "illumination_at_start": current.illumination,
        "events": [_lunar_event_json(e) for e in events],
    })


@app.command("rise-set")
def rise_set(
    lat: Annotated[float, typer.Option(help="Observer geodetic latitude in degrees (north positive)")],
    lon: Annotated[float, typer.Option(help="Observer longitude in degrees (east positive)")],
    date: Annotated[Optional[str], typer.Option(help="UTC date (YYYY-MM-DD); default today")] = None,
    days: Annotated[float, typer.Option(min=0.0, help="Search span in days")] = 1.0,
    body: Annotated[str, typer.Option(help="Body name (sun or moon)")] = "sun",
    height: Annotated[float, typer.Option(help="Observer height in metres")] = 0.0,
    temperature: Annotated[float, typer.Option(help="Ambient temperature in Celsius")] = 10.0,
    pressure: Annotated[float, typer.Option(help="Ambient pressure in millibars")] = 1010.0,
) -> None:
    """List rises, sets and culminations of a body."""
    ts = _timescale()
    try:
        target = Body.from_name(body)
        observer = Observer(
            latitude=lat,
            longitude=lon,
            height=height,
            temperature=temperature,
            pressure=pressure,
        )
        if date is not None:
            start = ts.from_iso8601(date)
        else:
            year, month, day = ts.now().caldate()[:3]
            start = ts.from_calendar(year, month, day)

        finder = EventFinder(ts, AnalyticAstrometry())
        events = finder.find_planetary_events(start.utc, start.utc + days, target, observer)
    except (ValueError, RootFindingError) as exc:
        _fail(exc)

    _emit({
        "body": target.name.lower(),
        "start": start.iso8601(),
        "days": days,
        "events": [_planetary_event_json(e, target, finder) for e in events],
    })


@app.command()
def positions(
    when: Annotated[
        Optional[str],
        typer.Option("--utc", help="ISO 8601 UTC time; default now"),
    ] = None,
    body: Annotated[
        Optional[List[str]],
        typer.Option(help="Body name, may be repeated; default every supported body"),
    ] = None,
) -> None:
    """Show geocentric equatorial and ecliptic positions of bodies."""
    ts = _timescale()
    astrometry = AnalyticAstrometry()
    try:
        instant = ts.from_iso8601(when) if when is not None else ts.now()
        if body:
            targets = sorted({Body.from_name(name) for name in body}, key=lambda b: b.value)
        else:
            targets = list(astrometry.supported_bodies)

        resolved = instant.resolve()
        rows = []
        for target in targets:
            position = astrometry.apparent_position(resolved, target)
            longitude, latitude = astrometry.equatorial_to_ecliptic(
                resolved, position.ra_hours, position.dec_degrees
            )
            hours, minutes, seconds = hours_to_hms(position.ra_hours)
            sign, degrees, arcminutes, arcseconds = degrees_to_dms(position.dec_degrees)
            rows.append({
                "body": target.name.lower(),
                "right_ascension": {"hours": hours, "minutes": minutes, "seconds": seconds},
                "declination": {
                    "sign": "-" if sign < 0 else "+",
                    "degrees": degrees,
                    "minutes": arcminutes,
                    "seconds": arcseconds,
                },
                "ecliptic_longitude": normalize_degrees(longitude),
                "ecliptic_latitude": latitude,
                "distance_au": position.distance_au,
            })
    except ValueError as exc:
        _fail(exc)

    _emit({"utc": instant.iso8601(), "positions": rows})


if __name__ == "__main__":
    app()
