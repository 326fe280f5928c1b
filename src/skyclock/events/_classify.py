"""Classification of elevation and azimuth roots by local hour angle.

For any body, local sidereal time equals right ascension plus hour angle,
so at a root of the target functions:

- LHA = 0 (or 24): upper culmination, on the meridian above the pole.
- LHA = 12: lower culmination.
- LHA > 12: the body is east of the meridian and rising.
- otherwise: west of the meridian and setting.
"""

from __future__ import annotations

from skyclock.events._types import EventKind
from skyclock.utils import normalize

_CULMINATION_WINDOW = 0.01
"""Hour angle distance [hours] from 0/12 that counts as a culmination."""


def local_sidereal_time(greenwich_sidereal_hours: float, longitude: float) -> float:
    """Local sidereal time [hours] for an east longitude [deg]."""
    return normalize(greenwich_sidereal_hours + longitude / 15.0, 24.0)


def local_hour_angle(local_sidereal_hours: float, ra_hours: float) -> float:
    """Local hour angle [hours] in ``[0, 24)``."""
    return normalize(local_sidereal_hours - ra_hours, 24.0)


def classify_hour_angle(lha: float) -> EventKind:
    """Classify an event by the body's local hour angle.

    Args:
        lha: Local hour angle [hours] in ``[0, 24)``.

    Returns:
        EventKind: The event kind.

    Examples:
        ```python
        classify_hour_angle(0.0)   # EventKind.UPPER_CULMINATION
        classify_hour_angle(18.0)  # EventKind.RISE
        ```
    """
    if abs(24.0 - lha) < _CULMINATION_WINDOW or abs(lha) < _CULMINATION_WINDOW:
        return EventKind.UPPER_CULMINATION
    if abs(12.0 - lha) < _CULMINATION_WINDOW:
        return EventKind.LOWER_CULMINATION
    if lha > 12.0:
        return EventKind.RISE
    return EventKind.SET
