"""Astrometry providers and the types exchanged with the event finder.

The event finder depends only on the :class:`Astrometry` protocol; the
bundled :class:`AnalyticAstrometry` covers the Sun and Moon with
low-precision analytic series.
"""

from skyclock.astrometry._types import (
    Astrometry,
    Body,
    HorizonCoordinates,
    Observer,
    SkyPosition,
    UnsupportedBodyError,
)
from skyclock.astrometry.analytic import AnalyticAstrometry

__all__ = [
    "AnalyticAstrometry",
    "Astrometry",
    "Body",
    "HorizonCoordinates",
    "Observer",
    "SkyPosition",
    "UnsupportedBodyError",
]
