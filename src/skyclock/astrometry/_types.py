"""Types shared by astrometry providers and the event finder.

- :class:`Body`: Solar system bodies with their mean diameters.
- :class:`Observer`: A site on the Earth's surface.
- :class:`SkyPosition` / :class:`HorizonCoordinates`: Provider outputs.
- :class:`Astrometry`: The provider protocol the event finder depends on.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple, Protocol

if TYPE_CHECKING:
    from skyclock.timescale import ResolvedInstant


class UnsupportedBodyError(ValueError):
    """Raised when a provider cannot compute positions for a body."""


class Body(enum.Enum):
    """Solar system bodies known to skyclock.

    Values are the catalogue ids; ``diameter_km`` is the mean diameter
    (equatorial and polar averaged for the oblate planets).
    """

    MERCURY = 1
    VENUS = 2
    EARTH = 3
    MARS = 4
    JUPITER = 5
    SATURN = 6
    URANUS = 7
    NEPTUNE = 8
    PLUTO = 9
    SUN = 10
    MOON = 11

    @property
    def diameter_km(self) -> float:
        return _DIAMETERS_KM[self]

    @classmethod
    def from_name(cls, name: str) -> Body:
        """Look up a body by case-insensitive name.

        Raises:
            ValueError: If *name* is not a known body.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            known = ", ".join(b.name.lower() for b in cls)
            raise ValueError(f"Unknown body '{name}'. Must be one of: {known}") from None


_DIAMETERS_KM = {
    Body.MERCURY: 4879.0,
    Body.VENUS: 12104.0,
    Body.EARTH: (12713.6 + 12756.2) / 2.0,
    Body.MARS: (6752.4 + 6792.4) / 2.0,
    Body.JUPITER: (133708.0 + 142984.0) / 2.0,
    Body.SATURN: (108728.0 + 120536.0) / 2.0,
    Body.URANUS: (49946.0 + 51118.0) / 2.0,
    Body.NEPTUNE: (48682.0 + 49528.0) / 2.0,
    Body.PLUTO: 2370.0,
    Body.SUN: 1391978.0,
    Body.MOON: 3474.0,
}


@dataclass(frozen=True)
class Observer:
    """A site on the Earth's surface.

    Attributes:
        latitude: Geodetic latitude [deg], north positive.
        longitude: Longitude [deg], east positive.
        height: Height above the WGS84 ellipsoid [m].
        temperature: Ambient temperature [deg C], used for refraction.
        pressure: Ambient pressure [mbar], used for refraction.
    """

    latitude: float
    longitude: float
    height: float = 0.0
    temperature: float = 10.0
    pressure: float = 1010.0


class SkyPosition(NamedTuple):
    """Apparent equatorial place of a body.

    Attributes:
        ra_hours: Right ascension [hours].
        dec_degrees: Declination [deg].
        distance_au: Distance from the observer [AU].
    """

    ra_hours: float
    dec_degrees: float
    distance_au: float


class HorizonCoordinates(NamedTuple):
    """Topocentric horizon coordinates of a body.

    Attributes:
        zenith_distance: Zenith distance [deg], refracted when requested.
        azimuth: Azimuth [deg], measured from north through east.
        refracted_ra: Right ascension after refraction [hours].
        refracted_dec: Declination after refraction [deg].
    """

    zenith_distance: float
    azimuth: float
    refracted_ra: float
    refracted_dec: float

    @property
    def elevation(self) -> float:
        """Elevation above the horizon [deg]."""
        return 90.0 - self.zenith_distance


class Astrometry(Protocol):
    """Interface to an astrometry provider.

    All methods take a :class:`~skyclock.timescale.ResolvedInstant`, so the
    provider can use UT1, TT, TDB and the Earth orientation record without
    further lookups.
    """

    def apparent_position(
        self,
        instant: ResolvedInstant,
        body: Body,
        observer: Observer | None = None,
    ) -> SkyPosition:
        """Apparent place of *body*; geocentric when *observer* is ``None``."""
        ...

    def horizon_coordinates(
        self,
        instant: ResolvedInstant,
        position: SkyPosition,
        observer: Observer,
        polar_motion: tuple[float, float] = (0.0, 0.0),
        refraction: bool = True,
    ) -> HorizonCoordinates:
        """Horizon coordinates of *position*; ``polar_motion`` is (x, y) [arcsec]."""
        ...

    def apparent_sidereal_time(self, instant: ResolvedInstant) -> float:
        """Greenwich apparent sidereal time [hours]."""
        ...

    def equatorial_to_ecliptic(
        self,
        instant: ResolvedInstant,
        ra_hours: float,
        dec_degrees: float,
    ) -> tuple[float, float]:
        """Ecliptic (longitude, latitude) [deg] of an equatorial direction."""
        ...
