"""Analytic astrometry provider for the Sun and Moon.

:class:`AnalyticAstrometry` implements the :class:`~skyclock.astrometry.Astrometry`
protocol with the low-precision series in
:mod:`skyclock.astrometry._ephemerides`. Positions are mean places of date
(no aberration, nutation or light time), so event times are good to about
a minute. Other bodies raise :class:`UnsupportedBodyError`.

Typical usage::

    from skyclock.astrometry import AnalyticAstrometry, Body, Observer
    from skyclock.timescale import TimeScale

    ts = TimeScale()
    t = ts.from_iso8601("2024-03-20").resolve()
    astro = AnalyticAstrometry()
    pos = astro.apparent_position(t, Body.SUN, Observer(51.48, 0.0))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import jax.numpy as jnp

from skyclock.astrometry import _transforms
from skyclock.astrometry._ephemerides import mean_obliquity, moon_position, sun_position
from skyclock.astrometry._types import (
    Body,
    HorizonCoordinates,
    Observer,
    SkyPosition,
    UnsupportedBodyError,
)
from skyclock.config import get_dtype
from skyclock.constants import AU_KM
from skyclock.utils import normalize

if TYPE_CHECKING:
    from skyclock.timescale import ResolvedInstant

_AU_M = AU_KM * 1.0e3

_EPHEMERIDES = {
    Body.SUN: sun_position,
    Body.MOON: moon_position,
}


class AnalyticAstrometry:
    """Low-precision astrometry for the Sun and Moon."""

    @property
    def supported_bodies(self) -> tuple[Body, ...]:
        return tuple(_EPHEMERIDES)

    def _centuries(self, instant: ResolvedInstant):
        return jnp.asarray(_transforms.julian_centuries(instant.tt), dtype=get_dtype())

    def geocentric_vector(self, instant: ResolvedInstant, body: Body):
        """Geocentric position of *body* [m], mean equator and equinox of date.

        Raises:
            UnsupportedBodyError: If *body* is not the Sun or the Moon.
        """
        try:
            ephemeris = _EPHEMERIDES[body]
        except KeyError:
            raise UnsupportedBodyError(
                f"{body.name.title()} is not supported by the analytic provider; "
                f"supported bodies: {', '.join(b.name.lower() for b in _EPHEMERIDES)}"
            ) from None
        return ephemeris(self._centuries(instant))

    def apparent_position(
        self,
        instant: ResolvedInstant,
        body: Body,
        observer: Observer | None = None,
    ) -> SkyPosition:
        """Place of *body*, topocentric when an observer is given.

        Args:
            instant: Resolved instant.
            body: Sun or Moon.
            observer: Observing site, or ``None`` for a geocentric place.

        Returns:
            SkyPosition: Right ascension [hours], declination [deg] and
                distance [AU].

        Raises:
            UnsupportedBodyError: For bodies other than the Sun and Moon.
        """
        r = self.geocentric_vector(instant, body)

        if observer is not None:
            r_site = _transforms.site_position(observer.latitude, observer.longitude, observer.height)
            r = r - _transforms.earth_rotation(r_site, self.apparent_sidereal_time(instant))

        ra, dec, dist = _transforms.vector_to_radec(r)
        return SkyPosition(ra_hours=ra, dec_degrees=dec, distance_au=dist / _AU_M)

    def horizon_coordinates(
        self,
        instant: ResolvedInstant,
        position: SkyPosition,
        observer: Observer,
        polar_motion: tuple[float, float] = (0.0, 0.0),
        refraction: bool = True,
    ) -> HorizonCoordinates:
        """Horizon coordinates of a place for an observer.

        Args:
            instant: Resolved instant.
            position: Topocentric place from :meth:`apparent_position`.
            observer: Observing site.
            polar_motion: Polar motion (x, y) [arcsec].
            refraction: Apply refraction for the observer's temperature and
                pressure.

        Returns:
            HorizonCoordinates: Zenith distance and azimuth [deg], and the
                refracted right ascension [hours] and declination [deg].
        """
        latitude, longitude = _transforms.polar_motion_site(
            observer.latitude, observer.longitude, *polar_motion
        )

        last = normalize(self.apparent_sidereal_time(instant) + longitude / 15.0, 24.0)
        hour_angle = last - position.ra_hours

        altitude, azimuth = _transforms.equatorial_to_horizon(
            hour_angle, position.dec_degrees, latitude
        )

        ra, dec = position.ra_hours, position.dec_degrees
        if refraction:
            refr = _transforms.refraction_degrees(altitude, observer.temperature, observer.pressure)
            if refr > 0.0:
                altitude += refr
                hour_angle, dec = _transforms.horizon_to_equatorial(altitude, azimuth, latitude)
                ra = normalize(last - hour_angle, 24.0)

        return HorizonCoordinates(
            zenith_distance=90.0 - altitude,
            azimuth=azimuth,
            refracted_ra=ra,
            refracted_dec=dec,
        )

    def apparent_sidereal_time(self, instant: ResolvedInstant) -> float:
        """Greenwich apparent sidereal time [hours]."""
        gast = _transforms.gmst_hours(instant.ut1) + _transforms.equation_of_equinoxes_hours(instant.tt)
        return normalize(gast, 24.0)

    def equatorial_to_ecliptic(
        self,
        instant: ResolvedInstant,
        ra_hours: float,
        dec_degrees: float,
    ) -> tuple[float, float]:
        """Ecliptic (longitude, latitude) [deg] on the mean ecliptic of date."""
        obliquity = float(mean_obliquity(_transforms.julian_centuries(instant.tt)))
        return _transforms.equatorial_to_ecliptic(ra_hours, dec_degrees, obliquity)
