"""Type definitions for Earth Orientation Parameters (EOP).

Provides the two EOP data types:

- :class:`EarthOrientationRecord`: Frozen per-instant record, returned by
  :func:`~skyclock.eop.value_at`. A record whose ``julian_utc`` is NaN is
  the explicit "no data" marker.
- :class:`EarthOrientationTable`: Immutable container of sorted float64
  arrays parsed from an IERS ``finals`` file, searched with
  ``jnp.searchsorted``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

from jax import Array


@dataclass(frozen=True)
class EarthOrientationRecord:
    """Earth orientation values for one UTC instant.

    Attributes:
        julian_utc: UTC Julian Date of the record. NaN for "no data".
        pm_x: Polar motion x-component [arcsec].
        pm_x_err: Error in ``pm_x`` [arcsec].
        pm_y: Polar motion y-component [arcsec].
        pm_y_err: Error in ``pm_y`` [arcsec].
        pm_is_prediction: ``True`` if polar motion is a Bulletin A prediction.
        ut1_minus_utc: UT1-UTC offset [seconds].
        ut1_minus_utc_err: Error in ``ut1_minus_utc`` [seconds].
        ut1_is_prediction: ``True`` if UT1-UTC is a Bulletin A prediction.
        nutation_psi: Celestial pole offset dPSI [mas], ``None`` if absent.
        nutation_psi_err: Error in dPSI [mas], ``None`` if absent.
        nutation_epsilon: Celestial pole offset dEPSILON [mas], ``None`` if absent.
        nutation_epsilon_err: Error in dEPSILON [mas], ``None`` if absent.
    """

    julian_utc: float
    pm_x: float = 0.0
    pm_x_err: float = 0.0
    pm_y: float = 0.0
    pm_y_err: float = 0.0
    pm_is_prediction: bool = False
    ut1_minus_utc: float = 0.0
    ut1_minus_utc_err: float = 0.0
    ut1_is_prediction: bool = False
    nutation_psi: float | None = None
    nutation_psi_err: float | None = None
    nutation_epsilon: float | None = None
    nutation_epsilon_err: float | None = None

    @property
    def available(self) -> bool:
        """``False`` for the "no data" record."""
        return not math.isnan(self.julian_utc)

    @property
    def polar_motion(self) -> tuple[float, float]:
        """Polar motion ``(x, y)`` in arcseconds."""
        return self.pm_x, self.pm_y

    @classmethod
    def no_data(cls) -> EarthOrientationRecord:
        """Return the "no data" record: all values zero, ``julian_utc`` NaN."""
        return cls(julian_utc=math.nan)


class EarthOrientationTable(NamedTuple):
    """Daily EOP records stored as sorted JAX arrays.

    Every array has shape ``(N,)`` and is sorted by ``julian_utc``. Numeric
    columns are float64 regardless of :func:`skyclock.config.get_dtype`, as
    a float32 Julian Date cannot resolve a day boundary. Absent nutation
    values are stored as NaN.

    Attributes:
        julian_utc: UTC Julian Date of each record (``2400000.5 + MJD``).
        pm_x: Polar motion x-component [arcsec].
        pm_x_err: Error in ``pm_x`` [arcsec].
        pm_y: Polar motion y-component [arcsec].
        pm_y_err: Error in ``pm_y`` [arcsec].
        pm_is_prediction: Boolean prediction flag for polar motion.
        ut1_minus_utc: UT1-UTC [seconds].
        ut1_minus_utc_err: Error in UT1-UTC [seconds].
        ut1_is_prediction: Boolean prediction flag for UT1-UTC.
        nutation_psi: dPSI [mas]. NaN where missing.
        nutation_psi_err: Error in dPSI [mas]. NaN where missing.
        nutation_epsilon: dEPSILON [mas]. NaN where missing.
        nutation_epsilon_err: Error in dEPSILON [mas]. NaN where missing.
    """

    julian_utc: Array
    pm_x: Array
    pm_x_err: Array
    pm_y: Array
    pm_y_err: Array
    pm_is_prediction: Array
    ut1_minus_utc: Array
    ut1_minus_utc_err: Array
    ut1_is_prediction: Array
    nutation_psi: Array
    nutation_psi_err: Array
    nutation_epsilon: Array
    nutation_epsilon_err: Array
