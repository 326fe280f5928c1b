"""TDB-TT periodic correction.

TDB differs from TT by a periodic term below 2 ms, dominated by the annual
term from the eccentricity of the Earth's orbit.
"""

from __future__ import annotations

import math

from .constants import JD_J2000

# (amplitude [s], frequency [rad/century], phase [rad])
_PERIODIC_TERMS = (
    (0.001657, 628.3076, 6.2401),
    (0.000022, 575.3385, 4.2970),
    (0.000014, 1256.6152, 6.1969),
    (0.000005, 606.9777, 4.0212),
    (0.000005, 52.9691, 0.4444),
    (0.000002, 21.3299, 5.5431),
)

# Mixed secular term t * sin(...)
_MIXED_TERM = (0.000010, 628.3076, 4.2490)


def tdb_minus_tt(jd: float) -> float:
    """Compute TDB-TT in seconds at a TT (or TDB) Julian Date.

    The argument may be given on either scale; the difference between them
    changes the result by far less than its accuracy (~10 microseconds,
    valid 1600-2200).

    Args:
        jd (float): Julian Date on the TT or TDB scale.

    Returns:
        float: TDB-TT [seconds].

    References:

        1. Fairhead, L. & Bretagnon, P. (1990), *A&A* 229, 240.
        2. Kaplan, G. (2005), *USNO Circular 179*, eq. 2.6.
    """
    t = (jd - JD_J2000) / 36525.0

    secdiff = 0.0
    for amplitude, frequency, phase in _PERIODIC_TERMS:
        secdiff += amplitude * math.sin(frequency * t + phase)

    amplitude, frequency, phase = _MIXED_TERM
    secdiff += amplitude * t * math.sin(frequency * t + phase)

    return secdiff
