"""
The `constants` module defines the mathematical, time and physical constants used by skyclock.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Constant to convert arcseconds to radians. Equal to 2pi/(360*3600). Units: *rad/as*
"""
AS2RAD = 2.0 * PI / 360.0 / 3600.0

# Time Constants

"""
Offset between Julian Date and Modified Julian Date. Units: *days*
"""
JD_MJD_OFFSET = 2400000.5

"""
Julian Date of the J2000.0 epoch (2000-01-01 12:00:00 TT). Units: *days*
"""
JD_J2000 = 2451545.0

"""
Length of a (non leap-second) day. Units: *s*
"""
SECONDS_PER_DAY = 86400.0

"""
Length of an hour. Units: *s*
"""
SECONDS_PER_HOUR = 3600.0

"""
Offset TT - TAI, constant by definition. Units: *s*
"""
TT_MINUS_TAI = 32.184

# Physical Constants

"""
Astronomical Unit, exact by IAU 2012 definition. Units: *km*
"""
AU_KM = 149597870.700

"""
Earth's semi-major axis as defined by the WGS84 geodetic system. [m]

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_a = 6378137.0

"""
Earth's ellipsoidal flattening.  WGS84 Value.

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_f = 1.0 / 298.257223563
