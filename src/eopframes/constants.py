"""
The `constants` module defines the mathematical, time and Earth-orientation
constants shared by the eopframes modules.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Two pi. Units: *rad*
"""
TWO_PI = 2.0 * PI

"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Constant to convert arcseconds to radians. Equal to 2pi/1296000. Units: *rad/as*
"""
AS2RAD = 2.0 * PI / 1296000.0

"""
Constant to convert radians to arcseconds. Equal to 1296000/2pi. Units: *as/rad*
"""
RAD2AS = 1296000.0 / (2.0 * PI)

"""
Constant to convert microarcseconds to radians. Units: *rad/uas*
"""
UAS2RAD = AS2RAD * 1.0e-6

# Time Constants

"""
Offset between Julian Date and Modified Julian Date. Units: *days*
"""
JD_MJD_OFFSET = 2400000.5

"""
Modified Julian Date of the J2000.0 reference epoch (2000-01-01 12:00:00). Units: *days*
"""
MJD2000 = 51544.5

"""
Modified Julian Date of the Unix epoch (1970-01-01 00:00:00). Units: *days*
"""
MJD_UNIX_EPOCH = 40587.0

"""
Seconds in one day. Units: *s*
"""
SECONDS_PER_DAY = 86400.0

"""
Days in one Julian century. Units: *days*
"""
DAYS_PER_JULIAN_CENTURY = 36525.0

"""
Julian centuries per second. Units: *cy/s*
"""
JULIAN_CENTURY_PER_SECOND = 1.0 / (DAYS_PER_JULIAN_CENTURY * SECONDS_PER_DAY)

# Earth Orientation Constants

"""
Constant term of the Capitaine (2000) Earth Rotation Angle model. Units: *rad*

References:

1. N. Capitaine, B. Guinot, D. McCarthy, *Definition of the Celestial
   Ephemeris Origin and of UT1 in the International Celestial Reference
   Frame*, 2000.
"""
ERA0 = TWO_PI * 0.7790572732640

"""
Integer part of the Earth Rotation Angle rate (one turn per UT1 day). Units: *rad/day*
"""
ERA1A = TWO_PI

"""
Fractional part of the Earth Rotation Angle rate. Units: *rad/day*
"""
ERA1B = TWO_PI * 0.00273781191135448

"""
Secular rate of the TIO locator s' (Lambert and Bizouard, 2002). Units: *rad/cy*
"""
S_PRIME_RATE = -47.0e-6 * AS2RAD

"""
Nominal Earth rotation rate used for velocity transformations. Units: *rad/s*

References:

1. P. Gérard and B. Luzum, *IERS Technical Note 36*, 2010
"""
OMEGA_EARTH = 7.292115146706979e-5
