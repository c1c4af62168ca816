"""
eopframes computes the rotation between the celestial (GCRF) and terrestrial
(ITRF) reference frames with the CIO-based IERS 2003 model, implemented in JAX.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    AS2RAD,
    RAD2AS,
    UAS2RAD,
    JD_MJD_OFFSET,
    MJD2000,
    OMEGA_EARTH,
)

from .config import set_dtype, get_dtype
from .epoch import Epoch, J2000_EPOCH
from .errors import EOPFramesError, InitializationError
from .rotation import Rotation, Rx, Ry, Rz

from .frames import (
    FrameContext,
    ITRFFrame,
    earth_rotation_angle,
    rotation_gcrf_to_itrf,
    rotation_itrf_to_gcrf,
    state_gcrf_to_itrf,
    state_itrf_to_gcrf,
)

__version__ = "0.1.0"
