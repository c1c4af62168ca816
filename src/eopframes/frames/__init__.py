"""Frame transformations.

- **ITRF frame**: :class:`ITRFFrame` computes the GCRF to ITRF rotation
  and the Earth Rotation Angle with the CIO-based IERS 2003 model
  (precession-nutation, Earth rotation and polar motion).
- **Functional API**: :func:`rotation_gcrf_to_itrf` and friends for
  one-off matrix and state-vector conversions.
- **Frame context**: :class:`FrameContext` holds the shared harmonic series
  and EOP data, loaded once on first use.
"""

from ._context import FrameContext, get_default_context, set_default_context
from ._corrections import CorrectionProvider, null_nutation_correction, null_tidal_correction
from .itrf import (
    ITRFFrame,
    RotationState,
    earth_rotation_angle,
    rotation_gcrf_to_itrf,
    rotation_itrf_to_gcrf,
    state_gcrf_to_itrf,
    state_itrf_to_gcrf,
)
from .precession_nutation import (
    cip_coordinates,
    half_angles,
    precession_nutation_rotation,
    rotation_from_cip,
)

__all__ = [
    # ITRF frame
    "ITRFFrame",
    "RotationState",
    "earth_rotation_angle",
    "rotation_gcrf_to_itrf",
    "rotation_itrf_to_gcrf",
    "state_gcrf_to_itrf",
    "state_itrf_to_gcrf",
    # Precession-nutation
    "cip_coordinates",
    "half_angles",
    "precession_nutation_rotation",
    "rotation_from_cip",
    # Context and corrections
    "CorrectionProvider",
    "FrameContext",
    "get_default_context",
    "null_nutation_correction",
    "null_tidal_correction",
    "set_default_context",
]
