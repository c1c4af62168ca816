"""Additional pole corrections not included in IERS bulletins.

Two contributions are summed with the interpolated IERS pole coordinates
before the polar motion rotation is built:

- the diurnal and semi-diurnal tidal (ocean tide) variations of the pole;
- the nutation-like terms with periods under two days caused by tidal
  gravity (libration), of order a few tens of microarcseconds.

Neither model is implemented here.  Both are pluggable: a provider is any
callable taking an :class:`~eopframes.epoch.Epoch` and returning a
:class:`~eopframes.eop.PoleCorrection`.  The defaults return
:data:`~eopframes.eop.NULL_CORRECTION`.
"""

from __future__ import annotations

from collections.abc import Callable

from eopframes.eop import NULL_CORRECTION, PoleCorrection
from eopframes.epoch import Epoch

CorrectionProvider = Callable[[Epoch], PoleCorrection]
"""Callable returning a pole correction [rad] at an epoch."""


def null_tidal_correction(epoch: Epoch) -> PoleCorrection:
    """Tidal correction to the pole motion (not modelled, always zero)."""
    return NULL_CORRECTION


def null_nutation_correction(epoch: Epoch) -> PoleCorrection:
    """Short-period nutation correction due to tidal gravity (not modelled, always zero)."""
    return NULL_CORRECTION
