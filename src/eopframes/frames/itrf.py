"""GCRF to ITRF transformation with the CIO-based IERS 2003 model.

The rotation is built from three parts:

- **precession-nutation** ``Q``: the motion of the Celestial Intermediate
  Pole in the GCRF, from the harmonic series (see
  :mod:`eopframes.frames.precession_nutation`);
- **Earth rotation** ``Rr``: a rotation about the CIP by the Earth
  Rotation Angle, driven by UT1;
- **polar motion** ``W``: the pole coordinates from the EOP series plus
  the TIO locator ``s'``.

The GCRF to ITRF rotation is ``inverse(Q . Rr . W)``.

:class:`ITRFFrame` caches the result for the last epoch it was asked about
and keeps the EOP bracket between calls, so sequences of nearby epochs
reuse the previous lookup.  A frame instance is not meant to be shared
between threads; the data it reads lives in a shared
:class:`~eopframes.frames.FrameContext`.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from eopframes.config import get_dtype
from eopframes.constants import (
    DAYS_PER_JULIAN_CENTURY,
    ERA0,
    ERA1A,
    ERA1B,
    JULIAN_CENTURY_PER_SECOND,
    OMEGA_EARTH,
    S_PRIME_RATE,
    SECONDS_PER_DAY,
)
from eopframes.eop import Bracket, PoleCorrection, interpolate_pole, interpolate_ut1_utc
from eopframes.epoch import J2000_EPOCH, Epoch
from eopframes.frames._context import FrameContext, get_default_context
from eopframes.frames._corrections import (
    CorrectionProvider,
    null_nutation_correction,
    null_tidal_correction,
)
from eopframes.frames.precession_nutation import precession_nutation_rotation
from eopframes.rotation import Rotation
from eopframes.series import compute_bodies_elements

logger = logging.getLogger(__name__)


class RotationState(NamedTuple):
    """Result of one frame update.

    Attributes:
        epoch: Epoch the state was computed for.
        rotation: GCRF to ITRF rotation.
        era: Earth Rotation Angle [rad], not reduced to ``[0, 2pi)``.
        polar_motion: TIRS to ITRF part of ``rotation``.
    """

    epoch: Epoch
    rotation: Rotation
    era: float
    polar_motion: Rotation


class ITRFFrame:
    """International Terrestrial Reference Frame, child of the GCRF.

    Args:
        context: Shared series and EOP data.  Default: the process-wide
            :func:`~eopframes.frames.get_default_context`.
        tidal_correction: Provider of the tidal pole correction.
            Default: zero.
        nutation_correction: Provider of the short-period nutation pole
            correction.  Default: zero.

    Examples:
        ```python
        from eopframes import Epoch
        from eopframes.frames import ITRFFrame
        itrf = ITRFFrame()
        R = itrf.rotation(Epoch(2007, 4, 5, 12)).to_matrix()
        ```
    """

    name = "ITRF"
    parent_name = "GCRF"

    def __init__(
        self,
        context: FrameContext | None = None,
        tidal_correction: CorrectionProvider | None = None,
        nutation_correction: CorrectionProvider | None = None,
    ) -> None:
        self._context = context if context is not None else get_default_context()
        self._tidal_correction = tidal_correction or null_tidal_correction
        self._nutation_correction = nutation_correction or null_nutation_correction
        self._bracket: Bracket | None = None
        self._state: RotationState | None = None

    @property
    def context(self) -> FrameContext:
        return self._context

    @property
    def transform(self) -> Rotation | None:
        """Last computed GCRF to ITRF rotation, ``None`` before the first update."""
        return self._state.rotation if self._state is not None else None

    def state(self, epoch: Epoch) -> RotationState:
        """Return the frame state at *epoch*, computing it if needed.

        Asking twice in a row for the same epoch returns the cached state.

        Args:
            epoch: Instant (UTC-like scale).

        Returns:
            RotationState: Rotation, Earth Rotation Angle and polar motion.

        Raises:
            InitializationError: If the harmonic series cannot be loaded.
        """
        if self._state is not None and self._state.epoch == epoch:
            return self._state
        self._state = self._compute(epoch)
        return self._state

    def rotation(self, epoch: Epoch) -> Rotation:
        """Return the GCRF to ITRF rotation at *epoch*."""
        return self.state(epoch).rotation

    def earth_rotation_angle(self, epoch: Epoch) -> float:
        """Return the Earth Rotation Angle at *epoch* [rad], unreduced."""
        return self.state(epoch).era

    def _pole(self, epoch: Epoch) -> PoleCorrection:
        iers = interpolate_pole(self._bracket, epoch)
        tidal = self._tidal_correction(epoch)
        nutation = self._nutation_correction(epoch)
        return PoleCorrection(
            xp=iers.xp + tidal.xp + nutation.xp,
            yp=iers.yp + tidal.yp + nutation.yp,
        )

    def _compute(self, epoch: Epoch) -> RotationState:
        series = self._context.series
        eop = self._context.eop

        # offset from J2000.0 epoch in Julian centuries
        t = (epoch - J2000_EPOCH) * JULIAN_CENTURY_PER_SECOND
        elements = compute_bodies_elements(t)

        self._bracket = eop.lookup(epoch, self._bracket)

        # Earth Rotation Angle, UT1 days since J2000.0
        dut1 = interpolate_ut1_utc(self._bracket, epoch)
        tu = t * DAYS_PER_JULIAN_CENTURY + dut1 / SECONDS_PER_DAY
        era = ERA0 + ERA1A * tu + ERA1B * tu

        pole = self._pole(epoch)
        r1 = Rotation.from_axis_angle("x", pole.yp)
        r2 = Rotation.from_axis_angle("y", pole.xp)
        r3 = Rotation.from_axis_angle("z", -S_PRIME_RATE * t)
        w = r3.compose(r2.compose(r1))

        rr = Rotation.from_axis_angle("z", -era)
        q = precession_nutation_rotation(series, t, elements)

        combined = q.compose(rr.compose(w)).inverse()
        return RotationState(epoch, combined, float(era), w.inverse())

    def __repr__(self) -> str:
        last = self._state.epoch if self._state is not None else None
        return f"ITRFFrame(parent={self.parent_name!r}, last_epoch={last})"


# Functional API


def rotation_gcrf_to_itrf(epoch: Epoch, frame: ITRFFrame | None = None) -> jax.Array:
    """Compute the 3x3 rotation matrix from GCRF to ITRF.

    Args:
        epoch: Instant (UTC-like scale).
        frame: Frame to evaluate.  Default: a new :class:`ITRFFrame` on the
            default context.

    Returns:
        3x3 rotation matrix (GCRF -> ITRF).

    Examples:
        ```python
        from eopframes import Epoch
        from eopframes.frames import rotation_gcrf_to_itrf
        R = rotation_gcrf_to_itrf(Epoch(2024, 1, 1))
        R.shape
        ```
    """
    frame = frame if frame is not None else ITRFFrame()
    return frame.rotation(epoch).to_matrix()


def rotation_itrf_to_gcrf(epoch: Epoch, frame: ITRFFrame | None = None) -> jax.Array:
    """Compute the 3x3 rotation matrix from ITRF to GCRF.

    This is the transpose of :func:`rotation_gcrf_to_itrf`.

    Args:
        epoch: Instant (UTC-like scale).
        frame: Frame to evaluate.  Default: a new :class:`ITRFFrame`.

    Returns:
        3x3 rotation matrix (ITRF -> GCRF).
    """
    frame = frame if frame is not None else ITRFFrame()
    return frame.rotation(epoch).inverse().to_matrix()


def earth_rotation_angle(epoch: Epoch, frame: ITRFFrame | None = None) -> float:
    """Compute the Earth Rotation Angle at *epoch*.

    Args:
        epoch: Instant (UTC-like scale).
        frame: Frame supplying the EOP data.  Default: a new
            :class:`ITRFFrame`.

    Returns:
        Earth Rotation Angle [rad], not reduced to ``[0, 2pi)``.
    """
    frame = frame if frame is not None else ITRFFrame()
    return frame.earth_rotation_angle(epoch)


def _omega_itrf(state: RotationState) -> jax.Array:
    """Earth rotation vector expressed in the ITRF."""
    omega = jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=get_dtype())
    return state.polar_motion.apply_to_vector(omega)


def state_gcrf_to_itrf(
    epoch: Epoch, x_gcrf: ArrayLike, frame: ITRFFrame | None = None
) -> jax.Array:
    """Transform a 6-element state vector from GCRF to ITRF.

    Position is rotated directly.  Velocity also removes the transport
    term of the Earth's rotation:

    .. math::

        \\mathbf{r}_{\\text{ITRF}} &= R \\, \\mathbf{r}_{\\text{GCRF}} \\\\
        \\mathbf{v}_{\\text{ITRF}} &= R \\, \\mathbf{v}_{\\text{GCRF}}
            - \\boldsymbol{\\omega}_{\\text{ITRF}} \\times \\mathbf{r}_{\\text{ITRF}}

    Args:
        epoch: Instant (UTC-like scale).
        x_gcrf: 6-element GCRF state ``[x, y, z, vx, vy, vz]``.
            Units: m, m/s.
        frame: Frame to evaluate.  Default: a new :class:`ITRFFrame`.

    Returns:
        6-element ITRF state ``[x, y, z, vx, vy, vz]``.
            Units: m, m/s.
    """
    frame = frame if frame is not None else ITRFFrame()
    x_gcrf = jnp.asarray(x_gcrf, dtype=get_dtype())

    state = frame.state(epoch)
    R = state.rotation.to_matrix()

    r_itrf = R @ x_gcrf[:3]
    v_itrf = R @ x_gcrf[3:6] - jnp.cross(_omega_itrf(state), r_itrf)

    return jnp.concatenate([r_itrf, v_itrf])


def state_itrf_to_gcrf(
    epoch: Epoch, x_itrf: ArrayLike, frame: ITRFFrame | None = None
) -> jax.Array:
    """Transform a 6-element state vector from ITRF to GCRF.

    Applies the inverse of :func:`state_gcrf_to_itrf`.

    Args:
        epoch: Instant (UTC-like scale).
        x_itrf: 6-element ITRF state ``[x, y, z, vx, vy, vz]``.
            Units: m, m/s.
        frame: Frame to evaluate.  Default: a new :class:`ITRFFrame`.

    Returns:
        6-element GCRF state ``[x, y, z, vx, vy, vz]``.
            Units: m, m/s.
    """
    frame = frame if frame is not None else ITRFFrame()
    x_itrf = jnp.asarray(x_itrf, dtype=get_dtype())

    state = frame.state(epoch)
    R = state.rotation.to_matrix()

    r_itrf = x_itrf[:3]
    v_itrf = x_itrf[3:6]

    r_gcrf = R.T @ r_itrf
    v_gcrf = R.T @ (v_itrf + jnp.cross(_omega_itrf(state), r_itrf))

    return jnp.concatenate([r_gcrf, v_gcrf])
