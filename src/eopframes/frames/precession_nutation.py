"""Precession-nutation rotation from the CIP coordinates and the CIO locator.

Given the coordinates ``(X, Y)`` of the Celestial Intermediate Pole in the
GCRS and the CIO locator ``s``, the celestial-to-intermediate transformation
of the IERS Conventions 2003 (chapter 5, equation 6) is::

    Q(t) = R3(-E) . R2(-d) . R3(E) . R3(s)

where ``E`` and ``d`` are the spherical angles of the CIP
(``X = sin d cos E``, ``Y = sin d sin E``).  The angles are never formed
explicitly: the quaternion components only need ``cos``/``sin`` of the
half angles, which are derived from ``(X, Y)`` with tangent half-angle
formulas chosen by branch so that no division by zero can occur.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from eopframes.config import get_dtype
from eopframes.rotation import Rotation
from eopframes.series import BodiesElements, CIPSeries


def cip_coordinates(
    series: CIPSeries, t: ArrayLike, elements: BodiesElements
) -> tuple[jax.Array, jax.Array, jax.Array]:
    """Evaluate the CIP coordinates and the CIO locator.

    Args:
        series: The X, Y and ``s + XY/2`` series.
        t: Julian centuries since J2000.0.
        elements: Fundamental arguments at ``t``.

    Returns:
        tuple: ``(x, y, s)`` in radians.
    """
    x = series.x.value(t, elements)
    y = series.y.value(t, elements)
    s = series.sxy2.value(t, elements) - x * y / 2.0
    return x, y, s


def half_angles(
    x: ArrayLike, y: ArrayLike
) -> tuple[jax.Array, jax.Array, jax.Array, jax.Array]:
    """Compute cosine and sine of ``E/2`` and ``d/2`` from the CIP coordinates.

    ``tan(E/2)`` is taken as ``(r - x) / y`` when ``|x| > |y|`` and as
    ``y / (r + x)`` otherwise, with ``r = sqrt(x^2 + y^2)``.  Then
    ``tan(d/2) = r / (1 + sqrt(1 - r^2))``.

    Degenerate inputs:

    - ``x = y = 0``: ``E/2 = 0`` (the rotation reduces to ``R3(s)``).
    - ``y = 0, x > 0``: ``E/2 = 0``.
    - ``y = 0, x < 0``: ``E/2 = pi/2`` exactly (``cos = 0``, ``sin = 1``).

    Args:
        x: CIP X coordinate [rad].
        y: CIP Y coordinate [rad].  ``x^2 + y^2`` must be below 1.

    Returns:
        tuple: ``(cos_half_e, sin_half_e, cos_half_d, sin_half_d)``.
    """
    dtype = get_dtype()
    x = jnp.asarray(x, dtype=dtype)
    y = jnp.asarray(y, dtype=dtype)

    r2 = x * x + y * y
    r = jnp.sqrt(r2)

    # tan(E/2) = num / den on the selected branch
    x_dominant = jnp.abs(x) > jnp.abs(y)
    num = jnp.where(x_dominant, r - x, y)
    den = jnp.where(x_dominant, y, r + x)

    # cos = 1 / sqrt(1 + tan^2), sin = tan * cos, written without the
    # division so that den == 0 with num > 0 yields (0, 1)
    norm = jnp.sqrt(num * num + den * den)
    degenerate = norm == 0.0
    safe_norm = jnp.where(degenerate, 1.0, norm)
    sign = jnp.where(den < 0.0, -1.0, 1.0)
    cos_half_e = jnp.where(degenerate, 1.0, jnp.abs(den) / safe_norm)
    sin_half_e = jnp.where(degenerate, 0.0, sign * num / safe_norm)

    tan_half_d = r / (1.0 + jnp.sqrt(1.0 - r2))
    cos_half_d = 1.0 / jnp.sqrt(1.0 + tan_half_d * tan_half_d)
    sin_half_d = tan_half_d * cos_half_d

    return cos_half_e, sin_half_e, cos_half_d, sin_half_d


def rotation_from_cip(x: ArrayLike, y: ArrayLike, s: ArrayLike) -> Rotation:
    """Build the precession-nutation rotation from ``(X, Y, s)``.

    The quaternions of ``R3(s)``, ``R3(E)`` and ``R2(-d)`` are assembled
    from the half-angle cosines and sines without renormalization and
    composed as ``inverse(RE) . RD . RE . Rs``.

    Args:
        x: CIP X coordinate [rad].
        y: CIP Y coordinate [rad].
        s: CIO locator [rad].

    Returns:
        Rotation: Precession-nutation rotation.  Its matrix maps vectors
            from the intermediate (CIRS) frame to the GCRF.
    """
    cos_half_e, sin_half_e, cos_half_d, sin_half_d = half_angles(x, y)
    half_s = 0.5 * jnp.asarray(s, dtype=get_dtype())

    zero = jnp.zeros_like(cos_half_e)
    rs = Rotation._from_internal(jnp.stack([jnp.cos(half_s), zero, zero, -jnp.sin(half_s)]))
    re = Rotation._from_internal(jnp.stack([cos_half_e, zero, zero, -sin_half_e]))
    rd = Rotation._from_internal(jnp.stack([cos_half_d, zero, sin_half_d, zero]))

    return re.apply_inverse_to(rd.compose(re.compose(rs)))


def precession_nutation_rotation(
    series: CIPSeries, t: ArrayLike, elements: BodiesElements
) -> Rotation:
    """Compute the precession-nutation rotation at date ``t``.

    Args:
        series: The X, Y and ``s + XY/2`` series.
        t: Julian centuries since J2000.0.
        elements: Fundamental arguments at ``t``.

    Returns:
        Rotation: Precession-nutation rotation ``Q(t)``.

    Examples:
        ```python
        from eopframes.series import compute_bodies_elements, load_iers2003_series
        from eopframes.frames import precession_nutation_rotation
        t = 0.07
        q = precession_nutation_rotation(load_iers2003_series(), t, compute_bodies_elements(t))
        ```
    """
    x, y, s = cip_coordinates(series, t, elements)
    return rotation_from_cip(x, y, s)
