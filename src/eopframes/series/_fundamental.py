"""Fundamental arguments of nutation theory (IERS Conventions 2003).

The five Delaunay arguments of the Moon and Sun, the mean longitudes of
the eight planets and the general accumulated precession in longitude.
Together they form the 14 arguments that the harmonic series multipliers
are applied to, in the column order of the IERS tables 5.2a-c:

    l  l'  F  D  Om  LMe  LVe  LE  LMa  LJ  LSa  LU  LNe  pA

Values are returned unreduced: sines and cosines do not need the angles
in ``[0, 2pi)`` and skipping the reduction keeps every argument a smooth
polynomial in ``t``.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from eopframes.config import get_dtype
from eopframes.constants import AS2RAD, DEG2RAD

# Delaunay arguments: constant term in degrees, then the t, t^2, t^3, t^4
# coefficients in arcseconds.
_DELAUNAY_COEFFS = (
    # l: mean anomaly of the Moon
    (134.96340251, 1717915923.2178, 31.8792, 0.051635, -0.00024470),
    # l': mean anomaly of the Sun
    (357.52910918, 129596581.0481, -0.5532, 0.000136, -0.00001149),
    # F: mean argument of latitude of the Moon
    (93.27209062, 1739527262.8478, -12.7512, -0.001037, 0.00000417),
    # D: mean elongation of the Moon from the Sun
    (297.85019547, 1602961601.2090, -6.3706, 0.006593, -0.00003169),
    # Om: mean longitude of the Moon's ascending node
    (125.04455501, -6962890.5431, 7.4722, 0.007702, -0.00005939),
)

# Planetary mean longitudes, Mercury to Neptune: (constant, rate) in rad, rad/century
_PLANETARY_COEFFS = (
    (4.402608842, 2608.7903141574),
    (3.176146697, 1021.3285546211),
    (1.753470314, 628.3075849991),
    (6.203480913, 334.0612426700),
    (0.599546497, 52.9690962641),
    (0.874016757, 21.3299104960),
    (5.481293872, 7.4781598567),
    (5.311886287, 3.8133035638),
)

# General accumulated precession in longitude: (t, t^2) coefficients in rad
_PRECESSION_COEFFS = (0.024381750, 0.00000538691)


class BodiesElements(NamedTuple):
    """The 14 fundamental arguments at one instant, in radians.

    Attributes:
        l: Mean anomaly of the Moon.
        lp: Mean anomaly of the Sun.
        f: Mean argument of latitude of the Moon (``L - Om``).
        d: Mean elongation of the Moon from the Sun.
        om: Mean longitude of the ascending node of the Moon.
        l_me: Mean longitude of Mercury.
        l_ve: Mean longitude of Venus.
        l_e: Mean longitude of the Earth.
        l_ma: Mean longitude of Mars.
        l_ju: Mean longitude of Jupiter.
        l_sa: Mean longitude of Saturn.
        l_u: Mean longitude of Uranus.
        l_ne: Mean longitude of Neptune.
        pa: General accumulated precession in longitude.
    """

    l: jax.Array
    lp: jax.Array
    f: jax.Array
    d: jax.Array
    om: jax.Array
    l_me: jax.Array
    l_ve: jax.Array
    l_e: jax.Array
    l_ma: jax.Array
    l_ju: jax.Array
    l_sa: jax.Array
    l_u: jax.Array
    l_ne: jax.Array
    pa: jax.Array

    def as_array(self) -> jax.Array:
        """Return the arguments stacked into a ``(14,)`` array."""
        return jnp.stack(self)


def _delaunay(t: jax.Array, coeffs: tuple[float, ...]) -> jax.Array:
    c0, c1, c2, c3, c4 = coeffs
    return c0 * DEG2RAD + t * (c1 + t * (c2 + t * (c3 + t * c4))) * AS2RAD


def compute_bodies_elements(t: ArrayLike) -> BodiesElements:
    """Compute the fundamental arguments at date ``t``.

    Args:
        t: Julian centuries since J2000.0.

    Returns:
        BodiesElements: The 14 arguments in radians, not range-reduced.

    Examples:
        ```python
        from eopframes.series import compute_bodies_elements
        elements = compute_bodies_elements(0.0)
        elements.om  # 125.04455501 deg in radians
        ```
    """
    t = jnp.asarray(t, dtype=get_dtype())

    delaunay = [_delaunay(t, c) for c in _DELAUNAY_COEFFS]
    planets = [c0 + c1 * t for c0, c1 in _PLANETARY_COEFFS]
    p1, p2 = _PRECESSION_COEFFS
    pa = (p1 + p2 * t) * t

    return BodiesElements(*delaunay, *planets, pa)
