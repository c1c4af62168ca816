"""Rotation value type for frame transformations.

Provides the :class:`Rotation` class, a unit quaternion in scalar-first
order ``[q0, q1, q2, q3]`` using the *frame transformation* convention: a
rotation built about axis ``u`` by angle ``a`` stores
``[cos(a/2), -sin(a/2) u]`` and its matrix re-expresses fixed vectors in
the rotated frame, i.e. ``Rotation.from_axis_angle(Z, a).to_matrix()``
equals :func:`Rz` ``(a)``.

Composition follows matrix multiplication: ``a.compose(b)`` (or
``a @ b``) is the rotation that applies ``b`` first, then ``a``.

Also provides the elementary rotation matrices :func:`Rx`, :func:`Ry`,
:func:`Rz`.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from eopframes.config import get_dtype, get_rotation_epsilon

_AXES = {
    "x": (1.0, 0.0, 0.0),
    "y": (0.0, 1.0, 0.0),
    "z": (0.0, 0.0, 1.0),
}


def Rx(angle: ArrayLike) -> jax.Array:
    """Rotation matrix, for a rotation about the x-axis.

    Args:
        angle (float): Counter-clockwise angle of rotation as viewed
            looking back along the postive direction of the rotation axis.

    Returns:
        jnp.ndarray: Rotation matrix.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and Applications*, 2012, p.27.
    """
    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[1.0,  0.0,  0.0],
                      [0.0,   +c,   +s],
                      [0.0,   -s,   +c]])


def Ry(angle: ArrayLike) -> jax.Array:
    """Rotation matrix, for a rotation about the y-axis.

    Args:
        angle (float): Counter-clockwise angle of rotation as viewed
            looking back along the postive direction of the rotation axis.

    Returns:
        jnp.ndarray: Rotation matrix.
    """
    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[ +c,  0.0,   -s],
                      [0.0, +1.0,  0.0],
                      [ +s,  0.0,   +c]])


def Rz(angle: ArrayLike) -> jax.Array:
    """Rotation matrix, for a rotation about the z-axis.

    Args:
        angle (float): Counter-clockwise angle of rotation as viewed
            looking back along the postive direction of the rotation axis.

    Returns:
        jnp.ndarray: Rotation matrix.
    """
    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[ +c,   +s,  0.0],
                      [ -s,   +c,  0.0],
                      [0.0,  0.0,  1.0]])


def _hamilton_product(q1: jax.Array, q2: jax.Array) -> jax.Array:
    """Hamilton product of two scalar-first quaternions, without normalization."""
    s1, v1 = q1[0], q1[1:]
    s2, v2 = q2[0], q2[1:]

    s = s1 * s2 - jnp.dot(v1, v2)
    v = s1 * v2 + s2 * v1 + jnp.cross(v1, v2)

    return jnp.concatenate([jnp.array([s]), v])


class Rotation:
    """Rotation between two frames, stored as a scalar-first quaternion.

    Args:
        q0 (float): Scalar component.
        q1 (float): First vector component.
        q2 (float): Second vector component.
        q3 (float): Third vector component.
        normalize (bool): If ``True`` (default) the quaternion is scaled to
            unit norm.  Pass ``False`` when the components are already
            unit-consistent by construction (e.g. a ``(cos, sin)`` pair).
    """

    __slots__ = ('_data',)

    def __init__(self, q0: float, q1: float, q2: float, q3: float,
                 normalize: bool = True) -> None:
        _float = get_dtype()
        q = jnp.array([_float(q0), _float(q1), _float(q2), _float(q3)])
        if normalize:
            q = q / jnp.linalg.norm(q)
        self._data = q

    @classmethod
    def _from_internal(cls, data: jax.Array) -> Rotation:
        """Create from a raw JAX array of shape ``(4,)`` without normalization."""
        obj = object.__new__(cls)
        obj._data = data
        return obj

    # Factory methods

    @classmethod
    def identity(cls) -> Rotation:
        """Return the identity rotation."""
        return cls(1.0, 0.0, 0.0, 0.0, normalize=False)

    @classmethod
    def from_axis_angle(cls, axis: str | ArrayLike, angle: ArrayLike) -> Rotation:
        """Create the frame rotation about *axis* by *angle*.

        Args:
            axis: ``"x"``, ``"y"``, ``"z"`` or a 3-vector (normalized here).
            angle: Rotation angle. Units: *rad*

        Returns:
            Rotation: Rotation whose matrix is the elementary frame rotation
                (``Rx``, ``Ry`` or ``Rz`` for the coordinate axes).
        """
        dtype = get_dtype()
        if isinstance(axis, str):
            u = jnp.array(_AXES[axis.lower()], dtype=dtype)
        else:
            u = jnp.asarray(axis, dtype=dtype)
            u = u / jnp.linalg.norm(u)
        half = -0.5 * jnp.asarray(angle, dtype=dtype)
        data = jnp.concatenate([jnp.array([jnp.cos(half)]), jnp.sin(half) * u])
        return cls._from_internal(data)

    # Properties

    @property
    def q0(self) -> jax.Array:
        """Scalar component."""
        return self._data[0]

    @property
    def q1(self) -> jax.Array:
        """First vector component."""
        return self._data[1]

    @property
    def q2(self) -> jax.Array:
        """Second vector component."""
        return self._data[2]

    @property
    def q3(self) -> jax.Array:
        """Third vector component."""
        return self._data[3]

    def to_vector(self) -> jax.Array:
        """Return the quaternion as a ``(4,)`` array ``[q0, q1, q2, q3]``."""
        return self._data

    # Algebra

    def compose(self, other: Rotation) -> Rotation:
        """Return the rotation applying *other* first, then ``self``.

        The matrix of the result is ``self.to_matrix() @ other.to_matrix()``.
        No renormalization is performed.

        Args:
            other (Rotation): Rotation applied first.

        Returns:
            Rotation: Composed rotation.
        """
        return Rotation._from_internal(_hamilton_product(self._data, other._data))

    def inverse(self) -> Rotation:
        """Return the inverse rotation.

        For a unit quaternion this is the conjugate ``[q0, -q1, -q2, -q3]``.
        """
        return Rotation._from_internal(
            jnp.array([self._data[0], -self._data[1], -self._data[2], -self._data[3]])
        )

    def apply_inverse_to(self, other: Rotation) -> Rotation:
        """Return the rotation applying *other* first, then the inverse of ``self``."""
        return self.inverse().compose(other)

    def __matmul__(self, other: Rotation) -> Rotation:
        if not isinstance(other, Rotation):
            return NotImplemented
        return self.compose(other)

    # Conversions

    def to_matrix(self) -> jax.Array:
        """Convert to a 3x3 rotation matrix.

        Returns:
            jnp.ndarray: Matrix ``R`` such that ``R @ v`` re-expresses a
                vector given in the source frame in the target frame.
        """
        q0, q1, q2, q3 = self._data[0], self._data[1], self._data[2], self._data[3]

        return jnp.array([
            [q0*q0 + q1*q1 - q2*q2 - q3*q3,  2.0*(q1*q2 - q0*q3),            2.0*(q1*q3 + q0*q2)],
            [2.0*(q1*q2 + q0*q3),            q0*q0 - q1*q1 + q2*q2 - q3*q3,  2.0*(q2*q3 - q0*q1)],
            [2.0*(q1*q3 - q0*q2),            2.0*(q2*q3 + q0*q1),            q0*q0 - q1*q1 - q2*q2 + q3*q3],
        ])

    def apply_to_vector(self, v: ArrayLike) -> jax.Array:
        """Re-express the 3-vector *v* in the target frame."""
        return self.to_matrix() @ jnp.asarray(v, dtype=get_dtype())

    def angle(self) -> jax.Array:
        """Return the rotation angle in ``[0, pi]``. Units: *rad*"""
        return 2.0 * jnp.arctan2(jnp.linalg.norm(self._data[1:]), jnp.abs(self._data[0]))

    def is_close(self, other: Rotation, atol: float | None = None) -> bool:
        """Check whether two rotations agree to within *atol* radians.

        Args:
            other (Rotation): Rotation to compare with.
            atol (float): Angular tolerance. Default: dtype-adaptive
                :func:`~eopframes.config.get_rotation_epsilon`.

        Returns:
            bool: ``True`` if the relative rotation angle is below *atol*.
        """
        if atol is None:
            atol = get_rotation_epsilon()
        return bool(self.apply_inverse_to(other).angle() <= atol)

    # String representations

    def __repr__(self) -> str:
        return (
            f"Rotation(q0={float(self._data[0])}, "
            f"q1={float(self._data[1])}, "
            f"q2={float(self._data[2])}, "
            f"q3={float(self._data[3])})"
        )


# Register as JAX pytree
jax.tree_util.register_pytree_node(
    Rotation,
    lambda r: ((r._data,), None),
    lambda _, children: Rotation._from_internal(children[0]),
)
