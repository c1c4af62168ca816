"""Tests for the Rotation value type and elementary rotation matrices."""

import jax
import jax.numpy as jnp
import pytest

from eopframes.rotation import Rotation, Rx, Ry, Rz

_TOL = 1e-14


class TestElementaryMatrices:
    def test_rx(self):
        R = Rx(jnp.pi / 2)
        assert jnp.allclose(R @ jnp.array([0.0, 1.0, 0.0]), jnp.array([0.0, 0.0, -1.0]), atol=_TOL)

    def test_ry(self):
        R = Ry(jnp.pi / 2)
        assert jnp.allclose(R @ jnp.array([0.0, 0.0, 1.0]), jnp.array([-1.0, 0.0, 0.0]), atol=_TOL)

    def test_rz(self):
        R = Rz(jnp.pi / 2)
        assert jnp.allclose(R @ jnp.array([1.0, 0.0, 0.0]), jnp.array([0.0, -1.0, 0.0]), atol=_TOL)

    @pytest.mark.parametrize("fn", [Rx, Ry, Rz])
    def test_orthonormal(self, fn):
        R = fn(0.3)
        assert jnp.allclose(R @ R.T, jnp.eye(3), atol=_TOL)
        assert jnp.abs(jnp.linalg.det(R) - 1.0) < _TOL


class TestRotationConstruction:
    def test_identity(self):
        r = Rotation.identity()
        assert jnp.allclose(r.to_matrix(), jnp.eye(3), atol=_TOL)
        assert float(r.angle()) == 0.0

    def test_normalization(self):
        r = Rotation(2.0, 0.0, 0.0, 0.0)
        assert float(r.q0) == 1.0

    def test_no_normalization(self):
        r = Rotation(2.0, 0.0, 0.0, 0.0, normalize=False)
        assert float(r.q0) == 2.0

    def test_components(self):
        r = Rotation(0.5, 0.5, 0.5, 0.5)
        assert jnp.allclose(r.to_vector(), jnp.array([0.5, 0.5, 0.5, 0.5]))
        assert float(r.q1) == 0.5
        assert float(r.q2) == 0.5
        assert float(r.q3) == 0.5

    @pytest.mark.parametrize("axis, fn", [("x", Rx), ("y", Ry), ("z", Rz)])
    def test_axis_angle_matches_elementary_matrix(self, axis, fn):
        angle = 0.7
        r = Rotation.from_axis_angle(axis, angle)
        assert jnp.allclose(r.to_matrix(), fn(angle), atol=_TOL)

    def test_axis_angle_vector_axis(self):
        a = Rotation.from_axis_angle([0.0, 0.0, 2.0], 0.4)
        b = Rotation.from_axis_angle("z", 0.4)
        assert a.is_close(b)

    def test_axis_angle_storage_convention(self):
        r = Rotation.from_axis_angle("z", 0.5)
        assert float(r.q0) == pytest.approx(jnp.cos(0.25), abs=_TOL)
        assert float(r.q3) == pytest.approx(-jnp.sin(0.25), abs=_TOL)


class TestRotationAlgebra:
    def test_compose_is_matrix_product(self):
        a = Rotation.from_axis_angle("x", 0.3)
        b = Rotation.from_axis_angle("y", -1.1)
        assert jnp.allclose(a.compose(b).to_matrix(), a.to_matrix() @ b.to_matrix(), atol=_TOL)

    def test_matmul_operator(self):
        a = Rotation.from_axis_angle("x", 0.3)
        b = Rotation.from_axis_angle("z", 0.2)
        assert jnp.allclose((a @ b).to_vector(), a.compose(b).to_vector(), atol=_TOL)

    def test_inverse(self):
        r = Rotation.from_axis_angle([1.0, 2.0, 3.0], 0.8)
        assert r.compose(r.inverse()).is_close(Rotation.identity())
        assert jnp.allclose(r.inverse().to_matrix(), r.to_matrix().T, atol=_TOL)

    def test_apply_inverse_to(self):
        a = Rotation.from_axis_angle("z", 0.3)
        b = Rotation.from_axis_angle("x", 0.5)
        expected = a.to_matrix().T @ b.to_matrix()
        assert jnp.allclose(a.apply_inverse_to(b).to_matrix(), expected, atol=_TOL)

    def test_same_axis_angles_add(self):
        a = Rotation.from_axis_angle("z", 0.3)
        b = Rotation.from_axis_angle("z", 0.4)
        assert a.compose(b).is_close(Rotation.from_axis_angle("z", 0.7))

    def test_angle(self):
        r = Rotation.from_axis_angle("y", 0.3)
        assert float(r.angle()) == pytest.approx(0.3, abs=_TOL)

    def test_apply_to_vector(self):
        r = Rotation.from_axis_angle("z", jnp.pi / 2)
        v = r.apply_to_vector([1.0, 0.0, 0.0])
        assert jnp.allclose(v, jnp.array([0.0, -1.0, 0.0]), atol=_TOL)

    def test_is_close_tolerance(self):
        a = Rotation.from_axis_angle("z", 0.3)
        b = Rotation.from_axis_angle("z", 0.3 + 1e-9)
        assert not a.is_close(b)
        assert a.is_close(b, atol=1e-8)

    def test_matmul_rejects_other_types(self):
        with pytest.raises(TypeError):
            Rotation.identity() @ 3


class TestRotationPytree:
    def test_tree_map(self):
        r = Rotation.from_axis_angle("x", 0.2)
        doubled = jax.tree_util.tree_map(lambda q: q * 1.0, r)
        assert isinstance(doubled, Rotation)
        assert jnp.allclose(doubled.to_vector(), r.to_vector())

    def test_jit(self):
        @jax.jit
        def to_matrix(r):
            return r.to_matrix()

        r = Rotation.from_axis_angle("y", 0.2)
        assert jnp.allclose(to_matrix(r), Ry(0.2), atol=_TOL)

    def test_repr(self):
        assert repr(Rotation.identity()) == "Rotation(q0=1.0, q1=0.0, q2=0.0, q3=0.0)"
