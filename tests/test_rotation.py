"""
ROTATION TESTS: Local-to-Global Transform of 3D Beams
=====================================================

The 12×12 transform repeats the direction cosine matrix [x; y; z] on its
four diagonal blocks. When the orientation vector is perpendicular to the
member axis it must be orthogonal, and an element lying along global x
with its normal along global y must not be rotated at all.
"""

import numpy as np
import pytest

from explicit_frame.v3d.elements import (
    beam3d_global_stiffness,
    beam3d_local_stiffness,
    rotation_matrix_3d,
)
from explicit_frame.v3d.model import Beam3D, BeamTheory, Node3D, Props

UNIT = Props(E=10.0, G=10.0, A=1.0, Iz=1.0, Iy=1.0, J=1.0, density=1.0)


def test_aligned_element_has_identity_rotation():
    R, RT = rotation_matrix_3d(np.zeros(3), np.array([2.0, 0.0, 0.0]), (0.0, 1.0, 0.0))

    np.testing.assert_array_equal(R, np.eye(12))
    np.testing.assert_array_equal(RT, np.eye(12))


@pytest.mark.parametrize("xi, xj, normal", [
    ((0, 0, 0), (1, 1, 0), (-1, 1, 0)),
    ((0, 0, 0), (0, 0, 2), (1, 0, 0)),
    ((1, -2, 0.5), (2, 0, 3.5), (3, 0, -1)),
    ((0, 0, 0), (-3, 0, 0), (0, 0, 5)),
])
def test_rotation_is_orthogonal(xi, xj, normal):
    R, RT = rotation_matrix_3d(np.array(xi, float), np.array(xj, float), normal)

    np.testing.assert_allclose(R @ RT, np.eye(12), atol=1e-14)
    np.testing.assert_allclose(RT, R.T)


def test_rotation_is_block_diagonal():
    R, _ = rotation_matrix_3d(np.zeros(3), np.array([0.0, 0.0, 1.0]), (1.0, 0.0, 0.0))

    lam = R[:3, :3]
    for b in range(4):
        np.testing.assert_array_equal(R[3 * b:3 * b + 3, 3 * b:3 * b + 3], lam)
    # local x along global z, local y along global x, local z = x × y
    np.testing.assert_allclose(lam, [[0, 0, 1], [1, 0, 0], [0, 1, 0]], atol=1e-15)


def test_round_trip_recovers_local_stiffness():
    nodes = [Node3D(0.0, 0.0, 0.0), Node3D(1.0, 2.0, 2.0)]
    normal = (2.0, -1.0, 0.0)
    props = Props(E=10.0, G=4.0, A=2.0, Iz=0.3, Iy=0.5, J=0.7, density=1.0, normal=normal)
    beam = Beam3D(0, 1, props, theory=BeamTheory.EULER_BERNOULLI)

    R, RT = rotation_matrix_3d(nodes[0].as_array(), nodes[1].as_array(), normal)
    k_global = beam3d_global_stiffness(nodes, beam)

    np.testing.assert_allclose(R @ k_global @ RT, beam3d_local_stiffness(nodes, beam), atol=1e-12)


def test_vertical_member_carries_axial_stiffness_along_z():
    L = 2.0
    nodes = [Node3D(0.0, 0.0, 0.0), Node3D(0.0, 0.0, L)]
    props = Props(E=10.0, G=10.0, A=1.0, Iz=1.0, Iy=1.0, J=1.0, density=1.0, normal=(1.0, 0.0, 0.0))
    k = beam3d_global_stiffness(nodes, Beam3D(0, 1, props, theory=BeamTheory.EULER_BERNOULLI))

    EA_L = props.E * props.A / L
    assert np.isclose(k[2, 2], EA_L)
    assert np.isclose(k[2, 8], -EA_L)
    # torsion about the member axis is global rz
    assert np.isclose(k[5, 5], props.G * props.J / L)
    assert np.isclose(k[0, 0], 12.0 * props.E * props.Iz / L ** 3)
