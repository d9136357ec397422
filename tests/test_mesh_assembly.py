"""
MESH ASSEMBLY TESTS: Global K, M and M^-1 of a 3D Frame
=======================================================

Model used by most tests (all lengths 1):

    node 3
      |          element 2: E = G = 1, vertical (out of the x-y plane)
    node 2 ---- node 1 ---- node 0
          element 1    element 0: E = G = 10

All elements are Euler-Bernoulli with A = Iy = Iz = J = density = 1 and
local y along global y. The stiffness matrix is compared entry by entry
against hand-assembled values.
"""

import numpy as np
import pytest

from explicit_frame.kernel.assemble import eliminate_constrained_dofs
from explicit_frame.kernel.dof import DOF_3D_FRAME
from explicit_frame.v3d.elements import beam3d_global_inv_mass, beam3d_global_stiffness
from explicit_frame.v3d.loads import BCType, ConstantBC
from explicit_frame.v3d.mesh import Mesh
from explicit_frame.v3d.model import Beam3D, BeamTheory, Node3D, Props

EXPECTED_K = np.array([
    [10.,0.,0.,0.,0.,0.,-10.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.],
    [0.,120.,0.,0.,0.,60.,0.,-120.,0.,0.,0.,60.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.],
    [0.,0.,120.,0.,-60.,0.,0.,0.,-120.,0.,-60.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.],
    [0.,0.,0.,10.,0.,0.,0.,0.,0.,-10.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.],
    [0.,0.,-60.,0.,40.,0.,0.,0.,60.,0.,20.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.],
    [0.,60.,0.,0.,0.,40.,0.,-60.,0.,0.,0.,20.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.],
    [-10.,0.,0.,0.,0.,0.,20.,0.,0.,0.,0.,0.,-10.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.],
    [0.,-120.,0.,0.,0.,-60.,0.,240.,0.,0.,0.,0.,0.,-120.,0.,0.,0.,60.,0.,0.,0.,0.,0.,0.],
    [0.,0.,-120.,0.,60.,0.,0.,0.,240.,0.,0.,0.,0.,0.,-120.,0.,-60.,0.,0.,0.,0.,0.,0.,0.],
    [0.,0.,0.,-10.,0.,0.,0.,0.,0.,20.,0.,0.,0.,0.,0.,-10.,0.,0.,0.,0.,0.,0.,0.,0.],
    [0.,0.,-60.,0.,20.,0.,0.,0.,0.,0.,80.,0.,0.,0.,60.,0.,20.,0.,0.,0.,0.,0.,0.,0.],
    [0.,60.,0.,0.,0.,20.,0.,0.,0.,0.,0.,80.,0.,-60.,0.,0.,0.,20.,0.,0.,0.,0.,0.,0.],
    [0.,0.,0.,0.,0.,0.,-10.,0.,0.,0.,0.,0.,22.,0.,0.,0.,6.,0.,-12.,0.,0.,0.,6.,0.],
    [0.,0.,0.,0.,0.,0.,0.,-120.,0.,0.,0.,-60.,0.,132.,0.,-6.,0.,-60.,0.,-12.,0.,-6.,0.,0.],
    [0.,0.,0.,0.,0.,0.,0.,0.,-120.,0.,60.,0.,0.,0.,121.,0.,60.,0.,0.,0.,-1.,0.,0.,0.],
    [0.,0.,0.,0.,0.,0.,0.,0.,0.,-10.,0.,0.,0.,-6.,0.,14.,0.,0.,0.,6.,0.,2.,0.,0.],
    [0.,0.,0.,0.,0.,0.,0.,0.,-60.,0.,20.,0.,6.,0.,60.,0.,44.,0.,-6.,0.,0.,0.,2.,0.],
    [0.,0.,0.,0.,0.,0.,0.,60.,0.,0.,0.,20.,0.,-60.,0.,0.,0.,41.,0.,0.,0.,0.,0.,-1.],
    [0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,-12.,0.,0.,0.,-6.,0.,12.,0.,0.,0.,-6.,0.],
    [0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,-12.,0.,6.,0.,0.,0.,12.,0.,6.,0.,0.],
    [0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,-1.,0.,0.,0.,0.,0.,1.,0.,0.,0.],
    [0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,-6.,0.,2.,0.,0.,0.,6.,0.,4.,0.,0.],
    [0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,6.,0.,0.,0.,2.,0.,-6.,0.,0.,0.,4.,0.],
    [0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,0.,-1.,0.,0.,0.,0.,0.,1.],
])


def make_chain(E1: float = 10.0, E2: float = 1.0, bcs=()):
    """3-element chain plus one out-of-plane element (see module docstring)."""
    props1 = Props(E=E1, G=E1, A=1.0, Iz=1.0, Iy=1.0, J=1.0, density=1.0, normal=(0.0, 1.0, 0.0))
    props2 = Props(E=E2, G=E2, A=1.0, Iz=1.0, Iy=1.0, J=1.0, density=1.0, normal=(0.0, 1.0, 0.0))

    nodes = [
        Node3D(0.0, 0.0, 0.0),
        Node3D(1.0, 0.0, 0.0),
        Node3D(2.0, 0.0, 0.0),
        Node3D(2.0, 0.0, 1.0),
    ]
    elements = [
        Beam3D(0, 1, props1, BeamTheory.EULER_BERNOULLI),
        Beam3D(1, 2, props1, BeamTheory.EULER_BERNOULLI),
        Beam3D(2, 3, props2, BeamTheory.EULER_BERNOULLI),
    ]
    return Mesh(nodes, elements, bcs)


def scatter(ndof, nodes, elements, element_matrix):
    """Dense reference assembly: place each element block by hand."""
    K = np.zeros((ndof, ndof))
    for e in elements:
        dofs = DOF_3D_FRAME.element_dof_map([e.ni, e.nj])
        K[np.ix_(dofs, dofs)] += element_matrix(nodes, e)
    return K


def test_stiffness_matches_hand_assembled_matrix():
    mesh = make_chain()
    K = mesh.stiffness_matrix.toarray()

    assert EXPECTED_K.shape == (24, 24)
    assert K.shape == (24, 24)
    np.testing.assert_allclose(K, EXPECTED_K, rtol=1e-12, atol=1e-12)


def test_stiffness_is_symmetric():
    K = make_chain().stiffness_matrix
    np.testing.assert_allclose(K.toarray(), K.T.toarray(), atol=1e-12)


def test_rigid_body_motion_is_stress_free():
    """A rigid translation in any direction produces no internal forces."""
    K = make_chain().stiffness_matrix
    for direction in range(3):
        u = np.zeros(24)
        u[direction::6] = 1.0
        np.testing.assert_allclose(K @ u, 0.0, atol=1e-12)


def test_assembly_is_superposition_of_elements():
    mesh = make_chain()
    ndof = mesh.ndof

    K_ref = scatter(ndof, mesh.nodes, mesh.elements, beam3d_global_stiffness)
    M_ref = scatter(ndof, mesh.nodes, mesh.elements,
                    lambda nodes, e: np.linalg.inv(beam3d_global_inv_mass(nodes, e)))
    Minv_ref = scatter(ndof, mesh.nodes, mesh.elements, beam3d_global_inv_mass)

    np.testing.assert_allclose(mesh.stiffness_matrix.toarray(), K_ref, atol=1e-12)
    np.testing.assert_allclose(mesh.mass_matrix.toarray(), M_ref, atol=1e-12)
    np.testing.assert_allclose(mesh.inv_mass_matrix.toarray(), Minv_ref, atol=1e-12)


def test_stiffness_is_linear_in_modulus():
    """Scaling every modulus by 3 scales K by 3."""
    K1 = make_chain(E1=10.0, E2=1.0).stiffness_matrix.toarray()
    K3 = make_chain(E1=30.0, E2=3.0).stiffness_matrix.toarray()

    np.testing.assert_allclose(K3, 3.0 * K1, rtol=1e-12, atol=1e-12)


def test_mass_is_inverse_of_inverse_mass_for_single_element():
    props = Props(E=200e9, G=80e9, A=0.01, Iz=2e-5, Iy=1e-5, J=3e-5, density=7800.0,
                  normal=(0.0, 0.0, 1.0))
    nodes = [Node3D(0.0, 0.0, 0.0), Node3D(0.6, 0.8, 0.0)]
    mesh = Mesh(nodes, [Beam3D(0, 1, props)])

    product = mesh.mass_matrix @ mesh.inv_mass_matrix
    np.testing.assert_allclose(product.toarray(), np.eye(12), atol=1e-9)


def test_total_translational_mass():
    """Summing the ux-ux block of M gives rho·A·L for each element."""
    mesh = make_chain()
    M = mesh.mass_matrix.toarray()
    ux = list(range(0, 24, 6))

    assert M[np.ix_(ux, ux)].sum() == pytest.approx(3.0)


def test_mesh_reports_sizes():
    mesh = make_chain()

    assert mesh.ndof == 24
    assert len(mesh.nodes) == 4
    assert len(mesh.elements) == 3
    assert mesh.bcs == ()


class TestBoundaryConditions:

    BCS = (ConstantBC(0, 0, 0.0, BCType.DISPLACEMENT), ConstantBC(1, 4, 0.0, BCType.DISPLACEMENT))

    def test_constrained_rows_and_columns_hold_unit_diagonal(self):
        mesh = make_chain(bcs=self.BCS)
        Minv = mesh.inv_mass_matrix.toarray()

        assert Minv.shape[0] == Minv.shape[1]
        assert mesh.constrained_dofs == [0, 10]
        for i in mesh.constrained_dofs:
            for j in range(mesh.ndof):
                expected = 1.0 if i == j else 0.0
                assert Minv[i, j] == expected
                assert Minv[j, i] == expected

    def test_other_entries_are_untouched(self):
        free_mesh = make_chain()
        mesh = make_chain(bcs=self.BCS)
        free = [i for i in range(24) if i not in (0, 10)]

        np.testing.assert_array_equal(
            mesh.inv_mass_matrix.toarray()[np.ix_(free, free)],
            free_mesh.inv_mass_matrix.toarray()[np.ix_(free, free)],
        )

    def test_stiffness_and_mass_are_not_eliminated(self):
        free_mesh = make_chain()
        mesh = make_chain(bcs=self.BCS)

        np.testing.assert_array_equal(mesh.stiffness_matrix.toarray(),
                                      free_mesh.stiffness_matrix.toarray())
        np.testing.assert_array_equal(mesh.mass_matrix.toarray(),
                                      free_mesh.mass_matrix.toarray())

    def test_elimination_is_idempotent(self):
        mesh = make_chain(bcs=self.BCS)
        again = eliminate_constrained_dofs(mesh.inv_mass_matrix, mesh.constrained_dofs)

        np.testing.assert_array_equal(again.toarray(), mesh.inv_mass_matrix.toarray())

    def test_velocity_bc_is_eliminated_too(self):
        mesh = make_chain(bcs=[ConstantBC(3, 2, 0.5, BCType.VELOCITY)])
        Minv = mesh.inv_mass_matrix.toarray()

        assert Minv[20, 20] == 1.0
        assert np.count_nonzero(Minv[20, :]) == 1
