# explicit_frame/v3d/elements.py
"""
3D BEAM ELEMENTS: Closed-Form Stiffness and Inverse Mass Matrices
=================================================================

PURPOSE:
--------
This module computes the 12×12 matrices of a 2-node 3D beam element in
GLOBAL coordinates, for two beam theories:

- Euler-Bernoulli: cubic shape functions, shear-rigid sections
- Timoshenko: shear-deformable, one shear parameter per bending plane

        phi = 12·E·I / (G·A·L²)

  As phi → 0 (G → ∞ or A → ∞) Timoshenko reduces to Euler-Bernoulli.

LOCAL DOF ORDER:
----------------
    node i: 0 ux  1 uy  2 uz  3 rx  4 ry  5 rz
    node j: 6 ux  7 uy  8 uz  9 rx 10 ry 11 rz

    axial:        (0, 6)            EA/L
    torsion:      (3, 9)            GJ/L
    x-y bending:  (1, 5, 7, 11)     E·Iz
    x-z bending:  (2, 4, 8, 10)     E·Iy

INVERSE MASS:
-------------
The explicit solver works with the closed-form INVERSE of the consistent
mass matrix. The mesh recovers the element mass by inverting the 12×12
block, which is always regular for a positive mass m = ρ·A·L.

TRANSFORMATION:
---------------
    lam = [x; y; z]                  (3×3 direction cosines)
    R   = blockdiag(lam, lam, lam, lam)
    ke_global = Rᵀ · ke_local · R
"""

from typing import Sequence, Tuple

import numpy as np

from .model import Beam3D, BeamTheory, Node3D, Props

_Z_PLANE = (1, 5, 7, 11)
_Y_PLANE = (2, 4, 8, 10)


def element_length(nodes: Sequence[Node3D], element: Beam3D) -> float:
    """
    Length of a beam element.

    Raises:
    -------
    ValueError
        If the element has zero length (coincident nodes)
    """
    dn = nodes[element.ni].as_array() - nodes[element.nj].as_array()
    L = float(np.linalg.norm(dn))
    if L == 0.0:
        raise ValueError(f"Element {element.ni}-{element.nj} has zero length")
    return L


def rotation_matrix_3d(
    xi: np.ndarray,
    xj: np.ndarray,
    normal: Sequence[float],
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the 12×12 local-to-global transform of a beam element.

    Parameters:
    -----------
    xi, xj : np.ndarray
        Coordinates of the first and second node
    normal : Sequence[float]
        Orientation of the local y-axis; must not be parallel to xj - xi

    Returns:
    --------
    Tuple[np.ndarray, np.ndarray]
        (R, R.T). R maps global DOFs to local DOFs.
    """
    ex = np.asarray(xj, dtype=float) - np.asarray(xi, dtype=float)
    ex /= np.linalg.norm(ex)

    ey = np.asarray(normal, dtype=float)
    ey = ey / np.linalg.norm(ey)

    ez = np.cross(ex, ey)
    ez /= np.linalg.norm(ez)

    lam = np.vstack([ex, ey, ez])
    R = np.kron(np.eye(4), lam)
    return R, R.T


def _symmetric(upper: np.ndarray) -> np.ndarray:
    return upper + upper.T - np.diag(np.diag(upper))


def _fill_bending_stiffness(k, plane, c12, c6, c4, c2, sign):
    t1, r1, t2, r2 = plane
    k[t1, t1] = c12
    k[t1, r1] = sign * c6
    k[t1, t2] = -c12
    k[t1, r2] = sign * c6
    k[r1, r1] = c4
    k[r1, t2] = -sign * c6
    k[r1, r2] = c2
    k[t2, t2] = c12
    k[t2, r2] = -sign * c6
    k[r2, r2] = c4


def _fill_bending_inv_mass(m, plane, d, e, f, g, h, k):
    t1, r1, t2, r2 = plane
    m[t1, t1] = d
    m[t1, r1] = -e
    m[t1, t2] = -f
    m[t1, r2] = -g
    m[r1, r1] = h
    m[r1, t2] = g
    m[r1, r2] = k
    m[t2, t2] = d
    m[t2, r2] = e
    m[r2, r2] = h


def _fill_axial_torsion(k, axial, torsion):
    for (a, b), value in (((0, 6), axial), ((3, 9), torsion)):
        k[a, a] = value[0]
        k[a, b] = value[1]
        k[b, b] = value[0]


def shear_parameters(L: float, props: Props) -> Tuple[float, float]:
    """Timoshenko shear parameters (phi_y, phi_z) for an element of length L."""
    GAL2 = props.G * props.A * L * L
    return 12.0 * props.E * props.Iy / GAL2, 12.0 * props.E * props.Iz / GAL2


def timoshenko_local_stiffness(L: float, props: Props) -> np.ndarray:
    """
    Local 12×12 Timoshenko stiffness.

    Per bending plane with EI and phi:
        12EI/(L³(1+phi)), 6EI/(L²(1+phi)),
        EI(4+phi)/(L(1+phi)), EI(2-phi)/(L(1+phi))
    """
    phi_y, phi_z = shear_parameters(L, props)
    return _local_stiffness(L, props, phi_y, phi_z)


def euler_bernoulli_local_stiffness(L: float, props: Props) -> np.ndarray:
    """Local 12×12 Euler-Bernoulli stiffness (Timoshenko with phi = 0)."""
    return _local_stiffness(L, props, 0.0, 0.0)


def _local_stiffness(L: float, props: Props, phi_y: float, phi_z: float) -> np.ndarray:
    k = np.zeros((12, 12))

    EA_L = props.E * props.A / L
    GJ_L = props.G * props.J / L
    _fill_axial_torsion(k, (EA_L, -EA_L), (GJ_L, -GJ_L))

    # x-y plane bends about local z; x-z plane about local y with flipped coupling
    for plane, EI, phi, sign in ((_Z_PLANE, props.E * props.Iz, phi_z, 1.0),
                                 (_Y_PLANE, props.E * props.Iy, phi_y, -1.0)):
        c12 = 12.0 * EI / (L ** 3 * (1.0 + phi))
        c6 = 6.0 * EI / (L ** 2 * (1.0 + phi))
        c4 = EI * (4.0 + phi) / (L * (1.0 + phi))
        c2 = EI * (2.0 - phi) / (L * (1.0 + phi))
        _fill_bending_stiffness(k, plane, c12, c6, c4, c2, sign)

    return _symmetric(k)


def euler_bernoulli_local_inv_mass(L: float, props: Props) -> np.ndarray:
    """
    Local 12×12 inverse of the Euler-Bernoulli consistent mass matrix.

    With m = ρ·A·L the bending coefficients are
    16/m, 120/(mL), 4/m, 60/(mL), 1200/(mL²), 840/(mL²).
    """
    m = props.density * props.A * L
    inv = np.zeros((12, 12))
    _fill_axial_torsion(inv, (4.0 / m, -2.0 / m), (4.0 / m, -2.0 / m))

    coeffs = (16.0 / m, 120.0 / (m * L), 4.0 / m, 60.0 / (m * L),
              1200.0 / (m * L * L), 840.0 / (m * L * L))
    _fill_bending_inv_mass(inv, _Z_PLANE, *coeffs)
    _fill_bending_inv_mass(inv, _Y_PLANE, *coeffs)

    return _symmetric(inv)


def _timoshenko_inv_mass_coefficients(L: float, m: float, phi: float):
    p1 = 6.0 + phi * (12.0 + phi)
    p2 = 2.0 + phi * (4.0 + 3.0 * phi)
    d1 = m * p1 * p2
    inv_d2 = 1.0 / (L ** 2 * m * (1.0 + phi) ** 2 * p1 * p2)

    d = 192.0 * (1.0 + phi) ** 2 / d1
    e = 60.0 * (24.0 + phi * (62.0 + 7.0 * phi * (8.0 + 3.0 * phi))) / (L * d1)
    f = 24.0 * (2.0 + phi * (4.0 + 7.0 * phi)) / d1
    g = 60.0 * (12.0 + phi * (38.0 + 3.0 * phi * (18.0 + 7.0 * phi))) / (L * d1)
    h = 30.0 * (480.0 + phi * (2592.0 + phi * (5928.0 + phi * (7428.0 + phi * (
        5350.0 + 21.0 * phi * (98.0 + 15.0 * phi)))))) * inv_d2
    k = 30.0 * (336.0 + phi * (2016.0 + phi * (5172.0 + phi * (7068.0 + phi * (
        5324.0 + 21.0 * phi * (98.0 + 15.0 * phi)))))) * inv_d2
    return d, e, f, g, h, k


def timoshenko_local_inv_mass(L: float, props: Props) -> np.ndarray:
    """Local 12×12 inverse of the Timoshenko consistent mass matrix."""
    m = props.density * props.A * L
    phi_y, phi_z = shear_parameters(L, props)

    inv = np.zeros((12, 12))
    _fill_axial_torsion(inv, (4.0 / m, -2.0 / m), (4.0 / m, -2.0 / m))
    _fill_bending_inv_mass(inv, _Z_PLANE, *_timoshenko_inv_mass_coefficients(L, m, phi_z))
    _fill_bending_inv_mass(inv, _Y_PLANE, *_timoshenko_inv_mass_coefficients(L, m, phi_y))

    return _symmetric(inv)


def _to_global(nodes: Sequence[Node3D], element: Beam3D, local: np.ndarray) -> np.ndarray:
    R, RT = rotation_matrix_3d(nodes[element.ni].as_array(),
                               nodes[element.nj].as_array(),
                               element.props.normal)
    return RT @ local @ R


def beam3d_local_stiffness(nodes: Sequence[Node3D], element: Beam3D) -> np.ndarray:
    """Unrotated 12×12 stiffness of an element, chosen by its beam theory."""
    L = element_length(nodes, element)
    if element.theory is BeamTheory.EULER_BERNOULLI:
        return euler_bernoulli_local_stiffness(L, element.props)
    elif element.theory is BeamTheory.TIMOSHENKO:
        return timoshenko_local_stiffness(L, element.props)
    raise ValueError(f"Unknown beam theory: {element.theory!r}")


def beam3d_local_inv_mass(nodes: Sequence[Node3D], element: Beam3D) -> np.ndarray:
    """Unrotated 12×12 inverse mass of an element, chosen by its beam theory."""
    L = element_length(nodes, element)
    if element.theory is BeamTheory.EULER_BERNOULLI:
        return euler_bernoulli_local_inv_mass(L, element.props)
    elif element.theory is BeamTheory.TIMOSHENKO:
        return timoshenko_local_inv_mass(L, element.props)
    raise ValueError(f"Unknown beam theory: {element.theory!r}")


def beam3d_global_stiffness(nodes: Sequence[Node3D], element: Beam3D) -> np.ndarray:
    """
    Compute the 12×12 stiffness matrix of a 3D beam in global coordinates.

    Parameters:
    -----------
    nodes : Sequence[Node3D]
        All nodes of the model, indexed by node id
    element : Beam3D
        The beam element

    Returns:
    --------
    np.ndarray
        Symmetric 12×12 matrix, ready for assembly with
        DOF_3D_FRAME.element_dof_map([element.ni, element.nj])
    """
    return _to_global(nodes, element, beam3d_local_stiffness(nodes, element))


def beam3d_global_inv_mass(nodes: Sequence[Node3D], element: Beam3D) -> np.ndarray:
    """Compute the 12×12 inverse mass matrix of a 3D beam in global coordinates."""
    return _to_global(nodes, element, beam3d_local_inv_mass(nodes, element))


def estimate_stable_timestep(nodes: Sequence[Node3D], elements: Sequence[Beam3D]) -> float:
    """
    Conservative time step for explicit integration.

    For each element the axial wave needs L / sqrt(E/ρ) to cross it;
    the estimate is one tenth of the shortest crossing time.

    Raises:
    -------
    ValueError
        If elements is empty
    """
    if len(elements) == 0:
        raise ValueError("Cannot estimate a stable time step without elements")

    transit = min(
        element_length(nodes, e) / np.sqrt(e.props.E / e.props.density)
        for e in elements
    )
    return float(transit) / 10.0
