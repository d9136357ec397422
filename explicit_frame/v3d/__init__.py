# explicit_frame/v3d - 3D Beam Dynamics
"""
V3D: 3D BEAM ELEMENTS AND EXPLICIT DYNAMICS
===========================================

This package provides:
- Node3D, Props, Beam3D: model records (Euler-Bernoulli or Timoshenko)
- ConstantBC, ConstantForce: prescribed values on single DOFs
- beam3d_global_stiffness / beam3d_global_inv_mass: 12×12 element matrices
- Mesh: global sparse K, M, M^-1
- ExplicitSystem: Newmark-beta stepping with Rayleigh damping

USAGE:
------
    from explicit_frame.v3d import (
        Node3D, Props, Beam3D, ConstantBC, BCType, Mesh, ExplicitSystem,
        estimate_stable_timestep,
    )

    nodes = [Node3D(0.0, 0.0, 0.0), Node3D(1.0, 0.0, 0.0)]
    steel = Props(E=200e9, G=80e9, A=0.01, Iz=1e-5, Iy=1e-5, J=2e-5, density=7800)
    mesh = Mesh(nodes, [Beam3D(0, 1, steel)], fixed_node_bcs(0))

    system = ExplicitSystem(mesh, [], np.zeros(mesh.ndof), np.zeros(mesh.ndof))
    system.update(estimate_stable_timestep(nodes, mesh.elements))
"""

from .model import Node3D, Props, Beam3D, BeamTheory
from .loads import BCType, ConstantBC, ConstantForce, fixed_node_bcs
from .elements import (
    element_length,
    rotation_matrix_3d,
    beam3d_global_stiffness,
    beam3d_global_inv_mass,
    estimate_stable_timestep,
)
from .mesh import Mesh
from .explicit import ExplicitSystem, NewmarkOptions, SizeMismatchError

__all__ = [
    'Node3D', 'Props', 'Beam3D', 'BeamTheory',
    'BCType', 'ConstantBC', 'ConstantForce', 'fixed_node_bcs',
    'element_length', 'rotation_matrix_3d',
    'beam3d_global_stiffness', 'beam3d_global_inv_mass', 'estimate_stable_timestep',
    'Mesh', 'ExplicitSystem', 'NewmarkOptions', 'SizeMismatchError',
]
