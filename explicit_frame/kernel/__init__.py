# explicit_frame/kernel - Element-agnostic analysis core
"""
KERNEL: THE ELEMENT-AGNOSTIC FOUNDATION
=======================================

This package contains the plumbing shared by every element formulation:
- A way to map (node_id, local_dof) → global_dof_index
- Sparse scatter-add assembly and boundary-condition elimination
- A cached sparse LU factorization
- Tolerant floating point comparison

The ELEMENT implementations (Euler-Bernoulli, Timoshenko) live in v3d/,
but the kernel plumbing is universal.
"""

from .dof import DOF, NUM_DOFS, DOFManager, DOF_3D_FRAME
from .compare import ValueCompare
from .assemble import assemble_global_sparse, prune_sparse, eliminate_constrained_dofs
from .solve import LinearSolver, SolveError

__all__ = [
    'DOF', 'NUM_DOFS', 'DOFManager', 'DOF_3D_FRAME',
    'ValueCompare',
    'assemble_global_sparse', 'prune_sparse', 'eliminate_constrained_dofs',
    'LinearSolver', 'SolveError',
]
