# explicit_frame/v3d/loads.py
"""
PRESCRIBED VALUES: Boundary Conditions and Nodal Forces
=======================================================

A prescribed value binds a scalar, possibly time-dependent, to one global
DOF. Two kinds exist:

- ConstantBC: fixes a displacement or a velocity
- ConstantForce: applies an external nodal force/moment

Both expose value_at(time) so time-varying variants can be added
alongside without touching the engine.

BC TYPES:
---------
DISPLACEMENT: u[i] = value and v[i] = 0 every step
VELOCITY:     v[i] = value every step; u[i] is integrated from it
"""

from dataclasses import dataclass
from enum import IntEnum

from ..kernel.dof import DOF_3D_FRAME, NUM_DOFS


class BCType(IntEnum):
    """Kind of boundary condition (integer codes match the CSV input)."""
    DISPLACEMENT = 0
    VELOCITY = 1


@dataclass(frozen=True)
class ConstantBC:
    """
    Constant boundary condition on one nodal DOF.

    Parameters:
    -----------
    node : int
        Node index
    dof : int
        Local DOF (0..5, see kernel.dof.DOF)
    value : float
        Prescribed displacement or velocity
    type : BCType
        DISPLACEMENT or VELOCITY
    """
    node: int
    dof: int
    value: float
    type: BCType = BCType.DISPLACEMENT

    def __post_init__(self):
        _check_dof(self.dof)
        object.__setattr__(self, 'type', BCType(self.type))

    @property
    def global_index(self) -> int:
        return DOF_3D_FRAME.idx(self.node, self.dof)

    def value_at(self, time: float) -> float:
        return self.value


@dataclass(frozen=True)
class ConstantForce:
    """Constant external force (or moment) on one nodal DOF."""
    node: int
    dof: int
    value: float

    def __post_init__(self):
        _check_dof(self.dof)

    @property
    def global_index(self) -> int:
        return DOF_3D_FRAME.idx(self.node, self.dof)

    def value_at(self, time: float) -> float:
        return self.value


def _check_dof(dof: int) -> None:
    if not 0 <= int(dof) < NUM_DOFS:
        raise ValueError(f"dof must be in [0, {NUM_DOFS}), got {dof}")


def fixed_node_bcs(node: int) -> list:
    """Zero-displacement BCs on all six DOFs of a node (a clamped support)."""
    return [ConstantBC(node, dof, 0.0, BCType.DISPLACEMENT) for dof in range(NUM_DOFS)]
