# explicit_frame/kernel/dof.py
"""
DOF MANAGER: Global Degree of Freedom Indexing for 3D Frames
============================================================

PURPOSE:
--------
This module handles the mapping from (node_id, local_dof) to global DOF indices.
Every row/column of the global matrices, every boundary condition and every
external force is addressed through this one piece of arithmetic:

    global_index = NUM_DOFS * node_id + dof

A 3D frame node carries six DOFs, always in this order:

    0: ux   1: uy   2: uz   3: rx   4: ry   5: rz

USAGE:
------
    dof = DOFManager(dof_per_node=NUM_DOFS)

    # Node 2, rotation about y
    global_idx = dof.idx(node_id=2, local_dof=DOF.ROTATION_Y)  # → 16

    # Scatter map of a 2-node beam element
    dof_map = dof.element_dof_map([ni, nj])  # 12 indices
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List


class DOF(IntEnum):
    """The six nodal degrees of freedom of a 3D frame, in storage order."""
    DISPLACEMENT_X = 0
    DISPLACEMENT_Y = 1
    DISPLACEMENT_Z = 2
    ROTATION_X = 3
    ROTATION_Y = 4
    ROTATION_Z = 5


NUM_DOFS = len(DOF)


@dataclass(frozen=True)
class DOFManager:
    """
    Manages degree-of-freedom indexing for structural analysis.

    This is the bridge between "node 5, y-rotation" and "global DOF index 34".

    Attributes:
    -----------
    dof_per_node : int
        Number of DOFs per node (6 for a 3D frame)

    Examples:
    ---------
    >>> dof = DOFManager(dof_per_node=6)
    >>> dof.idx(1, 0)  # Node 1, ux
    6
    >>> dof.ndof(4)    # Total DOFs for 4 nodes
    24
    """
    dof_per_node: int

    def idx(self, node_id: int, local_dof: int) -> int:
        """Global DOF index of a node's local DOF."""
        return self.dof_per_node * node_id + int(local_dof)

    def ndof(self, n_nodes: int) -> int:
        """Total DOFs (size of K) for a system with n_nodes."""
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_id: int) -> List[int]:
        """
        Get all global DOF indices for a single node.

        Examples:
        ---------
        >>> DOFManager(dof_per_node=6).node_dofs(1)
        [6, 7, 8, 9, 10, 11]
        """
        base = self.dof_per_node * node_id
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_ids: List[int]) -> List[int]:
        """
        Get the DOF map for an element connecting multiple nodes.

        Local rows/columns [0, dof_per_node) belong to the first node,
        the next block to the second node, and so on.

        Parameters:
        -----------
        node_ids : List[int]
            Node IDs that the element connects (e.g., [ni, nj])

        Returns:
        --------
        List[int]
            Flattened list of global DOF indices for the element
        """
        result = []
        for node_id in node_ids:
            result.extend(self.node_dofs(node_id))
        return result


# Pre-configured manager: ux, uy, uz, rx, ry, rz
DOF_3D_FRAME = DOFManager(dof_per_node=NUM_DOFS)
