# explicit_frame/v3d/mesh.py
"""
MESH: Global Stiffness, Mass and Inverse Mass of a 3D Frame
===========================================================

PURPOSE:
--------
A Mesh owns the nodes, beam elements and boundary conditions of a model
and assembles three global sparse matrices once, at construction:

    K      stiffness
    M      consistent mass (each element block = inv(element inverse mass))
    M^-1   inverse mass, with BC rows/columns replaced by a unit diagonal

The matrices are not modified afterwards and callers must treat them as
read-only. Node and DOF bounds are caller preconditions and are not
checked here.

USAGE:
------
    mesh = Mesh(nodes, elements, bcs)
    K = mesh.stiffness_matrix
    mesh.ndof   # 6 × len(nodes)
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from ..kernel.assemble import assemble_global_sparse, eliminate_constrained_dofs
from ..kernel.dof import DOF_3D_FRAME
from .elements import beam3d_global_inv_mass, beam3d_global_stiffness
from .loads import ConstantBC
from .model import Beam3D, Node3D

logger = logging.getLogger(__name__)


class Mesh:
    """
    Assembled finite element mesh of 3D beams.

    Parameters:
    -----------
    nodes : Sequence[Node3D]
        Node coordinates; a node's position is its id
    elements : Sequence[Beam3D]
        Beam elements
    bcs : Sequence[ConstantBC]
        Boundary conditions; eliminated from the inverse mass matrix only
    """

    def __init__(
        self,
        nodes: Sequence[Node3D],
        elements: Sequence[Beam3D],
        bcs: Sequence[ConstantBC] = (),
    ):
        self._nodes = tuple(nodes)
        self._elements = tuple(elements)
        self._bcs = tuple(bcs)
        self._ndof = DOF_3D_FRAME.ndof(len(self._nodes))

        k_contrib, m_contrib, minv_contrib = [], [], []
        for element in self._elements:
            dof_map = DOF_3D_FRAME.element_dof_map([element.ni, element.nj])
            ke = beam3d_global_stiffness(self._nodes, element)
            me_inv = beam3d_global_inv_mass(self._nodes, element)

            k_contrib.append((dof_map, ke))
            minv_contrib.append((dof_map, me_inv))
            m_contrib.append((dof_map, np.linalg.inv(me_inv)))

        self._K = assemble_global_sparse(self._ndof, k_contrib)
        self._M = assemble_global_sparse(self._ndof, m_contrib)

        minv = assemble_global_sparse(self._ndof, minv_contrib)
        self._Minv = eliminate_constrained_dofs(minv, self.constrained_dofs)

        logger.debug(
            "Assembled mesh: %d nodes, %d elements, %d BCs; nnz K=%d M=%d Minv=%d",
            len(self._nodes), len(self._elements), len(self._bcs),
            self._K.nnz, self._M.nnz, self._Minv.nnz,
        )

    @property
    def nodes(self) -> Tuple[Node3D, ...]:
        return self._nodes

    @property
    def elements(self) -> Tuple[Beam3D, ...]:
        return self._elements

    @property
    def bcs(self) -> Tuple[ConstantBC, ...]:
        return self._bcs

    @property
    def ndof(self) -> int:
        return self._ndof

    @property
    def constrained_dofs(self) -> list:
        """Sorted global indices that carry at least one BC."""
        return sorted({bc.global_index for bc in self._bcs})

    @property
    def stiffness_matrix(self):
        return self._K

    @property
    def mass_matrix(self):
        return self._M

    @property
    def inv_mass_matrix(self):
        return self._Minv
