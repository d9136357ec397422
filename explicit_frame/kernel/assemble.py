# explicit_frame/kernel/assemble.py
"""
ASSEMBLY: Sparse Global Matrix Assembly
=======================================

PURPOSE:
--------
This module handles the assembly of element contributions into global
sparse matrices. This is the scatter-add operation that builds K, M and
M^-1 from 12×12 element blocks.

Assembly doesn't care about element TYPE. It just needs:
- Total number of DOFs
- For each element: its DOF map and its matrix in global coordinates

Contributions are collected as (row, col, value) triplets and converted
to CSR in one pass. Duplicate positions are summed during conversion,
which is exactly the superposition of elements meeting at a shared node.

USAGE:
------
    contributions = []
    for element in elements:
        dof_map = DOF_3D_FRAME.element_dof_map([element.ni, element.nj])
        ke = beam3d_global_stiffness(nodes, element)
        contributions.append((dof_map, ke))

    K = assemble_global_sparse(ndof, contributions)

BOUNDARY CONDITIONS:
--------------------
eliminate_constrained_dofs() rewrites every constrained row and column so
that it holds only a unit diagonal. Applying it twice gives the same
matrix as applying it once.
"""

from typing import Iterable, List, Tuple

import numpy as np
from scipy import sparse

PRUNE_TOLERANCE = 1e-14


def assemble_global_sparse(
    ndof: int,
    contributions: Iterable[Tuple[List[int], np.ndarray]],
    tol: float = PRUNE_TOLERANCE,
) -> sparse.csr_matrix:
    """
    Assemble a global sparse matrix from element contributions.

    ALGORITHM:
    ----------
    rows, cols, vals = [], [], []
    for each element:
        for each (a, b) in element block:
            rows += dof_map[a]; cols += dof_map[b]; vals += ke[a, b]
    K = coo(vals, (rows, cols)).tocsr()   # duplicates summed
    prune |K_ij| < tol

    Parameters:
    -----------
    ndof : int
        Total number of DOFs in the system (6 × n_nodes)

    contributions : Iterable[Tuple[List[int], np.ndarray]]
        (dof_map, ke) per element; ke must be (len(dof_map), len(dof_map))

    tol : float
        Absolute pruning threshold applied after summation

    Returns:
    --------
    scipy.sparse.csr_matrix
        Global matrix, shape (ndof, ndof)
    """
    rows, cols, vals = [], [], []

    for dof_map, ke in contributions:
        dof_map = np.asarray(dof_map, dtype=int)
        n_element_dofs = len(dof_map)

        assert ke.shape == (n_element_dofs, n_element_dofs), \
            f"Element matrix shape {ke.shape} doesn't match dof_map length {n_element_dofs}"

        rows.append(np.repeat(dof_map, n_element_dofs))
        cols.append(np.tile(dof_map, n_element_dofs))
        vals.append(np.asarray(ke, dtype=float).ravel())

    if rows:
        rows = np.concatenate(rows)
        cols = np.concatenate(cols)
        vals = np.concatenate(vals)
    else:
        rows = cols = np.zeros(0, dtype=int)
        vals = np.zeros(0, dtype=float)

    K = sparse.coo_matrix((vals, (rows, cols)), shape=(ndof, ndof)).tocsr()
    return prune_sparse(K, tol)


def prune_sparse(mat, tol: float = PRUNE_TOLERANCE) -> sparse.csr_matrix:
    """
    Drop stored entries with |value| < tol and compact storage.

    Returns a new CSR matrix; the input is not modified.
    """
    out = sparse.csr_matrix(mat, dtype=float, copy=True)
    out.data[np.abs(out.data) < tol] = 0.0
    out.eliminate_zeros()
    out.sort_indices()
    return out


def eliminate_constrained_dofs(mat, constrained: Iterable[int]) -> sparse.csr_matrix:
    """
    Replace constrained rows/columns with a unit diagonal.

    Every stored entry whose row OR column is constrained is removed, then
    1.0 is placed at (i, i) for each constrained index i. All other
    entries are left untouched.

    Parameters:
    -----------
    mat : sparse matrix
        Square matrix (typically the inverse mass matrix)

    constrained : Iterable[int]
        Global DOF indices to eliminate (duplicates allowed)

    Returns:
    --------
    scipy.sparse.csr_matrix
        New matrix with the constrained DOFs eliminated
    """
    idx = np.unique(np.asarray(list(constrained), dtype=int))
    coo = sparse.coo_matrix(mat)

    if idx.size == 0:
        return prune_sparse(coo.tocsr(), tol=0.0)

    keep = ~(np.isin(coo.row, idx) | np.isin(coo.col, idx))

    rows = np.concatenate([coo.row[keep], idx])
    cols = np.concatenate([coo.col[keep], idx])
    vals = np.concatenate([coo.data[keep], np.ones(idx.size)])

    out = sparse.coo_matrix((vals, (rows, cols)), shape=coo.shape).tocsr()
    out.sum_duplicates()
    out.sort_indices()
    return out
