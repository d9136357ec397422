# explicit_frame/kernel/solve.py
"""Sparse LU factorization cache and solve with failure detection."""

import logging

import numpy as np
from scipy import sparse
from scipy.sparse.linalg import splu

logger = logging.getLogger(__name__)


class SolveError(RuntimeError):
    """Raised when a factorization or linear solve fails."""
    pass


class LinearSolver:
    """
    Holds the LU factorization of one sparse matrix for repeated solves.

    Call compute() whenever the matrix changes; solve() reuses the last
    factorization.

    Example:
        >>> solver = LinearSolver()
        >>> solver.compute(LHS)
        >>> a1 = solver.solve(RHS)
    """

    def __init__(self):
        self._lu = None
        self.n_factorizations = 0

    @property
    def is_factorized(self) -> bool:
        return self._lu is not None

    def compute(self, A) -> None:
        """
        Factorize A (any scipy sparse format, converted to CSC).

        Raises:
            SolveError: If A is not square or is singular
        """
        if A.shape[0] != A.shape[1]:
            raise SolveError(f"Cannot factorize non-square matrix of shape {A.shape}")

        self._lu = None
        try:
            self._lu = splu(sparse.csc_matrix(A))
        except RuntimeError as exc:
            raise SolveError(f"Sparse LU factorization failed: {exc}") from exc

        self.n_factorizations += 1
        logger.debug("Factorized %dx%d matrix (nnz=%d)", A.shape[0], A.shape[1], A.nnz)

    def solve(self, b: np.ndarray) -> np.ndarray:
        """
        Solve A·x = b with the cached factorization.

        Raises:
            SolveError: If nothing has been factorized or x is not finite
        """
        if self._lu is None:
            raise SolveError("solve() called before compute()")

        x = self._lu.solve(np.asarray(b, dtype=float))
        if not np.all(np.isfinite(x)):
            raise SolveError("Linear solve produced non-finite values")
        return x
