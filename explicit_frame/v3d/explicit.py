# explicit_frame/v3d/explicit.py
"""
EXPLICIT DYNAMICS: Newmark-beta Time Integration of a Beam Mesh
===============================================================

PURPOSE:
--------
ExplicitSystem advances the semi-discrete equations of motion

    M·a + C·v + K·u = F(t)

one step at a time with the Newmark-beta family, solving for the new
acceleration and predicting displacement/velocity from it.

ALGORITHM (one call to update(dt)):
-----------------------------------
1. If dt changed: LHS = M + γ·dt·C + β·dt²·K, refactorize
2. Write each listed force at t1 = t0 + dt into F (unlisted entries keep
   their previous value)
3. RHS = F - C·(v0 + (1-γ)·dt·a0) - K·(u0 + dt·v0 + (0.5-β)·dt²·a0)
4. Apply BCs at t1:  RHS[i] = 0, then
       DISPLACEMENT: u0[i] = value, v0[i] = 0
       VELOCITY:     v0[i] = value
5. Solve LHS·a1 = RHS
6. v1 = v0 + (1-γ)·dt·a0 + γ·dt·a1
   u1 = u0 + dt·v0 + dt²·(0.5-β)·a0 + dt²·β·a1

DAMPING:
--------
Rayleigh (proportional) damping, built once:  C = α·M + β_d·K

STABILITY:
----------
The engine does not limit dt. Use estimate_stable_timestep() from
v3d.elements to pick a step.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..kernel.assemble import prune_sparse
from ..kernel.compare import ValueCompare
from ..kernel.solve import LinearSolver
from .loads import BCType, ConstantForce
from .mesh import Mesh

logger = logging.getLogger(__name__)


class SizeMismatchError(ValueError):
    """Raised when initial state vectors do not fit the mesh."""
    pass


@dataclass
class NewmarkOptions:
    """
    Integration and damping parameters.

    Attributes:
        beta: Newmark β (displacement weight of the new acceleration)
        gamma: Newmark γ (velocity weight of the new acceleration)
        damping_alpha: Mass-proportional Rayleigh coefficient
        damping_beta: Stiffness-proportional Rayleigh coefficient
    """
    beta: float = 0.25
    gamma: float = 0.5
    damping_alpha: float = 0.01
    damping_beta: float = 0.01


class ExplicitSystem:
    """
    Stateful Newmark-beta integrator over a Mesh.

    The system takes exclusive ownership of the mesh and force list; state
    vectors handed back by the query properties are copies.

    Args:
        mesh: Assembled mesh (its BCs are enforced every step)
        external_forces: Nodal forces applied at each step
        initial_displacements: u at t0, length mesh.ndof
        initial_velocities: v at t0, length mesh.ndof
        t0: Start time
        options: Newmark and damping parameters

    Raises:
        SizeMismatchError: If the initial vectors differ in length from
            each other or from mesh.ndof

    Example:
        >>> system = ExplicitSystem(mesh, forces, u0, v0)
        >>> dt = estimate_stable_timestep(mesh.nodes, mesh.elements)
        >>> for _ in range(1000):
        ...     system.update(dt)
        >>> system.displacements
    """

    def __init__(
        self,
        mesh: Mesh,
        external_forces: Sequence[ConstantForce],
        initial_displacements,
        initial_velocities,
        t0: float = 0.0,
        options: Optional[NewmarkOptions] = None,
    ):
        u0 = np.array(initial_displacements, dtype=float).ravel()
        v0 = np.array(initial_velocities, dtype=float).ravel()

        if u0.size != v0.size:
            raise SizeMismatchError(
                f"Size of initial velocities ({v0.size}) and initial "
                f"displacements ({u0.size}) are not equal."
            )
        if u0.size != mesh.ndof:
            raise SizeMismatchError(
                f"Size of displacements and velocities ({u0.size}) does not match "
                f"the number of columns in the global matrices ({mesh.ndof})."
            )

        self._mesh = mesh
        self._forces = tuple(external_forces)
        self._options = options if options is not None else NewmarkOptions()
        self._compare = ValueCompare()
        self._solver = LinearSolver()

        self._u = u0
        self._v = v0
        self._a = np.zeros_like(u0)
        self._F = np.zeros_like(u0)
        self._t = float(t0)
        self._dt = None
        self._lhs = None

        opts = self._options
        self._C = prune_sparse(
            opts.damping_alpha * mesh.mass_matrix + opts.damping_beta * mesh.stiffness_matrix
        )

        self._apply_bcs(self._t)

    # -- queries ---------------------------------------------------------

    @property
    def mesh(self) -> Mesh:
        return self._mesh

    @property
    def options(self) -> NewmarkOptions:
        return self._options

    @property
    def time(self) -> float:
        return self._t

    @property
    def time_step(self) -> Optional[float]:
        """Last step size used, or None before the first update."""
        return self._dt

    @property
    def displacements(self) -> np.ndarray:
        return self._u.copy()

    @property
    def velocities(self) -> np.ndarray:
        return self._v.copy()

    @property
    def accelerations(self) -> np.ndarray:
        return self._a.copy()

    @property
    def forces(self) -> np.ndarray:
        """Internal plus inertial nodal forces K·u + M·a (reactions at supports)."""
        return self._mesh.stiffness_matrix @ self._u + self._mesh.mass_matrix @ self._a

    @property
    def damping_matrix(self):
        return self._C

    @property
    def lhs_matrix(self):
        """Current left-hand side, or None before the first update."""
        return self._lhs

    @property
    def n_factorizations(self) -> int:
        return self._solver.n_factorizations

    # -- stepping --------------------------------------------------------

    def update(self, dt: float) -> None:
        """
        Advance the state by one time step.

        Raises:
            ValueError: If dt is not a positive finite number
            SolveError: If the LHS is singular or the solve is not finite
        """
        dt = float(dt)
        if not np.isfinite(dt) or dt <= 0.0:
            raise ValueError(f"Time step must be positive and finite, got {dt}")

        if self._dt is None or not self._compare.equal(dt, self._dt):
            self._assemble_lhs(dt)

        beta = self._options.beta
        gamma = self._options.gamma
        K = self._mesh.stiffness_matrix
        t1 = self._t + dt

        for force in self._forces:
            self._F[force.global_index] = force.value_at(t1)

        u0, v0, a0 = self._u, self._v, self._a
        rhs = self._F.copy()
        rhs -= self._C @ (v0 + (1.0 - gamma) * dt * a0)
        rhs -= K @ (u0 + dt * v0 + (0.5 - beta) * dt * dt * a0)

        self._apply_bcs(t1, rhs)

        a1 = self._solver.solve(rhs)

        v1 = v0 + (1.0 - gamma) * dt * a0 + gamma * dt * a1
        u1 = u0 + dt * v0 + dt * dt * (0.5 - beta) * a0 + dt * dt * beta * a1

        self._u, self._v, self._a = u1, v1, a1
        self._t = t1
        self._dt = dt

    def _assemble_lhs(self, dt: float) -> None:
        opts = self._options
        mesh = self._mesh
        self._lhs = prune_sparse(
            mesh.mass_matrix
            + (opts.gamma * dt) * self._C
            + (opts.beta * dt * dt) * mesh.stiffness_matrix
        )
        self._solver.compute(self._lhs)
        logger.debug("Refactorized LHS for dt=%g (nnz=%d)", dt, self._lhs.nnz)

    def _apply_bcs(self, time: float, rhs: Optional[np.ndarray] = None) -> None:
        for bc in self._mesh.bcs:
            i = bc.global_index
            if rhs is not None:
                rhs[i] = 0.0
            if bc.type == BCType.DISPLACEMENT:
                self._u[i] = bc.value_at(time)
                self._v[i] = 0.0
            elif bc.type == BCType.VELOCITY:
                self._v[i] = bc.value_at(time)
