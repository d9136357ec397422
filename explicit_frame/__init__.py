# explicit_frame - Explicit Dynamics of 3D Beam Structures
"""
EXPLICIT-FRAME: Transient Dynamics of 3D Frames
===============================================

This package provides:
- Euler-Bernoulli and Timoshenko 3D beam elements (closed-form matrices)
- Sparse global assembly with boundary-condition elimination
- Newmark-beta explicit time integration with Rayleigh damping
- JSON/CSV run configuration, a run manager and a command line

ARCHITECTURE:
-------------
    kernel/         Element-agnostic core (DOF indexing, assembly, solve, compare)
    v3d/            3D beam model, elements, mesh and explicit integrator
    config.py       JSON/CSV ingestion
    manager.py      Run loop and state dumps
    cli.py          Command line entry point
"""

from .kernel import DOF, NUM_DOFS, DOFManager, ValueCompare, SolveError
from .v3d import (
    Node3D, Props, Beam3D, BeamTheory,
    BCType, ConstantBC, ConstantForce,
    Mesh, ExplicitSystem, NewmarkOptions, SizeMismatchError,
    estimate_stable_timestep,
)

__version__ = "0.1.0"
