# explicit_frame/v3d/model.py
"""
3D MODEL DEFINITIONS: Node3D, Props and Beam3D
==============================================

PURPOSE:
--------
This module defines the basic data structures for 3D frame dynamics:
- Node3D: A point in 3D space with x, y, z coordinates
- Props: Material and section bundle of one beam element
- Beam3D: A 2-node beam element tagged with the beam theory it uses

ENGINEERING CONTEXT:
--------------------
A 3D FRAME member carries axial force, torsion and bending about two axes.
Each node has 6 DOFs: ux, uy, uz, rx, ry, rz.

Two beam theories are available:
- EULER_BERNOULLI: plane sections stay normal to the axis (shear rigid)
- TIMOSHENKO: shear deformation included through phi = 12EI / (GAL²)

The local y-axis of the cross section is set by Props.normal. The local
x-axis runs from node ni to node nj; z completes the right-handed triad.
The normal must not be parallel to the member axis.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Node3D:
    """
    A node (joint) in 3D space.

    Parameters:
    -----------
    x, y, z : float
        Coordinates in the global system (meters)

    Notes:
    ------
    The node's position in the node list is its id; DOFManager uses that
    position to compute global DOF indices.
    """
    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


@dataclass(frozen=True)
class Props:
    """
    Material and cross-section properties of one beam element.

    Parameters:
    -----------
    E : float
        Young's modulus (Pa)
    G : float
        Shear modulus (Pa)
    A : float
        Cross-sectional area (m²)
    Iz : float
        Second moment of area about local z (m⁴), bending in the x-y plane
    Iy : float
        Second moment of area about local y (m⁴), bending in the x-z plane
    J : float
        Torsional constant (m⁴)
    density : float
        Mass density (kg/m³)
    normal : Tuple[float, float, float]
        Orientation of the local y-axis in global coordinates
    """
    E: float
    G: float
    A: float
    Iz: float
    Iy: float
    J: float
    density: float
    normal: Tuple[float, float, float] = (0.0, 1.0, 0.0)

    def __post_init__(self):
        object.__setattr__(self, 'normal', tuple(float(v) for v in self.normal))
        if len(self.normal) != 3:
            raise ValueError(f"normal must have 3 components, got {len(self.normal)}")


class BeamTheory(Enum):
    """Beam formulation used to build an element's matrices."""
    EULER_BERNOULLI = "euler_bernoulli"
    TIMOSHENKO = "timoshenko"


@dataclass(frozen=True)
class Beam3D:
    """
    A 2-node 3D beam element (12 DOFs).

    Parameters:
    -----------
    ni : int
        Index of the first node
    nj : int
        Index of the second node
    props : Props
        Material/section properties
    theory : BeamTheory
        Which closed-form matrices to use (default TIMOSHENKO)

    Examples:
    ---------
    >>> steel = Props(E=200e9, G=80e9, A=0.01, Iz=1e-5, Iy=1e-5, J=2e-5, density=7800)
    >>> beam = Beam3D(0, 1, steel)
    >>> rigid = Beam3D(1, 2, steel, theory=BeamTheory.EULER_BERNOULLI)
    """
    ni: int
    nj: int
    props: Props
    theory: BeamTheory = BeamTheory.TIMOSHENKO

    @property
    def node_ids(self) -> Tuple[int, int]:
        return (self.ni, self.nj)
