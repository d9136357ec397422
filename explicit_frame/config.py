# explicit_frame/config.py
"""
CONFIGURATION: JSON Run Documents and CSV Model Tables
======================================================

A run is described by one JSON document whose entries point at headerless,
comma-separated tables. Relative paths are resolved against the directory
of the JSON file.

    {
        "nodes": "nodes.csv",            x, y, z
        "elems": "elems.csv",            ni, nj
        "props": "props.csv",            E, G, A, Iz, Iy, J, density, nx, ny, nz
        "bcs": "bcs.csv",                node, dof, value, type (0 disp, 1 vel)
        "forces": "forces.csv",          node, dof, value           (optional)
        "nodal_displacements": "u0.csv", one value per DOF          (optional)
        "nodal_velocities": "v0.csv",    one value per DOF          (optional)
        "elem_type": "timoshenko",       or "euler_bernoulli"       (optional)
        "start_time": 0.0,
        "end_time": 1.0,
        "options": {
            "beta": 0.25, "gamma": 0.5,
            "damping_alpha": 0.01, "damping_beta": 0.01,
            "state_filename": "state",
            "nodal_displacements_filename": "displacements",
            "nodal_velocities_filename": "velocities",
            "nodal_forces_filename": "forces",
            "save_frequency": 0,
            "verbose": false
        }
    }

Every builder raises ConfigError for malformed input. Missing files
surface as OSError from the CSV reader.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
import pandas as pd

from .v3d.explicit import NewmarkOptions
from .v3d.loads import BCType, ConstantBC, ConstantForce
from .v3d.model import Beam3D, BeamTheory, Node3D, Props

PathLike = Union[str, Path]

# Keys whose values name CSV tables
MODEL_FILE_KEYS = ('nodes', 'elems', 'props', 'bcs', 'forces')


class ConfigError(ValueError):
    """Raised when a configuration document or table is malformed."""
    pass


@dataclass
class RunOptions:
    """Output and reporting settings of a run."""
    state_filename: str = "state"
    nodal_displacements_filename: str = "displacements"
    nodal_velocities_filename: str = "velocities"
    nodal_forces_filename: str = "forces"
    save_frequency: int = 0
    verbose: bool = False


def load_config(path: PathLike) -> dict:
    """
    Parse a JSON configuration file.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object
        OSError: If the file cannot be read
    """
    path = Path(path)
    with path.open('r') as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigError(
                f"{path}: invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}"
            ) from exc

    if not isinstance(doc, dict):
        raise ConfigError(f"{path}: top level of the configuration must be an object")
    return doc


def read_table(path: PathLike) -> np.ndarray:
    """
    Read a headerless comma-separated table as a 2D float array.

    Raises:
        ConfigError: If the file is empty or holds non-numeric values
    """
    try:
        df = pd.read_csv(path, header=None, skipinitialspace=True)
    except pd.errors.EmptyDataError as exc:
        raise ConfigError(f"{path}: table is empty") from exc

    try:
        return df.to_numpy(dtype=float)
    except ValueError as exc:
        raise ConfigError(f"{path}: table holds non-numeric values") from exc


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _resolve(doc: dict, key: str, base_dir: PathLike) -> Path:
    value = doc.get(key)
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a file name, got {value!r}")
    path = Path(value)
    if not path.is_absolute():
        path = Path(base_dir) / path
    return path


def _table(doc: dict, key: str, base_dir: PathLike, n_cols: int) -> np.ndarray:
    if key not in doc:
        raise ConfigError(f"Configuration does not have required member '{key}'")
    path = _resolve(doc, key, base_dir)
    table = read_table(path)
    if table.shape[1] != n_cols:
        raise ConfigError(
            f"{path}: expected {n_cols} columns per row, found {table.shape[1]}"
        )
    return table


def _as_indices(values: np.ndarray, what: str) -> np.ndarray:
    if not np.all(np.isfinite(values)) or np.any(values != np.round(values)) or np.any(values < 0):
        raise ConfigError(f"{what} must be non-negative integers")
    return values.astype(int)


def nodes_from_config(doc: dict, base_dir: PathLike = ".") -> List[Node3D]:
    """Nodes from the 'nodes' table (x, y, z per row)."""
    table = _table(doc, 'nodes', base_dir, 3)
    return [Node3D(*row) for row in table.tolist()]


def elements_from_config(doc: dict, base_dir: PathLike = ".") -> List[Beam3D]:
    """
    Beam elements from the 'elems' and 'props' tables.

    Row k of 'props' holds the properties of element k.
    """
    elems = _as_indices(_table(doc, 'elems', base_dir, 2), "Element node numbers")
    props = _table(doc, 'props', base_dir, 10)
    if len(elems) != len(props):
        raise ConfigError(
            f"'elems' has {len(elems)} rows but 'props' has {len(props)}"
        )

    try:
        theory = BeamTheory(doc.get('elem_type', BeamTheory.TIMOSHENKO.value))
    except ValueError as exc:
        raise ConfigError(f"Unknown elem_type {doc.get('elem_type')!r}") from exc

    elements = []
    for (ni, nj), p in zip(elems.tolist(), props.tolist()):
        E, G, A, Iz, Iy, J, density, nx, ny, nz = p
        elements.append(Beam3D(ni, nj, Props(E, G, A, Iz, Iy, J, density, (nx, ny, nz)), theory))
    return elements


def bcs_from_config(doc: dict, base_dir: PathLike = ".") -> List[ConstantBC]:
    """Boundary conditions from the 'bcs' table (node, dof, value, type)."""
    table = _table(doc, 'bcs', base_dir, 4)
    nodes = _as_indices(table[:, 0], "BC node numbers")
    dofs = _as_indices(table[:, 1], "BC dofs")
    types = _as_indices(table[:, 3], "BC types")

    bcs = []
    for node, dof, value, bc_type in zip(nodes.tolist(), dofs.tolist(), table[:, 2].tolist(), types.tolist()):
        try:
            bcs.append(ConstantBC(node, dof, value, BCType(bc_type)))
        except ValueError as exc:
            raise ConfigError(f"Invalid boundary condition row {node, dof, value, bc_type}: {exc}") from exc
    return bcs


def forces_from_config(doc: dict, base_dir: PathLike = ".") -> List[ConstantForce]:
    """External forces from the optional 'forces' table (node, dof, value)."""
    if 'forces' not in doc:
        return []
    table = _table(doc, 'forces', base_dir, 3)
    nodes = _as_indices(table[:, 0], "Force node numbers")
    dofs = _as_indices(table[:, 1], "Force dofs")

    forces = []
    for node, dof, value in zip(nodes.tolist(), dofs.tolist(), table[:, 2].tolist()):
        try:
            forces.append(ConstantForce(node, dof, value))
        except ValueError as exc:
            raise ConfigError(f"Invalid force row {node, dof, value}: {exc}") from exc
    return forces


def vector_from_config(doc: dict, key: str, size: int, base_dir: PathLike = ".") -> np.ndarray:
    """
    Column vector from an optional table; zeros when the key is absent.

    Values may be laid out one per line or comma separated on one line.
    """
    if key not in doc:
        return np.zeros(size)
    path = _resolve(doc, key, base_dir)
    vec = read_table(path).ravel()
    if vec.size != size:
        raise ConfigError(f"{path}: expected {size} values for '{key}', found {vec.size}")
    return vec


def time_window_from_config(doc: dict) -> Tuple[float, float]:
    """Required (start_time, end_time) pair."""
    window = []
    for key in ('start_time', 'end_time'):
        if key not in doc:
            raise ConfigError(f"Configuration does not have required member '{key}'")
        if not _is_number(doc[key]):
            raise ConfigError(f"'{key}' is not a number")
        window.append(float(doc[key]))
    return window[0], window[1]


def _options_block(doc: dict) -> dict:
    options = doc.get('options', {})
    if not isinstance(options, dict):
        raise ConfigError("'options' must be an object")
    return options


def newmark_options_from_config(doc: dict) -> NewmarkOptions:
    """Integration options from the 'options' block; defaults for missing keys."""
    options = _options_block(doc)
    kwargs = {}
    for key in ('beta', 'gamma', 'damping_alpha', 'damping_beta'):
        if key in options:
            if not _is_number(options[key]):
                raise ConfigError(f"{key} provided in options configuration is not a number")
            kwargs[key] = float(options[key])
    return NewmarkOptions(**kwargs)


def run_options_from_config(doc: dict) -> RunOptions:
    """Output options from the 'options' block; defaults for missing keys."""
    options = _options_block(doc)
    kwargs = {}
    for key in ('state_filename', 'nodal_displacements_filename',
                'nodal_velocities_filename', 'nodal_forces_filename'):
        if key in options:
            if not isinstance(options[key], str):
                raise ConfigError(f"{key} provided in options configuration is not a string")
            kwargs[key] = options[key]

    if 'save_frequency' in options:
        value = options['save_frequency']
        if not _is_number(value) or value < 0 or int(value) != value:
            raise ConfigError("save_frequency provided in options configuration is not a non-negative integer")
        kwargs['save_frequency'] = int(value)

    if 'verbose' in options:
        if not isinstance(options['verbose'], bool):
            raise ConfigError("verbose provided in options configuration is not a bool")
        kwargs['verbose'] = options['verbose']

    return RunOptions(**kwargs)
