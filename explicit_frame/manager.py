# explicit_frame/manager.py
"""
RUN MANAGER: Drive an ExplicitSystem from a Configuration File
==============================================================

PURPOSE:
--------
ExplicitSystemManager turns a JSON configuration into a Mesh and an
ExplicitSystem, integrates from start_time to end_time at the estimated
stable time step, and writes the state to disk along the way.

OUTPUT FILES:
-------------
Each dump k (k = iteration // max(save_frequency, 1)) writes

    <displacements>_0000k.txt    one value per line
    <velocities>_0000k.txt
    <forces>_0000k.txt
    <state>_0000k.json           the configuration, updated so that it
                                 restarts the run from this dump

The initial and final states are always dumped; intermediate dumps are
written every save_frequency steps when save_frequency > 0.
"""

import copy
import json
import logging
import time
from pathlib import Path
from typing import Optional

import numpy as np

from .config import (
    MODEL_FILE_KEYS,
    ConfigError,
    bcs_from_config,
    elements_from_config,
    forces_from_config,
    load_config,
    newmark_options_from_config,
    nodes_from_config,
    run_options_from_config,
    time_window_from_config,
    vector_from_config,
)
from .kernel.compare import ValueCompare
from .v3d.elements import estimate_stable_timestep
from .v3d.explicit import ExplicitSystem
from .v3d.mesh import Mesh

logger = logging.getLogger(__name__)


class ExplicitSystemManager:
    """
    Build and run an explicit dynamics analysis described by a config file.

    Args:
        config_path: JSON configuration file
        output_dir: Directory for dumps (default: the config file's directory)
        verbose: Override the 'verbose' option of the configuration
    """

    def __init__(self, config_path, output_dir=None, verbose: Optional[bool] = None):
        self.config_path = Path(config_path)
        self.base_dir = self.config_path.parent
        self.output_dir = Path(output_dir) if output_dir is not None else self.base_dir

        self.config = load_config(self.config_path)
        self.run_options = run_options_from_config(self.config)
        if verbose is not None:
            self.run_options.verbose = verbose

        self.start_time, self.end_time = time_window_from_config(self.config)
        self.iteration_number = self._initial_iteration()

        self._state_doc = copy.deepcopy(self.config)
        for key in MODEL_FILE_KEYS:
            if isinstance(self._state_doc.get(key), str):
                self._state_doc[key] = str(Path(self.base_dir, self._state_doc[key]).resolve())

        self._construct_system()

    def _report(self, msg, *args):
        if self.run_options.verbose:
            logger.info(msg, *args)
        else:
            logger.debug(msg, *args)

    def _initial_iteration(self) -> int:
        value = self.config.get('iteration_number', 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigError("iteration_number must be a non-negative integer")
        return value

    def _construct_system(self) -> None:
        started = time.perf_counter()
        doc, base = self.config, self.base_dir

        self._report("Parsing node list...")
        nodes = nodes_from_config(doc, base)
        self._report("Parsing element list...")
        elements = elements_from_config(doc, base)
        self._report("Parsing node boundary conditions...")
        bcs = bcs_from_config(doc, base)

        self._report("Creating mesh...")
        mesh = Mesh(nodes, elements, bcs)

        self._report("Parsing external forces and initial conditions...")
        forces = forces_from_config(doc, base)
        u0 = vector_from_config(doc, 'nodal_displacements', mesh.ndof, base)
        v0 = vector_from_config(doc, 'nodal_velocities', mesh.ndof, base)

        self.system = ExplicitSystem(
            mesh, forces, u0, v0,
            t0=self.start_time,
            options=newmark_options_from_config(doc),
        )
        self.dt = estimate_stable_timestep(nodes, elements)

        self._report(
            "Constructed system of %d elements and %d nodes in %.3f seconds",
            len(elements), len(nodes), time.perf_counter() - started,
        )
        self._report("Estimated stable time step is %g seconds", self.dt)

    def run(self) -> int:
        """
        Integrate until end_time, dumping state as configured.

        Returns:
            The iteration number reached
        """
        started = time.perf_counter()
        compare = ValueCompare()
        period = self.end_time - self.start_time
        old_percent = 0

        self._report("Saving initial system state...")
        self.dump_system()

        self._report("Advancing equations of motion...")
        save_frequency = self.run_options.save_frequency
        while compare.less_than(self.system.time, self.end_time):
            self.system.update(self.dt)
            self.iteration_number += 1

            if save_frequency > 0 and self.iteration_number % save_frequency == 0:
                self.dump_system()

            if period > 0:
                new_percent = int((self.system.time - self.start_time) / period * 100 + 0.1)
                if new_percent > old_percent:
                    self._report("%d%% completed", new_percent)
                    old_percent = new_percent

        self._report("Saving final system state...")
        self.dump_system()
        self._report(
            "Explicit time integration completed in %.3f seconds",
            time.perf_counter() - started,
        )
        return self.iteration_number

    def dump_system(self) -> Path:
        """
        Write the current vectors and a restartable state document.

        Returns:
            Path of the state JSON file
        """
        opts = self.run_options
        tail = "_%05d" % (self.iteration_number // max(opts.save_frequency, 1))
        self.output_dir.mkdir(parents=True, exist_ok=True)

        displacements_name = f"{opts.nodal_displacements_filename}{tail}.txt"
        velocities_name = f"{opts.nodal_velocities_filename}{tail}.txt"
        forces_name = f"{opts.nodal_forces_filename}{tail}.txt"

        np.savetxt(self.output_dir / displacements_name, self.system.displacements, fmt='%.15g')
        np.savetxt(self.output_dir / velocities_name, self.system.velocities, fmt='%.15g')
        np.savetxt(self.output_dir / forces_name, self.system.forces, fmt='%.15g')

        self._state_doc['nodal_displacements'] = displacements_name
        self._state_doc['nodal_velocities'] = velocities_name
        self._state_doc['start_time'] = self.system.time
        self._state_doc['iteration_number'] = self.iteration_number

        state_path = self.output_dir / f"{opts.state_filename}{tail}.json"
        with state_path.open('w') as f:
            json.dump(self._state_doc, f, indent=4)

        logger.debug("Dumped state at t=%g to %s", self.system.time, state_path)
        return state_path
