# explicit_frame/cli.py
"""
EXPLICIT FRAME COMMAND LINE
===========================

Run an explicit dynamics analysis described by a JSON configuration:

    explicit-frame -c config.json
    explicit-frame -c config.json -o results/ -v
"""

import argparse
import logging
import sys

from .config import ConfigError
from .kernel.solve import SolveError
from .manager import ExplicitSystemManager
from .v3d.explicit import SizeMismatchError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='explicit-frame',
        description='Explicit finite element dynamics of 3D beam structures',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  explicit-frame -c config.json
  explicit-frame -c config.json -o results/ -v

This will generate, for every dump:
  - displacements_NNNNN.txt, velocities_NNNNN.txt, forces_NNNNN.txt
  - state_NNNNN.json (restartable configuration)
        """
    )

    parser.add_argument(
        '-c', '--config',
        required=True,
        help='Path to the JSON configuration file'
    )

    parser.add_argument(
        '-o', '--output-dir',
        default=None,
        help='Directory for output files (default: directory of the config file)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Report progress regardless of the verbose option in the config'
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    try:
        manager = ExplicitSystemManager(
            args.config,
            output_dir=args.output_dir,
            verbose=True if args.verbose else None,
        )
        manager.run()
    except (ConfigError, SolveError, SizeMismatchError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Analysis completed after %d iterations", manager.iteration_number)
    return 0


if __name__ == "__main__":
    sys.exit(main())
