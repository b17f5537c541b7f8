#!/usr/bin/env python3
"""
===============================================================================
QUATERNION ALGEBRA - DEMONSTRATION ENTRY POINT
===============================================================================
Walks through the public quaternion operations on two sample quaternions:
arithmetic, norm/conjugate/inverse, equality, conversion to a rotation matrix
and back.

USAGE:
    python main.py                               # Samples from config
    python main.py --q1 1 0 0 0 --q2 0 1 0 0     # Override the samples
    python main.py --config my_config.yaml       # Alternate config file
    python main.py --log-level DEBUG             # Verbose logging

The results go to stdout; log messages go to stderr.

DEPENDENCIES:
    numpy, pyyaml
    Install: pip install numpy pyyaml

===============================================================================
"""

import sys
import argparse
import copy
import logging
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

import yaml

# ---------------------------------------------------------------------------
# Path setup: ensure all project modules are importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

# ---------------------------------------------------------------------------
# Project imports
# ---------------------------------------------------------------------------
from core.quaternion import Quaternion, ZeroNormError
from core.rotation_matrix import format_matrix

logger = logging.getLogger('QUATERNION_DEMO')

DEFAULT_CONFIG_PATH = PROJECT_ROOT.parent.parent / 'config' / 'demo_config.yaml'

# Used when the default config file is not shipped (e.g. an installed wheel)
DEFAULT_CONFIG = {
    'demo': {
        'name': 'Quaternion algebra walkthrough',
        'q1': [1.0, 2.0, 3.0, 4.0],
        'q2': [5.0, 6.0, 7.0, 8.0],
    },
    'logging': {
        'level': 'INFO',
    },
}

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Load demo configuration from a YAML file.

    Args:
        config_path: Path to YAML config. Defaults to config/demo_config.yaml;
            if that default is missing the built-in defaults are used.

    Returns:
        Dictionary with 'demo' (q1, q2) and 'logging' sections

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If the file is not a mapping, a section is malformed, or
            q1/q2 are missing or not four numbers each
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.warning(f"No config at {DEFAULT_CONFIG_PATH}, using built-in defaults")
            return copy.deepcopy(DEFAULT_CONFIG)
        config_path = str(DEFAULT_CONFIG_PATH)

    logger.info(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config {config_path} must be a mapping, got {type(config).__name__}")

    demo = config.get('demo')
    if not isinstance(demo, dict):
        raise ValueError(f"Config {config_path} has no 'demo' section")

    for key in ('q1', 'q2'):
        demo[key] = parse_components(demo.get(key), key)

    logging_section = config.setdefault('logging', {})
    if not isinstance(logging_section, dict):
        raise ValueError(f"Config {config_path} has a malformed 'logging' section")
    logging_section.setdefault('level', 'INFO')

    logger.info(f"Demo: {demo.get('name', 'unnamed')}")
    return config


def parse_components(values, name: str) -> List[float]:
    """
    Validate a [w, x, y, z] list from config or the command line.

    Raises:
        ValueError: If values is not a sequence of exactly four numbers
    """
    if not isinstance(values, (list, tuple)) or len(values) != 4:
        raise ValueError(f"'{name}' must be a list of four numbers [w, x, y, z], got {values!r}")
    try:
        return [float(v) for v in values]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{name}' contains a non-numeric component: {values!r}") from exc


def run_demo(q1: Quaternion, q2: Quaternion, out: Optional[TextIO] = None) -> Quaternion:
    """
    Print the walkthrough for two quaternions.

    Args:
        q1: First sample quaternion (also used for norm/inverse/matrix steps)
        q2: Second sample quaternion
        out: Stream to write to. Defaults to sys.stdout.

    Returns:
        The quaternion recovered from q1's rotation matrix
    """
    if out is None:
        out = sys.stdout

    logger.info(f"Running demo with q1={q1}, q2={q2}")

    # Arithmetic operations
    print(f"Sum: {q1 + q2}", file=out)
    print(f"Difference: {q1 - q2}", file=out)
    print(f"Product: {q1 * q2}", file=out)

    # Norm, conjugate, and inverse
    print(f"Norm of q1: {q1.norm!r}", file=out)
    print(f"Conjugate of q1: {q1.conjugate()}", file=out)
    try:
        print(f"Inverse of q1: {q1.inverse()}", file=out)
    except ZeroNormError as exc:
        logger.warning(f"Skipping inverse: {exc}")
        print(f"Inverse of q1: undefined ({exc})", file=out)

    # Equality and inequality
    print(f"Are q1 and q2 equal? {q1 == q2}", file=out)
    print(f"Are q1 and q2 not equal? {q1 != q2}", file=out)

    # Conversion to rotation matrix
    if not q1.is_unit():
        logger.debug(f"q1 has norm {q1.norm}; its matrix is not a proper rotation")
    rotation_matrix = q1.to_rotation_matrix()
    print("Rotation Matrix:", file=out)
    print(format_matrix(rotation_matrix), file=out)

    # Conversion from rotation matrix
    q_from_matrix = Quaternion.from_rotation_matrix(rotation_matrix)
    print(f"Quaternion from Rotation Matrix: {q_from_matrix}", file=out)

    logger.info("Demo complete")
    return q_from_matrix


def build_parser() -> argparse.ArgumentParser:
    """Command line interface for the demo."""
    parser = argparse.ArgumentParser(
        description='Quaternion algebra demonstration',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                              Samples from config
  python main.py --q1 0.7071 0.7071 0 0       Override q1
  python main.py --log-level DEBUG            Verbose logging
        """
    )

    parser.add_argument('--config', type=str, default=None,
                        help='Path to demo config YAML')
    parser.add_argument('--q1', type=float, nargs=4, default=None,
                        metavar=('W', 'X', 'Y', 'Z'),
                        help='First quaternion, overrides config')
    parser.add_argument('--q2', type=float, nargs=4, default=None,
                        metavar=('W', 'X', 'Y', 'Z'),
                        help='Second quaternion, overrides config')
    parser.add_argument('--log-level', type=str, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: from config)')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point. Parses command line arguments and runs the demo.

    Returns:
        Process exit code (0 on success)
    """
    args = build_parser().parse_args(argv)

    # Configure handlers before the config load so its messages are emitted;
    # the level is refined once the config has been read.
    logging.basicConfig(level=args.log_level or logging.INFO, format=LOG_FORMAT,
                        handlers=[logging.StreamHandler(sys.stderr)])

    config = load_config(args.config)

    level = args.log_level or str(config['logging']['level']).upper()
    logging.getLogger().setLevel(level)
    logger.setLevel(level)

    q1_values = args.q1 if args.q1 is not None else config['demo']['q1']
    q2_values = args.q2 if args.q2 is not None else config['demo']['q2']

    run_demo(Quaternion(*q1_values), Quaternion(*q2_values))
    return 0


if __name__ == '__main__':
    sys.exit(main())
