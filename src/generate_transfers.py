#!/usr/bin/env python3
"""
CLI tool to generate a GTFS transfers.txt from a GTFS stops.txt.

Usage:
    python src/generate_transfers.py --input stops.txt --output transfers.txt \
        --max-distance 500 --walking-speed 0.785 --transfer-time 0
"""

import argparse
import logging
import sys

from transfer_config import DEFAULTS, ConfigError, build_config, load_config_file
from gtfs_loader import StopsFileError, load_stop_points
from transfer_generator import generate_transfers
from transfer_writer import TransfersFileError, write_transfers


logger = logging.getLogger("gtfs_transfers")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Generate GTFS transfers.txt from stops.txt'
    )
    parser.add_argument(
        '-i', '--input',
        required=True,
        help='GTFS stops.txt file'
    )
    parser.add_argument(
        '-o', '--output',
        help=f"GTFS transfers.txt file (default: {DEFAULTS['output']})"
    )
    parser.add_argument(
        '-d', '--max-distance',
        type=float,
        help=f"Max distance in meters to compute the transfer (default: {DEFAULTS['max_distance']:g})"
    )
    parser.add_argument(
        '-s', '--walking-speed',
        type=float,
        help=(
            f"Walking speed in meters per second (default: {DEFAULTS['walking_speed']}). "
            "You may want to divide your initial speed by sqrt(2) "
            "to simulate Manhattan distances"
        )
    )
    parser.add_argument(
        '-t', '--transfer-time',
        type=int,
        help=f"Transfer time in seconds added to every walking time (default: {DEFAULTS['transfer_time']})"
    )
    parser.add_argument(
        '-c', '--config',
        help='Path to YAML config file providing defaults'
    )
    parser.add_argument(
        '--progress',
        action='store_true',
        default=None,
        help='Show a progress bar'
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='Log debug messages')
    verbosity.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        file_values = load_config_file(args.config) if args.config else {}
        config = build_config(
            args.input,
            overrides={
                'output': args.output,
                'max_distance': args.max_distance,
                'walking_speed': args.walking_speed,
                'transfer_time': args.transfer_time,
                'show_progress': args.progress,
            },
            file_values=file_values
        )
        logger.debug("Using %s", config)

        stop_points = load_stop_points(config.input_path)
        written = write_transfers(config.output_path, generate_transfers(stop_points, config))
    except (ConfigError, StopsFileError, TransfersFileError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("Done: %d transfers between %d stop points", written, len(stop_points))
    return 0


if __name__ == '__main__':
    sys.exit(main())
