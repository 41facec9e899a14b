#!/usr/bin/env python3
"""
routetree - Main Entry Point
Builds junction trees for globally routed nets and writes canonical route lines
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from routetree import __version__
from routetree.application.services import TopologyService
from routetree.shared.configuration import ConfigManager
from routetree.shared.exceptions import ConfigurationError, RouteTreeException
from routetree.shared.utils.logging_utils import setup_logging

logger = logging.getLogger("routetree.cli")


def setup_environment(config_path: Optional[str] = None, verbose: bool = False) -> ConfigManager:
    """Load configuration and initialize logging.

    Raises:
        ConfigurationError: If an explicitly named configuration file does not exist
    """
    if config_path and not Path(config_path).expanduser().exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}", error_code="CONFIG")

    config = ConfigManager(config_path, create_default=False)

    if verbose:
        config.update_logging_settings(level="DEBUG")

    setup_logging(config.get_settings().logging)
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routetree",
        description="routetree - junction-tree topology for globally routed nets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s case1.txt                          # Print route lines to stdout
  %(prog)s case1.txt -o case1.out             # Write route file
  %(prog)s case1.txt -o case1.out --stats     # Also print statistics as JSON
  %(prog)s case1.txt --via-style segment      # One via route line per junction
        """
    )

    parser.add_argument(
        'input_file',
        help='Global-routing input file'
    )
    parser.add_argument(
        '-o', '--output',
        help='Output route file (default: stdout)'
    )
    parser.add_argument(
        '-c', '--config',
        help='Configuration file path'
    )
    parser.add_argument(
        '--via-style', choices=['split', 'segment'],
        help='How junction vias are written (overrides configuration)'
    )
    parser.add_argument(
        '--sort-junctions', action='store_true',
        help='Order junctions by position for reproducible output'
    )
    parser.add_argument(
        '--no-header', action='store_true',
        help='Omit the NumMovedCellInst/NumRoutes header'
    )
    parser.add_argument(
        '--stats', action='store_true',
        help='Print run statistics as JSON to stderr'
    )
    parser.add_argument(
        '-v', '--verbose', action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    return parser


def run_cli(args: argparse.Namespace) -> int:
    """Run the topology pipeline for parsed arguments; returns the exit code."""
    try:
        config = setup_environment(args.config, args.verbose)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    if args.via_style:
        config.update_output_settings(via_style=args.via_style)
    if args.no_header:
        config.update_output_settings(write_header=False)
    if args.sort_junctions:
        config.update_topology_settings(sort_junctions=True)

    try:
        config.require_valid()
        service = TopologyService(config.get_settings())

        if args.output:
            statistics = service.run(args.input_file, args.output)
        else:
            statistics = service.run(args.input_file, stream=sys.stdout)

    except FileNotFoundError as e:
        logger.error(str(e))
        return 2
    except RouteTreeException as e:
        logger.error(f"Failed to process {args.input_file}: {e}")
        return 1

    if args.stats:
        sys.stderr.write(json.dumps(statistics.to_dict(), indent=2) + "\n")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    return run_cli(args)


if __name__ == "__main__":
    sys.exit(main())
