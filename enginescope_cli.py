#!/usr/bin/env python3
"""EngineScope - Web game engine detector.

Entry point for the command-line interface.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from enginescope import __version__
from enginescope.core.config import Config, load_config, save_config
from enginescope.core.logging_config import setup_logging
from enginescope.ui.cli.commands import (
    run_detect_command,
    run_probe_command,
    run_profiles_command,
)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="enginescope",
        description="Detect the engine behind a web game and report tuning advice",
        epilog="For more information, see the documentation.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase verbosity (use -vv for debug)",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress console log output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Detect command
    detect_parser = subparsers.add_parser("detect", help="Detect the engine of an HTML document")
    detect_parser.add_argument("html_file", type=Path, help="HTML document to inspect")
    detect_parser.add_argument(
        "--context", "-c",
        action="append",
        metavar="CANVAS=DESCRIPTOR",
        help="Attach a captured WebGL context to a canvas id or index (can be repeated)",
    )
    detect_parser.add_argument(
        "--profiles", "-p",
        type=Path,
        help="Extra engine profiles file",
    )
    detect_parser.add_argument(
        "--json",
        action="store_true",
        help="Output report as JSON",
    )
    detect_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write report to file",
    )

    # Profiles command
    profiles_parser = subparsers.add_parser("profiles", help="List engine profiles")
    profiles_parser.add_argument(
        "--scores",
        type=Path,
        metavar="HTML_FILE",
        help="Score every profile against a document",
    )
    profiles_parser.add_argument(
        "--context", "-c",
        action="append",
        metavar="CANVAS=DESCRIPTOR",
        help="Attach a captured WebGL context when scoring",
    )
    profiles_parser.add_argument(
        "--profiles", "-p",
        type=Path,
        help="Extra engine profiles file",
    )
    profiles_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # Probe command
    probe_parser = subparsers.add_parser("probe", help="Show capabilities of a captured context")
    probe_parser.add_argument("descriptor", type=Path, help="Context descriptor JSON file")
    probe_parser.add_argument("--width", type=int, help="Canvas width for display analysis")
    probe_parser.add_argument("--height", type=int, help="Canvas height for display analysis")
    probe_parser.add_argument("--dpr", type=float, help="Device pixel ratio")
    probe_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # Config command
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser


def get_log_level(verbose: int) -> int:
    """Get logging level from verbosity count."""
    if verbose >= 2:
        return logging.DEBUG
    elif verbose >= 1:
        return logging.INFO
    return logging.WARNING


def run_config(args: argparse.Namespace, config: Config) -> int:
    """Execute the config command."""
    if args.init:
        save_config(config)
        print(f"Configuration saved to {config.config_dir / 'config.json'}")
        return 0

    if args.show:
        print(json.dumps(config.to_dict(), indent=2))
        return 0

    print("Use --init to create config or --show to display current config")
    return 1


def main() -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    config = load_config(args.config) if args.config else load_config()

    config.ensure_directories()
    setup_logging(
        config.logs_dir,
        log_level=get_log_level(args.verbose),
        console_output=not args.quiet,
    )
    logging.getLogger("enginescope.cli").debug(f"Running command: {args.command}")

    if args.command == "detect":
        return run_detect_command(args, config)
    elif args.command == "profiles":
        return run_profiles_command(args, config)
    elif args.command == "probe":
        return run_probe_command(args, config)
    elif args.command == "config":
        return run_config(args, config)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
