"""
NodeTunnel CLI - Main entry point.

Usage:
    nodetunnel init                       # Write default config
    nodetunnel up --cluster cluster.yml   # Bring up tunnels, check engines
    nodetunnel versions                   # Show supported Docker versions
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nodetunnel import __version__
from nodetunnel.core.config import Config
from nodetunnel.core.errors import VersionLookupError


def setup_logging(config: Config, debug: bool = False):
    """Configure root logging from the config (library modules only log)."""
    level = logging.DEBUG if debug else config.log_level
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if config.logging.file:
        try:
            config.logging.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(config.logging.file))
        except OSError as e:
            print(f"Warning: can't open log file {config.logging.file}: {e}", file=sys.stderr)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )

    # paramiko is chatty at DEBUG
    if not debug:
        logging.getLogger("paramiko").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nodetunnel",
        description="Docker engine access to cluster nodes over SSH",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  init        Write a default config file
  up          Establish tunnels and check Docker versions
  versions    Show supported Docker versions

Examples:
  nodetunnel init
  nodetunnel up --cluster cluster.yml
  nodetunnel up --cluster cluster.yml --host 10.0.0.1
  nodetunnel up --cluster cluster.yml --ignore-docker-version
  nodetunnel versions --k8s-version 1.8

Use 'nodetunnel <command> --help' for more information on a command.
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        help="Config file (default: ~/.nodetunnel/config.yaml or $NODETUNNEL_CONFIG)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    subparsers.add_parser(
        "init",
        help="Write a default config file",
    )

    up_parser = subparsers.add_parser(
        "up",
        help="Establish tunnels and check Docker versions",
        description="Connect to each node over SSH and query its Docker engine",
    )
    _setup_up_parser(up_parser)

    versions_parser = subparsers.add_parser(
        "versions",
        help="Show supported Docker versions",
    )
    versions_parser.add_argument(
        "--k8s-version",
        help="Kubernetes release (default: all releases)",
    )

    return parser


def _setup_up_parser(parser: argparse.ArgumentParser):
    """Set up up subcommand parser."""
    parser.add_argument(
        "--cluster", "-c",
        default="cluster.yml",
        help="Cluster file (default: cluster.yml)",
    )

    parser.add_argument(
        "--host",
        action="append",
        dest="hosts",
        metavar="ADDRESS",
        help="Only this node (repeatable)",
    )

    parser.add_argument(
        "--ignore-docker-version",
        action="store_true",
        help="Warn instead of failing on unsupported Docker versions",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = Config.load(Path(args.config) if args.config else None)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config, debug=args.debug)

    if args.command == "init":
        return _handle_init(config)
    elif args.command == "up":
        from nodetunnel.cli.up import handle_up

        return handle_up(args, config)
    elif args.command == "versions":
        return _handle_versions(args, config)
    else:
        parser.print_help()
        return 1


def _handle_init(config: Config) -> int:
    if config.save_default_config():
        print(f"✓ Wrote default config: {config.config_file}")
    else:
        print(f"Config already exists: {config.config_file}")
    return 0


def _handle_versions(args, config: Config) -> int:
    try:
        table = config.version_table()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    releases = [args.k8s_version] if args.k8s_version else sorted(table)
    if not releases:
        print("No supported Docker versions configured")
        return 1

    status = 0
    for release in releases:
        try:
            versions = table.supported_versions(release)
        except VersionLookupError as e:
            print(f"Error: {e}", file=sys.stderr)
            status = 1
            continue
        print(f"Kubernetes {release}: {', '.join(versions)}")

    return status


if __name__ == "__main__":
    sys.exit(main())
