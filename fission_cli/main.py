"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m fission_cli package create --env ENV [--src PATH] [--deploy PATH] [--desc TEXT]
    python -m fission_cli package update --name NAME [--env ENV] [--src PATH] [--deploy PATH] [--desc TEXT] [-f]
    python -m fission_cli package get --name NAME [--target FILE]
    python -m fission_cli package info --name NAME
    python -m fission_cli package list
    python -m fission_cli package delete --name NAME [-f]
    python -m fission_cli config --init

Environment Variables:
    FISSION_URL                 Controller URL (same as --server)
    FISSION_NAMESPACE           Namespace for packages and functions (default: default)
    FISSION_HTTP_TIMEOUT        HTTP timeout in seconds (default: transport default)
    FISSION_LOG_LEVEL           Log level (default: INFO)
    FISSION_LOG_FILE            Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from fission_cli import __version__
from fission_cli.commands import package
from fission_cli.config import load_config, get_default_config_template


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def _add_force_flag(parser: argparse.ArgumentParser, verb: str) -> None:
    parser.add_argument(
        "-f", "--force",
        dest="force",
        action="store_true",
        default=False,
        help=f"{verb} even if functions use the package",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="fission",
        description="Fission CLI - Create, update, download and delete function packages.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--server",
        type=str,
        default=None,
        help="Fission controller URL (overrides FISSION_URL and config)",
    )
    parser.add_argument(
        "--namespace",
        type=str,
        default=None,
        help="Namespace for packages and functions (default: from config or 'default')",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./fission.json or ~/.config/fission/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- package command ---
    pkg_parser = subparsers.add_parser(
        "package",
        aliases=["pkg"],
        help="Manage packages",
        description="Create, update, inspect and delete function packages.",
    )
    pkg_subparsers = pkg_parser.add_subparsers(dest="package_command", help="Package operation")

    # package create
    pkg_create = pkg_subparsers.add_parser("create", help="Create a new package")
    pkg_create.add_argument("--env", type=str, default="", help="Environment name for the package")
    pkg_create.add_argument("--src", type=str, default="", help="Local path of the source archive")
    pkg_create.add_argument("--deploy", type=str, default="", help="Local path of the deployment archive")
    pkg_create.add_argument("--desc", type=str, default="", help="Package description")
    _add_json_flag(pkg_create)
    pkg_create.set_defaults(func=package.package_create_cmd)

    # package update
    pkg_update = pkg_subparsers.add_parser("update", help="Update a package")
    pkg_update.add_argument("--name", type=str, default="", help="Package name")
    pkg_update.add_argument("--env", type=str, default="", help="New environment name")
    pkg_update.add_argument("--src", type=str, default="", help="Local path of the new source archive")
    pkg_update.add_argument("--deploy", type=str, default="", help="Local path of the new deployment archive")
    pkg_update.add_argument("--desc", type=str, default="", help="New package description")
    _add_force_flag(pkg_update, "Update")
    _add_json_flag(pkg_update)
    pkg_update.set_defaults(func=package.package_update_cmd)

    # package get
    pkg_get = pkg_subparsers.add_parser("get", help="Download a package's archives")
    pkg_get.add_argument("--name", type=str, default="", help="Package name")
    pkg_get.add_argument("--target", type=str, default="", help="File name for the downloaded archives")
    _add_json_flag(pkg_get)
    pkg_get.set_defaults(func=package.package_get_cmd)

    # package info
    pkg_info = pkg_subparsers.add_parser("info", help="Show package details and build log")
    pkg_info.add_argument("--name", type=str, default="", help="Package name")
    _add_json_flag(pkg_info)
    pkg_info.set_defaults(func=package.package_info_cmd)

    # package list
    pkg_list = pkg_subparsers.add_parser("list", help="List packages")
    _add_json_flag(pkg_list)
    pkg_list.set_defaults(func=package.package_list_cmd)

    # package delete
    pkg_delete = pkg_subparsers.add_parser("delete", help="Delete a package")
    pkg_delete.add_argument("--name", type=str, default="", help="Package name")
    _add_force_flag(pkg_delete, "Delete")
    _add_json_flag(pkg_delete)
    pkg_delete.set_defaults(func=package.package_delete_cmd)

    pkg_parser.set_defaults(func=lambda args: pkg_parser.print_help() or EXIT_SUCCESS)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="fission.json",
        help="Path for config file (default: fission.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (FISSION_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = args.cli_config
        config_dict = {
            "server_url": config.server_url or "(not configured)",
            "namespace": config.namespace,
            "http_timeout": config.http_timeout,
            "log_level": config.log_level,
            "log_file": config.log_file,
            "default_output_format": config.default_output_format,
        }
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: fission config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.server:
        config.server_url = args.server
    if args.namespace:
        config.namespace = args.namespace
    if config.default_output_format == "json" and hasattr(args, "json"):
        args.json = True

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
