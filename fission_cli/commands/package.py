"""
CLI Package Commands

Usage:
    fission package create --env python --src handler.py [--deploy bin.zip] [--desc TEXT]
    fission package update --name NAME [--env ENV] [--src PATH] [--deploy PATH] [--desc TEXT] [-f]
    fission package get --name NAME [--target FILE]
    fission package info --name NAME
    fission package list
    fission package delete --name NAME [-f]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.schemas import FissionException, MissingArgumentException, Package

from fission_cli.config import CLIConfig
from lifecycle import PackageManager


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class PackageSummary:
    """Outcome of a package command for CLI output."""
    action: str = ""
    name: str = ""
    status: str = ""
    resource_version: str = ""
    paths: list[str] = field(default_factory=list)
    blocked: bool = False
    success: bool = False
    message: str = ""
    error: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["error"] is None:
            del d["error"]
        return d


def build_manager(cli_config: CLIConfig) -> PackageManager:
    """Build a package manager for the configured controller."""
    client_config = cli_config.to_client_config()
    if not client_config.server_url:
        raise MissingArgumentException(
            "Need --server or FISSION_URL set to your fission server.",
            argument="server",
        )
    return PackageManager.from_config(client_config)


def _summary_for(action: str, pkg: Package) -> PackageSummary:
    return PackageSummary(
        action=action,
        name=pkg.name,
        status=pkg.build_status.value,
        resource_version=pkg.resource_version,
        success=True,
    )


def print_summary(summary: PackageSummary, output_json: bool) -> None:
    """Print a summary in human-readable or JSON form."""
    if output_json:
        print(json.dumps(summary.to_dict(), indent=2))
        return
    if summary.success:
        if summary.message:
            print(summary.message)
        for path in summary.paths:
            print(path)
    else:
        print(f"Error: {summary.message}", file=sys.stderr)


def _fail(action: str, e: FissionException, output_json: bool) -> int:
    summary = PackageSummary(
        action=action,
        message=e.message,
        error=e.to_error_model().model_dump(mode="json"),
    )
    print_summary(summary, output_json)
    return EXIT_RUNTIME_ERROR


def package_create_cmd(args: Namespace) -> int:
    """Execute ``package create``."""
    output_json = getattr(args, "json", False)
    try:
        manager = build_manager(args.cli_config)
        pkg = manager.create(
            env=args.env,
            src=args.src,
            deploy=args.deploy,
            description=args.desc or "",
        )
    except FissionException as e:
        return _fail("create", e, output_json)

    summary = _summary_for("create", pkg)
    summary.message = f"package '{pkg.name}' created"
    print_summary(summary, output_json)
    return EXIT_SUCCESS


def package_update_cmd(args: Namespace) -> int:
    """Execute ``package update``."""
    output_json = getattr(args, "json", False)
    try:
        manager = build_manager(args.cli_config)
        pkg = manager.update(
            args.name,
            env=args.env,
            description=args.desc,
            src=args.src,
            deploy=args.deploy,
            force=args.force,
        )
    except FissionException as e:
        return _fail("update", e, output_json)

    summary = _summary_for("update", pkg)
    summary.message = f"package '{pkg.name}' updated"
    print_summary(summary, output_json)
    return EXIT_SUCCESS


def package_get_cmd(args: Namespace) -> int:
    """Execute ``package get``: download the package's archives."""
    output_json = getattr(args, "json", False)
    try:
        manager = build_manager(args.cli_config)
        paths = manager.download(args.name, target=args.target)
    except FissionException as e:
        return _fail("get", e, output_json)

    summary = PackageSummary(
        action="get",
        name=args.name,
        paths=[str(p) for p in paths],
        success=True,
    )
    print_summary(summary, output_json)
    return EXIT_SUCCESS


def package_info_cmd(args: Namespace) -> int:
    """Execute ``package info``."""
    output_json = getattr(args, "json", False)
    try:
        manager = build_manager(args.cli_config)
        if output_json:
            print(json.dumps(manager.get(args.name).to_wire(), indent=2))
        else:
            print(manager.info(args.name))
    except FissionException as e:
        return _fail("info", e, output_json)
    return EXIT_SUCCESS


def package_list_cmd(args: Namespace) -> int:
    """Execute ``package list``."""
    output_json = getattr(args, "json", False)
    try:
        manager = build_manager(args.cli_config)
        packages = manager.list()
    except FissionException as e:
        return _fail("list", e, output_json)

    if output_json:
        print(json.dumps([pkg.to_wire() for pkg in packages], indent=2))
    else:
        print(manager.render_list(packages))
    return EXIT_SUCCESS


def package_delete_cmd(args: Namespace) -> int:
    """
    Execute ``package delete``.

    A delete blocked by dependent functions prints a message and still
    exits successfully.
    """
    output_json = getattr(args, "json", False)
    try:
        manager = build_manager(args.cli_config)
        deleted = manager.delete(args.name, force=args.force)
    except FissionException as e:
        return _fail("delete", e, output_json)

    summary = PackageSummary(action="delete", name=args.name, success=True)
    if deleted:
        summary.message = f"Package {args.name} is deleted"
    else:
        summary.blocked = True
        summary.message = "Package is used by multiple functions, use -f to force delete"
    print_summary(summary, output_json)
    return EXIT_SUCCESS
