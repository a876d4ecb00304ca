"""
CLI command modules.
"""

from fission_cli.commands import package

__all__ = ["package"]
