"""
Fission CLI

Command-line interface for managing function packages.

Usage:
    python -m fission_cli package create --env python --src handler.py
    python -m fission_cli package list
    python -m fission_cli package delete --name <name>
"""

__version__ = "0.1.0"
