"""
Test fixtures package for the package lifecycle tests.

Provides factory functions and collaborator fakes:
- common.py: record factories, fake storage, manager wiring

Usage:
    from fixtures import make_package, make_function

    def test_something():
        pkg = make_package(name="pkg1")
        fn = make_function(name="fn1", package_name="pkg1")
"""

from .common import (
    SERVER_URL,
    FakeStorage,
    make_function,
    make_manager,
    make_package,
    make_response,
)

__all__ = [
    "SERVER_URL",
    "FakeStorage",
    "make_function",
    "make_manager",
    "make_package",
    "make_response",
]
