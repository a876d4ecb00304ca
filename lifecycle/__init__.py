"""
Package Lifecycle

Archive resolution, package record management, dependent-function
consistency and archive transfer.

Public API:
- PackageManager: create/update/get/list/info/download/delete packages
- ArchiveResolver: local file -> literal or uploaded archive
- ArchiveTransfer: archive -> local file (zip detected by content)
- DependentFunctionQuery: functions referencing a package
"""

from lifecycle.archives import ArchiveResolver
from lifecycle.dependents import DependentFunctionQuery
from lifecycle.manager import PackageManager, generate_package_name
from lifecycle.transfer import ArchiveTransfer, is_zip_file, proxy_url_for
from lifecycle.views import render_package_info, render_package_table

__all__ = [
    "ArchiveResolver",
    "ArchiveTransfer",
    "DependentFunctionQuery",
    "PackageManager",
    "generate_package_name",
    "is_zip_file",
    "proxy_url_for",
    "render_package_info",
    "render_package_table",
]
