"""
Function-Package Consistency

Finds the functions that depend on a package and re-points them at a new
package revision. The lookup lists every function and filters client-side;
it sits behind DependentFunctionQuery so an indexed server-side lookup can
replace it without touching callers.
"""

from __future__ import annotations

import logging

from core.schemas import Function, PersistException, ResourceClientException

from controller import ResourceClient


logger = logging.getLogger(__name__)


class DependentFunctionQuery:
    """Dependent-function lookup and re-pointing over a resource client."""

    def __init__(self, client: ResourceClient) -> None:
        self.client = client

    def list_functions_referencing(self, package_name: str) -> list[Function]:
        """
        Functions whose package reference names ``package_name``, in list order.

        Returns an empty list when nothing references the package.
        """
        return [
            fn for fn in self.client.function_list()
            if fn.package_name == package_name
        ]

    def repoint(self, functions: list[Function], resource_version: str) -> list[Function]:
        """
        Point each function's package reference at ``resource_version``.

        Functions are updated one at a time in order. The first failure
        raises PersistException; functions updated before it keep their new
        reference, there is no rollback.

        Returns:
            The updated function records
        """
        updated: list[Function] = []
        for fn in functions:
            new_fn = fn.with_package_version(resource_version)
            try:
                meta = self.client.function_update(new_fn)
            except ResourceClientException as e:
                if updated:
                    logger.error(
                        f"Function {fn.name} update failed after re-pointing "
                        f"{', '.join(f.name for f in updated)}; those are not rolled back"
                    )
                raise PersistException(
                    f"Failed to update function {fn.name}: {e.message}",
                    kind="function",
                    name=fn.name,
                    status_code=e.status_code,
                ) from e
            updated.append(new_fn.model_copy(update={"metadata": meta}))
            logger.debug(f"Function {fn.name} now references package version {resource_version}")
        return updated
