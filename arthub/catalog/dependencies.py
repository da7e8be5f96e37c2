# -*- coding: utf-8 -*-
"""
Dependency Resolver - Order the prerequisites of an artifact install.

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-06

Modified
--------
2026-02-06
"""

# Standard library
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

# Artifact Hub internal
from arthub.catalog.database import CatalogDatabase, _fts_expression
from arthub.catalog.exceptions import DependencyNotFoundError
from arthub.catalog.models import Artifact, SearchQuery


@dataclass
class DependencyResolution:
    """Artifacts to install before the target, prerequisites first.

    ``warnings`` lists dependency cycles that were cut short.
    """

    artifacts: List[Artifact] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class DependencyResolver:
    """Resolves artifact dependencies against the catalog database.

    A dependency id is looked up in the dependent's own catalog first,
    then by exact id across enabled catalogs, then by a global search
    with the id as query (top hit wins). Ids with no searchable terms
    never fall through to the search.

    Parameters
    ----------
    database : CatalogDatabase
    """

    def __init__(self, database: CatalogDatabase) -> None:
        self._db = database

    def lookup(self, dependency_id: str, catalog_id: str) -> Optional[Artifact]:
        """Find the artifact a dependency id refers to, or None."""
        artifact = self._db.get_artifact(catalog_id, dependency_id)
        if artifact is None:
            artifact = self._db.find_artifact(dependency_id)
        if artifact is not None:
            return artifact
        if _fts_expression(dependency_id) is None:
            return None
        result = self._db.search(SearchQuery(query=dependency_id, page_size=1))
        return result.artifacts[0] if result.artifacts else None

    def resolve(self, artifact: Artifact) -> DependencyResolution:
        """Compute the not-yet-installed dependencies of ``artifact``.

        Depth-first and post-order: transitive dependencies precede the
        dependency that needs them, and each id appears once. An id seen
        earlier in the same resolution is skipped; if it is still on the
        current path (a cycle) a warning is recorded instead of an error.

        Raises
        ------
        DependencyNotFoundError
            If a dependency matches nothing in any catalog.
        """
        resolution = DependencyResolution()
        visited: Set[str] = set()
        for dependency_id in artifact.dependencies:
            self._visit(
                dependency_id, artifact.catalog_id, (artifact.id,),
                visited, resolution,
            )
        return resolution

    def _visit(
        self,
        dependency_id: str,
        catalog_id: str,
        chain: Tuple[str, ...],
        visited: Set[str],
        resolution: DependencyResolution,
    ) -> None:
        if dependency_id in visited:
            if dependency_id in chain:
                cycle = ' -> '.join(chain + (dependency_id,))
                logger.warning("Dependency cycle: %s", cycle)
                resolution.warnings.append(f"Dependency cycle: {cycle}")
            return
        visited.add(dependency_id)

        dependency = self.lookup(dependency_id, catalog_id)
        if dependency is None:
            raise DependencyNotFoundError(dependency_id)

        if self._db.get_installation(dependency.catalog_id, dependency.id):
            return

        for transitive_id in dependency.dependencies:
            self._visit(
                transitive_id, dependency.catalog_id,
                chain + (dependency_id,), visited, resolution,
            )
        resolution.artifacts.append(dependency)
