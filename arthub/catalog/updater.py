# -*- coding: utf-8 -*-
"""
Update Checker - Compare installed artifacts against their catalogs.

Reports, per installation of an enabled configured catalog, whether the
catalog currently lists a different version than the one installed.

Dependencies
------------
packaging

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
from typing import List, Sequence

logger = logging.getLogger(__name__)

# Artifact Hub internal
from arthub.catalog.database import CatalogDatabase
from arthub.catalog.models import CatalogRepoConfig, UpdateResult


class UpdateChecker:
    """Checks installed artifacts for newer catalog versions.

    Parameters
    ----------
    database : CatalogDatabase
        The catalog database to check.
    """

    def __init__(self, database: CatalogDatabase) -> None:
        self._db = database

    def check(self, configs: Sequence[CatalogRepoConfig]) -> List[UpdateResult]:
        """Check every installation of the enabled configured catalogs.

        Any version string that differs from the installed one counts as
        an update, older versions included.

        Parameters
        ----------
        configs : Sequence[CatalogRepoConfig]
            Configured catalogs; disabled ones are skipped.

        Returns
        -------
        List[UpdateResult]
            One result per installation.
        """
        results: List[UpdateResult] = []
        for config in configs:
            if not config.enabled:
                continue
            for installation in self._db.list_installations(config.id):
                artifact = self._db.get_artifact(
                    installation.catalog_id, installation.artifact_id
                )
                if artifact is None:
                    logger.warning(
                        "Installed artifact %s/%s is no longer in its catalog",
                        installation.catalog_id, installation.artifact_id,
                    )
                    results.append(UpdateResult(installation))
                    continue
                results.append(UpdateResult(
                    installation,
                    artifact=artifact,
                    latest_version=artifact.version,
                    update_available=artifact.version != installation.version,
                ))

        logger.info(
            "Update check: %d installation(s), %d update(s) available",
            len(results), sum(1 for r in results if r.update_available),
        )
        return results

    def available(self, configs: Sequence[CatalogRepoConfig]) -> List[UpdateResult]:
        """Only the results with an update available."""
        return [r for r in self.check(configs) if r.update_available]
