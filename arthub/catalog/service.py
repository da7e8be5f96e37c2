# -*- coding: utf-8 -*-
"""
Catalog Service - Register, refresh and remove remote catalogs.

Fetches a catalog manifest, validates it, resolves the source URL of every
artifact and writes the catalog row plus its artifact set to the catalog
database in a single transaction.

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
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

# Artifact Hub internal
from arthub.catalog.database import CatalogDatabase
from arthub.catalog.exceptions import (
    ArthubError,
    CatalogConflictError,
    CatalogNotFoundError,
)
from arthub.catalog.filesystem import LocalFileSystem
from arthub.catalog.http import AuthResolver, HttpClient
from arthub.catalog.manifest import CatalogManifest, validate_manifest
from arthub.catalog.models import (
    Artifact,
    CatalogRecord,
    CatalogRepoConfig,
    Credential,
)
from arthub.catalog.urls import resolve_artifact_url


def build_artifacts(manifest: CatalogManifest, catalog_id: str) -> List[Artifact]:
    """Index the manifest's artifacts with their resolved source URLs."""
    repository = manifest.catalog.repository
    return [
        entry.to_artifact(
            catalog_id, resolve_artifact_url(repository, entry.path)
        )
        for entry in manifest.artifacts
    ]


def _catalog_metadata(manifest: CatalogManifest) -> Dict:
    return manifest.catalog.model_dump(by_alias=True, exclude_none=True)


class CatalogService:
    """Keeps the local catalog database in sync with remote manifests.

    Parameters
    ----------
    database : CatalogDatabase
    http : HttpClient
    auth : Optional[AuthResolver]
        Credential resolution; anonymous access if None.
    filesystem : Optional[LocalFileSystem]
        Used to delete installed files when a catalog is removed.
    """

    def __init__(
        self,
        database: CatalogDatabase,
        http: HttpClient,
        auth: Optional[AuthResolver] = None,
        filesystem: Optional[LocalFileSystem] = None,
    ) -> None:
        self._db = database
        self._http = http
        self._auth = auth or AuthResolver()
        self._fs = filesystem or LocalFileSystem()

    def _credential(self, config: CatalogRepoConfig) -> Optional[Credential]:
        return self._auth.resolve(config.id, config.auth)

    def fetch_manifest(
        self,
        url: str,
        credential: Optional[Credential] = None,
    ) -> CatalogManifest:
        """Download and validate a catalog manifest.

        Raises
        ------
        ValidationError
            If the document is not a valid catalog.
        requests.RequestException
            On transport failures.
        """
        return validate_manifest(self._http.fetch_json(url, credential))

    def add_catalog(self, config: CatalogRepoConfig) -> CatalogRecord:
        """Fetch a new catalog and index its artifacts.

        Raises
        ------
        CatalogConflictError
            If the id or URL is already registered.
        """
        if self._db.get_catalog(config.id) is not None:
            raise CatalogConflictError(config.id, "id already registered")

        manifest = self.fetch_manifest(config.url, self._credential(config))
        artifacts = build_artifacts(manifest, config.id)
        with self._db.transaction():
            self._db.add_catalog(
                config.id, config.url, _catalog_metadata(manifest),
                enabled=config.enabled,
            )
            self._db.replace_artifacts(config.id, artifacts)

        logger.info(
            "Added catalog '%s' with %d artifacts", config.id, len(artifacts)
        )
        return self._db.get_catalog(config.id)

    def refresh_catalog(self, config: CatalogRepoConfig) -> CatalogRecord:
        """Re-fetch a catalog and atomically replace its artifact set.

        A catalog present in the configuration but not yet in the
        database is registered. On failure the catalog is marked
        ``error`` with the failure message and the exception re-raised.
        """
        known = self._db.get_catalog(config.id) is not None
        if known:
            self._db.set_catalog_status(config.id, 'updating')

        try:
            manifest = self.fetch_manifest(config.url, self._credential(config))
            artifacts = build_artifacts(manifest, config.id)
            with self._db.transaction():
                self._db.upsert_catalog(
                    config.id, config.url, _catalog_metadata(manifest),
                    enabled=config.enabled, status='healthy', error=None,
                )
                self._db.replace_artifacts(config.id, artifacts)
        except Exception as e:
            if known:
                self._db.set_catalog_status(config.id, 'error', str(e) or type(e).__name__)
            raise

        logger.info(
            "Refreshed catalog '%s' (%d artifacts)", config.id, len(artifacts)
        )
        return self._db.get_catalog(config.id)

    def refresh_all(self, configs: Sequence[CatalogRepoConfig]) -> Dict[str, Optional[str]]:
        """Refresh every enabled catalog, one at a time.

        A failing catalog is logged and skipped so it cannot block the
        others.

        Returns
        -------
        Dict[str, Optional[str]]
            Catalog id -> error message, None for success.
        """
        outcome: Dict[str, Optional[str]] = {}
        for config in configs:
            if not config.enabled:
                continue
            try:
                self.refresh_catalog(config)
                outcome[config.id] = None
            except Exception as e:
                logger.error("Failed to refresh catalog %s: %s", config.id, e)
                outcome[config.id] = str(e) or type(e).__name__
        return outcome

    def update_catalog(
        self,
        catalog_id: str,
        enabled: Optional[bool] = None,
        url: Optional[str] = None,
    ) -> CatalogRecord:
        """Change a catalog's enabled flag and/or manifest URL."""
        if not self._db.update_catalog_settings(catalog_id, enabled=enabled, url=url):
            raise CatalogNotFoundError(catalog_id)
        return self._db.get_catalog(catalog_id)

    def remove_catalog(self, catalog_id: str, confirmed: bool = False) -> bool:
        """Remove a catalog, its artifacts and its installed files.

        When artifacts of the catalog are installed, their files are
        deleted too; that only happens with ``confirmed=True``.

        Returns
        -------
        bool
            True if the catalog was removed, False if confirmation was
            required and not given.
        """
        if self._db.get_catalog(catalog_id) is None:
            raise CatalogNotFoundError(catalog_id)

        installations = self._db.list_installations(catalog_id)
        if installations and not confirmed:
            logger.info(
                "Not removing catalog '%s': %d installed artifact(s) "
                "need confirmation", catalog_id, len(installations),
            )
            return False

        for installation in installations:
            try:
                self._fs.delete(installation.installed_path, recursive=True)
            except ArthubError as e:
                logger.error(
                    "Failed to delete %s: %s", installation.installed_path, e
                )

        self._db.delete_catalog(catalog_id)
        logger.info("Removed catalog '%s'", catalog_id)
        return True

    def list_catalogs(self) -> List[CatalogRecord]:
        return self._db.list_catalogs()
