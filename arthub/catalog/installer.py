# -*- coding: utf-8 -*-
"""
Artifact Installer - Install, update and uninstall catalog artifacts.

Materializes artifacts as plain files in the workspace. An install
resolves and installs missing dependencies first, settles file conflicts
with the caller, downloads the main file and any supporting files, and
records the installation in the catalog database.

Dependencies
------------
requests

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
from pathlib import Path, PurePosixPath
from typing import Callable, List, Optional, Tuple, Union

# Third-party
import requests

logger = logging.getLogger(__name__)

# Artifact Hub internal
from arthub.catalog.database import CatalogDatabase
from arthub.catalog.dependencies import DependencyResolver
from arthub.catalog.exceptions import (
    AlreadyInstalledError,
    ArthubError,
    ArtifactNotFoundError,
    FileConflictError,
    NotInstalledError,
)
from arthub.catalog.filesystem import LocalFileSystem
from arthub.catalog.http import HttpClient
from arthub.catalog.models import (
    ARTIFACT_EXTENSIONS,
    ARTIFACT_PATHS,
    Artifact,
    ConflictResolution,
    Credential,
    InstallResult,
    Installation,
)
from arthub.catalog.urls import catalog_base_url

DEFAULT_INSTALL_ROOT = ".github"

ConflictHandler = Callable[[Artifact, Path], Optional[ConflictResolution]]
CredentialLookup = Callable[[str], Optional[Credential]]


def extract_relative_path(file_path: str, artifact_id: str) -> str:
    """Path of a supporting file below its artifact's directory.

    ``chatmodes/x/.ceo-advisor/scripts/a.py`` -> ``scripts/a.py`` for
    artifact ``ceo-advisor``. Both ``<id>/`` and ``.<id>/`` layouts are
    recognized; otherwise only the file name is kept.
    """
    parts = [p for p in file_path.split('/') if p]
    if not parts:
        return file_path
    for marker in (f".{artifact_id}", artifact_id):
        if marker in parts:
            index = parts.index(marker)
            if index < len(parts) - 1:
                return '/'.join(parts[index + 1:])
    return parts[-1]


class ArtifactInstaller:
    """Drives install, update and uninstall of artifacts in a workspace.

    Installs never raise: every failure comes back as an
    :class:`InstallResult` with ``success=False`` so dependency chains
    and batch callers can decide what to do.

    Parameters
    ----------
    database : CatalogDatabase
    workspace_root : Path
        Root of the project tree artifacts are installed into.
    http : Optional[HttpClient]
    resolver : Optional[DependencyResolver]
    filesystem : Optional[LocalFileSystem]
    credentials : Optional[CredentialLookup]
        Catalog id -> credential for downloads; anonymous if None.
    """

    def __init__(
        self,
        database: CatalogDatabase,
        workspace_root: Union[str, Path],
        http: Optional[HttpClient] = None,
        resolver: Optional[DependencyResolver] = None,
        filesystem: Optional[LocalFileSystem] = None,
        credentials: Optional[CredentialLookup] = None,
    ) -> None:
        self._db = database
        self._workspace = Path(workspace_root)
        self._http = http or HttpClient()
        self._resolver = resolver or DependencyResolver(database)
        self._fs = filesystem or LocalFileSystem()
        self._credentials = credentials or (lambda catalog_id: None)

    def target_path(self, artifact: Artifact, install_root: str) -> Path:
        """Where an artifact's main file goes, by artifact type."""
        filename = f"{artifact.id}{ARTIFACT_EXTENSIONS[artifact.artifact_type]}"
        return (
            self._workspace / install_root
            / ARTIFACT_PATHS[artifact.artifact_type] / filename
        )

    def supporting_dir(
        self,
        artifact_id: str,
        main_path: Path,
        install_root: Optional[str] = None,
    ) -> Path:
        """Directory holding an artifact's supporting files.

        ``<install_root>/.<id>``; without an install root it is derived
        from the main file, which lives in ``<install_root>/<type dir>/``.
        """
        if install_root is not None:
            return self._workspace / install_root / f".{artifact_id}"
        return main_path.parent.parent / f".{artifact_id}"

    def _legacy_supporting_dirs(self, artifact_id: str, main_path: Path) -> List[Path]:
        return [
            self._workspace / f".{artifact_id}",
            main_path.parent / artifact_id,
        ]

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    def install(
        self,
        artifact: Artifact,
        install_root: str = DEFAULT_INSTALL_ROOT,
        resolve_conflict: Optional[ConflictHandler] = None,
    ) -> InstallResult:
        """Install an artifact and its missing dependencies.

        Parameters
        ----------
        artifact : Artifact
        install_root : str
            Install root relative to the workspace.
        resolve_conflict : Optional[ConflictHandler]
            Called with ``(artifact, path)`` when a target file exists.
            Returning None cancels. Without a handler a conflict fails
            the install.

        Returns
        -------
        InstallResult
        """
        try:
            if self._db.get_installation(artifact.catalog_id, artifact.id):
                raise AlreadyInstalledError(artifact.catalog_id, artifact.id)

            resolution = self._resolver.resolve(artifact)
            target, refusal = self._settle_conflict(
                artifact, self.target_path(artifact, install_root),
                resolve_conflict,
            )
            if target is None:
                return InstallResult(
                    success=False, artifact=artifact,
                    path=str(self.target_path(artifact, install_root)),
                    error=refusal, warnings=list(resolution.warnings),
                )

            dependency_results: List[InstallResult] = []
            for dependency in resolution.artifacts:
                if dependency.key == artifact.key:
                    continue
                if self._db.get_installation(dependency.catalog_id, dependency.id):
                    continue
                result = self._install_one(
                    dependency, install_root, resolve_conflict
                )
                dependency_results.append(result)
                if not result.success:
                    return InstallResult(
                        success=False, artifact=artifact, path=str(target),
                        error=(
                            f"Dependency '{dependency.id}' failed to "
                            f"install: {result.error}"
                        ),
                        warnings=list(resolution.warnings),
                        dependencies=dependency_results,
                    )

            result = self._perform_install(artifact, target, install_root)
            result.warnings = list(resolution.warnings) + result.warnings
            result.dependencies = dependency_results
            return result
        except Exception as e:
            logger.error("Install of '%s' failed: %s", artifact.id, e)
            return InstallResult(
                success=False, artifact=artifact, path='',
                error=str(e) or type(e).__name__,
            )

    def _install_one(
        self,
        artifact: Artifact,
        install_root: str,
        resolve_conflict: Optional[ConflictHandler],
    ) -> InstallResult:
        """Install a single already-resolved dependency."""
        default_target = self.target_path(artifact, install_root)
        target, refusal = self._settle_conflict(
            artifact, default_target, resolve_conflict
        )
        if target is None:
            return InstallResult(
                success=False, artifact=artifact, path=str(default_target),
                error=refusal,
            )
        return self._perform_install(artifact, target, install_root)

    def _settle_conflict(
        self,
        artifact: Artifact,
        target: Path,
        resolve_conflict: Optional[ConflictHandler],
    ) -> Tuple[Optional[Path], Optional[str]]:
        """Return the path to write to, or None with the reason not to."""
        if not self._fs.exists(target):
            return target, None
        if resolve_conflict is None:
            return None, str(FileConflictError(str(target)))

        resolution = resolve_conflict(artifact, target)
        if resolution is None:
            return None, "Installation cancelled"
        if resolution.action == 'keep':
            return None, "Keeping existing file"
        if resolution.action == 'rename':
            extension = ARTIFACT_EXTENSIONS[artifact.artifact_type]
            return target.parent / f"{resolution.new_name}{extension}", None
        return target, None

    def _perform_install(
        self,
        artifact: Artifact,
        target: Path,
        install_root: Optional[str],
    ) -> InstallResult:
        """Download and write the files, then record the installation."""
        credential = self._credentials(artifact.catalog_id)
        try:
            content = self._http.fetch_text(artifact.source_url, credential)
            self._fs.create_directory(target.parent)
            self._fs.write_text(target, content)
        except (requests.RequestException, ArthubError) as e:
            return InstallResult(
                success=False, artifact=artifact, path=str(target),
                error=str(e) or type(e).__name__,
            )

        warnings = self._install_supporting_files(
            artifact, self.supporting_dir(artifact.id, target, install_root),
            credential,
        )

        try:
            self._db.record_installation(
                artifact.catalog_id, artifact.id, artifact.version, str(target)
            )
        except ArthubError as e:
            return InstallResult(
                success=False, artifact=artifact, path=str(target),
                error=str(e), warnings=warnings,
            )

        logger.info(
            "Installed %s/%s %s at %s",
            artifact.catalog_id, artifact.id, artifact.version, target,
        )
        return InstallResult(
            success=True, artifact=artifact, path=str(target),
            warnings=warnings,
        )

    def _install_supporting_files(
        self,
        artifact: Artifact,
        directory: Path,
        credential: Optional[Credential],
    ) -> List[str]:
        """Best-effort download of supporting files; returns warnings."""
        if not artifact.supporting_files:
            return []

        base_url = catalog_base_url(artifact.source_url, artifact.path)
        warnings: List[str] = []
        for file_path in artifact.supporting_files:
            relative = PurePosixPath(
                extract_relative_path(file_path, artifact.id)
            )
            destination = directory / relative
            if (relative.is_absolute() or '..' in relative.parts
                    or not destination.resolve().is_relative_to(
                        directory.resolve())):
                logger.warning(
                    "Skipped supporting file %s: path leaves %s",
                    file_path, directory,
                )
                warnings.append(f"Skipped supporting file {file_path}: "
                                f"path leaves the artifact directory")
                continue
            try:
                content = self._http.fetch_text(
                    f"{base_url}/{file_path}", credential
                )
                self._fs.create_directory(destination.parent)
                self._fs.write_text(destination, content)
            except (requests.RequestException, ArthubError) as e:
                logger.warning(
                    "Failed to download supporting file %s: %s", file_path, e
                )
                warnings.append(
                    f"Failed to download supporting file {file_path}: {e}"
                )
        return warnings

    # ------------------------------------------------------------------
    # Update / uninstall
    # ------------------------------------------------------------------

    def update(
        self,
        catalog_id: str,
        artifact_id: str,
        install_root: Optional[str] = None,
    ) -> InstallResult:
        """Re-download an installed artifact in place at the catalog's version.

        Raises
        ------
        NotInstalledError
            If the artifact has no installation record.
        ArtifactNotFoundError
            If the catalog no longer lists the artifact.
        """
        installation = self._db.get_installation(catalog_id, artifact_id)
        if installation is None:
            raise NotInstalledError(catalog_id, artifact_id)
        artifact = self._db.get_artifact(catalog_id, artifact_id)
        if artifact is None:
            raise ArtifactNotFoundError(catalog_id, artifact_id)

        logger.info(
            "Updating %s/%s %s -> %s", catalog_id, artifact_id,
            installation.version, artifact.version,
        )
        return self._perform_install(
            artifact, Path(installation.installed_path), install_root
        )

    def uninstall(
        self,
        catalog_id: str,
        artifact_id: str,
        confirmed: bool = False,
    ) -> bool:
        """Delete an installed artifact's files and its record.

        Nothing is touched unless ``confirmed`` is True.

        Returns
        -------
        bool
            True if the artifact was uninstalled.

        Raises
        ------
        NotInstalledError
            If the artifact has no installation record.
        """
        installation = self._db.get_installation(catalog_id, artifact_id)
        if installation is None:
            raise NotInstalledError(catalog_id, artifact_id)
        if not confirmed:
            logger.info(
                "Uninstall of %s/%s not confirmed; nothing deleted",
                catalog_id, artifact_id,
            )
            return False

        main_path = Path(installation.installed_path)
        try:
            self._fs.delete(main_path)
        except ArthubError as e:
            logger.error("Failed to delete main file: %s", e)

        for directory in [self.supporting_dir(artifact_id, main_path)] + \
                self._legacy_supporting_dirs(artifact_id, main_path):
            if not self._fs.exists(directory):
                continue
            try:
                self._fs.delete(directory, recursive=True)
            except ArthubError as e:
                logger.error("Failed to delete supporting files: %s", e)

        self._db.delete_installation(catalog_id, artifact_id)
        logger.info("Uninstalled %s/%s", catalog_id, artifact_id)
        return True

    def list_installations(self) -> List[Installation]:
        return self._db.list_installations()
