# -*- coding: utf-8 -*-
"""
Catalog Exceptions - Error taxonomy for catalog indexing and installation.

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
from typing import List, Optional, Tuple


class ArthubError(Exception):
    """Base exception for all artifact hub errors."""
    pass


class ValidationError(ArthubError):
    """A fetched catalog manifest failed structural validation.

    Parameters
    ----------
    errors : List[Tuple[str, str]]
        Every offending ``(field, message)`` pair found in the document.
    """

    def __init__(self, errors: List[Tuple[str, str]]) -> None:
        self.errors = list(errors)
        details = '; '.join(
            f"{field}: {message}" if field else message
            for field, message in self.errors
        )
        super().__init__(f"Invalid catalog format: {details}")


class ConflictError(ArthubError):
    """Something with the same identity already exists."""
    pass


class CatalogConflictError(ConflictError):
    """A catalog with the same id or URL is already registered."""

    def __init__(self, catalog_id: str, detail: Optional[str] = None) -> None:
        self.catalog_id = catalog_id
        message = f"Catalog '{catalog_id}' conflicts with an existing catalog"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class FileConflictError(ConflictError):
    """The install target file already exists."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File already exists: {path}")


class NotFoundError(ArthubError):
    """Base for lookups that came back empty."""
    pass


class CatalogNotFoundError(NotFoundError):
    def __init__(self, catalog_id: str) -> None:
        self.catalog_id = catalog_id
        super().__init__(f"Catalog {catalog_id} not found")


class ArtifactNotFoundError(NotFoundError):
    """The artifact is not (or no longer) present in its catalog."""

    def __init__(self, catalog_id: str, artifact_id: str) -> None:
        self.catalog_id = catalog_id
        self.artifact_id = artifact_id
        super().__init__(
            f"Artifact '{artifact_id}' not found in catalog '{catalog_id}'"
        )


class NotInstalledError(NotFoundError):
    def __init__(self, catalog_id: str, artifact_id: str) -> None:
        self.catalog_id = catalog_id
        self.artifact_id = artifact_id
        super().__init__(
            f"Artifact '{artifact_id}' from catalog '{catalog_id}' "
            f"is not installed"
        )


class DependencyNotFoundError(NotFoundError):
    def __init__(self, dependency_id: str) -> None:
        self.dependency_id = dependency_id
        super().__init__(f"Dependency not found: {dependency_id}")


class AlreadyInstalledError(ArthubError):
    def __init__(self, catalog_id: str, artifact_id: str) -> None:
        self.catalog_id = catalog_id
        self.artifact_id = artifact_id
        super().__init__(
            f"Artifact '{artifact_id}' is already installed. "
            f"Use update instead."
        )


class FileSystemError(ArthubError):
    """A write or delete against the workspace failed."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")
