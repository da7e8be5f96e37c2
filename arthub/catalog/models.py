# -*- coding: utf-8 -*-
"""
Catalog Models - Data models for catalogs, artifacts and installations.

Defines the records read from and written to the catalog database, the
repository configuration consumed by the catalog service, and the value
types exchanged with callers of the installer and update checker.

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
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

# Third-party
from packaging.version import InvalidVersion, Version


ARTIFACT_TYPES = ('chatmode', 'instructions', 'prompt', 'task', 'profile')

# Install location below the install root, per artifact type.
ARTIFACT_PATHS: Dict[str, str] = {
    'chatmode': 'chatmodes',
    'instructions': 'instructions',
    'prompt': 'prompts',
    'task': 'tasks',
    'profile': 'profiles',
}

ARTIFACT_EXTENSIONS: Dict[str, str] = {
    'chatmode': '.chatmode.md',
    'instructions': '.instructions.md',
    'prompt': '.prompt.md',
    'task': '.task.md',
    'profile': '.profile.json',
}

CATALOG_STATUSES = ('healthy', 'updating', 'error')

AUTH_TYPES = ('none', 'bearer', 'basic', 'env')

SORT_ORDERS = ('relevance', 'rating', 'downloads', 'updated')


class Artifact:
    """An installable unit indexed from a catalog manifest.

    Parameters
    ----------
    id : str
        Artifact slug, unique within its catalog.
    catalog_id : str
        Owning catalog id.
    artifact_type : str
        One of ``ARTIFACT_TYPES``.
    name : str
        Display name.
    path : str
        Path of the main file inside the source repository.
    version : str
        ``MAJOR.MINOR.PATCH`` version string.
    source_url : str
        Fetchable raw-content URL derived from the catalog repository.
    description : str
        Human-readable description.
    category : str
        Category label.
    tags : Optional[List[str]]
        Search tags.
    keywords, language, framework, use_case : Optional[List[str]]
        Optional search facets.
    difficulty : Optional[str]
    estimated_time : Optional[str]
    author : Optional[Dict[str, Any]]
        ``{name, email?, url?}``.
    compatibility : Optional[Dict[str, Any]]
    metadata : Optional[Dict[str, Any]]
        Free-form metadata (rating, downloads, lastUpdated, ...).
    dependencies : Optional[List[str]]
        Ids of artifacts that must be installed first.
    supporting_files : Optional[List[str]]
        Auxiliary file paths installed alongside the main file.
    """

    def __init__(
        self,
        id: str,
        catalog_id: str,
        artifact_type: str,
        name: str,
        path: str,
        version: str,
        source_url: str = "",
        description: str = "",
        category: str = "",
        tags: Optional[List[str]] = None,
        keywords: Optional[List[str]] = None,
        language: Optional[List[str]] = None,
        framework: Optional[List[str]] = None,
        use_case: Optional[List[str]] = None,
        difficulty: Optional[str] = None,
        estimated_time: Optional[str] = None,
        author: Optional[Dict[str, Any]] = None,
        compatibility: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        dependencies: Optional[List[str]] = None,
        supporting_files: Optional[List[str]] = None,
    ) -> None:
        if artifact_type not in ARTIFACT_TYPES:
            raise ValueError(
                f"artifact_type must be one of {ARTIFACT_TYPES}, "
                f"got {artifact_type!r}"
            )
        self.id = id
        self.catalog_id = catalog_id
        self.artifact_type = artifact_type
        self.name = name
        self.path = path
        self.version = version
        self.source_url = source_url
        self.description = description
        self.category = category
        self.tags = list(tags or [])
        self.keywords = list(keywords or [])
        self.language = list(language or [])
        self.framework = list(framework or [])
        self.use_case = list(use_case or [])
        self.difficulty = difficulty
        self.estimated_time = estimated_time
        self.author = author
        self.compatibility = compatibility
        self.metadata = dict(metadata or {})
        self.dependencies = list(dependencies or [])
        self.supporting_files = list(supporting_files or [])

    @property
    def key(self) -> Tuple[str, str]:
        """``(catalog_id, id)`` identity of the artifact."""
        return (self.catalog_id, self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Artifact):
            return NotImplemented
        return self.key == other.key and self.version == other.version

    def __hash__(self) -> int:
        return hash((self.key, self.version))

    def __repr__(self) -> str:
        return (
            f"Artifact(id={self.id!r}, catalog={self.catalog_id!r}, "
            f"version={self.version!r}, type={self.artifact_type!r})"
        )


class CatalogRecord:
    """Local sync state of a registered catalog.

    Parameters
    ----------
    id : str
    url : str
        Manifest URL.
    enabled : bool
    metadata : Dict[str, Any]
        The manifest's ``catalog`` block as last fetched.
    status : str
        One of ``CATALOG_STATUSES``.
    error : Optional[str]
        Last refresh failure message.
    last_fetched, created_at, updated_at : Optional[datetime]
    artifact_count : int
    """

    def __init__(
        self,
        id: str,
        url: str,
        enabled: bool = True,
        metadata: Optional[Dict[str, Any]] = None,
        status: str = 'healthy',
        error: Optional[str] = None,
        last_fetched: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        artifact_count: int = 0,
    ) -> None:
        if status not in CATALOG_STATUSES:
            raise ValueError(
                f"status must be one of {CATALOG_STATUSES}, got {status!r}"
            )
        self.id = id
        self.url = url
        self.enabled = enabled
        self.metadata = dict(metadata or {})
        self.status = status
        self.error = error
        self.last_fetched = last_fetched
        self.created_at = created_at
        self.updated_at = updated_at
        self.artifact_count = artifact_count

    @property
    def name(self) -> str:
        return self.metadata.get('name', self.id)

    def __repr__(self) -> str:
        return (
            f"CatalogRecord(id={self.id!r}, status={self.status!r}, "
            f"artifacts={self.artifact_count})"
        )


class Installation:
    """Record of an artifact materialized in the workspace.

    Parameters
    ----------
    id : int
        Database row ID.
    artifact_id : str
    catalog_id : str
    version : str
        Version that was installed.
    installed_path : str
        Absolute path of the main file.
    installed_at : Optional[datetime]
    last_used : Optional[datetime]
    """

    def __init__(
        self,
        id: int,
        artifact_id: str,
        catalog_id: str,
        version: str,
        installed_path: str,
        installed_at: Optional[datetime] = None,
        last_used: Optional[datetime] = None,
    ) -> None:
        self.id = id
        self.artifact_id = artifact_id
        self.catalog_id = catalog_id
        self.version = version
        self.installed_path = installed_path
        self.installed_at = installed_at
        self.last_used = last_used

    def __repr__(self) -> str:
        return (
            f"Installation({self.catalog_id}/{self.artifact_id}"
            f"@{self.version})"
        )


@dataclass
class AuthConfig:
    """How to authenticate against a catalog's host.

    ``env`` reads a token from ``env_var`` (or ``ARTHUB_TOKEN_<ID>``).
    """

    type: str = 'none'
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    env_var: Optional[str] = None

    def __post_init__(self) -> None:
        if self.type not in AUTH_TYPES:
            raise ValueError(
                f"auth type must be one of {AUTH_TYPES}, got {self.type!r}"
            )


@dataclass
class Credential:
    """A resolved credential handed to every authenticated fetch."""

    kind: str
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def __repr__(self) -> str:
        return f"Credential(kind={self.kind!r})"


@dataclass
class CatalogRepoConfig:
    """A configured catalog source."""

    id: str
    url: str
    enabled: bool = True
    auth: Optional[AuthConfig] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CatalogRepoConfig':
        auth = data.get('auth')
        return cls(
            id=data['id'],
            url=data['url'],
            enabled=bool(data.get('enabled', True)),
            auth=AuthConfig(**auth) if auth else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': self.id, 'url': self.url, 'enabled': self.enabled,
        }
        if self.auth is not None:
            # Secrets stay out of the config file.
            data['auth'] = {
                'type': self.auth.type,
                'username': self.auth.username,
                'env_var': self.auth.env_var,
            }
        return data


@dataclass
class SearchQuery:
    """Search parameters for :meth:`CatalogDatabase.search`.

    List-valued filters match when any listed value matches.
    """

    query: Optional[str] = None
    types: List[str] = field(default_factory=list)
    language: List[str] = field(default_factory=list)
    framework: List[str] = field(default_factory=list)
    category: List[str] = field(default_factory=list)
    difficulty: List[str] = field(default_factory=list)
    catalog: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    sort_by: str = 'relevance'
    page: int = 1
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.sort_by not in SORT_ORDERS:
            raise ValueError(
                f"sort_by must be one of {SORT_ORDERS}, got {self.sort_by!r}"
            )
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")


@dataclass
class SearchResult:
    artifacts: List[Artifact]
    total: int
    page: int
    page_size: int
    has_more: bool


@dataclass
class ConflictResolution:
    """Caller's answer to an install target that already exists.

    ``action`` is ``replace``, ``keep`` or ``rename``; ``new_name`` is the
    replacement base name (without extension) for ``rename``.
    """

    action: str
    new_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.action not in ('replace', 'keep', 'rename'):
            raise ValueError(f"Unknown conflict action {self.action!r}")
        if self.action == 'rename' and not self.new_name:
            raise ValueError("rename requires new_name")


@dataclass
class InstallResult:
    success: bool
    artifact: Artifact
    path: str
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    dependencies: List['InstallResult'] = field(default_factory=list)


class UpdateResult:
    """Result of comparing one installation against its catalog.

    Parameters
    ----------
    installation : Installation
    artifact : Optional[Artifact]
        Current catalog entry, or None if it no longer exists.
    latest_version : Optional[str]
        Version currently listed in the catalog.
    update_available : bool
        True when the listed version differs from the installed one.
    """

    def __init__(
        self,
        installation: Installation,
        artifact: Optional[Artifact] = None,
        latest_version: Optional[str] = None,
        update_available: bool = False,
    ) -> None:
        self.installation = installation
        self.artifact = artifact
        self.latest_version = latest_version
        self.update_available = update_available

    @property
    def current_version(self) -> str:
        return self.installation.version

    @property
    def is_downgrade(self) -> bool:
        """True when the catalog lists an older version than installed."""
        if not self.update_available or self.latest_version is None:
            return False
        try:
            return Version(self.latest_version) < Version(self.current_version)
        except InvalidVersion:
            return False

    def __repr__(self) -> str:
        name = self.installation.artifact_id
        if self.update_available:
            return (
                f"UpdateResult({name!r}: "
                f"{self.current_version} -> {self.latest_version})"
            )
        return f"UpdateResult({name!r}: up to date)"
