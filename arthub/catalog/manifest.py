# -*- coding: utf-8 -*-
"""
Catalog Manifest - Schema and validation for remote catalog documents.

A catalog manifest is the JSON document published by a catalog
repository. It carries the catalog metadata, the list of artifacts and an
optional list of profiles (named bundles of artifact references). The
whole document is validated in one pass; every offending field is
reported together.

Dependencies
------------
pydantic

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
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple
from urllib.parse import urlparse

# Third-party
import pydantic
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

# Artifact Hub internal
from arthub.catalog.exceptions import ValidationError
from arthub.catalog.models import Artifact


SLUG_PATTERN = r'^[a-z0-9-]+$'
SEMVER_PATTERN = r'^\d+\.\d+\.\d+$'
_EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("Invalid url")
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]


class _ManifestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class Author(_ManifestModel):
    name: str
    email: Optional[str] = Field(default=None, pattern=_EMAIL_PATTERN)
    url: Optional[UrlStr] = None


class Repository(_ManifestModel):
    """Where a catalog's artifact files live.

    ``type`` selects the URL layout (``github``, ``gitlab``, anything
    else is treated as a generic web directory).
    """

    type: str
    url: UrlStr
    branch: Optional[str] = None


class Compatibility(_ManifestModel):
    vscode: Optional[str] = None
    copilot: Optional[str] = None


class ManifestArtifact(_ManifestModel):
    id: str = Field(pattern=SLUG_PATTERN)
    type: Literal['chatmode', 'instructions', 'prompt', 'task', 'profile']
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    path: str
    version: str = Field(pattern=SEMVER_PATTERN)
    author: Optional[Author] = None
    category: str
    tags: List[str] = Field(min_length=1, max_length=20)
    keywords: Optional[List[str]] = None
    language: Optional[List[str]] = None
    framework: Optional[List[str]] = None
    use_case: Optional[List[str]] = Field(default=None, alias='useCase')
    difficulty: Optional[str] = None
    estimated_time: Optional[str] = Field(default=None, alias='estimatedTime')
    compatibility: Optional[Compatibility] = None
    dependencies: List[str] = Field(default_factory=list)
    supporting_files: Optional[List[str]] = Field(
        default=None, alias='supportingFiles'
    )
    metadata: Optional[Dict[str, Any]] = None

    def to_artifact(self, catalog_id: str, source_url: str) -> Artifact:
        """Build the indexed :class:`Artifact` for this manifest entry."""
        return Artifact(
            id=self.id,
            catalog_id=catalog_id,
            artifact_type=self.type,
            name=self.name,
            path=self.path,
            version=self.version,
            source_url=source_url,
            description=self.description,
            category=self.category,
            tags=self.tags,
            keywords=self.keywords,
            language=self.language,
            framework=self.framework,
            use_case=self.use_case,
            difficulty=self.difficulty,
            estimated_time=self.estimated_time,
            author=(
                self.author.model_dump(exclude_none=True)
                if self.author else None
            ),
            compatibility=(
                self.compatibility.model_dump(exclude_none=True)
                if self.compatibility else None
            ),
            metadata=self.metadata,
            dependencies=self.dependencies,
            supporting_files=self.supporting_files,
        )


class CatalogMetadata(_ManifestModel):
    id: str = Field(pattern=SLUG_PATTERN)
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    author: Author
    repository: Repository
    license: str
    homepage: Optional[UrlStr] = None
    icon: Optional[str] = None
    tags: Optional[List[str]] = None
    categories: Optional[List[str]] = None


class ProfileArtifactRef(_ManifestModel):
    catalog_id: str = Field(alias='catalogId')
    artifact_id: str = Field(alias='artifactId')
    version: Optional[str] = None


class Profile(_ManifestModel):
    """Named bundle of artifact references.

    Parsed and validated, not acted upon yet.
    """

    id: str = Field(pattern=SLUG_PATTERN)
    name: str
    description: Optional[str] = None
    version: str = Field(pattern=SEMVER_PATTERN)
    artifacts: List[ProfileArtifactRef]


class CatalogManifest(_ManifestModel):
    schema_url: Optional[UrlStr] = Field(default=None, alias='$schema')
    version: str = Field(pattern=SEMVER_PATTERN)
    catalog: CatalogMetadata
    artifacts: List[ManifestArtifact]
    profiles: Optional[List[Profile]] = None


def _format_location(loc: Tuple[Any, ...]) -> str:
    """Render a pydantic error location as ``artifacts[0].tags``."""
    parts: List[str] = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        elif parts:
            parts.append(f".{item}")
        else:
            parts.append(str(item))
    return ''.join(parts)


def validate_manifest(document: Any) -> CatalogManifest:
    """Validate a decoded catalog document.

    Parameters
    ----------
    document : Any
        The decoded JSON document.

    Returns
    -------
    CatalogManifest
        The parsed manifest.

    Raises
    ------
    ValidationError
        If any field is missing or malformed. All violations are listed.
    """
    try:
        return CatalogManifest.model_validate(document)
    except pydantic.ValidationError as e:
        raise ValidationError([
            (_format_location(err['loc']), err['msg'])
            for err in e.errors()
        ]) from None
