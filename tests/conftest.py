# -*- coding: utf-8 -*-
"""
Shared fixtures for Artifact Hub tests.

Created
-------
2026-02-06
"""

import copy

import pytest

from arthub.catalog.database import CatalogDatabase
from arthub.catalog.models import Artifact


_MANIFEST = {
    "version": "1.0.0",
    "catalog": {
        "id": "team",
        "name": "Team Catalog",
        "description": "Shared prompts and chat modes",
        "author": {"name": "Platform Team", "email": "platform@example.com"},
        "repository": {
            "type": "gitlab",
            "url": "https://gitlab.com/org/artifacts",
            "branch": "main",
        },
        "license": "MIT",
    },
    "artifacts": [
        {
            "id": "code-review",
            "type": "prompt",
            "name": "Code Review",
            "description": "Review a merge request for defects",
            "path": "prompts/code-review.prompt.md",
            "version": "1.0.0",
            "category": "quality",
            "tags": ["review", "quality"],
            "language": ["python"],
        },
        {
            "id": "architect",
            "type": "chatmode",
            "name": "Architect",
            "description": "Design discussions with an architect persona",
            "path": "chatmodes/architect.chatmode.md",
            "version": "2.1.0",
            "category": "design",
            "tags": ["architecture"],
        },
    ],
}


@pytest.fixture
def manifest_document():
    """A valid catalog manifest as decoded JSON (fresh copy per test)."""
    return copy.deepcopy(_MANIFEST)


@pytest.fixture
def db(tmp_path):
    """A catalog database in a temporary directory."""
    database = CatalogDatabase(db_path=tmp_path / "catalog.db")
    yield database
    database.close()


def make_artifact(artifact_id, catalog_id="team", **kwargs):
    """Build an Artifact with sensible defaults for tests."""
    values = dict(
        artifact_type="prompt",
        name=artifact_id.replace('-', ' ').title(),
        path=f"prompts/{artifact_id}.prompt.md",
        version="1.0.0",
        source_url=(
            f"https://gitlab.com/org/artifacts/-/raw/main/"
            f"prompts/{artifact_id}.prompt.md"
        ),
        description=f"The {artifact_id} artifact",
        category="general",
        tags=["general"],
    )
    values.update(kwargs)
    return Artifact(id=artifact_id, catalog_id=catalog_id, **values)


@pytest.fixture
def seeded_db(db):
    """Database with catalog ``team`` holding a handful of artifacts."""
    db.add_catalog("team", "https://example.com/team/catalog.json", {"name": "Team"})
    return db
