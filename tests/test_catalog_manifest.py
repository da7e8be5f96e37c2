# -*- coding: utf-8 -*-
"""
Tests for arthub.catalog.manifest - catalog manifest validation.

Created
-------
2026-02-06
"""

import pytest

from arthub.catalog.exceptions import ValidationError
from arthub.catalog.manifest import validate_manifest


def _fields(exc_info):
    return [field for field, _ in exc_info.value.errors]


class TestValidManifest:

    def test_parses_catalog_and_artifacts(self, manifest_document):
        manifest = validate_manifest(manifest_document)
        assert manifest.catalog.id == "team"
        assert manifest.catalog.repository.type == "gitlab"
        assert [a.id for a in manifest.artifacts] == ["code-review", "architect"]
        assert manifest.artifacts[0].dependencies == []

    def test_camel_case_fields(self, manifest_document):
        manifest_document["artifacts"][0].update({
            "useCase": ["review"],
            "estimatedTime": "5m",
            "supportingFiles": ["prompts/.code-review/checklist.md"],
        })
        entry = validate_manifest(manifest_document).artifacts[0]
        assert entry.use_case == ["review"]
        assert entry.estimated_time == "5m"
        assert entry.supporting_files == ["prompts/.code-review/checklist.md"]

    def test_profiles_are_accepted(self, manifest_document):
        manifest_document["profiles"] = [{
            "id": "starter",
            "name": "Starter",
            "version": "1.0.0",
            "artifacts": [{"catalogId": "team", "artifactId": "code-review"}],
        }]
        manifest = validate_manifest(manifest_document)
        assert manifest.profiles[0].artifacts[0].artifact_id == "code-review"

    def test_schema_url(self, manifest_document):
        manifest_document["$schema"] = "https://example.com/schema.json"
        assert validate_manifest(manifest_document).schema_url == (
            "https://example.com/schema.json"
        )

    def test_to_artifact(self, manifest_document):
        entry = validate_manifest(manifest_document).artifacts[0]
        artifact = entry.to_artifact("team", "https://example.com/x.prompt.md")
        assert artifact.key == ("team", "code-review")
        assert artifact.artifact_type == "prompt"
        assert artifact.source_url == "https://example.com/x.prompt.md"
        assert artifact.language == ["python"]


class TestInvalidManifest:

    def test_missing_catalog(self, manifest_document):
        del manifest_document["catalog"]
        with pytest.raises(ValidationError) as exc_info:
            validate_manifest(manifest_document)
        assert "catalog" in _fields(exc_info)
        assert str(exc_info.value).startswith("Invalid catalog format:")

    def test_collects_every_violation(self, manifest_document):
        manifest_document["version"] = "1.0"
        manifest_document["artifacts"][0]["id"] = "Bad Id"
        manifest_document["artifacts"][1]["tags"] = []
        manifest_document["artifacts"][1]["type"] = "plugin"

        with pytest.raises(ValidationError) as exc_info:
            validate_manifest(manifest_document)

        fields = _fields(exc_info)
        assert "version" in fields
        assert "artifacts[0].id" in fields
        assert "artifacts[1].tags" in fields
        assert "artifacts[1].type" in fields

    def test_too_many_tags(self, manifest_document):
        manifest_document["artifacts"][0]["tags"] = [f"t{i}" for i in range(21)]
        with pytest.raises(ValidationError) as exc_info:
            validate_manifest(manifest_document)
        assert _fields(exc_info) == ["artifacts[0].tags"]

    def test_bad_repository_url(self, manifest_document):
        manifest_document["catalog"]["repository"]["url"] = "not a url"
        with pytest.raises(ValidationError) as exc_info:
            validate_manifest(manifest_document)
        assert _fields(exc_info) == ["catalog.repository.url"]

    def test_description_length(self, manifest_document):
        manifest_document["catalog"]["description"] = "x" * 501
        with pytest.raises(ValidationError) as exc_info:
            validate_manifest(manifest_document)
        assert _fields(exc_info) == ["catalog.description"]

    def test_not_an_object(self):
        with pytest.raises(ValidationError):
            validate_manifest(["not", "a", "catalog"])
