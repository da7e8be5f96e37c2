# -*- coding: utf-8 -*-
"""
Tests for arthub.catalog.service - CatalogService.

Created
-------
2026-02-06
"""

from unittest.mock import MagicMock

import pytest
import requests

from arthub.catalog.exceptions import (
    CatalogConflictError,
    CatalogNotFoundError,
    ValidationError,
)
from arthub.catalog.http import AuthResolver
from arthub.catalog.models import AuthConfig, CatalogRepoConfig
from arthub.catalog.service import CatalogService

_URL = "https://example.com/team/catalog.json"


@pytest.fixture
def http(manifest_document):
    client = MagicMock()
    client.fetch_json.return_value = manifest_document
    return client


@pytest.fixture
def service(db, http):
    return CatalogService(db, http)


@pytest.fixture
def config():
    return CatalogRepoConfig(id="team", url=_URL)


class TestAddCatalog:

    def test_indexes_artifacts(self, service, db, config):
        record = service.add_catalog(config)

        assert record.id == "team"
        assert record.name == "Team Catalog"
        assert record.artifact_count == 2
        artifact = db.get_artifact("team", "code-review")
        assert artifact.source_url == (
            "https://gitlab.com/org/artifacts/-/raw/main/"
            "prompts/code-review.prompt.md"
        )
        assert record.metadata["repository"]["type"] == "gitlab"

    def test_duplicate_id(self, service, config):
        service.add_catalog(config)
        with pytest.raises(CatalogConflictError):
            service.add_catalog(config)

    def test_duplicate_url(self, service, db, config):
        service.add_catalog(config)
        with pytest.raises(CatalogConflictError):
            service.add_catalog(CatalogRepoConfig(id="again", url=_URL))
        assert db.get_catalog("again") is None

    def test_invalid_manifest_stores_nothing(self, service, db, http, config):
        http.fetch_json.return_value = {"version": "1.0.0"}
        with pytest.raises(ValidationError):
            service.add_catalog(config)
        assert db.list_catalogs() == []

    def test_uses_resolved_credential(self, db, http):
        service = CatalogService(db, http, auth=AuthResolver({"team": "tok"}))
        service.add_catalog(CatalogRepoConfig(
            id="team", url=_URL, auth=AuthConfig(type='bearer'),
        ))
        url, credential = http.fetch_json.call_args.args
        assert url == _URL
        assert credential.token == "tok"


class TestRefreshCatalog:

    def test_refresh_is_idempotent(self, service, db, config):
        service.add_catalog(config)
        before = db.list_artifacts("team")

        record = service.refresh_catalog(config)

        assert record.status == 'healthy'
        assert db.list_artifacts("team") == before

    def test_refresh_registers_unknown_catalog(self, service, db, config):
        record = service.refresh_catalog(config)
        assert record.artifact_count == 2

    def test_refresh_applies_changes(self, service, db, http, config, manifest_document):
        service.add_catalog(config)
        db.record_installation("team", "architect", "2.1.0", "/a")
        manifest_document["artifacts"][1]["version"] = "2.2.0"
        del manifest_document["artifacts"][0]
        http.fetch_json.return_value = manifest_document

        service.refresh_catalog(config)

        assert [a.id for a in db.list_artifacts("team")] == ["architect"]
        assert db.get_artifact("team", "architect").version == "2.2.0"
        assert db.get_installation("team", "architect").version == "2.1.0"

    def test_failure_marks_error_and_reraises(self, service, db, http, config):
        service.add_catalog(config)
        http.fetch_json.side_effect = requests.ConnectionError("offline")

        with pytest.raises(requests.ConnectionError):
            service.refresh_catalog(config)

        record = db.get_catalog("team")
        assert record.status == 'error'
        assert record.error == "offline"
        assert record.artifact_count == 2

    def test_recovery_clears_error(self, service, db, http, config, manifest_document):
        service.add_catalog(config)
        http.fetch_json.side_effect = requests.ConnectionError("offline")
        with pytest.raises(requests.ConnectionError):
            service.refresh_catalog(config)

        http.fetch_json.side_effect = None
        http.fetch_json.return_value = manifest_document
        record = service.refresh_catalog(config)
        assert record.status == 'healthy'
        assert record.error is None


class TestRefreshAll:

    def test_failures_do_not_block_others(self, service, db, http, manifest_document):
        def fetch(url, credential=None):
            if "broken" in url:
                raise requests.HTTPError("500 Server Error")
            return manifest_document
        http.fetch_json.side_effect = fetch

        outcome = service.refresh_all([
            CatalogRepoConfig(id="broken", url="https://broken.example.com/c.json"),
            CatalogRepoConfig(id="team", url=_URL),
            CatalogRepoConfig(id="off", url="https://off.example.com/c.json",
                              enabled=False),
        ])

        assert outcome == {"broken": "500 Server Error", "team": None}
        assert db.get_catalog("team").artifact_count == 2
        assert db.get_catalog("off") is None


class TestUpdateAndRemove:

    def test_update_catalog(self, service, config):
        service.add_catalog(config)
        record = service.update_catalog("team", enabled=False)
        assert record.enabled is False
        with pytest.raises(CatalogNotFoundError):
            service.update_catalog("missing", enabled=True)

    def test_remove_without_installations(self, service, db, config):
        service.add_catalog(config)
        assert service.remove_catalog("team") is True
        assert db.get_catalog("team") is None

    def test_remove_with_installations_needs_confirmation(self, service, db, config, tmp_path):
        service.add_catalog(config)
        installed = tmp_path / "architect.chatmode.md"
        installed.write_text("x")
        db.record_installation("team", "architect", "2.1.0", str(installed))

        assert service.remove_catalog("team") is False
        assert installed.exists()
        assert db.get_catalog("team") is not None

        assert service.remove_catalog("team", confirmed=True) is True
        assert not installed.exists()
        assert db.list_installations() == []
        assert db.list_artifacts("team") == []

    def test_remove_unknown(self, service):
        with pytest.raises(CatalogNotFoundError):
            service.remove_catalog("missing")
