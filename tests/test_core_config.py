# -*- coding: utf-8 -*-
"""
Tests for arthub.core.config - ArthubConfig and load_config.

Created
-------
2026-02-06
"""

import json
from pathlib import Path

import pytest

from arthub.catalog.models import AuthConfig, CatalogRepoConfig
from arthub.core.config import ArthubConfig, load_config


class TestArthubConfig:
    def test_defaults(self):
        cfg = ArthubConfig()
        assert cfg.repositories == []
        assert cfg.install_root == ".github"
        assert cfg.auto_update is True
        assert cfg.update_interval == 3600
        assert cfg.request_timeout == 10.0
        assert cfg.workspace() == Path.cwd()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "config.json"
        cfg = ArthubConfig(
            repositories=[
                CatalogRepoConfig("team", "https://ex.com/c.json"),
                CatalogRepoConfig(
                    "private", "https://ex.com/p.json", enabled=False,
                    auth=AuthConfig(type='env', env_var='MY_TOKEN'),
                ),
            ],
            install_root=".assistant",
            update_interval=60,
        )
        cfg.save(path)

        loaded = load_config(path)
        assert loaded.install_root == ".assistant"
        assert loaded.update_interval == 60
        assert loaded.request_timeout == 10.0
        assert [r.id for r in loaded.repositories] == ["team", "private"]
        assert loaded.get_repository("private").enabled is False
        assert loaded.get_repository("private").auth.env_var == "MY_TOKEN"
        assert loaded.get_repository("missing") is None

    def test_secrets_not_saved(self, tmp_path):
        path = tmp_path / "config.json"
        ArthubConfig(repositories=[CatalogRepoConfig(
            "team", "https://ex.com/c.json",
            auth=AuthConfig(type='bearer', token='s3cret'),
        )]).save(path)
        assert 's3cret' not in path.read_text()
        assert load_config(path).repositories[0].auth.type == 'bearer'

    def test_load_missing_file_returns_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "nonexistent.json")
        assert cfg.install_root == ".github"

    def test_load_corrupted_file_returns_defaults(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json {{{")
        assert load_config(path).update_interval == 3600

    def test_load_bad_auth_type_returns_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "repositories": [{"id": "a", "url": "u", "auth": {"type": "magic"}}],
        }))
        assert load_config(path).repositories == []

    def test_load_ignores_unknown_fields(self, tmp_path):
        path = tmp_path / "config.json"
        with open(path, 'w') as f:
            json.dump({"install_root": ".x", "unknown_field": 42}, f)
        assert load_config(path).install_root == ".x"
