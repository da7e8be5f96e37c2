# -*- coding: utf-8 -*-
"""
Configuration Module - User configuration for Artifact Hub.

Provides an ArthubConfig dataclass holding the configured catalog
repositories and the install, update and network settings. Loads from
~/.arthub/config.json if it exists, otherwise uses defaults.

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
import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Artifact Hub internal
from arthub.catalog.models import CatalogRepoConfig
from arthub.catalog.paths import config_dir

_CONFIG_FILE = "config.json"


def default_config_path() -> Path:
    return config_dir() / _CONFIG_FILE


@dataclass
class ArthubConfig:
    """Artifact Hub configuration with defaults.

    Attributes
    ----------
    repositories : List[CatalogRepoConfig]
        Configured catalog sources.
    install_root : str
        Directory below the workspace that artifacts install into.
    workspace_root : Optional[str]
        Workspace directory; the current directory if None.
    auto_update : bool
        Refresh catalogs periodically in the background.
    update_interval : int
        Seconds between background refreshes.
    request_timeout : float
        HTTP timeout for catalog and artifact downloads in seconds.
    catalog_path : Optional[str]
        Catalog database location; see
        :func:`arthub.catalog.paths.resolve_catalog_path`.
    """

    repositories: List[CatalogRepoConfig] = field(default_factory=list)
    install_root: str = ".github"
    workspace_root: Optional[str] = None
    auto_update: bool = True
    update_interval: int = 3600
    request_timeout: float = 10.0
    catalog_path: Optional[str] = None

    def get_repository(self, catalog_id: str) -> Optional[CatalogRepoConfig]:
        for repo in self.repositories:
            if repo.id == catalog_id:
                return repo
        return None

    def workspace(self) -> Path:
        return Path(self.workspace_root).expanduser() if self.workspace_root else Path.cwd()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['repositories'] = [r.to_dict() for r in self.repositories]
        return data

    def save(self, path: Optional[Path] = None) -> None:
        """Save config to JSON file."""
        path = path or default_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config(path: Optional[Path] = None) -> ArthubConfig:
    """Load configuration from file, or return defaults.

    Parameters
    ----------
    path : Optional[Path]
        Config file path. Defaults to ~/.arthub/config.json.

    Returns
    -------
    ArthubConfig
        Loaded or default configuration.
    """
    path = path or default_config_path()
    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            values = {
                k: v for k, v in data.items()
                if k in ArthubConfig.__dataclass_fields__
            }
            values['repositories'] = [
                CatalogRepoConfig.from_dict(r)
                for r in values.get('repositories') or []
            ]
            return ArthubConfig(**values)
        except Exception as e:
            logger.warning("Failed to load config from %s: %s", path, e)

    return ArthubConfig()
