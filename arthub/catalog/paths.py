# -*- coding: utf-8 -*-
"""
Catalog Path Resolver - Locate the artifact hub catalog database.

Resolves the catalog database path using a priority chain:
1. ARTHUB_CATALOG_PATH environment variable (highest priority)
2. ~/.arthub/config.json "catalog_path" field
3. ~/.arthub/catalog.db (default fallback)

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
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


_ENV_VAR = "ARTHUB_CATALOG_PATH"
_CONFIG_DIR = ".arthub"
_CONFIG_FILE = "config.json"
_DEFAULT_DB = "catalog.db"


def config_dir() -> Path:
    """Return ``~/.arthub`` (not created)."""
    return Path.home() / _CONFIG_DIR


def resolve_catalog_path(config_path: Optional[Path] = None) -> Path:
    """Resolve the catalog database path.

    Priority:
    1. ``ARTHUB_CATALOG_PATH`` environment variable
    2. ``catalog_path`` field of ``config_path`` (``~/.arthub/config.json``
       when not given)
    3. ``~/.arthub/catalog.db`` (default)

    Returns
    -------
    Path
        Resolved path to the catalog database file.
    """
    env_path = os.environ.get(_ENV_VAR)
    if env_path:
        return Path(env_path)

    base = config_dir()

    if config_path is None:
        config_path = base / _CONFIG_FILE
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
            catalog_path = config.get('catalog_path')
            if catalog_path:
                return Path(catalog_path).expanduser()
        except (json.JSONDecodeError, OSError, AttributeError) as e:
            logger.warning(
                "Ignoring unreadable config %s: %s", config_path, e
            )

    return base / _DEFAULT_DB


def ensure_config_dir() -> Path:
    """Ensure the ~/.arthub/ configuration directory exists.

    Returns
    -------
    Path
        Path to the configuration directory.
    """
    path = config_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path
