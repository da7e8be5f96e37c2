# -*- coding: utf-8 -*-
"""
Catalog Module - Catalog indexing and artifact installation.

Provides a SQLite-backed index of remote artifact catalogs with
full-text search, dependency-aware installation of artifacts into a
workspace, and update checking of installed artifacts.

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
