# -*- coding: utf-8 -*-
"""
Artifact Hub - Catalog and installer for AI assistant artifacts.

Indexes remote catalogs of chat modes, instructions, prompts, tasks and
profiles, searches them, and installs artifacts with their dependencies
into a project workspace.

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

__version__ = "0.1.0"
