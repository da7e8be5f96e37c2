# -*- coding: utf-8 -*-
"""
Core Module - Application-level settings for Artifact Hub.

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
