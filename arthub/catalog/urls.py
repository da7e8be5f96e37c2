# -*- coding: utf-8 -*-
"""
Source URL Resolver - Derive raw-content URLs for catalog artifact files.

Catalogs declare the repository their artifact files live in. This module
turns that declaration plus a repository-relative path into a URL that
serves the raw file content, following the layout rules of the hosting
service (GitLab, GitHub) or a plain web directory.

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
import re
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlparse


_DEFAULT_BRANCH = "main"
_GITLAB_RAW_SUFFIX = re.compile(r'/-/raw/.*$')
_GITHUB_PATH_SUFFIX = re.compile(r'/(raw|blob)/.*$')
_FILE_SUFFIX = re.compile(r'\.[a-z0-9]+$', re.IGNORECASE)


def _strip_trailing_slash(url: str) -> str:
    return url[:-1] if url.endswith('/') else url


def _field(repository: Union[Mapping[str, Any], Any], name: str) -> Any:
    if isinstance(repository, Mapping):
        return repository.get(name)
    return getattr(repository, name, None)


def resolve_gitlab_url(
    repo_url: str,
    branch: Optional[str],
    artifact_path: str,
) -> str:
    """``https://gitlab.com/o/r`` -> ``https://gitlab.com/o/r/-/raw/main/{path}``."""
    clean = _strip_trailing_slash(_GITLAB_RAW_SUFFIX.sub('', repo_url, count=1))
    return f"{clean}/-/raw/{branch or _DEFAULT_BRANCH}/{artifact_path}"


def resolve_github_url(
    repo_url: str,
    branch: Optional[str],
    artifact_path: str,
) -> str:
    """``https://github.com/o/r`` -> ``https://raw.githubusercontent.com/o/r/main/{path}``."""
    clean = repo_url
    if 'github.com' in clean and 'raw.githubusercontent.com' not in clean:
        clean = clean.replace('github.com', 'raw.githubusercontent.com', 1)
    clean = _strip_trailing_slash(_GITHUB_PATH_SUFFIX.sub('', clean, count=1))
    return f"{clean}/{branch or _DEFAULT_BRANCH}/{artifact_path}"


def resolve_generic_url(base_url: str, artifact_path: str) -> str:
    """Resolve against a plain web location.

    The base is treated as a directory unless its path ends in a file
    name (``/catalogs/catalog.json``), in which case the parent directory
    is used. A bare domain is always a directory: TLDs such as ``.dev``
    or ``.io`` look like extensions but never appear in the path.
    """
    clean = _strip_trailing_slash(base_url)
    parsed = urlparse(clean)
    if parsed.scheme and parsed.netloc:
        path = parsed.path
        if path and path != '/' and _FILE_SUFFIX.search(path):
            directory = clean[:clean.rfind('/')]
            return f"{directory}/{artifact_path}"
    return f"{clean}/{artifact_path}"


def resolve_artifact_url(
    repository: Union[Mapping[str, Any], Any],
    artifact_path: str,
) -> str:
    """Resolve the raw-content URL of a file inside a catalog repository.

    Parameters
    ----------
    repository : Mapping or object
        Repository descriptor with ``type``, ``url`` and optional
        ``branch`` (a manifest ``Repository`` model or a plain dict).
    artifact_path : str
        Path of the file relative to the repository root.

    Returns
    -------
    str
        Absolute URL of the raw file content.
    """
    repo_type = (_field(repository, 'type') or '').lower()
    repo_url = _field(repository, 'url') or ''
    branch = _field(repository, 'branch')

    if repo_type == 'gitlab':
        return resolve_gitlab_url(repo_url, branch, artifact_path)
    if repo_type == 'github':
        return resolve_github_url(repo_url, branch, artifact_path)
    return resolve_generic_url(repo_url, artifact_path)


def get_catalog_url_type(url: str) -> str:
    """Classify a catalog URL as ``gitlab``, ``github`` or ``generic``."""
    if 'gitlab' in url:
        return 'gitlab'
    if 'github' in url:
        return 'github'
    return 'generic'


def catalog_base_url(source_url: str, artifact_path: str) -> str:
    """Recover the repository base URL from a resolved artifact URL.

    Supporting files are listed relative to the repository root, so they
    resolve against the artifact's source URL minus its own path.
    """
    index = source_url.find(artifact_path)
    if index > 0:
        return _strip_trailing_slash(source_url[:index])

    match = re.match(
        r'^(https?://[^/]+/[^/]+/[^/]+/-/raw/[^/]+)', source_url
    )
    if match:
        return match.group(1)

    match = re.match(
        r'^(https?://raw\.githubusercontent\.com/[^/]+/[^/]+/[^/]+)',
        source_url,
    )
    if match:
        return match.group(1)

    return source_url[:source_url.rfind('/')]


def generate_id_from_url(url: str) -> str:
    """Suggest a catalog id from a manifest URL.

    ``https://gitlab.com/org/repo/-/raw/main/catalog.json`` has path
    segments ``org, repo, -, raw, main, catalog.json``; the two segments
    before the file name become the id (``raw-main``), so callers usually
    offer this as an editable default.
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return 'custom-catalog'
    parts = [p for p in parsed.path.split('/') if p]
    candidate = '-'.join(parts[-3:-1]).lower()
    candidate = re.sub(r'[^a-z0-9-]+', '-', candidate).strip('-')
    return candidate or 'custom-catalog'
