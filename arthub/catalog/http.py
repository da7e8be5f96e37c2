# -*- coding: utf-8 -*-
"""
Catalog HTTP - Fetch manifests and artifact files from catalog hosts.

Provides the HttpClient used for every remote read and the AuthResolver
that turns a catalog's auth configuration into an explicit Credential
value passed along with each request.

Dependencies
------------
requests

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
import logging
import os
import re
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

# Third-party
import requests

logger = logging.getLogger(__name__)

# Artifact Hub internal
from arthub.catalog.exceptions import ValidationError
from arthub.catalog.models import AuthConfig, CatalogRepoConfig, Credential


_TOKEN_ENV_PREFIX = "ARTHUB_TOKEN_"


def token_env_var(catalog_id: str) -> str:
    """Default environment variable holding a catalog's token.

    ``my-catalog`` -> ``ARTHUB_TOKEN_MY_CATALOG``.
    """
    return _TOKEN_ENV_PREFIX + re.sub(r'[^A-Z0-9]', '_', catalog_id.upper())


class AuthResolver:
    """Resolve catalog auth settings into explicit credentials.

    Parameters
    ----------
    secrets : Optional[Mapping[str, str]]
        Stored tokens (or passwords for ``basic``) keyed by catalog id.
        Secret storage itself belongs to the host.
    """

    def __init__(self, secrets: Optional[Mapping[str, str]] = None) -> None:
        self._secrets: Dict[str, str] = dict(secrets or {})

    def set_secret(self, catalog_id: str, secret: str) -> None:
        self._secrets[catalog_id] = secret

    def resolve(
        self,
        catalog_id: str,
        auth: Optional[AuthConfig],
    ) -> Optional[Credential]:
        """Return the credential for a catalog, or None for anonymous."""
        if auth is None or auth.type == 'none':
            return None

        if auth.type == 'bearer':
            token = auth.token or self._secrets.get(catalog_id)
            if not token:
                logger.warning(
                    "No token stored for catalog '%s'; fetching anonymously",
                    catalog_id,
                )
                return None
            return Credential(kind='bearer', token=token)

        if auth.type == 'basic':
            password = auth.password or self._secrets.get(catalog_id)
            return Credential(
                kind='basic',
                username=auth.username or '',
                password=password or '',
            )

        # env
        var = auth.env_var or token_env_var(catalog_id)
        token = os.environ.get(var)
        if not token:
            logger.warning(
                "Environment variable %s is not set for catalog '%s'",
                var, catalog_id,
            )
            return None
        return Credential(kind='bearer', token=token)

    def lookup(
        self,
        configs: Sequence[CatalogRepoConfig],
    ) -> Callable[[str], Optional[Credential]]:
        """Bind the resolver to a configuration: catalog id -> credential."""
        by_id = {c.id: c for c in configs}

        def _credential(catalog_id: str) -> Optional[Credential]:
            config = by_id.get(catalog_id)
            return self.resolve(catalog_id, config.auth if config else None)

        return _credential


class HttpClient:
    """Thin requests wrapper for catalog and artifact downloads.

    Transport errors (``requests.RequestException``) propagate to the
    caller unchanged.

    Parameters
    ----------
    timeout : float
        HTTP request timeout in seconds. Default 10.0.
    session : Optional[requests.Session]
        Session to reuse; a new one is created if None.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()

    def _get(self, url: str, credential: Optional[Credential]) -> requests.Response:
        headers: Dict[str, str] = {}
        auth = None
        if credential is not None:
            if credential.kind == 'basic':
                auth = (credential.username or '', credential.password or '')
            elif credential.token:
                headers['Authorization'] = f"Bearer {credential.token}"

        logger.debug("GET %s", url)
        try:
            resp = self._session.get(
                url, headers=headers, auth=auth, timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            raise
        return resp

    def fetch_json(
        self,
        url: str,
        credential: Optional[Credential] = None,
    ) -> Any:
        """GET a URL and decode its body as JSON.

        Raises
        ------
        ValidationError
            If the body is not valid JSON.
        requests.RequestException
            On network, HTTP status or auth failures.
        """
        resp = self._get(url, credential)
        try:
            return resp.json()
        except ValueError as e:
            raise ValidationError([('', f"response is not valid JSON ({e})")]) from e

    def fetch_text(
        self,
        url: str,
        credential: Optional[Credential] = None,
    ) -> str:
        """GET a URL and return its body as text."""
        resp = self._get(url, credential)
        if resp.encoding is None:
            resp.encoding = 'utf-8'
        return resp.text

    def close(self) -> None:
        self._session.close()
