# -*- coding: utf-8 -*-
"""
Tests for arthub.catalog.http - HttpClient and AuthResolver.

Created
-------
2026-02-06
"""

import os
from unittest.mock import MagicMock, patch

import pytest
import requests

from arthub.catalog.exceptions import ValidationError
from arthub.catalog.http import AuthResolver, HttpClient, token_env_var
from arthub.catalog.models import AuthConfig, CatalogRepoConfig, Credential


def _response(json_data=None, text="", status=200, json_error=None):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    resp.encoding = 'utf-8'
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = json_data
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return resp


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


class TestHttpClient:

    def test_fetch_json_anonymous(self, session):
        session.get.return_value = _response({"version": "1.0.0"})
        client = HttpClient(timeout=3.0, session=session)

        assert client.fetch_json("https://ex.com/c.json") == {"version": "1.0.0"}
        session.get.assert_called_once_with(
            "https://ex.com/c.json", headers={}, auth=None, timeout=3.0,
        )

    def test_bearer_header(self, session):
        session.get.return_value = _response(text="# prompt")
        client = HttpClient(session=session)

        text = client.fetch_text(
            "https://ex.com/p.md", Credential(kind='bearer', token='tok')
        )
        assert text == "# prompt"
        _, kwargs = session.get.call_args
        assert kwargs['headers'] == {'Authorization': 'Bearer tok'}

    def test_basic_auth(self, session):
        session.get.return_value = _response(text="x")
        client = HttpClient(session=session)
        client.fetch_text(
            "https://ex.com/p.md",
            Credential(kind='basic', username='u', password='p'),
        )
        _, kwargs = session.get.call_args
        assert kwargs['auth'] == ('u', 'p')
        assert kwargs['headers'] == {}

    def test_http_error_propagates(self, session):
        session.get.return_value = _response(status=404)
        client = HttpClient(session=session)
        with pytest.raises(requests.HTTPError):
            client.fetch_json("https://ex.com/missing.json")

    def test_connection_error_propagates(self, session):
        session.get.side_effect = requests.ConnectionError("refused")
        client = HttpClient(session=session)
        with pytest.raises(requests.ConnectionError):
            client.fetch_text("https://ex.com/p.md")

    def test_invalid_json_is_validation_error(self, session):
        session.get.return_value = _response(json_error=ValueError("Expecting value"))
        client = HttpClient(session=session)
        with pytest.raises(ValidationError, match="not valid JSON"):
            client.fetch_json("https://ex.com/c.json")


class TestAuthResolver:

    def test_no_auth(self):
        resolver = AuthResolver()
        assert resolver.resolve("team", None) is None
        assert resolver.resolve("team", AuthConfig()) is None

    def test_bearer_from_config_or_secrets(self):
        resolver = AuthResolver({"team": "stored"})
        assert resolver.resolve("team", AuthConfig(type='bearer')).token == "stored"
        assert resolver.resolve(
            "team", AuthConfig(type='bearer', token='inline')
        ).token == "inline"
        assert resolver.resolve("other", AuthConfig(type='bearer')) is None

    def test_basic(self):
        resolver = AuthResolver()
        resolver.set_secret("team", "pw")
        credential = resolver.resolve("team", AuthConfig(type='basic', username='me'))
        assert (credential.kind, credential.username, credential.password) == (
            'basic', 'me', 'pw',
        )

    def test_env_default_variable(self):
        assert token_env_var("my-catalog") == "ARTHUB_TOKEN_MY_CATALOG"
        with patch.dict(os.environ, {"ARTHUB_TOKEN_MY_CATALOG": "envtok"}):
            credential = AuthResolver().resolve("my-catalog", AuthConfig(type='env'))
        assert credential.kind == 'bearer'
        assert credential.token == "envtok"

    def test_env_custom_variable_missing(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("NOT_SET_ANYWHERE", None)
            assert AuthResolver().resolve(
                "team", AuthConfig(type='env', env_var="NOT_SET_ANYWHERE")
            ) is None

    def test_lookup(self):
        resolver = AuthResolver({"private": "tok"})
        lookup = resolver.lookup([
            CatalogRepoConfig("public", "https://ex.com/a.json"),
            CatalogRepoConfig(
                "private", "https://ex.com/b.json", auth=AuthConfig(type='bearer')
            ),
        ])
        assert lookup("public") is None
        assert lookup("unknown") is None
        assert lookup("private").token == "tok"

    def test_credential_repr_hides_secret(self):
        assert "tok" not in repr(Credential(kind='bearer', token='tok'))

    def test_unknown_auth_type_rejected(self):
        with pytest.raises(ValueError):
            AuthConfig(type='oauth')
