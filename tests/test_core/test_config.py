# tests/test_core/test_config.py

import pytest

from moviereview.core.config import Settings


def _settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


def test_defaults():
    s = _settings()
    assert s.PORT == 4000
    assert s.API_PREFIX == "/api"
    assert s.AUTH_MODE == "jwks"
    assert s.STORE_BACKEND == "memory"
    assert s.LIST_ALL_LIMIT == 50
    assert s.cors_origins_list == []
    assert s.is_development is True


@pytest.mark.parametrize("raw,expected", [("api", "/api"), ("/v1/", "/v1"), ("", "")])
def test_api_prefix_is_normalized(raw, expected):
    assert _settings(API_PREFIX=raw).API_PREFIX == expected


def test_cors_origins_from_csv():
    s = _settings(CORS_ALLOW_ORIGINS=" https://a.example.com ,https://b.example.com,, ")
    assert s.cors_origins_list == ["https://a.example.com", "https://b.example.com"]


def test_cors_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example.com,https://b.example.com")
    assert Settings(_env_file=None).cors_origins_list == ["https://a.example.com", "https://b.example.com"]


def test_firebase_project_drives_issuer_audience_and_firestore_project():
    s = _settings(FIREBASE_PROJECT_ID="proj")
    assert s.token_issuer == "https://securetoken.google.com/proj"
    assert s.token_audience == "proj"
    assert s.firestore_project == "proj"


def test_explicit_issuer_audience_win():
    s = _settings(FIREBASE_PROJECT_ID="proj", TOKEN_ISSUER="https://idp", TOKEN_AUDIENCE="aud", FIRESTORE_PROJECT_ID="db")
    assert (s.token_issuer, s.token_audience, s.firestore_project) == ("https://idp", "aud", "db")


def test_no_issuer_without_project():
    s = _settings()
    assert s.token_issuer is None
    assert s.token_audience is None


@pytest.mark.parametrize("field,value", [("PORT", 0), ("AUTH_MODE", "basic"), ("STORE_BACKEND", "postgres")])
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValueError):
        _settings(**{field: value})
