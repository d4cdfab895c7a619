"""Tests for Settings configuration.

All tests run without a real .env; we use environment variable injection
via monkeypatch so there's no filesystem dependency.
"""

import importlib

import pytest


def _reload_settings(monkeypatch, env_overrides: dict) -> object:
    """Reload settings with specific env vars patched.

    Returns the reloaded `settings` singleton.
    """
    for key, value in env_overrides.items():
        monkeypatch.setenv(key, value)
    import settings as settings_mod
    importlib.reload(settings_mod)
    return settings_mod.settings


@pytest.fixture(autouse=True)
def _restore_settings():
    """Reload once more after monkeypatch has undone its env changes."""
    yield
    import settings as settings_mod
    importlib.reload(settings_mod)


class TestSettingsDefaults:
    def test_chunk_defaults(self):
        from settings import settings
        assert settings.KCS_MAX_CHUNK_CHARS == 700
        assert settings.KCS_EXPORT_FORMAT == "json"

    def test_store_defaults(self):
        from settings import settings
        assert settings.STORE_BACKEND == "memory"
        assert settings.REDIS_URL == "redis://localhost:6379/0"
        assert settings.STORE_PREFIX == "focus-board"

    def test_server_defaults(self):
        from settings import settings
        assert settings.PORT == 8000
        assert settings.HOST == "0.0.0.0"
        assert settings.DEBUG_MODE is False
        assert settings.LOG_LEVEL == "INFO"


class TestSettingsEnvOverride:
    def test_chunk_size_override(self, monkeypatch):
        s = _reload_settings(monkeypatch, {"KCS_MAX_CHUNK_CHARS": "1200"})
        assert s.KCS_MAX_CHUNK_CHARS == 1200

    def test_bool_true_variants(self, monkeypatch):
        for truthy in ("true", "1", "yes", "True", "YES"):
            s = _reload_settings(monkeypatch, {"DEBUG_MODE": truthy})
            assert s.DEBUG_MODE is True

    def test_bool_false_variants(self, monkeypatch):
        for falsy in ("false", "0", "no", "False", "NO"):
            s = _reload_settings(monkeypatch, {"DEBUG_MODE": falsy})
            assert s.DEBUG_MODE is False

    def test_store_backend_override(self, monkeypatch):
        s = _reload_settings(monkeypatch, {"STORE_BACKEND": "redis", "REDIS_URL": "redis://cache:6379/2"})
        assert s.STORE_BACKEND == "redis"
        assert s.REDIS_URL == "redis://cache:6379/2"


class TestSettingsImmutability:
    def test_settings_is_frozen(self):
        from settings import settings
        with pytest.raises((TypeError, AttributeError)):
            settings.PORT = 9999  # type: ignore[misc]
