import pytest

from backend.config import load_settings
from backend.errors import ConfigError

ENV_VARS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "VITE_SUPABASE_URL",
    "VITE_SUPABASE_ANON_KEY",
    "DEALS_TABLE",
    "STORE_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_settings(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co/")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("STORE_TIMEOUT", "2.5")
    settings = load_settings(dotenv=False)
    assert settings.supabase_url == "https://demo.supabase.co"
    assert settings.supabase_key == "anon"
    assert settings.table == "deals"
    assert settings.timeout == 2.5
    assert settings.log_level == "INFO"


def test_vite_names_are_accepted(monkeypatch):
    monkeypatch.setenv("VITE_SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.setenv("VITE_SUPABASE_ANON_KEY", "anon")
    assert load_settings(dotenv=False).supabase_key == "anon"


def test_missing_key_is_config_error(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
    with pytest.raises(ConfigError) as exc:
        load_settings(dotenv=False)
    assert exc.value.details == "SUPABASE_ANON_KEY"
    assert exc.value.to_dict()["error_code"] == "CONFIG_ERROR"


def test_missing_both(monkeypatch):
    with pytest.raises(ConfigError) as exc:
        load_settings(dotenv=False)
    assert exc.value.details == "SUPABASE_URL, SUPABASE_ANON_KEY"


def test_bad_timeout(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("STORE_TIMEOUT", "soon")
    with pytest.raises(ConfigError):
        load_settings(dotenv=False)


def test_missing_key_keeps_resolved_url(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
    with pytest.raises(ConfigError) as exc:
        load_settings(dotenv=False)
    assert exc.value.url == "https://demo.supabase.co"


def test_missing_url_has_no_url(monkeypatch):
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    with pytest.raises(ConfigError) as exc:
        load_settings(dotenv=False)
    assert exc.value.url is None
