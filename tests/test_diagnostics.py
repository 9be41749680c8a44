from unittest.mock import MagicMock

from backend.config import Settings
from backend.diagnostics import check_connection
from backend.errors import ConfigError, StoreError

SETTINGS = Settings(supabase_url="https://demo.supabase.co", supabase_key="anon")


def store_with(rows=None, error=None):
    store = MagicMock()
    if error is not None:
        store.probe.side_effect = error
    else:
        store.probe.return_value = rows
    return lambda settings: store


def test_missing_settings():
    def loader():
        raise ConfigError(
            "Missing environment variables",
            details="SUPABASE_ANON_KEY",
            url="https://demo.supabase.co",
        )

    report = check_connection(loader, store_with([]))
    assert not report.ok
    assert report.status == "ERROR: Missing environment variables"
    assert report.details["key_set"] == "NOT SET"
    assert report.details["url"] == "https://demo.supabase.co"


def test_success_with_sample():
    report = check_connection(lambda: SETTINGS, store_with([{"business_name": "Acme"}]))
    assert report.ok
    assert report.status == "SUCCESS: Connected to Supabase!"
    assert report.details["row_count"] == 1
    assert report.details["sample_data"] == "Acme"
    assert report.details["key_set"] == "YES (hidden)"


def test_success_without_rows():
    report = check_connection(lambda: SETTINGS, store_with([]))
    assert report.details["sample_data"] == "No data yet"


def test_query_failure():
    error = StoreError('relation "public.deals" does not exist', code="42P01")
    report = check_connection(lambda: SETTINGS, store_with(error=error))
    assert not report.ok
    assert report.status == "ERROR: Database query failed"
    assert report.details["error_code"] == "42P01"
    assert report.details["error_hint"] == "No hint"


def test_unexpected_exception():
    report = check_connection(lambda: SETTINGS, store_with(error=RuntimeError("boom")))
    assert report.status == "ERROR: Exception thrown"
    assert report.details["exception"] == "boom"


def test_missing_url_is_reported_not_set():
    def loader():
        raise ConfigError(
            "Missing environment variables",
            details="SUPABASE_URL, SUPABASE_ANON_KEY",
        )

    report = check_connection(loader, store_with([]))
    assert report.details["url"] == "NOT SET"
    assert report.details["key_set"] == "NOT SET"
