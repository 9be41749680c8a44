# backend/diagnostics.py

import logging
from typing import Any, Callable, Dict

from pydantic import BaseModel, Field

from .config import Settings, load_settings
from .errors import ConfigError, StoreError
from .store import SupabaseStore

logger = logging.getLogger(__name__)


class ConnectionReport(BaseModel):
    status: str
    ok: bool = False
    details: Dict[str, Any] = Field(default_factory=dict)


def check_connection(
    settings_loader: Callable[[], Settings] = load_settings,
    store_factory: Callable[[Settings], SupabaseStore] = SupabaseStore.from_settings,
) -> ConnectionReport:
    """Check that the store settings are present and the deals table can be read."""
    try:
        settings = settings_loader()
    except ConfigError as e:
        logger.error("Store configuration missing: %s", e.details)
        missing = e.details or ""
        return ConnectionReport(
            status="ERROR: Missing environment variables",
            details={
                "url": e.url or "NOT SET",
                "key_set": "NOT SET" if "SUPABASE_ANON_KEY" in missing else "YES (hidden)",
                "missing": missing,
            },
        )

    details: Dict[str, Any] = {"url": settings.supabase_url, "key_set": "YES (hidden)"}
    try:
        rows = store_factory(settings).probe(settings.table, limit=5)
    except StoreError as e:
        details["db_error"] = e.message
        details["error_code"] = e.code
        details["error_hint"] = e.hint or "No hint"
        return ConnectionReport(status="ERROR: Database query failed", details=details)
    except Exception as e:
        logger.exception("Connection test raised")
        details["exception"] = str(e)
        return ConnectionReport(status="ERROR: Exception thrown", details=details)

    details["db_connection"] = "SUCCESS"
    details["row_count"] = len(rows)
    details["sample_data"] = rows[0].get("business_name") if rows else "No data yet"
    return ConnectionReport(status="SUCCESS: Connected to Supabase!", ok=True, details=details)
