# backend/store.py

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from .config import Settings
from .errors import StoreError

logger = logging.getLogger(__name__)

RecordId = Union[int, str]


class SupabaseStore:
    """Minimal CRUD client for a Supabase (PostgREST) table collection."""

    def __init__(
        self,
        url: str,
        key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseStore":
        return cls(settings.supabase_url, settings.supabase_key, timeout=settings.timeout)

    def list(self, collection: str, order: str = "created_at.desc") -> List[Dict[str, Any]]:
        """Return every record in the collection, newest first by default."""
        resp = self._request("GET", collection, params={"select": "*", "order": order})
        return self._rows(resp)

    def probe(self, collection: str, limit: int = 5) -> List[Dict[str, Any]]:
        """Fetch a few records to check that the endpoint, key and table work."""
        resp = self._request("GET", collection, params={"select": "*", "limit": str(limit)})
        return self._rows(resp)

    def insert(self, collection: str, record: Dict[str, Any]) -> None:
        self._request(
            "POST",
            collection,
            json=[record],
            headers={"Prefer": "return=minimal"},
        )

    def update(self, collection: str, record_id: RecordId, partial: Dict[str, Any]) -> None:
        self._request(
            "PATCH",
            collection,
            params={"id": f"eq.{record_id}"},
            json=partial,
            headers={"Prefer": "return=minimal"},
        )

    def delete(self, collection: str, record_id: RecordId) -> None:
        self._request("DELETE", collection, params={"id": f"eq.{record_id}"})

    def _request(self, method: str, collection: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/{collection}"
        logger.debug("%s %s params=%s", method, url, kwargs.get("params"))
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"Request to {collection} failed", details=str(e))

        if not resp.ok:
            raise _error_from_response(resp, collection)
        return resp

    @staticmethod
    def _rows(resp: requests.Response) -> List[Dict[str, Any]]:
        try:
            data = resp.json()
        except ValueError as e:
            raise StoreError("Store returned a non-JSON body", details=str(e))
        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError("Store returned an unexpected payload", details=type(data).__name__)
        return data


def _error_from_response(resp: requests.Response, collection: str) -> StoreError:
    """Build a StoreError from a PostgREST error body ({message, code, hint, details})."""
    try:
        parsed = resp.json()
    except ValueError:
        parsed = None
    body: Dict[str, Any] = parsed if isinstance(parsed, dict) else {}

    message = body.get("message") or f"{resp.status_code} error on {collection}"
    details = body.get("details") or (resp.text if not body else None)
    return StoreError(
        message,
        details=details,
        code=body.get("code") or str(resp.status_code),
        hint=body.get("hint"),
    )
