# backend/repository.py

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from pydantic import ValidationError as SchemaError

from .errors import RefreshError, StoreError
from .schemas import Deal, DealPayload
from .store import RecordId

logger = logging.getLogger(__name__)

Snapshot = Tuple[Deal, ...]


class DealRepository:
    """In-memory snapshot of the deals collection.

    Every successful mutation is followed by a full re-fetch instead of
    patching the snapshot locally, so server-assigned ids and timestamps are
    always what the store holds. A failed fetch or mutation leaves the
    previous snapshot in place.
    """

    def __init__(self, store, collection: str = "deals"):
        self.store = store
        self.collection = collection
        self._snapshot: Snapshot = ()
        self._loaded = False
        self._listeners: List[Callable[[Snapshot], None]] = []

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def loaded(self) -> bool:
        return self._loaded

    def subscribe(self, callback: Callable[[Snapshot], None]) -> None:
        """Call callback with the new snapshot after every successful refresh."""
        self._listeners.append(callback)

    def get(self, deal_id: RecordId) -> Optional[Deal]:
        for deal in self._snapshot:
            if deal.id == deal_id:
                return deal
        return None

    def refresh(self) -> Snapshot:
        try:
            rows = self.store.list(self.collection, order="created_at.desc")
        except StoreError as e:
            logger.error("Error fetching deals: %s", e.message)
            raise

        try:
            deals = tuple(Deal.model_validate(row) for row in rows)
        except SchemaError as e:
            logger.error("Store returned malformed deal records: %s", e)
            raise StoreError("Store returned malformed deal records", details=str(e))

        self._snapshot = deals
        self._loaded = True
        logger.debug("Snapshot refreshed with %d deals", len(deals))
        for callback in self._listeners:
            callback(deals)
        return deals

    def create(self, payload: DealPayload) -> Snapshot:
        record = payload.to_record()
        try:
            self.store.insert(self.collection, record)
        except StoreError as e:
            logger.error("Error saving deal: %s", e.message)
            raise
        logger.info("Created deal %r", payload.business_name)
        return self._refresh_after_write()

    def update(self, deal_id: RecordId, payload: DealPayload) -> Snapshot:
        record = payload.to_record()
        record["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            self.store.update(self.collection, deal_id, record)
        except StoreError as e:
            logger.error("Error saving deal %s: %s", deal_id, e.message)
            raise
        logger.info("Updated deal %s", deal_id)
        return self._refresh_after_write()

    def delete(self, deal_id: RecordId) -> Snapshot:
        try:
            self.store.delete(self.collection, deal_id)
        except StoreError as e:
            logger.error("Error deleting deal %s: %s", deal_id, e.message)
            raise
        logger.info("Deleted deal %s", deal_id)
        return self._refresh_after_write()

    def _refresh_after_write(self) -> Snapshot:
        try:
            return self.refresh()
        except StoreError as e:
            raise RefreshError(
                f"Change saved, but the deal list could not be refreshed: {e.message}",
                details=e.details,
                code=e.code,
                hint=e.hint,
            ) from e
