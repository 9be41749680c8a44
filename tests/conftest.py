import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.append(ROOT_DIR)

from backend.errors import StoreError
from backend.repository import DealRepository
from backend.schemas import Deal


class FakeStore:
    """In-memory stand-in for the hosted deals table."""

    def __init__(self, rows=None):
        self.rows = [dict(r) for r in rows or []]
        self.next_id = max([r["id"] for r in self.rows], default=0) + 1
        self.clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.fail_on = set()
        self.calls = []

    def _check(self, method):
        self.calls.append(method)
        if method in self.fail_on:
            raise StoreError(f"{method} rejected", code="23502", hint="simulated failure")

    def list(self, collection, order="created_at.desc"):
        self._check("list")
        return sorted((dict(r) for r in self.rows), key=lambda r: r["created_at"], reverse=True)

    def insert(self, collection, record):
        self._check("insert")
        self.clock += timedelta(minutes=1)
        row = dict(record, id=self.next_id, created_at=self.clock.isoformat(), updated_at=None)
        self.next_id += 1
        self.rows.append(row)

    def update(self, collection, record_id, partial):
        self._check("update")
        for row in self.rows:
            if row["id"] == record_id:
                row.update(partial)

    def delete(self, collection, record_id):
        self._check("delete")
        self.rows = [r for r in self.rows if r["id"] != record_id]


def make_deal(id, business_name="Acme Plumbing", asking_price=100000, sde=50000,
              status="Reviewing", created_at="2024-01-01T00:00:00+00:00", **extra):
    return Deal(
        id=id,
        business_name=business_name,
        asking_price=asking_price,
        sde=sde,
        industry=extra.pop("industry", "Services"),
        status=status,
        location=extra.pop("location", "Austin, TX"),
        created_at=created_at,
        **extra,
    )


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def repository(store):
    return DealRepository(store)
