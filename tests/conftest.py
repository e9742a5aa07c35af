import os

os.environ["ENVIRONMENT"] = "testing"
os.environ["BRAVE_SEARCH_API_KEY"] = ""
os.environ.setdefault("ENRICH_WITH_LLM", "false")

import time
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from pymongo.errors import DuplicateKeyError


class FakeCursor:

    def __init__(self, rows):
        self.rows = rows

    def sort(self, key, direction=1):
        self.rows.sort(key=lambda r: r.get(key) or 0, reverse=direction < 0)
        return self

    def limit(self, n):
        self.rows = self.rows[:n]
        return self

    async def to_list(self, length=None):
        return self.rows if length is None else self.rows[:length]


class FakeCollection:
    """In-memory stand-in for the few motor collection calls the services make"""

    def __init__(self, rows=None, name="unvetted", unique_key="identity_key"):
        self.rows = [dict(r) for r in (rows or [])]
        self.name = name
        self.unique_key = unique_key

    @staticmethod
    def _matches(row, query):
        for key, expected in query.items():
            if isinstance(expected, dict) and "$in" in expected:
                if row.get(key) not in expected["$in"]:
                    return False
            elif isinstance(expected, dict) and "$nin" in expected:
                if row.get(key) in expected["$nin"]:
                    return False
            elif row.get(key) != expected:
                return False
        return True

    def find(self, query=None, projection=None):
        return FakeCursor([dict(r) for r in self.rows if self._matches(r, query or {})])

    async def find_one(self, query, projection=None):
        for row in self.rows:
            if self._matches(row, query):
                return dict(row)
        return None

    async def insert_one(self, row):
        key = self.unique_key
        if key and row.get(key) and any(r.get(key) == row[key] for r in self.rows):
            raise DuplicateKeyError(f"E11000 duplicate key error index: {key}")
        row["_id"] = len(self.rows) + 1
        self.rows.append(dict(row))
        return SimpleNamespace(inserted_id=row["_id"])

    async def update_one(self, query, update, upsert=False):
        for row in self.rows:
            if self._matches(row, query):
                row.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, upserted_id=None)
        if upsert:
            new = {**query, **update.get("$setOnInsert", {}), **update.get("$set", {})}
            self.rows.append(new)
            return SimpleNamespace(matched_count=0, upserted_id=len(self.rows))
        return SimpleNamespace(matched_count=0, upserted_id=None)

    async def delete_one(self, query):
        for i, row in enumerate(self.rows):
            if self._matches(row, query):
                del self.rows[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query):
        before = len(self.rows)
        self.rows = [r for r in self.rows if not self._matches(r, query)]
        return SimpleNamespace(deleted_count=before - len(self.rows))


class StubSearchClient:
    """Search client returning canned results keyed by site filter"""

    def __init__(self, results=None, configured=True, errors=None, delays=None):
        self.results = results or {}
        self.configured = configured
        self.errors = errors or {}
        self.delays = delays or {}
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        site = query.split()[0][len("site:"):]
        if site in self.delays:
            time.sleep(self.delays[site])
        if site in self.errors:
            raise self.errors[site]
        return list(self.results.get(site, []))


@pytest.fixture(autouse=True)
def activity_log():
    """Keep the audit trail off the network in every test"""
    with patch("recruitops.services.activity.activity_coll") as coll:
        coll.insert_one = AsyncMock()
        yield coll


@pytest.fixture
def staging():
    return FakeCollection(name="unvetted")


@pytest.fixture
def pool():
    return FakeCollection(name="candidates", unique_key=None)
