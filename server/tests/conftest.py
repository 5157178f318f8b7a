"""
Simple pytest configuration
"""
import copy
import os
import uuid

import pytest

os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

from fastapi.testclient import TestClient
from main import app
from database.DB import get_db
from helpers.DateTimeSerializer import DateTimeSerializerVisitor
from routes.dependencies import require_admin


ADMIN_USER = {"name": "Admin", "email": "admin@example.com", "rollNumber": "N/A", "role": "admin"}


class InMemoryDatabase:
    """Stand-in for database.DB.Database with the same return envelopes."""

    def __init__(self):
        self.collections = {}
        self.fail_inserts = False
        self.serializer = DateTimeSerializerVisitor().visit

    def _matches(self, doc, query):
        return all(doc.get(key) == value for key, value in (query or {}).items())

    def _out(self, doc):
        return self.serializer(copy.deepcopy(doc))

    async def add(self, collection_name, data):
        if self.fail_inserts:
            raise ConnectionError("store offline")
        stored = copy.deepcopy(data)
        stored["_id"] = uuid.uuid4().hex
        self.collections.setdefault(collection_name, []).append(stored)
        return {"status": 200, "data": self._out(stored), "message": "Document added successfully"}

    async def find_many(self, collection_name, query=None, projection=None, sort=None, limit=None):
        docs = [d for d in self.collections.get(collection_name, []) if self._matches(d, query)]
        for key, direction in reversed(sort or []):
            docs.sort(key=lambda d: (d.get(key) is None, d.get(key)), reverse=direction < 0)
        if limit:
            docs = docs[:limit]
        return {"status": 200, "data": [self._out(d) for d in docs], "message": "Documents retrieved successfully"}

    async def find_one(self, collection_name, query):
        for doc in self.collections.get(collection_name, []):
            if self._matches(doc, query):
                return self._out(doc)
        return None

    async def count(self, collection_name, query=None):
        return len([d for d in self.collections.get(collection_name, []) if self._matches(d, query)])

    async def update(self, collection_name, query, update_string):
        for doc in self.collections.get(collection_name, []):
            if self._matches(doc, query):
                doc.update(update_string.get("$set", {}))
                return {"status": 200, "matched_count": 1, "modified_count": 1, "message": "Document updated successfully"}
        return {"status": 404, "matched_count": 0, "modified_count": 0, "message": "Document not found or no changes made"}

    async def delete(self, collection_name, query):
        docs = self.collections.get(collection_name, [])
        for idx, doc in enumerate(docs):
            if self._matches(doc, query):
                del docs[idx]
                return {"status": 200, "deleted_count": 1, "message": "Document deleted successfully"}
        return {"status": 404, "deleted_count": 0, "message": "Document not found"}


@pytest.fixture
def fake_db():
    return InMemoryDatabase()


@pytest.fixture
def client(fake_db):
    """Create a test client backed by the in-memory database"""
    app.dependency_overrides[get_db] = lambda: fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    """Test client whose requests are made as the admin user"""
    app.dependency_overrides[require_admin] = lambda: ADMIN_USER
    return client


@pytest.fixture
def make_event(fake_db):
    """Insert an event straight into the fake store and return its id"""
    def _make(title, category="Technical", status="open", payment_link=None):
        event_id = str(uuid.uuid4())
        fake_db.collections.setdefault("events", []).append({
            "_id": uuid.uuid4().hex,
            "event_id": event_id,
            "title": title,
            "category": category,
            "status": status,
            "payment_link": payment_link,
        })
        return event_id
    return _make
