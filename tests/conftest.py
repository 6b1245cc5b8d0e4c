"""Pytest configuration for forum search tests."""

import os
import sys
from pathlib import Path

# Set ENVIRONMENT before importing any modules that use infrastructure_config
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import asyncio  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from bson import ObjectId  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from forum_search.services.forums import ForumService  # noqa: E402
from forum_search.services.search import SearchService  # noqa: E402

TEST_INDEX = "forums-test"


# --- MongoDB (Motor) fakes ---


class FakeCursor:
    def __init__(self, docs):
        self._docs = [dict(d) for d in docs]

    def sort(self, key, direction=1):
        self._docs.sort(key=lambda d: str(d.get(key, "")), reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return list(self._docs)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield doc


class FakeCollection:
    def __init__(self):
        self.docs: dict[ObjectId, dict] = {}

    @staticmethod
    def _matches(doc, query):
        for key, cond in query.items():
            value = doc.get(key)
            if isinstance(cond, dict) and "$in" in cond:
                if value not in cond["$in"]:
                    return False
            elif value != cond:
                return False
        return True

    def find(self, query=None, projection=None):
        return FakeCursor(d for d in self.docs.values() if self._matches(d, query or {}))

    async def find_one(self, query):
        for doc in self.docs.values():
            if self._matches(doc, query):
                return dict(doc)
        return None

    async def insert_one(self, doc):
        oid = doc.get("_id") or ObjectId()
        self.docs[oid] = {**doc, "_id": oid}
        return SimpleNamespace(inserted_id=oid)

    async def find_one_and_update(self, query, update, return_document=None):
        for oid, doc in self.docs.items():
            if self._matches(doc, query):
                doc.update(update.get("$set", {}))
                return dict(doc)
        return None

    async def delete_one(self, query):
        for oid, doc in list(self.docs.items()):
            if self._matches(doc, query):
                del self.docs[oid]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def count_documents(self, query):
        return sum(1 for d in self.docs.values() if self._matches(d, query))


class FakeDatabase:
    name = "skillSwapHub"

    def __init__(self):
        self.collections: dict[str, FakeCollection] = {}
        self.ping_count = 0
        self.ping_error: Exception | None = None

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())

    async def command(self, command):
        await asyncio.sleep(0)
        self.ping_count += 1
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}


# --- Elasticsearch fakes ---


class FakeIndices:
    def __init__(self):
        self.existing: set[str] = set()
        self.created: list[dict] = []
        self.deleted: list[str] = []
        self.create_error: Exception | None = None

    async def exists(self, index):
        return index in self.existing

    async def create(self, index, settings=None, mappings=None):
        if self.create_error is not None:
            raise self.create_error
        self.existing.add(index)
        self.created.append({"index": index, "settings": settings, "mappings": mappings})

    async def delete(self, index):
        self.existing.discard(index)
        self.deleted.append(index)


class FakeElasticsearch:
    """Records calls; stores indexed documents by id."""

    def __init__(self):
        self.indices = FakeIndices()
        self.documents: dict[str, dict] = {}
        self.calls: list[tuple[str, dict]] = []
        self.reachable = True
        self.ping_count = 0
        self.search_response: dict = {"hits": {"hits": []}}
        self.search_error: Exception | None = None
        self.write_error: Exception | None = None
        self.closed = False

    async def ping(self):
        await asyncio.sleep(0)
        self.ping_count += 1
        return self.reachable

    async def index(self, index, id, document, refresh=None):
        self.calls.append(("index", {"index": index, "id": id, "refresh": refresh}))
        if self.write_error is not None:
            raise self.write_error
        self.documents[id] = document

    async def delete_by_query(self, index, query, refresh=None):
        self.calls.append(("delete_by_query", {"index": index, "query": query, "refresh": refresh}))
        if self.write_error is not None:
            raise self.write_error
        target = query["term"]["mongoId"]
        doomed = [k for k, v in self.documents.items() if v.get("mongoId") == target]
        for key in doomed:
            del self.documents[key]
        return {"deleted": len(doomed)}

    async def search(self, index, **kwargs):
        self.calls.append(("search", {"index": index, **kwargs}))
        if self.search_error is not None:
            raise self.search_error
        return self.search_response

    async def count(self, index):
        return {"count": len(self.documents)}

    async def close(self):
        self.closed = True

    def calls_named(self, name):
        return [kwargs for call, kwargs in self.calls if call == name]


def _make_hit(mongo_id, score, title_hl=None, description_hl=None):
    """Build a search hit in the shape Elasticsearch returns."""
    hit = {"_id": f"doc-{mongo_id}", "_score": score, "_source": {"mongoId": mongo_id}}
    highlight = {}
    if title_hl is not None:
        highlight["title"] = [title_hl]
    if description_hl is not None:
        highlight["description"] = [description_hl]
    if highlight:
        hit["highlight"] = highlight
    return hit


# --- Fixtures ---


@pytest.fixture
def make_hit():
    return _make_hit


@pytest.fixture
def fake_es():
    return FakeElasticsearch()


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def forums(fake_db):
    return fake_db["forums"]


@pytest.fixture
def seed_forum(forums):
    """Insert a forum row directly; returns the stored document."""

    def _seed(title, description, **fields):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        oid = ObjectId()
        doc = {
            "_id": oid,
            "title": title,
            "description": description,
            "posts": fields.pop("posts", 0),
            "replies": fields.pop("replies", 0),
            "lastActive": now,
            "image": fields.pop("image", "/forum.png"),
            "createdAt": now,
            "updatedAt": now,
            **fields,
        }
        forums.docs[oid] = doc
        return doc

    return _seed


@pytest.fixture
def fake_bulk(monkeypatch):
    """Replace async_bulk and async_scan with fakes over the client's documents."""
    calls = []

    async def _bulk(client, actions, **kwargs):
        if hasattr(actions, "__aiter__"):
            collected = [action async for action in actions]
        else:
            collected = list(actions)
        for action in collected:
            if action["_op_type"] == "delete":
                client.documents.pop(action["_id"], None)
            else:
                client.documents[action["_id"]] = action["_source"]
        calls.append({"actions": collected, **kwargs})
        return len(collected), []

    async def _scan(client, query=None, **kwargs):
        should = query["query"]["bool"]["should"]
        cutoff = datetime.fromisoformat(should[0]["range"]["updatedAt"]["lt"])
        for doc_id, source in list(client.documents.items()):
            updated = source.get("updatedAt")
            if updated is None or datetime.fromisoformat(updated) < cutoff:
                yield {"_id": doc_id, "_source": {"mongoId": source.get("mongoId")}}

    monkeypatch.setattr("forum_search.search.sync.async_bulk", _bulk)
    monkeypatch.setattr("forum_search.search.sync.async_scan", _scan)
    return calls


@pytest.fixture
def search_service(fake_es, fake_db):
    return SearchService(
        fake_es, fake_db, index_name=TEST_INDEX, results_limit=10, chunk_size=100
    )


@pytest.fixture
def test_client(search_service):
    """Create FastAPI TestClient with fake-backed services installed."""
    from forum_search.api.main import app

    app.state.search_service = search_service
    app.state.forum_service = ForumService(search_service)

    yield TestClient(app)

    app.state.search_service = None
    app.state.forum_service = None
