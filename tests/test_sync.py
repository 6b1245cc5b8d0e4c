"""Tests for bulk and incremental index sync."""

import pytest

from forum_search.models import Forum
from forum_search.search import SyncError


@pytest.mark.asyncio
async def test_sync_all_indexes_every_forum_keyed_by_forum_id(
    search_service, fake_es, seed_forum, fake_bulk
):
    react = seed_forum("React Basics", "Intro")
    python = seed_forum("Python Tips", "Idioms")

    indexed = await search_service.sync_all()

    assert indexed == 2
    call = fake_bulk[0]
    assert call["refresh"] is True
    assert call["chunk_size"] == 100
    ids = {action["_id"] for action in call["actions"]}
    assert ids == {str(react["_id"]), str(python["_id"])}
    for action in call["actions"]:
        assert action["_index"] == search_service.index_name
        assert action["_source"]["mongoId"] == action["_id"]


@pytest.mark.asyncio
async def test_sync_all_with_no_forums(search_service, fake_bulk):
    assert await search_service.sync_all() == 0


@pytest.mark.asyncio
async def test_sync_all_failure_raises_sync_error(search_service, seed_forum, monkeypatch):
    seed_forum("React Basics", "Intro")

    async def _failing_bulk(client, actions, **kwargs):
        raise ConnectionError("bulk rejected")

    monkeypatch.setattr("forum_search.search.sync.async_bulk", _failing_bulk)

    with pytest.raises(SyncError, match="bulk rejected"):
        await search_service.sync_all()


@pytest.mark.asyncio
async def test_sync_document_index_upserts(search_service, fake_es, seed_forum):
    doc = seed_forum("React Basics", "Intro", posts=4)
    forum = Forum.from_mongo(doc)

    await search_service.sync_document(forum, "index")
    forum.title = "React Basics (2024)"
    await search_service.sync_document(forum, "index")

    assert list(fake_es.documents) == [forum.id]
    assert fake_es.documents[forum.id]["title"] == "React Basics (2024)"
    assert fake_es.documents[forum.id]["posts"] == 4
    assert all(call["refresh"] is True for call in fake_es.calls_named("index"))


@pytest.mark.asyncio
async def test_sync_document_delete_matches_on_mongo_id(search_service, fake_es, seed_forum):
    doc = seed_forum("React Basics", "Intro")
    forum = Forum.from_mongo(doc)
    # document stored under an index-generated id
    fake_es.documents["generated-id"] = forum.to_search_document()

    await search_service.sync_document(forum, "delete")

    call = fake_es.calls_named("delete_by_query")[0]
    assert call["query"] == {"term": {"mongoId": forum.id}}
    assert call["refresh"] is True
    assert fake_es.documents == {}


@pytest.mark.asyncio
async def test_sync_document_rejects_unknown_operation(search_service):
    forum = Forum(id="65f1c0ffee0000000000abcd", title="t", description="d")

    with pytest.raises(ValueError, match="Unsupported sync operation"):
        await search_service.sync_document(forum, "upsert")


@pytest.mark.asyncio
async def test_sync_document_requires_saved_forum(search_service):
    with pytest.raises(ValueError):
        await search_service.sync_document(Forum(title="t", description="d"), "index")


@pytest.mark.asyncio
async def test_sync_document_client_error_raises_sync_error(search_service, fake_es):
    fake_es.write_error = ConnectionError("timeout")
    forum = Forum(id="65f1c0ffee0000000000abcd", title="t", description="d")

    with pytest.raises(SyncError, match="65f1c0ffee0000000000abcd"):
        await search_service.sync_document(forum, "index")


@pytest.mark.asyncio
async def test_reconcile_removes_documents_of_deleted_forums(
    search_service, fake_es, forums, seed_forum, fake_bulk
):
    kept = seed_forum("React Basics", "Intro")
    removed = seed_forum("Old Forum", "Gone soon")
    await search_service.sync_all()

    del forums.docs[removed["_id"]]
    stats = await search_service.reconcile()

    assert stats == {"indexed": 1, "removed": 1}
    assert list(fake_es.documents) == [str(kept["_id"])]


@pytest.mark.asyncio
async def test_reconcile_with_empty_collection_clears_index(
    search_service, fake_es, fake_bulk
):
    fake_es.documents["stale"] = {"mongoId": "65f1c0ffee0000000000abcd"}

    stats = await search_service.reconcile()

    assert stats == {"indexed": 0, "removed": 1}
    assert fake_es.documents == {}
    purge = fake_bulk[-1]
    assert purge["actions"] == [
        {"_op_type": "delete", "_index": search_service.index_name, "_id": "stale"}
    ]
    assert purge["refresh"] is True


@pytest.mark.asyncio
async def test_reconcile_keeps_documents_written_after_it_started(
    search_service, fake_es, fake_bulk
):
    # indexed by a concurrent create after the live ids were read
    fake_es.documents["fresh"] = {
        "mongoId": "65f1c0ffee0000000000beef",
        "updatedAt": "2999-01-01T00:00:00Z",
    }
    fake_es.documents["gone"] = {
        "mongoId": "65f1c0ffee0000000000dead",
        "updatedAt": "2024-05-01T12:00:00Z",
    }

    stats = await search_service.reconcile()

    assert stats["removed"] == 1
    assert list(fake_es.documents) == ["fresh"]


@pytest.mark.asyncio
async def test_reconcile_does_not_delete_when_nothing_is_stale(
    search_service, fake_es, seed_forum, fake_bulk
):
    seed_forum("React Basics", "Intro")

    stats = await search_service.reconcile()

    assert stats == {"indexed": 1, "removed": 0}
    assert len(fake_bulk) == 1
    assert len(fake_es.documents) == 1


@pytest.mark.asyncio
async def test_index_status_reports_drift(search_service, fake_es, seed_forum, fake_bulk):
    fake_es.indices.existing.add(search_service.index_name)
    seed_forum("React Basics", "Intro")
    await search_service.sync_all()
    seed_forum("Python Tips", "Idioms")

    status = await search_service.index_status()

    assert status == {
        "index": search_service.index_name,
        "exists": True,
        "documents": 1,
        "forums": 2,
        "in_sync": False,
    }
