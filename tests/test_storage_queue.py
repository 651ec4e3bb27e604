"""Tests for QueueStore - the persisted queue document."""

import json

import pytest

from sitqueue.exceptions import QueueWriteError
from sitqueue.model import AddAttachment, CreateResource, DeleteAttachment
from sitqueue.storage.queue import QueueStore

from tests.shared import JANE, JOHN, PHOTO


def make_records():
    return [
        CreateResource(
            id="pending_1700000000001_aaaaaaa",
            actor_id=JANE,
            created_at=1700000000001,
            actor_name="Jane",
            photo=PHOTO.with_data("file:pending_1700000000001_aaaaaaa"),
        ),
        DeleteAttachment(
            id="pending_1700000000002_bbbbbbb",
            actor_id=JOHN,
            created_at=1700000000002,
            attachment_id="att_1",
        ),
        AddAttachment(
            id="pending_1700000000003_ccccccc",
            actor_id=JANE,
            created_at=1700000000003,
            collection_id="col_1",
            actor_name="Jane",
            photo=PHOTO,
        ),
    ]


async def test_storage_queue_roundtrip(tmp_path):
    store = QueueStore(tmp_path)
    assert await store.load() == []

    records = make_records()
    await store.save(records)
    assert (tmp_path / "pending_uploads.json").exists()
    assert not (tmp_path / "pending_uploads.json.tmp").exists()

    data = json.loads((tmp_path / "pending_uploads.json").read_text())
    assert data["version"] == 1
    assert [r["kind"] for r in data["records"]] == [
        "CreateResource",
        "DeleteAttachment",
        "AddAttachment",
    ]
    assert data["records"][0]["actorId"] == JANE

    loaded = await QueueStore(tmp_path).load()
    assert loaded == records

    # full rewrite
    await store.save(records[1:])
    assert await store.load() == records[1:]
    await store.save([])
    assert await store.load() == []


async def test_storage_queue_legacy(tmp_path):
    records = make_records()
    legacy = [r.model_dump(by_alias=True) for r in records]
    (tmp_path / "pending_uploads.json").write_text(json.dumps(legacy))
    assert await QueueStore(tmp_path).load() == records


async def test_storage_queue_corrupt(tmp_path):
    (tmp_path / "pending_uploads.json").write_text('[{"id": "pending_1')
    store = QueueStore(tmp_path)
    assert await store.load() == []
    assert (tmp_path / "pending_uploads.json.corrupt").read_text().startswith("[{")

    (tmp_path / "pending_uploads.json").write_text('{"foo": "bar"}')
    assert await store.load() == []

    # newer format
    doc = {"version": 2, "records": []}
    (tmp_path / "pending_uploads.json").write_text(json.dumps(doc))
    assert await store.load() == []
    assert "version" in (tmp_path / "pending_uploads.json.corrupt").read_text()

    # next save starts over
    await store.save(make_records())
    assert len(await store.load()) == 3


async def test_storage_queue_skip_invalid(tmp_path):
    records = make_records()
    items = [r.model_dump(by_alias=True) for r in records]
    items.insert(1, {"id": "pending_x", "kind": "Unknown"})
    items.insert(2, "foo")
    items.append(items[0])  # duplicate
    doc = {"version": 1, "records": items}
    (tmp_path / "pending_uploads.json").write_text(json.dumps(doc))
    assert await QueueStore(tmp_path).load() == records


async def test_storage_queue_memory():
    store = QueueStore("memory://")
    records = make_records()
    await store.save(records)
    assert await store.load() == records


async def test_storage_queue_write_error(tmp_path, monkeypatch):
    store = QueueStore(tmp_path)

    def _fail(*args, **kwargs):
        raise OSError("read-only file system")

    monkeypatch.setattr(type(store._store), "put", _fail)
    with pytest.raises(QueueWriteError):
        await store.save(make_records())
