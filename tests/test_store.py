"""Tests for visionflow/store.py — memory and file document stores."""

import json
import logging

import pytest

from visionflow.config import Settings
from visionflow.store import (
    DocumentRef,
    FileDocumentStore,
    MemoryDocumentStore,
    StoreError,
    open_store,
)

REF = DocumentRef("app", "u1", "tasks")


def test_document_ref_path():
    assert str(REF) == "artifacts/app/users/u1/appData/tasks"


def test_get_missing():
    snap = MemoryDocumentStore().get(REF)
    assert snap.exists is False
    assert snap.value is None


def test_set_replace_and_merge():
    store = MemoryDocumentStore()
    store.set(REF, {"value": [1], "meta": "keep"})
    store.set(REF, {"value": [2]}, merge=True)
    assert store.get(REF).data == {"value": [2], "meta": "keep"}

    store.set(REF, {"value": [3]})
    assert store.get(REF).data == {"value": [3]}


def test_payloads_are_copied():
    store = MemoryDocumentStore()
    payload = {"value": [1]}
    store.set(REF, payload)
    payload["value"].append(2)
    snap = store.get(REF)
    snap.value.append(3)
    assert store.get(REF).value == [1]


def test_subscribe_delivers_current_then_each_write():
    store = MemoryDocumentStore()
    seen = []
    unsubscribe = store.subscribe(REF, lambda s: seen.append(s.value))
    assert seen == [None]

    store.set(REF, {"value": "a"})
    store.set(REF, {"value": "b"})
    assert seen == [None, "a", "b"]

    unsubscribe()
    store.set(REF, {"value": "c"})
    assert seen == [None, "a", "b"]
    assert store.subscriber_count(REF) == 0


def test_subscribe_other_documents_not_notified():
    store = MemoryDocumentStore()
    seen = []
    store.subscribe(REF, lambda s: seen.append(s.value))
    store.set(DocumentRef("app", "u2", "tasks"), {"value": 1})
    store.set(DocumentRef("app", "u1", "goals"), {"value": 1})
    assert seen == [None]


def test_subscribe_read_error_goes_to_on_error():
    store = MemoryDocumentStore()
    store.fail_reads = True
    errors = []
    store.subscribe(REF, lambda s: pytest.fail("no snapshot expected"), errors.append)
    assert len(errors) == 1
    assert isinstance(errors[0], StoreError)


def test_memory_write_failure():
    store = MemoryDocumentStore()
    store.fail_writes = True
    with pytest.raises(StoreError):
        store.set(REF, {"value": 1})
    assert store.get(REF).exists is False


def test_file_store_round_trip(tmp_path):
    store = FileDocumentStore(tmp_path)
    store.set(REF, {"value": [{"id": "1"}]})

    path = store.path_for(REF)
    assert path == tmp_path / "app" / "users" / "u1" / "appData" / "tasks.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"value": [{"id": "1"}]}

    assert FileDocumentStore(tmp_path).get(REF).value == [{"id": "1"}]


def test_file_store_poll_picks_up_other_writer(tmp_path):
    writer = FileDocumentStore(tmp_path)
    reader = FileDocumentStore(tmp_path)
    seen = []
    reader.subscribe(REF, lambda s: seen.append(s.value))
    assert seen == [None]

    writer.set(REF, {"value": [1]})
    assert reader.poll() == 1
    assert seen == [None, [1]]
    assert reader.poll() == 0


def test_file_store_corrupt_document(tmp_path):
    store = FileDocumentStore(tmp_path)
    path = store.path_for(REF)
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        store.get(REF)


def test_file_store_rejects_path_segments(tmp_path):
    store = FileDocumentStore(tmp_path)
    with pytest.raises(StoreError):
        store.get(DocumentRef("app", "../etc", "tasks"))
    with pytest.raises(StoreError):
        store.set(DocumentRef("app", "a/b", "tasks"), {"value": 1})


def test_open_store_backends(tmp_path):
    assert isinstance(open_store(Settings(store="memory"), tmp_path), MemoryDocumentStore)

    store = open_store(Settings(store="file"), tmp_path)
    assert isinstance(store, FileDocumentStore)
    assert store.base == tmp_path / "artifacts"
    assert store.base.is_dir()


def test_open_store_unknown_backend_degrades(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="visionflow.store"):
        assert open_store(Settings(store="firestore"), tmp_path) is None
    assert "unknown backend" in caplog.text


def test_open_store_names_known_backends(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="visionflow.store"):
        assert open_store(Settings(store=""), tmp_path) is None
    assert "expected one of file, memory" in caplog.text
    assert not (tmp_path / "artifacts").exists()
