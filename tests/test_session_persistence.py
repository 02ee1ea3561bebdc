"""Tests for the file and memory save stores."""

import pytest

from ecosim.exceptions import CorruptSaveError, PersistenceUnavailableError
from ecosim.session import GameSession
from ecosim_server.session_persistence import FileSaveStore, MemorySaveStore, validate_key


@pytest.fixture
def captured(session, populate):
    populate(session.store, producers=4, primaries=1)
    return session.capture_state()


@pytest.fixture(params=["file", "memory"])
def save_store(request, tmp_path):
    if request.param == "file":
        return FileSaveStore(tmp_path / "saves")
    return MemorySaveStore()


def test_save_then_load(save_store, captured):
    save_store.save("slot_1", captured)
    assert save_store.load("slot_1") == captured
    assert save_store.list_keys() == ["slot_1"]


def test_load_restores_playable_session(save_store, captured):
    save_store.save("resume", captured)
    session = GameSession(seed=3)
    session.restore(save_store.load("resume"))
    assert len(session.store) == 5
    session.run_simulation()


def test_missing_save_unavailable(save_store):
    with pytest.raises(PersistenceUnavailableError):
        save_store.load("nothing_here")


def test_delete(save_store, captured):
    save_store.save("gone", captured)
    assert save_store.delete("gone") is True
    assert save_store.delete("gone") is False
    assert save_store.list_keys() == []


@pytest.mark.parametrize("key", ["../escape", "a/b", "", "x" * 65, "dot.json"])
def test_bad_keys_rejected(key):
    with pytest.raises(ValueError):
        validate_key(key)


def test_file_store_writes_json(tmp_path, captured):
    store = FileSaveStore(tmp_path)
    store.save("pretty", captured)
    text = (tmp_path / "pretty.json").read_text()
    assert '"currentDay": 1' in text
    assert '"savedAt"' in text


def test_file_store_corrupt_json(tmp_path):
    (tmp_path / "broken.json").write_text("{not json")
    with pytest.raises(CorruptSaveError):
        FileSaveStore(tmp_path).load("broken")


def test_file_store_wrong_shape(tmp_path):
    (tmp_path / "shape.json").write_text('{"currentDay": 1}')
    with pytest.raises(CorruptSaveError):
        FileSaveStore(tmp_path).load("shape")


def test_file_store_unwritable(tmp_path, captured):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where the directory should be")
    with pytest.raises(PersistenceUnavailableError):
        FileSaveStore(blocker / "saves").save("x", captured)


def test_list_keys_without_directory(tmp_path):
    assert FileSaveStore(tmp_path / "never_created").list_keys() == []
