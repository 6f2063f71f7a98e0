"""Tests for journal.store: JournalStore over memory and filesystem backends."""

import threading
from datetime import date

import pytest

from healthnote.core.storage import LocalStorage, MemoryStorage, StorageError
from healthnote.journal.models import DailyLog
from healthnote.journal.store import DEVICE_ID_KEY, LOGS_KEY, USER_KEY, JournalStore


def _log(i: int, category: str = "mood") -> DailyLog:
    return DailyLog(id=f"log-{i}", date=date(2025, 5, 1), category=category, value=3)


@pytest.fixture(params=["memory", "local"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return JournalStore(MemoryStorage())
    return JournalStore(LocalStorage(base_path=str(tmp_path / "store")))


class TestProfile:
    def test_absent_by_default(self, any_store):
        assert any_store.read_profile() is None

    def test_roundtrip(self, any_store, profile):
        any_store.write_profile(profile)
        assert any_store.read_profile() == profile

    def test_overwrite(self, any_store, profile):
        any_store.write_profile(profile)
        renamed = profile.with_body_measures(weight=60)
        any_store.write_profile(renamed)
        assert any_store.read_profile().weight == 60


class TestLogs:
    def test_empty_by_default(self, any_store):
        assert any_store.read_logs() == []

    def test_write_is_full_overwrite(self, any_store):
        any_store.write_logs([_log(1), _log(2)])
        any_store.write_logs([_log(3)])
        assert [log.id for log in any_store.read_logs()] == ["log-3"]

    def test_insertion_order_preserved(self, any_store):
        any_store.write_logs([_log(3), _log(1), _log(2)])
        assert [log.id for log in any_store.read_logs()] == ["log-3", "log-1", "log-2"]

    def test_append(self, any_store):
        any_store.append_log(_log(1))
        logs = any_store.append_log(_log(2))
        assert [log.id for log in logs] == ["log-1", "log-2"]
        assert any_store.read_logs() == logs

    def test_append_requires_id(self, any_store):
        with pytest.raises(ValueError):
            any_store.append_log(DailyLog(date=date(2025, 5, 1), category="mood", value=3))

    def test_append_rejects_duplicate_id(self, any_store):
        any_store.append_log(_log(1))
        with pytest.raises(ValueError, match="Duplicate"):
            any_store.append_log(_log(1))

    def test_corrupt_logs_raise(self):
        store = JournalStore(MemoryStorage({LOGS_KEY: {"not": "a list"}}))
        with pytest.raises(StorageError):
            store.read_logs()


def test_concurrent_appends_all_land(store):
    threads = [threading.Thread(target=store.append_log, args=(_log(i),)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store.read_logs()) == 20


def test_clear_removes_profile_and_logs_but_keeps_device_id(store, profile):
    store.write_profile(profile)
    store.write_logs([_log(1)])
    store.write_device_id("device-1")

    store.clear()

    assert store.read_profile() is None
    assert store.read_logs() == []
    assert store.read_device_id() == "device-1"


def test_keys_match_on_device_layout(profile):
    backend = MemoryStorage()
    store = JournalStore(backend)
    store.write_profile(profile)
    store.write_logs([_log(1)])
    store.write_device_id("d")
    assert backend.keys() == sorted([USER_KEY, LOGS_KEY, DEVICE_ID_KEY])
    assert backend.load(USER_KEY)["birthDate"] == "1990-04-12"
