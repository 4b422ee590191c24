"""
Storage capability tests.

The same upsert/ordering behaviour is checked for the in-memory storage and
the key-value storage over a dict and over a JSON file.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from reviewgate.config import Settings
from reviewgate.session import Session
from reviewgate.storage import (
    InMemoryReviewStorage,
    JsonFileStore,
    KeyValueReviewStorage,
    create_storage,
)
from reviewgate.version import Version

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_session(offset_days: float = 0, version: Version = Version.INITIAL, score: float = 0.0, is_bad: bool = False) -> Session:
    return Session(date=T0 + timedelta(days=offset_days), version=version, score=score, is_bad=is_bad)


@pytest.fixture(params=["memory", "dict", "file"])
def storage(request, tmp_path):
    if request.param == "memory":
        return InMemoryReviewStorage()
    if request.param == "dict":
        return KeyValueReviewStorage({})
    return KeyValueReviewStorage(JsonFileStore(tmp_path / "review.json"))


class TestSessionHistory:
    def test_save_appends_in_insertion_order(self, storage):
        storage.save_session(make_session(2))
        storage.save_session(make_session(0))
        storage.save_session(make_session(1))
        assert [s.date for s in storage.sessions] == [
            T0 + timedelta(days=2),
            T0,
            T0 + timedelta(days=1),
        ]

    def test_save_replaces_same_date_and_version_in_place(self, storage):
        storage.save_session(make_session(0, score=10))
        storage.save_session(make_session(1, score=20))
        storage.save_session(make_session(0, score=99, is_bad=True))
        sessions = storage.sessions
        assert len(sessions) == 2
        assert sessions[0].score == 99
        assert sessions[0].is_bad is True
        assert sessions[1].score == 20

    def test_same_date_different_version_is_new_entry(self, storage):
        storage.save_session(make_session(0, version=Version(1, 0, 0)))
        storage.save_session(make_session(0, version=Version(1, 0, 1)))
        assert len(storage.sessions) == 2

    def test_clear_sessions(self, storage):
        storage.save_session(make_session(0))
        storage.clear_sessions()
        assert storage.sessions == []

    def test_returned_sessions_are_not_live(self, storage):
        storage.save_session(make_session(0, score=5))
        storage.sessions[0].score = 500
        assert storage.sessions[0].score == 5


class TestBookkeeping:
    def test_defaults_are_absent(self, storage):
        assert storage.first_session_date is None
        assert storage.last_request_date is None
        assert storage.last_request_session is None
        assert storage.last_request_version is None
        assert storage.number_of_sessions == 0

    def test_round_trip(self, storage):
        storage.first_session_date = T0
        storage.last_request_date = T0 + timedelta(days=3)
        storage.last_request_session = 7
        storage.last_request_version = Version(2, 1, 0)
        storage.number_of_sessions = 9
        assert storage.first_session_date == T0
        assert storage.last_request_date == T0 + timedelta(days=3)
        assert storage.last_request_session == 7
        assert storage.last_request_version == Version(2, 1, 0)
        assert storage.number_of_sessions == 9

    def test_setting_none_clears(self, storage):
        storage.last_request_version = Version(1, 0, 0)
        storage.last_request_session = 3
        storage.last_request_version = None
        storage.last_request_session = None
        assert storage.last_request_version is None
        assert storage.last_request_session is None


class TestInMemorySeeding:
    def test_seeded_sessions_count_as_started(self):
        storage = InMemoryReviewStorage([make_session(0), make_session(1)])
        assert storage.number_of_sessions == 2
        assert len(storage.sessions) == 2


class TestKeyValueStorage:
    def test_keys_are_namespaced(self):
        backend = {}
        storage = KeyValueReviewStorage(backend, namespace="app")
        storage.save_session(make_session(0, score=12.5))
        storage.number_of_sessions = 1
        assert set(backend) == {"app.sessions", "app.number_of_sessions"}
        history = json.loads(backend["app.sessions"])
        assert history[0]["score"] == 12.5
        assert history[0]["version"] == {"major": 1, "minor": 0, "patch": 0}

    def test_corrupt_history_reads_as_empty(self):
        storage = KeyValueReviewStorage({"review_request.sessions": "{not json"})
        assert storage.sessions == []

    def test_corrupt_scalar_reads_as_absent(self):
        storage = KeyValueReviewStorage(
            {
                "review_request.last_request_session": '"seven"',
                "review_request.last_request_version": '{"major": -1, "minor": 0, "patch": 0}',
            }
        )
        assert storage.last_request_session is None
        assert storage.last_request_version is None

    def test_write_failure_is_swallowed(self):
        class BrokenBackend(dict):
            def __setitem__(self, key, value):
                raise OSError("disk full")

        storage = KeyValueReviewStorage(BrokenBackend())
        storage.save_session(make_session(0))
        storage.number_of_sessions = 3
        assert storage.sessions == []
        assert storage.number_of_sessions == 0


class TestJsonFileStore:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "review.json"
        first = KeyValueReviewStorage(JsonFileStore(path))
        first.save_session(make_session(0, score=40))
        first.first_session_date = T0
        first.number_of_sessions = 1

        second = KeyValueReviewStorage(JsonFileStore(path))
        assert [s.score for s in second.sessions] == [40]
        assert second.first_session_date == T0
        assert second.number_of_sessions == 1

    def test_unreadable_file_starts_empty(self, tmp_path):
        path = tmp_path / "review.json"
        path.write_text("[1, 2", encoding="utf-8")
        store = JsonFileStore(path)
        assert len(store) == 0

    def test_delete_and_iterate(self, tmp_path):
        store = JsonFileStore(tmp_path / "review.json")
        store["a"] = "1"
        store["b"] = "2"
        del store["a"]
        assert list(store) == ["b"]
        assert json.loads((tmp_path / "review.json").read_text(encoding="utf-8")) == {"b": "2"}


class TestCreateStorage:
    def test_memory_when_no_path(self):
        settings = Settings(review_store_path=None)
        assert isinstance(create_storage(settings), InMemoryReviewStorage)

    def test_file_backed_when_path_set(self, tmp_path):
        settings = Settings(review_store_path=str(tmp_path / "store.json"), review_store_namespace="ns")
        storage = create_storage(settings)
        assert isinstance(storage, KeyValueReviewStorage)
        assert storage.namespace == "ns"
