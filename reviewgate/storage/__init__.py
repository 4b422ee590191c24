from __future__ import annotations

from typing import Optional

from reviewgate.storage.base import ReviewStorage
from reviewgate.storage.file_store import JsonFileStore
from reviewgate.storage.keyvalue import (
    DEFAULT_NAMESPACE,
    KeyValueReviewStorage,
    SessionRecord,
    VersionRecord,
)
from reviewgate.storage.memory import InMemoryReviewStorage


def create_storage(settings=None) -> ReviewStorage:
    """
    Build the storage selected by settings: a JSON file store when
    ``REVIEW_STORE_PATH`` is set, otherwise in-memory.
    """
    if settings is None:
        from reviewgate.config import get_settings

        settings = get_settings()
    path: Optional[str] = settings.review_store_path
    if not path:
        return InMemoryReviewStorage()
    return KeyValueReviewStorage(JsonFileStore(path), namespace=settings.review_store_namespace)


__all__ = [
    "ReviewStorage",
    "InMemoryReviewStorage",
    "KeyValueReviewStorage",
    "JsonFileStore",
    "SessionRecord",
    "VersionRecord",
    "DEFAULT_NAMESPACE",
    "create_storage",
]
