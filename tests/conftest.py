from __future__ import annotations

import os

import pytest

from settee.domain.persistence import Database
from tests.helpers.stores import RecordingStore

os.environ.setdefault("COUCHDB_DATABASE", "settee_test")


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def db(store: RecordingStore) -> Database:
    return Database(store)
