from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from settee.domain.errors import ConflictError, StoreConflict
from settee.domain.persistence import Database
from tests.helpers.documents import Category, Tracked
from tests.helpers.stores import RecordingStore

if TYPE_CHECKING:
    from settee.domain.ports import SerializedDocument


class AlwaysConflictingDelete(RecordingStore):
    def delete(self, document: SerializedDocument) -> None:
        self.calls.append(("delete", dict(document)))
        raise StoreConflict("Document update conflict.", status_code=409)


def test_destroy_removes_document_and_clears_identity(
    db: Database, store: RecordingStore
) -> None:
    category = Category(name="pizza")
    db.save(category)
    doc_id = category.id

    assert db.destroy(category) is True

    assert doc_id not in store
    assert category.id is None
    assert category.revision is None
    assert category.new is True


def test_destroy_sends_deleted_marker_with_revision(
    db: Database, store: RecordingStore
) -> None:
    category = Category(name="pizza")
    db.save(category)
    revision = category.revision
    store.calls.clear()

    db.destroy(category)

    [(name, payload)] = store.calls
    assert name == "delete"
    assert payload["_deleted"] is True
    assert payload["_rev"] == revision


def test_destroy_of_already_deleted_document_does_not_raise() -> None:
    store = AlwaysConflictingDelete()
    db = Database(store)
    category = Category(id="gone", revision="1-abc", name="pizza")

    assert db.destroy(category) is True

    assert store.names() == ["delete", "get"]
    assert category.id is None


def test_destroy_retries_once_after_reload(db: Database, store: RecordingStore) -> None:
    category = Category(name="pizza")
    db.save(category)
    stale = Category(id=category.id, revision=category.revision, name="pizza")
    category.name = "pasta"
    db.save(category)
    store.calls.clear()

    assert db.destroy(stale) is True

    assert store.names() == ["delete", "get", "delete"]
    assert category.id not in store


def test_destroy_raises_when_retry_conflicts_again() -> None:
    store = AlwaysConflictingDelete()
    db = Database(store)
    category = Category(name="pizza")
    db.save(category)

    with pytest.raises(ConflictError):
        db.destroy(category)

    assert store.names().count("delete") == 2


def test_destroy_hook_can_abort(db: Database, store: RecordingStore) -> None:
    doc = Tracked(title="x", veto="before_destroy")
    db.save(doc)

    assert db.destroy(doc) is False

    assert doc.id in store
    assert doc.id is not None


def test_destroy_of_unsaved_document_is_rejected(db: Database, store: RecordingStore) -> None:
    doc = Tracked(title="draft")

    with pytest.raises(ValueError, match="without an id"):
        db.destroy(doc)

    assert store.calls == []
    assert doc.calls == []
