from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from settee.domain.errors import ValidationFailedError
from settee.domain.model import BLANK_MESSAGE
from tests.helpers.documents import Category, Tracked, Vulcan

if TYPE_CHECKING:
    from settee.domain.persistence import Database
    from tests.helpers.stores import RecordingStore


def test_save_assigns_id_and_revision_to_new_document(db: Database) -> None:
    category = Category(name="pizza")

    assert db.save(category) is True

    assert category.new is False
    assert category.id is not None
    assert category.revision is not None
    assert category.revision.startswith("1-")
    assert category.dirty is False


def test_save_sets_back_reference_before_validation(db: Database) -> None:
    category = Category()

    assert db.save(category) is False

    assert category.database is db


def test_save_returns_false_when_creating_invalid_document(
    db: Database, store: RecordingStore
) -> None:
    category = Category()

    assert db.save(category) is False

    assert category.new is True
    assert category.errors["name"] == [BLANK_MESSAGE]
    assert store.calls == []


def test_save_returns_false_when_updating_invalid_document(db: Database) -> None:
    category = Category(name="pizza")
    assert db.save(category) is True

    category.name = None

    assert db.save(category) is False
    assert category.dirty is True
    assert category.errors["name"] == [BLANK_MESSAGE]


def test_save_without_validation_creates_invalid_document(db: Database) -> None:
    category = Category()

    assert db.save(category, False) is True

    assert category.new is False
    assert category.errors.is_empty()


def test_save_without_validation_updates_invalid_document(db: Database) -> None:
    category = Category(name="food")
    db.save(category)
    category.name = None

    db.save(category, False)

    assert category.dirty is False


def test_save_without_validation_leaves_errors_untouched(db: Database) -> None:
    category = Category()
    category.errors.add("name", "stale message")

    db.save(category, False)

    assert category.errors["name"] == ["stale message"]


def test_update_of_unchanged_document_skips_the_store(
    db: Database, store: RecordingStore
) -> None:
    category = Category(name="pizza")
    db.save(category)
    revision = category.revision
    store.calls.clear()

    assert db.save(category) is True

    assert store.calls == []
    assert category.revision == revision


def test_update_writes_dirty_document_with_its_revision(
    db: Database, store: RecordingStore
) -> None:
    category = Category(name="pizza")
    db.save(category)
    first_revision = category.revision
    store.calls.clear()

    category.name = "pasta"
    assert db.save(category) is True

    [(name, payload)] = store.calls
    assert name == "write_existing"
    assert payload["_rev"] == first_revision
    assert payload["name"] == "pasta"
    assert category.revision is not None
    assert category.revision.startswith("2-")


def test_forced_dirty_document_is_written(db: Database, store: RecordingStore) -> None:
    category = Category(name="pizza")
    db.save(category)
    store.calls.clear()

    category.mark_dirty()
    db.save(category)

    assert store.names() == ["write_existing"]
    assert category.dirty is False


class TestErrorsFromHooks:
    def test_keeps_errors_added_before_validation_on_create(self, db: Database) -> None:
        spock = Vulcan(name="spock")

        assert db.save(spock) is False

        assert spock.errors["validation"] == ["failed"]

    def test_keeps_errors_added_before_validation_on_update(self, db: Database) -> None:
        spock = Vulcan(name="spock")
        db.save(spock, False)
        assert spock.new is False

        spock.name = "spock's father"
        db.save(spock)

        assert spock.errors["validation"] == ["failed"]

    def test_keeps_hook_errors_together_with_validator_errors(self, db: Database) -> None:
        spock = Vulcan()

        db.save(spock)

        assert spock.errors["validation"] == ["failed"]
        assert spock.errors["name"] == [BLANK_MESSAGE]

    def test_clears_errors_on_later_valid_save_when_creating(self, db: Database) -> None:
        spock = Vulcan()
        db.save(spock)

        spock.name = "Spock"
        db.save(spock)

        assert spock.errors["name"] == []

    def test_clears_errors_on_later_valid_save_when_updating(self, db: Database) -> None:
        spock = Vulcan(name="spock")
        db.save(spock, False)

        spock.name = None
        db.save(spock)
        assert spock.errors["name"] == [BLANK_MESSAGE]

        spock.name = "Spock"
        db.save(spock)
        assert spock.errors["name"] == []


class TestHookSequencing:
    def test_create_runs_hooks_in_nesting_order(self, db: Database) -> None:
        doc = Tracked(title="x")

        assert db.save(doc) is True

        assert doc.calls == [
            "before_validation_on_save",
            "before_validation_on_create",
            "before_save",
            "before_create",
            "after_create",
            "after_save",
        ]

    def test_update_runs_update_hooks(self, db: Database) -> None:
        doc = Tracked(title="x")
        db.save(doc)
        doc.calls.clear()

        doc.title = "y"
        db.save(doc)

        assert doc.calls == [
            "before_validation_on_save",
            "before_save",
            "before_update",
            "after_update",
            "after_save",
        ]

    @pytest.mark.parametrize(
        "veto",
        [
            "before_validation_on_save",
            "before_validation_on_create",
            "before_save",
            "before_create",
        ],
    )
    def test_aborting_hook_prevents_the_write(
        self, db: Database, store: RecordingStore, veto: str
    ) -> None:
        doc = Tracked(title="x", veto=veto)

        assert db.save(doc) is False

        assert doc.new is True
        assert doc.calls[-1] == veto
        assert "write_new" not in store.names()

    def test_aborting_validation_hook_skips_inner_stages(self, db: Database) -> None:
        doc = Tracked(title="x", veto="before_validation_on_save")

        db.save(doc)

        assert doc.calls == ["before_validation_on_save"]

    def test_aborting_after_hook_reports_failure_after_write(
        self, db: Database, store: RecordingStore
    ) -> None:
        doc = Tracked(title="x", veto="after_create")

        assert db.save(doc) is False

        assert store.names() == ["write_new"]
        assert doc.new is False
        assert "after_save" not in doc.calls


class TestSaveOrRaise:
    def test_raises_with_field_messages(self, db: Database) -> None:
        category = Category()

        with pytest.raises(ValidationFailedError) as exc:
            db.save_or_raise(category)

        assert exc.value.messages == {"name": [BLANK_MESSAGE]}
        assert exc.value.full_messages == [f"Name {BLANK_MESSAGE}"]

    def test_passes_for_valid_document(self, db: Database) -> None:
        category = Category(name="pizza")

        assert db.save_or_raise(category) is True
        assert category.new is False
