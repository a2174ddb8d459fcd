from __future__ import annotations

import json
from contextlib import contextmanager
from typing import TYPE_CHECKING

import pytest

from settee.domain.persistence import Database
from settee.domain.ports import BatchResult
from settee.ui import cli as cli_module
from tests.helpers.documents import Category
from tests.helpers.stores import RecordingStore, StaticBulkStore

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def cli_db(monkeypatch: pytest.MonkeyPatch) -> Database:
    db = Database(RecordingStore())

    @contextmanager
    def fake_open_database() -> Iterator[Database]:
        yield db

    monkeypatch.setattr(cli_module, "open_database", fake_open_database)
    return db


def _stored(db: Database, *ids: str) -> None:
    for doc_id in ids:
        db.save(Category(id=doc_id, name=f"name {doc_id}"))


def test_load_prints_documents(cli_db: Database, capsys: pytest.CaptureFixture[str]) -> None:
    _stored(cli_db, "1")

    cli_module.main(["load", "1", "2"])

    [printed] = json.loads(capsys.readouterr().out)
    assert printed["_id"] == "1"
    assert printed["type"] == "Category"
    assert printed["name"] == "name 1"


def test_strict_load_fails_on_missing_documents(
    cli_db: Database, caplog: pytest.LogCaptureFixture
) -> None:
    _stored(cli_db, "1")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["load", "--strict", "1", "2", "3"])

    assert excinfo.value.code == 1
    assert "2, 3" in caplog.text


def test_strict_load_prints_documents_of_unregistered_types(
    cli_db: Database, capsys: pytest.CaptureFixture[str]
) -> None:
    store = cli_db.store
    assert isinstance(store, RecordingStore)
    store.write_new({"_id": "raw", "type": "Unregistered", "value": 1})

    cli_module.main(["load", "--strict", "raw"])

    [printed] = json.loads(capsys.readouterr().out)
    assert printed["_id"] == "raw"
    assert printed["value"] == 1


def test_put_bulk_saves_documents(cli_db: Database, tmp_path: Path) -> None:
    path = tmp_path / "docs.json"
    path.write_text(
        json.dumps(
            [
                {"_id": "a", "type": "Category", "name": "a"},
                {"type": "Category"},
            ]
        )
    )

    cli_module.main(["put", str(path)])

    store = cli_db.store
    assert isinstance(store, RecordingStore)
    assert store.names() == ["bulk_write"]
    assert len(store) == 2


def test_put_exits_when_any_write_fails(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    db = Database(StaticBulkStore([BatchResult(id="a", ok=False, error="conflict")]))

    @contextmanager
    def fake_open_database() -> Iterator[Database]:
        yield db

    monkeypatch.setattr(cli_module, "open_database", fake_open_database)
    path = tmp_path / "docs.json"
    path.write_text(json.dumps([{"_id": "a", "_rev": "1-x", "type": "Category", "name": "a"}]))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["put", str(path)])

    assert excinfo.value.code == 1


@pytest.mark.parametrize(
    "payload",
    [{"type": "Category"}, [{"type": "NotRegistered"}], ["not an object"]],
)
def test_put_rejects_malformed_files(cli_db: Database, tmp_path: Path, payload: object) -> None:
    path = tmp_path / "docs.json"
    path.write_text(json.dumps(payload))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["put", str(path)])

    assert excinfo.value.code == 1
    assert cli_db.store.names() == []  # type: ignore[attr-defined]


def test_models_option_imports_modules(cli_db: Database) -> None:
    cli_module.main(["--models", "tests.helpers.documents", "load", "x"])


def test_missing_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2
