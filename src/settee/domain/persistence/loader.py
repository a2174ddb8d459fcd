"""Loading documents by id."""

from __future__ import annotations

from collections.abc import Sequence
from logging import getLogger
from typing import TYPE_CHECKING, overload

from settee.domain.errors import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

    from settee.domain.ports import DocumentStore, LoadedRow

log = getLogger(__name__)


class DocumentLoader:
    def __init__(self, store: DocumentStore, *, on_loaded: Callable[[object], None]) -> None:
        self._store = store
        self._on_loaded = on_loaded

    @overload
    def load(self, doc_id: str) -> object | None: ...

    @overload
    def load(self, doc_id: Sequence[str]) -> list[object]: ...

    def load(self, doc_id: str | Sequence[str] | None) -> object | list[object] | None:
        """Load one document, or several in one round-trip.

        A single missing document yields ``None``. Missing documents of a batch
        are left out; the rest follow the store's order.
        """

        if doc_id is None:
            raise ValueError("Can't load a document without an id (got None)")
        if isinstance(doc_id, str):
            document = self._store.get(doc_id)
            if document is not None:
                self._on_loaded(document)
            return document
        if isinstance(doc_id, Sequence):
            return self._bulk_load(doc_id)
        raise TypeError(f"Expected an id or a sequence of ids, got {type(doc_id).__name__}")

    @overload
    def load_or_raise(self, doc_id: str) -> object: ...

    @overload
    def load_or_raise(self, doc_id: Sequence[str]) -> list[object]: ...

    def load_or_raise(self, doc_id: str | Sequence[str] | None) -> object | list[object]:
        """Like ``load``, but raise ``NotFoundError`` naming every missing id."""

        if doc_id is None or isinstance(doc_id, str):
            document = self.load(doc_id)  # type: ignore[arg-type]
            if document is None:
                raise NotFoundError([doc_id])  # type: ignore[list-item]
            return document

        if not isinstance(doc_id, Sequence):
            raise TypeError(f"Expected an id or a sequence of ids, got {type(doc_id).__name__}")
        rows = self._found_rows(doc_id)
        # rows carry the requested id; decoded documents may be plain dicts
        found = {row.id for row in rows}
        missing = [requested for requested in doc_id if requested not in found]
        if missing:
            raise NotFoundError(missing)
        return [row.document for row in rows]

    def _bulk_load(self, doc_ids: Sequence[str]) -> list[object]:
        return [row.document for row in self._found_rows(doc_ids)]

    def _found_rows(self, doc_ids: Sequence[str]) -> list[LoadedRow]:
        rows = [row for row in self._store.bulk_load(list(doc_ids)) if row.document is not None]
        for row in rows:
            self._on_loaded(row.document)
        if len(rows) < len(doc_ids):
            log.debug("Bulk load found %d of %d documents", len(rows), len(doc_ids))
        return rows
