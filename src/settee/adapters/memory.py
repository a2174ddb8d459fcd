"""In-process document store with CouchDB-style revision checks."""

from __future__ import annotations

import copy
import hashlib
import json
import uuid
from logging import getLogger
from typing import TYPE_CHECKING, Any

from settee.adapters.couchdb.codec import DocumentCodec
from settee.domain.errors import StoreConflict
from settee.domain.model import DELETED_KEY, ID_KEY, REVISION_KEY
from settee.domain.ports import BatchResult, LoadedRow, WriteAck

if TYPE_CHECKING:
    from collections.abc import Sequence

    from settee.domain.ports import SerializedDocument

log = getLogger(__name__)

CONFLICT_REASON = "Document update conflict."


class InMemoryDocumentStore:
    """Keeps the latest revision of every document in a dict.

    Revisions follow CouchDB's ``<generation>-<digest>`` shape. Writes naming a
    stale revision raise ``StoreConflict``; in ``bulk_write`` they are reported
    per document instead.
    """

    location = "memory://"

    def __init__(self, *, codec: DocumentCodec | None = None) -> None:
        self._codec = codec or DocumentCodec()
        self._documents: dict[str, dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    def raw(self, doc_id: str) -> dict[str, Any] | None:
        stored = self._documents.get(doc_id)
        return copy.deepcopy(stored) if stored is not None else None

    def get(self, doc_id: str) -> object | None:
        stored = self._documents.get(doc_id)
        if stored is None:
            return None
        return self._codec.decode(copy.deepcopy(stored))

    def bulk_load(self, doc_ids: Sequence[str]) -> list[LoadedRow]:
        return [LoadedRow(id=doc_id, document=self.get(doc_id)) for doc_id in doc_ids]

    def write_new(self, document: SerializedDocument) -> WriteAck:
        doc_id = document.get(ID_KEY) or uuid.uuid4().hex
        if doc_id in self._documents:
            raise StoreConflict(CONFLICT_REASON, status_code=409)
        return self._store(doc_id, document, generation=0)

    def write_existing(self, document: SerializedDocument) -> WriteAck:
        doc_id = document.get(ID_KEY)
        if not doc_id:
            raise ValueError("Can't update a document without an id")
        current = self._documents.get(doc_id)
        if current is None or current[REVISION_KEY] != document.get(REVISION_KEY):
            raise StoreConflict(CONFLICT_REASON, status_code=409)
        return self._store(doc_id, document, generation=_generation(current[REVISION_KEY]))

    def bulk_write(self, documents: Sequence[SerializedDocument]) -> list[BatchResult]:
        results: list[BatchResult] = []
        for document in documents:
            try:
                if REVISION_KEY in document:
                    ack = self.write_existing(document)
                else:
                    ack = self.write_new(document)
            except StoreConflict:
                results.append(
                    BatchResult(
                        id=document.get(ID_KEY),
                        ok=False,
                        error="conflict",
                        reason=CONFLICT_REASON,
                    )
                )
                continue
            results.append(BatchResult(id=ack.id, ok=True, revision=ack.revision))
        return results

    def delete(self, document: SerializedDocument) -> None:
        doc_id = document.get(ID_KEY)
        current = self._documents.get(doc_id) if doc_id else None
        if current is None or current[REVISION_KEY] != document.get(REVISION_KEY):
            raise StoreConflict(CONFLICT_REASON, status_code=409)
        del self._documents[doc_id]
        log.debug("Deleted %s", doc_id)

    def _store(self, doc_id: str, document: SerializedDocument, *, generation: int) -> WriteAck:
        body = {k: copy.deepcopy(v) for k, v in document.items() if k != DELETED_KEY}
        digest = hashlib.md5(  # noqa: S324
            json.dumps(body, sort_keys=True, default=str).encode()
        ).hexdigest()
        revision = f"{generation + 1}-{digest}"
        body[ID_KEY] = doc_id
        body[REVISION_KEY] = revision
        self._documents[doc_id] = body
        return WriteAck(id=doc_id, revision=revision)


def _generation(revision: str) -> int:
    head, _, _ = revision.partition("-")
    return int(head) if head.isdigit() else 0
