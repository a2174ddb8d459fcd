"""Port for the remote document store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

type SerializedDocument = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class WriteAck:
    """Acknowledgement of a single-document write."""

    id: str
    revision: str


@dataclass(frozen=True, slots=True)
class LoadedRow:
    """One row of a bulk load; ``document`` is ``None`` when the id is unknown."""

    id: str
    document: object | None


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Per-document outcome of a bulk write. Consumed immediately, never stored."""

    id: str | None
    ok: bool
    revision: str | None = None
    error: str | None = None
    reason: str | None = None


@runtime_checkable
class DocumentStore(Protocol):
    """Store contract; stale revisions raise ``StoreConflict``."""

    def get(self, doc_id: str) -> object | None: ...

    def bulk_load(self, doc_ids: Sequence[str]) -> list[LoadedRow]: ...

    def write_new(self, document: SerializedDocument) -> WriteAck: ...

    def write_existing(self, document: SerializedDocument) -> WriteAck: ...

    def bulk_write(self, documents: Sequence[SerializedDocument]) -> list[BatchResult]: ...

    def delete(self, document: SerializedDocument) -> None: ...
