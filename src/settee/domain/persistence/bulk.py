"""Batch saves in a single store round-trip."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from settee.domain.hooks import HookStage, run_stage

from .intent import Intent

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from settee.domain.model import Document
    from settee.domain.ports import BatchResult, DocumentStore

    from .validation import ValidationPipeline

log = getLogger(__name__)


class BulkSaveCoordinator:
    """Validate, filter and write a batch of documents.

    Validation stops at the first invalid document and nothing is written.
    Only new or dirty documents are sent. Failed outcomes are left to the
    caller; nothing here retries them.
    """

    def __init__(
        self,
        store: DocumentStore,
        validation: ValidationPipeline,
        *,
        on_written: Callable[[Document], None],
    ) -> None:
        self._store = store
        self._validation = validation
        self._on_written = on_written

    def save(
        self,
        documents: Iterable[Document],
        *,
        validate: bool = True,
    ) -> list[BatchResult] | Literal[False]:
        documents = list(documents)

        if validate:
            for document in documents:
                if not self._validation.run(document, Intent.for_document(document)):
                    log.debug("Bulk save aborted: %r failed validation", document)
                    return False

        write_set: list[Document] = []
        for document in documents:
            self._collect(document, write_set)

        results = self._store.bulk_write([document.to_dict() for document in write_set])
        self._reconcile(write_set, results)
        log.debug(
            "Bulk saved %d of %d documents, %d failed",
            len(write_set),
            len(documents),
            sum(1 for result in results if not result.ok),
        )
        return results

    def _collect(self, document: Document, write_set: list[Document]) -> None:
        """Run the before-hooks of ``save`` and ``create``/``update``.

        The inner actions return ``False`` so that after-hooks never run for a
        write that has not happened yet.
        """

        intent = Intent.for_document(document)

        def include() -> bool:
            if document.new or document.dirty:
                write_set.append(document)
            return False

        def write_stage() -> bool:
            run_stage(document, intent.write_stage, include)
            return False

        run_stage(document, HookStage.SAVE, write_stage)

    def _reconcile(self, write_set: list[Document], results: list[BatchResult]) -> None:
        by_id = {document.id: document for document in write_set if document.id is not None}
        for position, result in enumerate(results):
            if not result.ok or result.revision is None:
                continue
            document = by_id.get(result.id)
            if document is None and position < len(write_set) and write_set[position].new:
                # the store assigns ids to new documents; results follow request order
                document = write_set[position]
            if document is None:
                log.warning("Bulk result for unknown document %s", result.id)
                continue
            document.mark_persisted(id=result.id, revision=result.revision)
            self._on_written(document)
