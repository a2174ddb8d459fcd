"""Store writes wrapped in the save lifecycle hooks."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from settee.domain.hooks import HookStage, run_stage

from .intent import Intent

if TYPE_CHECKING:
    from settee.domain.model import Document
    from settee.domain.ports import DocumentStore

log = getLogger(__name__)


class MutationPipeline:
    """``save`` wrapping ``create``/``update`` wrapping the store write.

    Returns ``False`` only when a hook aborted. A non-dirty update is a
    successful no-op. ``StoreConflict`` raised by the store propagates.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def run(self, document: Document, intent: Intent) -> bool:
        return run_stage(
            document,
            HookStage.SAVE,
            lambda: run_stage(
                document,
                intent.write_stage,
                lambda: self._write(document, intent),
            ),
        )

    def _write(self, document: Document, intent: Intent) -> None:
        if intent is Intent.CREATE:
            ack = self._store.write_new(document.to_dict())
            document.mark_persisted(id=ack.id, revision=ack.revision)
            log.debug("Created %s at %s", ack.id, ack.revision)
        elif document.dirty:
            ack = self._store.write_existing(document.to_dict())
            document.mark_persisted(revision=ack.revision)
            log.debug("Updated %s to %s", document.id, ack.revision)
        else:
            log.debug("Skipped write of unchanged %s", document.id)
