"""Recovery from optimistic-concurrency conflicts on single documents."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from settee.domain.errors import ConflictError, StoreConflict

if TYPE_CHECKING:
    from collections.abc import Callable

    from settee.domain.model import Document

log = getLogger(__name__)

MAX_CONFLICT_RETRIES: Final[int] = 5

type SaveAttempt = Callable[[Document, bool], bool]
type DestroyAttempt = Callable[[Document], bool]
type Reloader = Callable[[Document], Document | None]
type Mutation = Callable[[Document], object]


class ConflictRetryCoordinator:
    """Retries conflicting writes after reloading the document.

    A save can only be retried when the caller supplies a mutation that
    reapplies its change on top of the reloaded state; without one the first
    conflict is final. Reloading updates the caller's instance in place.
    """

    def __init__(
        self,
        *,
        save_once: SaveAttempt,
        destroy_once: DestroyAttempt,
        reload: Reloader,
        max_retries: int = MAX_CONFLICT_RETRIES,
    ) -> None:
        self._save_once = save_once
        self._destroy_once = destroy_once
        self._reload = reload
        self.max_retries = max_retries

    def save(self, document: Document, *, validate: bool = True) -> bool:
        try:
            return self._save_once(document, validate)
        except StoreConflict as exc:
            raise ConflictError(f"Conflict while saving {document.id}") from exc

    def save_with_retry(
        self,
        document: Document,
        mutate: Mutation,
        *,
        validate: bool = True,
    ) -> bool:
        retries = 0
        while True:
            mutate(document)
            try:
                return self._save_once(document, validate)
            except StoreConflict as exc:
                if retries >= self.max_retries:
                    log.error(
                        "Giving up on %s after %d conflicting retries", document.id, retries
                    )
                    raise ConflictError(
                        f"Conflict while saving {document.id} after {retries} retries"
                    ) from exc
                self._refresh(document, exc)
                retries += 1
                log.warning(
                    "Write conflict on %s, retry %d of %d",
                    document.id,
                    retries,
                    self.max_retries,
                )

    def destroy(self, document: Document) -> bool:
        """Destroy, reloading and retrying once on conflict.

        A document that is gone after the reload counts as destroyed.
        """

        try:
            return self._destroy_once(document)
        except StoreConflict:
            latest = self._reload(document)
            if latest is None:
                log.info("%s was already deleted", document.id)
                document.mark_destroyed()
                return True
            document.adopt(latest)
            log.warning("Delete conflict on %s, retrying at %s", document.id, document.revision)

        try:
            return self._destroy_once(document)
        except StoreConflict as exc:
            raise ConflictError(f"Conflict while destroying {document.id}") from exc

    def _refresh(self, document: Document, cause: StoreConflict) -> None:
        latest = self._reload(document)
        if latest is None:
            raise ConflictError(f"{document.id} disappeared while resolving a conflict") from cause
        document.adopt(latest)
