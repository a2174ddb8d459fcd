"""The public persistence API consumed by application code."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal, overload

from settee.domain.errors import NotFoundError, ValidationFailedError
from settee.domain.hooks import HookStage, run_stage
from settee.domain.model import DELETED_KEY
from settee.domain.ports import attach_database

from .bulk import BulkSaveCoordinator
from .conflicts import ConflictRetryCoordinator, Mutation
from .intent import Intent
from .loader import DocumentLoader
from .mutation import MutationPipeline
from .validation import ValidationPipeline

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from settee.domain.model import Document
    from settee.domain.ports import BatchResult, DocumentStore, ViewRunner
    from settee.domain.views import ViewSpec

log = getLogger(__name__)


class Database:
    """Coordinates document persistence against a store.

    Example::

        db = Database(store)
        category = Category(name="pizza")
        db.save(category)                 # True, category.id is set
        db.save_with_retry(category, lambda c: setattr(c, "name", "pasta"))
        db.load([category.id, "missing"]) # [category copy]

    Every document returned or successfully written gets a back-reference to
    this database when it supports one.
    """

    def __init__(self, store: DocumentStore, views: ViewRunner | None = None) -> None:
        self._store = store
        self._views = views
        self._validation = ValidationPipeline()
        self._mutation = MutationPipeline(store)
        self._conflicts = ConflictRetryCoordinator(
            save_once=self._save_once,
            destroy_once=self._destroy_once,
            reload=self._reload,
        )
        self._bulk = BulkSaveCoordinator(store, self._validation, on_written=self._bind)
        self._loader = DocumentLoader(store, on_loaded=self._bind)

    @property
    def store(self) -> DocumentStore:
        return self._store

    # -- views -----------------------------------------------------------

    def view(self, spec: ViewSpec) -> object:
        """Run a view and process its rows with the spec's result processor."""
        if self._views is None:
            raise RuntimeError("This database has no view runner")
        results = spec.process_results(self._views.query_view(spec))
        if isinstance(results, list | tuple):
            for result in results:
                self._bind(result)
        return results

    def first(self, spec: ViewSpec) -> object | None:
        results = self.view(spec.with_parameters(limit=1))
        if isinstance(results, list | tuple):
            return results[0] if results else None
        return results

    def first_or_raise(self, spec: ViewSpec) -> object:
        result = self.first(spec)
        if result is None:
            raise NotFoundError([f"{spec.design_document}/{spec.view_name}"])
        return result

    # -- writes ----------------------------------------------------------

    def save(self, document: Document, validate: bool = True) -> bool:  # noqa: FBT001, FBT002
        """Save a document; ``False`` when validation or a hook stopped it.

        Raises ``ConflictError`` when the store holds a newer revision.
        """
        return self._conflicts.save(document, validate=validate)

    def save_with_retry(
        self,
        document: Document,
        mutate: Mutation,
        *,
        validate: bool = True,
    ) -> bool:
        """Apply ``mutate`` and save, reloading and reapplying it on conflicts.

        Gives up with ``ConflictError`` after five retries.
        """
        return self._conflicts.save_with_retry(document, mutate, validate=validate)

    def save_or_raise(self, document: Document) -> bool:
        if not self.save(document):
            raise ValidationFailedError(document.errors)
        return True

    def destroy(self, document: Document) -> bool:
        """Delete a stored document; ``False`` when a ``destroy`` hook aborted."""
        if document.id is None:
            raise ValueError("Can't destroy a document without an id")
        return self._conflicts.destroy(document)

    def bulk_save(
        self,
        documents: Iterable[Document],
        validate: bool = True,  # noqa: FBT001, FBT002
    ) -> list[BatchResult] | Literal[False]:
        return self._bulk.save(documents, validate=validate)

    # -- reads -----------------------------------------------------------

    @overload
    def load(self, doc_id: str) -> object | None: ...

    @overload
    def load(self, doc_id: Sequence[str]) -> list[object]: ...

    def load(self, doc_id: str | Sequence[str]) -> object | list[object] | None:
        return self._loader.load(doc_id)

    @overload
    def load_or_raise(self, doc_id: str) -> object: ...

    @overload
    def load_or_raise(self, doc_id: Sequence[str]) -> list[object]: ...

    def load_or_raise(self, doc_id: str | Sequence[str]) -> object | list[object]:
        return self._loader.load_or_raise(doc_id)

    def __repr__(self) -> str:
        location = getattr(self._store, "location", type(self._store).__name__)
        return f"<Database {location}>"

    # -- internals -------------------------------------------------------

    def _bind(self, document: object) -> None:
        attach_database(document, self)

    def _save_once(self, document: Document, validate: bool) -> bool:  # noqa: FBT001
        intent = Intent.for_document(document)
        if intent is Intent.CREATE:
            self._bind(document)
        if not self._validation.run(document, intent, validate=validate):
            return False
        if not self._mutation.run(document, intent):
            return False
        self._bind(document)
        return True

    def _destroy_once(self, document: Document) -> bool:
        def delete() -> None:
            self._store.delete({**document.to_dict(), DELETED_KEY: True})

        if not run_stage(document, HookStage.DESTROY, delete):
            return False
        log.debug("Destroyed %s", document.id)
        document.mark_destroyed()
        return True

    def _reload(self, document: Document) -> Document | None:
        if document.id is None:
            return None
        latest = self._loader.load(document.id)
        if latest is not None and not isinstance(latest, type(document)):
            raise TypeError(f"Reloaded {document.id} as {type(latest).__name__}")
        return latest
