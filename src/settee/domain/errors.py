"""Exceptions raised by the persistence layer.

Validation failures are not exceptional by default: ``Database.save`` returns
``False``. The classes here are raised by the fail-fast variants and by the
conflict handling once local recovery is exhausted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from settee.domain.model import Errors


class SetteeError(Exception):
    """Base class for all persistence errors."""


class ValidationFailedError(SetteeError):
    """Raised by ``save_or_raise`` when a document does not pass validation."""

    def __init__(self, errors: Errors) -> None:
        self.messages = errors.as_dict()
        self.full_messages = errors.full_messages()
        super().__init__(", ".join(self.full_messages) or "Validation failed")


class ConflictError(SetteeError):
    """A write lost the optimistic-concurrency race and could not be recovered."""


class NotFoundError(SetteeError):
    """One or more requested documents do not exist."""

    def __init__(self, missing_ids: Iterable[str] = ()) -> None:
        self.missing_ids = tuple(missing_ids)
        super().__init__(", ".join(self.missing_ids))


class StoreError(SetteeError):
    """The store rejected a request for a reason other than a conflict."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreConflict(StoreError):
    """The store rejected a write because the document revision is stale.

    Raised by store adapters; the persistence layer either recovers from it or
    translates it into ``ConflictError``.
    """
