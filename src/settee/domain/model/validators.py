"""Field validators for documents.

A validator takes a document and yields ``(field, message)`` pairs for every
problem it finds. Validators never touch ``document.errors`` themselves.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

type Violation = tuple[str, str]
type Validator = Callable[[object], Iterable[Violation]]

BLANK_MESSAGE = "can't be blank"


def is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Collection):
        return len(value) == 0
    return False


def required(*names: str, message: str = BLANK_MESSAGE) -> Validator:
    """Presence validator for one or more fields."""

    def validate(document: object) -> Iterable[Violation]:
        return [(name, message) for name in names if is_blank(getattr(document, name, None))]

    return validate
