"""Document model."""

from __future__ import annotations

from .document import (
    DELETED_KEY,
    ID_KEY,
    REVISION_KEY,
    TRANSIENT,
    TYPE_KEY,
    Document,
    document_class_for,
)
from .field_errors import BASE_FIELD, Errors
from .validators import BLANK_MESSAGE, Validator, is_blank, required

__all__ = [
    "BASE_FIELD",
    "BLANK_MESSAGE",
    "DELETED_KEY",
    "ID_KEY",
    "REVISION_KEY",
    "TRANSIENT",
    "TYPE_KEY",
    "Document",
    "Errors",
    "Validator",
    "document_class_for",
    "is_blank",
    "required",
]
