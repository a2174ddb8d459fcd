"""Domain port definitions for adapters."""

from __future__ import annotations

from .back_reference import SupportsBackReference, attach_database
from .store import BatchResult, DocumentStore, LoadedRow, SerializedDocument, WriteAck
from .views import ViewResponse, ViewRow, ViewRunner

__all__ = [
    "BatchResult",
    "DocumentStore",
    "LoadedRow",
    "SerializedDocument",
    "SupportsBackReference",
    "ViewResponse",
    "ViewRow",
    "ViewRunner",
    "WriteAck",
    "attach_database",
]
