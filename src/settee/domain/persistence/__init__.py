"""Persistence coordination: validation, hooks, writes and conflict recovery."""

from __future__ import annotations

from .bulk import BulkSaveCoordinator
from .conflicts import MAX_CONFLICT_RETRIES, ConflictRetryCoordinator
from .database import Database
from .intent import Intent
from .loader import DocumentLoader
from .mutation import MutationPipeline
from .validation import ValidationPipeline, check_validity

__all__ = [
    "MAX_CONFLICT_RETRIES",
    "BulkSaveCoordinator",
    "ConflictRetryCoordinator",
    "Database",
    "DocumentLoader",
    "Intent",
    "MutationPipeline",
    "ValidationPipeline",
    "check_validity",
]
