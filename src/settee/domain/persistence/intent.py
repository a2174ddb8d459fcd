"""Whether a save creates or updates a document."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from settee.domain.hooks import HookStage

if TYPE_CHECKING:
    from settee.domain.model import Document


class Intent(StrEnum):
    CREATE = "create"
    UPDATE = "update"

    @classmethod
    def for_document(cls, document: Document) -> Intent:
        return cls.CREATE if document.new else cls.UPDATE

    @property
    def validation_stage(self) -> HookStage:
        if self is Intent.CREATE:
            return HookStage.VALIDATION_ON_CREATE
        return HookStage.VALIDATION_ON_UPDATE

    @property
    def write_stage(self) -> HookStage:
        return HookStage.CREATE if self is Intent.CREATE else HookStage.UPDATE
