"""Validation around a single save."""

from __future__ import annotations

from typing import TYPE_CHECKING

from settee.domain.hooks import HookStage, run_stage

if TYPE_CHECKING:
    from settee.domain.model import Document

    from .intent import Intent


def check_validity(document: Document) -> bool:
    """Run the document's validators without losing errors added by hooks.

    Hooks may already have added entries before this runs. The validators
    produce a fresh error set; the document ends up with the fresh entries
    followed by the earlier ones.
    """

    prior = document.errors.snapshot()
    document.errors.replace(document.validate(), prior)
    return document.errors.is_empty()


class ValidationPipeline:
    """``validation_on_save`` wrapping ``validation_on_<intent>`` wrapping the validity check."""

    def run(self, document: Document, intent: Intent, *, validate: bool = True) -> bool:
        if not validate:
            return True

        document.errors.clear()
        passed = run_stage(
            document,
            HookStage.VALIDATION_ON_SAVE,
            lambda: run_stage(
                document,
                intent.validation_stage,
                lambda: check_validity(document),
            ),
        )
        return passed and document.errors.is_empty()
