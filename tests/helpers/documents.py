"""Document classes shared by the tests.

Kept in one module because document types register globally by name.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from settee.domain.hooks import HookResult, HookStage, after, before
from settee.domain.model import TRANSIENT, Document, required


@dataclass(eq=False, kw_only=True)
class Category(Document):
    name: str | None = None

    validators = (required("name"),)


@dataclass(eq=False, kw_only=True)
class Vulcan(Document):
    """Adds an error in its before-validation hooks, so it never validates."""

    name: str | None = None

    validators = (required("name"),)

    @before(HookStage.VALIDATION_ON_CREATE)
    @before(HookStage.VALIDATION_ON_UPDATE)
    def set_errors(self) -> None:
        self.errors.add("validation", "failed")


@dataclass(eq=False, kw_only=True)
class Counter(Document):
    count: int = 0


@dataclass(eq=False, kw_only=True)
class Tracked(Document):
    """Records which lifecycle hooks ran; ``veto`` aborts the named stage."""

    title: str | None = None
    veto: str | None = field(default=None, metadata={TRANSIENT: True})
    calls: list[str] = field(default_factory=list[str], repr=False, metadata={TRANSIENT: True})

    def _record(self, label: str) -> HookResult:
        self.calls.append(label)
        return HookResult.ABORT if self.veto == label else HookResult.CONTINUE

    @before(HookStage.VALIDATION_ON_SAVE)
    def before_validation_on_save(self) -> HookResult:
        return self._record("before_validation_on_save")

    @before(HookStage.VALIDATION_ON_CREATE)
    def before_validation_on_create(self) -> HookResult:
        return self._record("before_validation_on_create")

    @before(HookStage.SAVE)
    def before_save(self) -> HookResult:
        return self._record("before_save")

    @before(HookStage.CREATE)
    def before_create(self) -> HookResult:
        return self._record("before_create")

    @before(HookStage.UPDATE)
    def before_update(self) -> HookResult:
        return self._record("before_update")

    @after(HookStage.CREATE)
    def after_create(self) -> HookResult:
        return self._record("after_create")

    @after(HookStage.UPDATE)
    def after_update(self) -> HookResult:
        return self._record("after_update")

    @after(HookStage.SAVE)
    def after_save(self) -> HookResult:
        return self._record("after_save")

    @before(HookStage.DESTROY)
    def before_destroy(self) -> HookResult:
        return self._record("before_destroy")
