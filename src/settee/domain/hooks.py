"""Lifecycle hook stages.

Every document class owns a ``HookRegistry``: an explicit, ordered list of
hooks per named stage. A stage runs its before-hooks, then the inner action,
then its after-hooks. A hook aborts the stage by returning ``False`` (or
``HookResult.ABORT``); any other return value continues. The inner action
aborts the same way, which also skips the after-hooks.
"""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

log = getLogger(__name__)

type Hook = Callable[[Any], object]
type HookTiming = Literal["before", "after"]

HOOK_MARKER = "__settee_hooks__"


class HookStage(StrEnum):
    VALIDATION_ON_SAVE = "validation_on_save"
    VALIDATION_ON_CREATE = "validation_on_create"
    VALIDATION_ON_UPDATE = "validation_on_update"
    SAVE = "save"
    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"


class HookResult(StrEnum):
    CONTINUE = "continue"
    ABORT = "abort"


def aborts(outcome: object) -> bool:
    return outcome is False or outcome is HookResult.ABORT


class HookRegistry:
    """Ordered hooks per stage for one document class."""

    def __init__(
        self,
        stages: Mapping[HookStage, Mapping[HookTiming, tuple[Hook, ...]]] | None = None,
    ) -> None:
        self._stages: dict[HookStage, dict[HookTiming, tuple[Hook, ...]]] = {}
        for stage, timings in (stages or {}).items():
            self._stages[stage] = dict(timings)

    def register(self, stage: HookStage, hook: Hook, *, when: HookTiming = "before") -> None:
        timings = self._stages.setdefault(stage, {})
        timings[when] = (*timings.get(when, ()), hook)

    def hooks(self, stage: HookStage, *, when: HookTiming = "before") -> tuple[Hook, ...]:
        return self._stages.get(stage, {}).get(when, ())

    def copy(self) -> HookRegistry:
        return HookRegistry(self._stages)

    def run_stage(
        self,
        document: object,
        stage: HookStage,
        action: Callable[[], object],
    ) -> bool:
        """Run ``action`` wrapped in the hooks of ``stage``; ``False`` if anything aborted."""

        for hook in self.hooks(stage, when="before"):
            if aborts(hook(document)):
                log.debug("%s hook %s aborted %s", stage, _hook_name(hook), document)
                return False
        if aborts(action()):
            return False
        for hook in self.hooks(stage, when="after"):
            if aborts(hook(document)):
                log.debug("%s after-hook %s aborted %s", stage, _hook_name(hook), document)
                return False
        return True


def run_stage(document: object, stage: HookStage, action: Callable[[], object]) -> bool:
    """Run a stage for ``document``; documents without hooks just run ``action``."""

    registry = getattr(type(document), "hooks", None)
    if isinstance(registry, HookRegistry):
        return registry.run_stage(document, stage, action)
    return not aborts(action())


def before[F: Callable[..., object]](stage: HookStage) -> Callable[[F], F]:
    """Mark a document method as a before-hook of ``stage``."""
    return _marker(stage, "before")


def after[F: Callable[..., object]](stage: HookStage) -> Callable[[F], F]:
    """Mark a document method as an after-hook of ``stage``."""
    return _marker(stage, "after")


def collect_marked_hooks(namespace: Mapping[str, object], registry: HookRegistry) -> None:
    """Register every marked function of a class body, in definition order."""

    for value in namespace.values():
        for stage, when in getattr(value, HOOK_MARKER, ()):
            registry.register(stage, value, when=when)  # type: ignore[arg-type]


def _marker[F: Callable[..., object]](stage: HookStage, when: HookTiming) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        marks: list[tuple[HookStage, HookTiming]] = list(getattr(func, HOOK_MARKER, ()))
        marks.append((stage, when))
        setattr(func, HOOK_MARKER, tuple(marks))
        return func

    return decorator


def _hook_name(hook: Hook) -> str:
    return getattr(hook, "__qualname__", repr(hook))
