"""Port for view execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from settee.domain.views import ViewSpec


@dataclass(frozen=True, slots=True)
class ViewRow:
    key: object
    value: object
    id: str | None = None
    doc: object | None = None


@dataclass(frozen=True, slots=True)
class ViewResponse:
    rows: list[ViewRow] = field(default_factory=list["ViewRow"])
    total_rows: int | None = None
    offset: int | None = None


@runtime_checkable
class ViewRunner(Protocol):
    """Turns a view spec into a store request and parses the rows."""

    def query_view(self, spec: ViewSpec) -> ViewResponse: ...
