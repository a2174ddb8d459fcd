"""View specifications.

A ``ViewSpec`` names a design document view together with the functions that
define it and the query parameters to send. How the rows come back is decided
by its ``process_results`` callable.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from settee.domain.ports.views import ViewResponse

DEFAULT_LANGUAGE = "javascript"


def documents_or_values(response: ViewResponse) -> list[object]:
    """Included documents where present, otherwise row values."""
    return [row.doc if row.doc is not None else row.value for row in response.rows]


def reduced_value(response: ViewResponse) -> object:
    """The value of the single reduce row, ``0`` for an empty reduction."""
    return response.rows[0].value if response.rows else 0


@dataclass(frozen=True, slots=True)
class ViewSpec:
    design_document: str
    view_name: str
    map_function: str
    reduce_function: str | None = None
    list_name: str | None = None
    list_function: str | None = None
    lib: Mapping[str, str] | None = None
    language: str = DEFAULT_LANGUAGE
    view_parameters: Mapping[str, Any] = field(default_factory=dict[str, Any])
    results_processor: Callable[[ViewResponse], object] = documents_or_values

    def with_parameters(self, **parameters: Any) -> ViewSpec:
        return replace(self, view_parameters={**self.view_parameters, **parameters})

    def process_results(self, response: ViewResponse) -> object:
        return self.results_processor(response)
