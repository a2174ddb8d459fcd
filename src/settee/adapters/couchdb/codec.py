"""Mapping between stored JSON and document instances."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from settee.domain.model import TYPE_KEY, Document, document_class_for

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

log = getLogger(__name__)

type ClassResolver = Callable[[str], type[Document] | None]


class DocumentCodec:
    """Decode stored JSON by its ``type`` field.

    Payloads whose type is not a registered document class are returned as
    plain dicts.
    """

    def __init__(self, resolver: ClassResolver = document_class_for) -> None:
        self._resolver = resolver
        self._unknown_types: set[str] = set()

    def decode(self, data: Mapping[str, Any]) -> Document | dict[str, Any]:
        type_name = data.get(TYPE_KEY)
        cls = self._resolver(type_name) if isinstance(type_name, str) else None
        if cls is None:
            if isinstance(type_name, str) and type_name not in self._unknown_types:
                self._unknown_types.add(type_name)
                log.warning("No document class registered for type %r", type_name)
            return dict(data)
        return cls.from_dict(data)
