"""Document base class.

Concrete documents are keyword-only dataclasses deriving from ``Document``::

    @dataclass(eq=False, kw_only=True)
    class Category(Document):
        name: str | None = None

        validators = (required("name"),)

Every ``init`` field other than ``id`` and ``revision`` is persisted, unless its
metadata marks it ``TRANSIENT``. The persistence layer is the only writer of
``id``, ``revision`` and the persisted snapshot that ``dirty`` is computed
against.
"""

from __future__ import annotations

import copy
import weakref
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, ClassVar, Self

from settee.domain.hooks import HookRegistry, collect_marked_hooks

from .field_errors import Errors

if TYPE_CHECKING:
    from collections.abc import Mapping

    from settee.domain.persistence.database import Database

    from .validators import Validator

ID_KEY = "_id"
REVISION_KEY = "_rev"
DELETED_KEY = "_deleted"
TYPE_KEY = "type"

# dataclass field metadata key for in-memory only fields
TRANSIENT = "settee.transient"

_RESERVED_FIELDS = frozenset({"id", "revision"})
_document_types: dict[str, type[Document]] = {}


def document_class_for(type_name: str) -> type[Document] | None:
    """Look up a registered document class by its stored ``type`` value."""
    return _document_types.get(type_name)


@dataclass(eq=False, kw_only=True)
class Document:
    id: str | None = None
    revision: str | None = None

    errors: Errors = field(default_factory=Errors, init=False, repr=False)
    _persisted: dict[str, Any] | None = field(default=None, init=False, repr=False)
    _forced_dirty: bool = field(default=False, init=False, repr=False)
    _database_ref: weakref.ReferenceType[Database] | None = field(
        default=None, init=False, repr=False
    )

    # class-level configuration; subclasses override
    DOCUMENT_TYPE: ClassVar[str] = "Document"
    validators: ClassVar[tuple[Validator, ...]] = ()
    hooks: ClassVar[HookRegistry] = HookRegistry()

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if "DOCUMENT_TYPE" not in cls.__dict__:
            cls.DOCUMENT_TYPE = cls.__qualname__
        cls.hooks = cls.hooks.copy()
        collect_marked_hooks(cls.__dict__, cls.hooks)
        _document_types[cls.DOCUMENT_TYPE] = cls

    # -- state -----------------------------------------------------------

    @property
    def new(self) -> bool:
        return self.id is None

    @property
    def dirty(self) -> bool:
        return self._forced_dirty or self._persisted != self.field_values()

    def mark_dirty(self) -> None:
        """Force the next update to be written even without field changes."""
        self._forced_dirty = True

    @property
    def database(self) -> Database | None:
        return self._database_ref() if self._database_ref is not None else None

    @database.setter
    def database(self, database: Database | None) -> None:
        self._database_ref = weakref.ref(database) if database is not None else None

    def mark_persisted(self, *, revision: str, id: str | None = None) -> None:  # noqa: A002
        """Record an acknowledged write."""
        if id is not None and self.id is None:
            self.id = id
        self.revision = revision
        self._persisted = copy.deepcopy(self.field_values())
        self._forced_dirty = False

    def mark_destroyed(self) -> None:
        self.id = None
        self.revision = None
        self._persisted = None
        self._forced_dirty = False

    def adopt(self, latest: Document) -> None:
        """Take over identity, revision and field state of a freshly loaded copy."""
        for name, value in latest.field_values().items():
            setattr(self, name, copy.deepcopy(value))
        self.id = latest.id
        self.revision = latest.revision
        self._persisted = copy.deepcopy(latest.field_values())
        self._forced_dirty = False

    # -- validation ------------------------------------------------------

    def validate(self) -> Errors:
        """Run the declared validators and return a fresh error set."""
        errors = Errors()
        for validator in self.validators:
            for name, message in validator(self):
                errors.add(name, message)
        return errors

    def valid(self) -> bool:
        """Replace ``errors`` with the result of the validators."""
        self.errors.replace(self.validate())
        return self.errors.is_empty()

    # -- serialisation ---------------------------------------------------

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(
            f.name
            for f in fields(cls)  # type: ignore[arg-type]
            if f.init and f.name not in _RESERVED_FIELDS and not f.metadata.get(TRANSIENT)
        )

    def field_values(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.field_names()}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id is not None:
            data[ID_KEY] = self.id
        if self.revision is not None:
            data[REVISION_KEY] = self.revision
        data[TYPE_KEY] = self.DOCUMENT_TYPE
        data.update(copy.deepcopy(self.field_values()))
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        names = cls.field_names()
        document = cls(**{name: data[name] for name in names if name in data})
        document.id = data.get(ID_KEY)
        document.revision = data.get(REVISION_KEY)
        document._persisted = copy.deepcopy(document.field_values())
        return document

    def reload(self) -> Self | None:
        """Fetch the stored version of this document, ``None`` if it is gone."""
        if self.id is None:
            raise ValueError("Can't reload a document without an id")
        database = self.database
        if database is None:
            raise RuntimeError(f"{self!r} is not attached to a database")
        latest = database.load(self.id)
        if latest is None:
            return None
        if not isinstance(latest, type(self)):
            raise TypeError(f"Reloaded {self.id} as {type(latest).__name__}")
        return latest
