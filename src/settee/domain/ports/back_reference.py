"""Capability of holding a link back to the database."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from settee.domain.persistence.database import Database


@runtime_checkable
class SupportsBackReference(Protocol):
    """Objects the database may attach itself to after loading or writing them."""

    database: Database | None


def attach_database(target: object, database: Database) -> None:
    if isinstance(target, SupportsBackReference):
        target.database = database
