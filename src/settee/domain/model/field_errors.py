"""Per-field validation messages."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

BASE_FIELD = "base"


class Errors:
    """Ordered mapping of field name to validation messages.

    Fields keep the order in which they first received a message; messages
    keep insertion order and duplicates are preserved.
    """

    __slots__ = ("_messages",)

    def __init__(self, entries: Mapping[str, Iterable[str]] | None = None) -> None:
        self._messages: dict[str, list[str]] = {}
        if entries is not None:
            for name, messages in entries.items():
                for message in messages:
                    self.add(name, message)

    def add(self, name: str, message: str) -> None:
        self._messages.setdefault(name, []).append(message)

    def clear(self) -> None:
        self._messages.clear()

    def merge(self, other: Errors) -> None:
        """Append every message of ``other`` after the existing ones."""
        for name, messages in other.items():
            for message in messages:
                self.add(name, message)

    def replace(self, *sources: Errors) -> None:
        """Swap the whole content for the union of ``sources`` in one step."""
        combined = Errors()
        for source in sources:
            combined.merge(source)
        self._messages = combined._messages

    def snapshot(self) -> Errors:
        return Errors(self._messages)

    def is_empty(self) -> bool:
        return not self._messages

    def items(self) -> Iterator[tuple[str, list[str]]]:
        for name, messages in self._messages.items():
            yield name, list(messages)

    def as_dict(self) -> dict[str, list[str]]:
        return {name: list(messages) for name, messages in self._messages.items()}

    def full_messages(self) -> list[str]:
        return [
            message if name == BASE_FIELD else f"{name.replace('_', ' ').capitalize()} {message}"
            for name, messages in self._messages.items()
            for message in messages
        ]

    def __getitem__(self, name: str) -> list[str]:
        return list(self._messages.get(name, ()))

    def __contains__(self, name: object) -> bool:
        return name in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Errors):
            return self._messages == other._messages
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Errors({self._messages!r})"
