"""Append-only log of conversation turns."""

from __future__ import annotations

from collections.abc import Iterator

from journal.schemas import Message


class MessageStore:
    """Insertion order is conversation order; entries are never reordered or removed."""

    def __init__(self, seed: Message | None = None) -> None:
        self._messages: list[Message] = [seed] if seed is not None else []

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def all(self) -> list[Message]:
        return list(self._messages)

    def reset(self, seed: Message) -> None:
        self._messages = [seed]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.all())
