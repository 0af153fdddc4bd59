"""Domain models for the edit history ledger."""

from collections.abc import Iterator
from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

from lumina_studio.domain.errors import HistoryEntryNotFound
from lumina_studio.domain.images import EncodedImage


@dataclass(frozen=True)
class HistoryEntry:
    """Successful transform result recorded in the ledger."""

    id: UUID
    image: EncodedImage
    created_at: datetime


@dataclass(frozen=True, eq=False, repr=False)
class HistoryLedger:
    """Append-only record of results, newest first.

    Each ledger is a node pointing at the ledger it was appended to, so
    appends are O(1) and older session snapshots keep their own view.
    """

    _head: HistoryEntry | None = None
    _rest: "HistoryLedger | None" = None
    _size: int = 0

    def append(self, entry: HistoryEntry) -> "HistoryLedger":
        """Return a ledger with the entry inserted at index 0."""
        if self._head is not None and entry.created_at < self._head.created_at:
            # Ordering follows insertion; never let clock skew reorder stamps.
            entry = replace(entry, created_at=self._head.created_at)
        return HistoryLedger(_head=entry, _rest=self, _size=self._size + 1)

    def find(self, entry_id: UUID) -> HistoryEntry:
        """Return the entry with the given id."""
        for entry in self:
            if entry.id == entry_id:
                return entry
        raise HistoryEntryNotFound(entry_id)

    @property
    def latest(self) -> HistoryEntry | None:
        """Return the newest entry, or None for an empty ledger."""
        return self._head

    def __iter__(self) -> Iterator[HistoryEntry]:
        node: HistoryLedger | None = self
        while node is not None and node._head is not None:
            yield node._head
            node = node._rest

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> HistoryEntry:
        """Return the entry at a position, walking at most ``index`` nodes."""
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError(index)
        for position, entry in enumerate(self):
            if position == index:
                return entry
        raise IndexError(index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HistoryLedger):
            return NotImplemented
        return self._size == other._size and list(self) == list(other)

    def __repr__(self) -> str:
        ids = ", ".join(str(entry.id) for entry in self)
        return f"HistoryLedger([{ids}])"
