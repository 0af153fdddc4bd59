"""Tests for the edit history ledger."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from lumina_studio.domain.errors import HistoryEntryNotFound
from lumina_studio.domain.history import HistoryEntry, HistoryLedger
from lumina_studio.domain.images import EncodedImage

_NOW = datetime(2026, 1, 1, tzinfo=UTC)


def _entry(payload: bytes, created_at: datetime = _NOW) -> HistoryEntry:
    return HistoryEntry(
        id=uuid4(),
        image=EncodedImage(data=payload, media_type="image/png"),
        created_at=created_at,
    )


def test_append_inserts_newest_first() -> None:
    first, second, third = _entry(b"1"), _entry(b"2"), _entry(b"3")

    ledger = HistoryLedger().append(first).append(second).append(third)

    assert list(ledger) == [third, second, first]
    assert len(ledger) == 3
    assert ledger[0] == third
    assert ledger[2] == first
    assert ledger[-1] == first
    assert ledger.latest == third
    with pytest.raises(IndexError):
        ledger[3]


def test_append_leaves_previous_ledger_untouched() -> None:
    base = HistoryLedger().append(_entry(b"1"))

    extended = base.append(_entry(b"2"))

    assert len(base) == 1
    assert len(extended) == 2


def test_append_clamps_timestamps_to_insertion_order() -> None:
    later = _entry(b"1", created_at=_NOW)
    skewed = _entry(b"2", created_at=_NOW - timedelta(seconds=5))

    ledger = HistoryLedger().append(later).append(skewed)

    assert ledger[0].id == skewed.id
    assert ledger[0].created_at == later.created_at


def test_find_returns_entry_or_raises() -> None:
    entry = _entry(b"1")
    ledger = HistoryLedger().append(entry)

    assert ledger.find(entry.id) == entry
    with pytest.raises(HistoryEntryNotFound):
        ledger.find(uuid4())


def test_empty_ledger_equality() -> None:
    assert HistoryLedger() == HistoryLedger()
    assert list(HistoryLedger()) == []
