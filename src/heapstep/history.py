"""StepHistory — cursor navigation over recorded steps.

A :class:`StepHistory` is a read-only view over the records an engine
has produced, plus a display cursor.  Moving the cursor only selects a
snapshot to show; it never re-drives the engine and never restores the
engine's live array or work queue.  A caller that wants to *continue*
from an earlier point has to start a new run.

Usage
-----
>>> view = engine.history_view()
>>> view.current.message              # latest narration
>>> view.previous().values_snapshot   # one step back
>>> view.at(0).kind                   # StepKind.START
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence, Tuple

from .errors import HistoryIndexError
from .record import StepRecord

__all__ = [
    "StepHistory",
]


class StepHistory:
    """Display cursor over an append-only sequence of step records.

    Parameters
    ----------
    records : sequence of StepRecord
        Copied on construction; use :meth:`refresh` to pick up new
        records from a running engine.
    """

    def __init__(self, records: Sequence[StepRecord]):
        self._records = tuple(records)
        self._cursor = len(self._records) - 1

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StepRecord]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"StepHistory({len(self._records)} records, cursor={self._cursor})"

    @property
    def records(self) -> Tuple[StepRecord, ...]:
        return self._records

    @property
    def current_index(self) -> int:
        """Cursor position, ``-1`` while the history is empty."""
        return self._cursor

    @property
    def current(self) -> Optional[StepRecord]:
        if not self._records:
            return None
        return self._records[self._cursor]

    @property
    def at_end(self) -> bool:
        return self._cursor == len(self._records) - 1

    @property
    def can_go_back(self) -> bool:
        return self._cursor > 0

    @property
    def can_go_forward(self) -> bool:
        return self._cursor < len(self._records) - 1

    def at(self, k: int) -> StepRecord:
        """Return record *k*.

        Raises
        ------
        HistoryIndexError
            If *k* is outside ``[0, len - 1]``.  Negative indices are
            not interpreted Python-style.
        """
        if not 0 <= k < len(self._records):
            raise HistoryIndexError(k, len(self._records))
        return self._records[k]

    def seek(self, k: int) -> StepRecord:
        """Move the cursor to *k* and return that record."""
        record = self.at(k)
        self._cursor = k
        return record

    def previous(self) -> Optional[StepRecord]:
        """Step the cursor back one record (clamped at the start)."""
        if self.can_go_back:
            self._cursor -= 1
        return self.current

    def next(self) -> Optional[StepRecord]:
        """Step the cursor forward one record (clamped at the end)."""
        if self.can_go_forward:
            self._cursor += 1
        return self.current

    def refresh(self, records: Sequence[StepRecord]) -> None:
        """Rebind to a newer history.

        A cursor sitting on the last record follows the new tail;
        otherwise it keeps its position, clamped to the new length.
        """
        follow = self.at_end
        self._records = tuple(records)
        last = len(self._records) - 1
        self._cursor = last if follow else min(self._cursor, last)
