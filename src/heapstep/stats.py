"""Run statistics — counts derived from a step history.

Takes the records of one run and tallies what happened: how many
comparisons the sift steps made, how many of them swapped, how many
extractions finalised an element, and how the steps split across
phases.

Usage
-----
>>> from heapstep.stats import collect_stats
>>> stats = collect_stats(engine.history)
>>> stats.n_extractions               # n - 1 once the run is complete
>>> print(stats.summary())
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from .record import HeapOrder, StepKind, StepRecord

__all__ = [
    "RunStats",
    "collect_stats",
]


@dataclass(frozen=True)
class RunStats:
    """Tallies for one heap-sort run.

    Attributes
    ----------
    order : HeapOrder or None
        Ordering of the run (``None`` for an empty history).
    n_elements : int
        Length of the sorted array.
    n_records : int
        Records in the history, including ``START``.
    n_comparisons : int
        Sift steps (each compares a parent against its children).
    n_swaps : int
        Records that exchanged two elements (sift swaps and extractions).
    n_extractions : int
        Elements moved into their final position by extraction.
    kind_counts : dict[str, int]
        Records per :class:`StepKind` value.
    phase_counts : dict[str, int]
        Records per phase the engine was left in.
    completed : bool
        Whether the last record is ``COMPLETE``.
    """

    order: Optional[HeapOrder]
    n_elements: int
    n_records: int
    n_comparisons: int
    n_swaps: int
    n_extractions: int
    kind_counts: Dict[str, int] = field(default_factory=dict)
    phase_counts: Dict[str, int] = field(default_factory=dict)
    completed: bool = False

    @property
    def n_sift_swaps(self) -> int:
        return self.kind_counts.get(StepKind.SIFT_SWAP.value, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order.value if self.order is not None else None,
            "n_elements": self.n_elements,
            "n_records": self.n_records,
            "n_comparisons": self.n_comparisons,
            "n_swaps": self.n_swaps,
            "n_extractions": self.n_extractions,
            "kind_counts": dict(self.kind_counts),
            "phase_counts": dict(self.phase_counts),
            "completed": self.completed,
        }

    def summary(self) -> str:
        order = self.order.value if self.order is not None else "unstarted"
        state = "complete" if self.completed else "in progress"
        return (
            f"{order}: {self.n_records} records, "
            f"{self.n_comparisons} comparisons, "
            f"{self.n_swaps} swaps, "
            f"{self.n_extractions} extractions ({state})"
        )


def collect_stats(records: Iterable[StepRecord]) -> RunStats:
    """Tally a sequence of step records from a single run."""
    records = list(records)
    kinds = Counter(r.kind.value for r in records)
    phases = Counter(r.phase.value for r in records)

    return RunStats(
        order=records[0].order if records else None,
        n_elements=records[-1].n if records else 0,
        n_records=len(records),
        n_comparisons=(
            kinds[StepKind.SIFT_SWAP.value]
            + kinds[StepKind.SIFT_SETTLED.value]),
        n_swaps=sum(1 for r in records if r.is_swap),
        n_extractions=kinds[StepKind.EXTRACT.value],
        kind_counts=dict(kinds),
        phase_counts=dict(phases),
        completed=bool(records) and records[-1].kind is StepKind.COMPLETE,
    )
