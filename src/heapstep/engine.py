"""SiftEngine — heap-sort decomposed into externally triggered steps.

Classical heap-sort is two loops wrapped around a recursive sift-down.
Here the recursion is flattened into a *work queue* whose front is the
only live sift position:

* continuing the descent **replaces** the front with the child that was
  swapped into,
* a settled position **pops** the front.

During the build phase the queue is seeded once with every non-leaf
index, last first; during the sort phase it is re-seeded with ``[0]``
after every extraction.  Each :meth:`SiftEngine.step` performs a single
comparison-and-maybe-swap (or one phase transition / extraction) and
returns a :class:`~heapstep.record.StepRecord` narrating it.

The engine owns no timers and never blocks; pacing belongs to whoever
calls :meth:`~SiftEngine.step` (see :mod:`heapstep.driver`).

Usage
-----
>>> from heapstep import SiftEngine, Phase
>>> engine = SiftEngine([4, 10, 3, 5, 1])
>>> engine.start("max").message
'Phase 1: Building Max heap. Starting from index 1 (last non-leaf node).'
>>> while engine.phase is not Phase.IDLE:
...     record = engine.step()
>>> engine.values
(1, 3, 4, 5, 10)
"""

from __future__ import annotations

import logging
from typing import Any, FrozenSet, List, Optional, Sequence, Tuple, Union

from .errors import InvariantViolation
from .history import StepHistory
from .record import HeapOrder, Phase, StepKind, StepRecord
from .settings import DEFAULT_SETTINGS, Settings

logger = logging.getLogger(__name__)

__all__ = [
    "SiftEngine",
    "DEFAULT_VALUES",
]

DEFAULT_VALUES: Tuple[int, ...] = (4, 10, 3, 5, 1, 2, 8, 7, 6, 9)
"""Canonical initial sequence used when no values are given."""


def _fmt_values(values: Sequence[Any]) -> str:
    return "[" + ", ".join(str(v) for v in values) + "]"


# ═══════════════════════════════════════════════════════════════════
# SiftEngine
# ═══════════════════════════════════════════════════════════════════

class SiftEngine:
    """Stepwise heap-sort state machine.

    Parameters
    ----------
    initial_values : sequence
        Totally ordered elements.  Every ``start()`` restores the
        array to this sequence.  Defaults to :data:`DEFAULT_VALUES`.
    settings : Settings, optional
        Only ``verify_heap`` is read here.

    Notes
    -----
    Not reentrant: a single caller must drive ``step()``.
    """

    def __init__(
        self,
        initial_values: Sequence[Any] = DEFAULT_VALUES,
        *,
        settings: Settings = DEFAULT_SETTINGS,
    ):
        self._initial: Tuple[Any, ...] = tuple(initial_values)
        self.settings = settings
        self._clear()

    def _clear(self) -> None:
        self._values: List[Any] = list(self._initial)
        self._order: Optional[HeapOrder] = None
        self._phase = Phase.IDLE
        self._boundary = len(self._values)
        self._queue: List[int] = []
        self._active: FrozenSet[int] = frozenset()
        self._history: List[StepRecord] = []

    # ── read accessors ──────────────────────────────────────────

    @property
    def initial_values(self) -> Tuple[Any, ...]:
        return self._initial

    @property
    def n(self) -> int:
        return len(self._values)

    @property
    def values(self) -> Tuple[Any, ...]:
        return tuple(self._values)

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def order(self) -> Optional[HeapOrder]:
        return self._order

    @property
    def heap_boundary(self) -> int:
        return self._boundary

    @property
    def active_indices(self) -> FrozenSet[int]:
        return self._active

    @property
    def work_queue(self) -> Tuple[int, ...]:
        return tuple(self._queue)

    @property
    def history(self) -> Tuple[StepRecord, ...]:
        return tuple(self._history)

    @property
    def last_record(self) -> Optional[StepRecord]:
        return self._history[-1] if self._history else None

    @property
    def is_running(self) -> bool:
        return self._phase is not Phase.IDLE

    def history_view(self) -> StepHistory:
        """Return a cursor view over the current history."""
        return StepHistory(self._history)

    def __repr__(self) -> str:
        order = self._order.value if self._order is not None else None
        return (
            f"SiftEngine(n={self.n}, order={order!r}, "
            f"phase={self._phase.value!r}, boundary={self._boundary})"
        )

    # ── lifecycle ───────────────────────────────────────────────

    def reset(self) -> None:
        """Return to the freshly constructed Idle state (order unset)."""
        self._clear()
        logger.info(f"Engine reset to {_fmt_values(self._values)}")

    def start(self, order: Union[HeapOrder, str]) -> StepRecord:
        """Begin a new run, discarding any run in progress.

        Returns the synthetic ``START`` record, which is also the first
        entry of the fresh history.
        """
        order = HeapOrder.coerce(order)
        self._clear()
        self._order = order
        self._phase = Phase.BUILDING
        self._queue = list(range(self.n // 2 - 1, -1, -1))

        narrative = [f"Phase 1: Building {order.label} heap."]
        if self._queue:
            narrative.append(
                f"Starting from index {self._queue[0]} (last non-leaf node).")
        else:
            narrative.append(
                "No non-leaf nodes to examine; the array is already a heap.")

        logger.info(
            f"Starting {order.value}-heap sort of {self.n} elements "
            f"({len(self._queue)} non-leaf nodes)"
        )
        return self._record(StepKind.START, narrative)

    def step(self) -> Optional[StepRecord]:
        """Advance the simulation by exactly one atomic unit.

        While Idle this is a no-op that returns the last record (or
        ``None`` if the engine was never started).
        """
        if self._phase is Phase.IDLE:
            logger.debug("step() while idle: nothing to do")
            return self.last_record

        if self._queue:
            record = self._sift()
        elif self._phase is Phase.BUILDING:
            record = self._finish_build()
        elif self._boundary > 1:
            record = self._extract()
        else:
            record = self._complete()

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(record.summary())
        return record

    # ── atomic units ────────────────────────────────────────────

    def _sift(self) -> StepRecord:
        """One comparison at the front of the work queue."""
        arr = self._values
        order = self._order
        bound = self._boundary
        i = self._queue[0]
        if not 0 <= i < bound:
            raise InvariantViolation(
                f"Sift index {i} outside active heap [0, {bound})")

        left, right = 2 * i + 1, 2 * i + 2
        target = i
        # Strict comparisons: on ties the earlier index stays.
        if left < bound and order.prefers(arr[left], arr[target]):
            target = left
        if right < bound and order.prefers(arr[right], arr[target]):
            target = right

        children = [c for c in (left, right) if c < bound]
        self._active = frozenset([i, *children])

        parent = arr[i]
        if children:
            listed = ", ".join(f"{c} ({arr[c]})" for c in children)
            comparison = f"Comparing index {i} ({parent}) with children {listed}."
        else:
            comparison = f"Index {i} ({parent}) has no children inside the heap."

        building = self._phase is Phase.BUILDING

        if target != i:
            child = arr[target]
            arr[i], arr[target] = arr[target], arr[i]
            self._queue[0] = target
            if building:
                relation = "larger" if order is HeapOrder.MAX else "smaller"
                action = (
                    f"Swap: child {child} is {relation} than parent {parent}. "
                    f"Sifting {parent} down to index {target}."
                )
            else:
                action = (
                    f"Sifting down: moving {parent} deeper to index {target} "
                    f"to restore heap property."
                )
            return self._record(
                StepKind.SIFT_SWAP, [comparison, action], swapped=(i, target))

        self._queue.pop(0)
        if building:
            narrative = [
                comparison,
                f"Index {i} ({parent}) already satisfies the {order.value} "
                f"heap property relative to its children; no swap needed.",
            ]
            if self._queue:
                narrative.append(f"Next index to check: {self._queue[0]}.")
        else:
            narrative = [
                comparison,
                f"Heap property restored at index {i}. "
                f"Ready for next extraction.",
            ]
        return self._record(StepKind.SIFT_SETTLED, narrative)

    def _finish_build(self) -> StepRecord:
        if self.settings.verify_heap:
            self._verify_heap()

        self._phase = Phase.SORTING
        # A heap of one element is already sorted; skip the root sift.
        self._queue = [0] if self._boundary > 1 else []
        self._active = frozenset()

        narrative = [
            "Heap structure complete! "
            "Phase 2: swapping root to the end to sort."
        ]
        if self.n:
            narrative.append(
                f"The {self._order.extreme} element ({self._values[0]}) "
                f"is at index 0.")
        else:
            narrative.append("The heap is empty.")
        logger.info(f"Heap built after {len(self._history)} steps")
        return self._record(StepKind.HEAP_BUILT, narrative)

    def _extract(self) -> StepRecord:
        arr = self._values
        last = self._boundary - 1
        root = arr[0]
        arr[0], arr[last] = arr[last], arr[0]
        self._boundary = last
        self._queue = [0]
        self._active = frozenset((0, last))
        narrative = [
            f"EXTRACT: moving {self._order.extreme} element ({root}) "
            f"to index {last} (final sorted position).",
            f"Heap boundary is now {last}.",
        ]
        return self._record(StepKind.EXTRACT, narrative, swapped=(0, last))

    def _complete(self) -> StepRecord:
        self._phase = Phase.IDLE
        self._boundary = 0
        self._queue = []
        self._active = frozenset()
        narrative = [
            "Success: array is fully sorted!",
            f"Final sequence: {_fmt_values(self._values)}.",
        ]
        logger.info(
            f"Sort complete after {len(self._history)} steps: "
            f"{_fmt_values(self._values)}"
        )
        return self._record(StepKind.COMPLETE, narrative)

    # ── helpers ─────────────────────────────────────────────────

    def _verify_heap(self) -> None:
        arr = self._values
        bound = self._boundary
        for i in range(bound // 2):
            for c in (2 * i + 1, 2 * i + 2):
                if c < bound and self._order.prefers(arr[c], arr[i]):
                    raise InvariantViolation(
                        f"Heap property broken after build: index {c} "
                        f"({arr[c]}) beats parent {i} ({arr[i]})"
                    )

    def _record(
        self,
        kind: StepKind,
        narrative: Sequence[str],
        *,
        swapped: Optional[Tuple[int, int]] = None,
    ) -> StepRecord:
        record = StepRecord(
            step=len(self._history),
            kind=kind,
            phase=self._phase,
            order=self._order,
            narrative=tuple(narrative),
            heap_boundary=self._boundary,
            work_queue_snapshot=tuple(self._queue),
            values_snapshot=tuple(self._values),
            active_indices=self._active,
            swapped=swapped,
        )
        self._history.append(record)
        return record
