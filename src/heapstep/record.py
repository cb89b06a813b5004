"""StepRecord — the immutable narration of one simulation step.

Every call into :class:`~heapstep.engine.SiftEngine` that does work
produces exactly one :class:`StepRecord`: what kind of step it was,
the phase the engine was left in, the human-readable narrative and
full snapshots of the array and the work queue at that point.

Usage
-----
>>> from heapstep import SiftEngine
>>> engine = SiftEngine()
>>> record = engine.start("max")
>>> record.kind                       # StepKind.START
>>> record.message                    # "Phase 1: Building Max heap. ..."
>>> record = engine.step()
>>> record.swapped                    # (4, 9)
>>> record.to_dict()                  # JSON-safe dict
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

__all__ = [
    "HeapOrder",
    "Phase",
    "StepKind",
    "StepRecord",
]


# ═══════════════════════════════════════════════════════════════════
# Enumerations
# ═══════════════════════════════════════════════════════════════════

class HeapOrder(str, Enum):
    """Heap ordering.  ``MAX`` sorts ascending, ``MIN`` descending."""

    MAX = "max"
    MIN = "min"

    @classmethod
    def coerce(cls, order: Union["HeapOrder", str]) -> "HeapOrder":
        """Return *order* as a :class:`HeapOrder`.

        Raises
        ------
        ValueError
            If *order* is neither a member nor ``"max"`` / ``"min"``.
        """
        if isinstance(order, cls):
            return order
        if isinstance(order, str):
            try:
                return cls(order.strip().lower())
            except ValueError:
                pass
        raise ValueError(
            f"Unknown heap order {order!r}. "
            f"Valid orders: {[o.value for o in cls]}"
        )

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def extreme(self) -> str:
        """``"largest"`` for MAX, ``"smallest"`` for MIN."""
        return "largest" if self is HeapOrder.MAX else "smallest"

    def prefers(self, a: Any, b: Any) -> bool:
        """True when *a* strictly beats *b* under this order."""
        if self is HeapOrder.MAX:
            return a > b
        return a < b


class Phase(str, Enum):
    IDLE = "idle"
    BUILDING = "building"
    SORTING = "sorting"


class StepKind(str, Enum):
    """What a single step did."""

    START = "start"
    SIFT_SWAP = "sift_swap"
    SIFT_SETTLED = "sift_settled"
    HEAP_BUILT = "heap_built"
    EXTRACT = "extract"
    COMPLETE = "complete"


# ═══════════════════════════════════════════════════════════════════
# StepRecord
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StepRecord:
    """Immutable fact about one point in a heap-sort run.

    Attributes
    ----------
    step : int
        Position of this record in the engine history (``START`` is 0).
    kind : StepKind
        Which atomic unit produced the record.
    phase : Phase
        Engine phase *after* the step.
    order : HeapOrder or None
        Ordering of the run.
    narrative : tuple[str, ...]
        Human-readable sentences describing the step.
    heap_boundary : int
        Indices below this belong to the heap, the rest are finalised.
    work_queue_snapshot : tuple[int, ...]
        Indices still awaiting a sift check, front first.
    values_snapshot : tuple
        The whole array after the step.
    active_indices : frozenset[int]
        Indices touched by the step (parent and children, or the
        root and the extraction slot).
    swapped : tuple[int, int] or None
        The pair exchanged by this step, if any.
    """

    step: int
    kind: StepKind
    phase: Phase
    order: Optional[HeapOrder]
    narrative: Tuple[str, ...]
    heap_boundary: int
    work_queue_snapshot: Tuple[int, ...]
    values_snapshot: Tuple[Any, ...]
    active_indices: FrozenSet[int] = field(default_factory=frozenset)
    swapped: Optional[Tuple[int, int]] = None

    # ── Derived properties ──────────────────────────────────────

    @property
    def message(self) -> str:
        """The narrative as one line of text."""
        return " ".join(self.narrative)

    @property
    def is_swap(self) -> bool:
        return self.swapped is not None

    @property
    def n(self) -> int:
        return len(self.values_snapshot)

    @property
    def finalized_indices(self) -> range:
        """Indices already locked into their sorted position."""
        return range(self.heap_boundary, self.n)

    # ── Serialisation ───────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-safe dict of the record."""
        return {
            "step": self.step,
            "kind": self.kind.value,
            "phase": self.phase.value,
            "order": self.order.value if self.order is not None else None,
            "narrative": list(self.narrative),
            "heap_boundary": self.heap_boundary,
            "work_queue_snapshot": list(self.work_queue_snapshot),
            "values_snapshot": list(self.values_snapshot),
            "active_indices": sorted(self.active_indices),
            "swapped": list(self.swapped) if self.swapped else None,
        }

    def summary(self) -> str:
        """One-line human-readable summary."""
        queue = ", ".join(str(i) for i in self.work_queue_snapshot) or "none"
        return (
            f"#{self.step} {self.kind.value} "
            f"[{self.phase.value}] "
            f"boundary={self.heap_boundary}/{self.n} "
            f"queue=[{queue}]: {self.message}"
        )

    def __repr__(self) -> str:
        return (
            f"StepRecord(#{self.step}, {self.kind.value}, "
            f"boundary={self.heap_boundary}, swapped={self.swapped})"
        )
