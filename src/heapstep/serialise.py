"""JSON export of step histories.

Turns :class:`StepRecord` sequences into JSON text a presenter or a
notebook can load, and back into frozen records for inspection.  This
is an export format: nothing here feeds a record back into a live
:class:`~heapstep.engine.SiftEngine`.

Workflow
--------
>>> text = history_to_json(engine.history, {"label": "demo"})
>>> records, metadata = history_from_json(text)
>>> records[-1].kind                  # StepKind.COMPLETE
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .record import HeapOrder, Phase, StepKind, StepRecord

__all__ = [
    "record_to_dict",
    "record_from_dict",
    "history_to_json",
    "history_from_json",
]

FORMAT_VERSION = 1


# ═══════════════════════════════════════════════════════════════════
# Record ↔ dict
# ═══════════════════════════════════════════════════════════════════

def record_to_dict(record: StepRecord) -> Dict[str, Any]:
    """Convert a StepRecord to a JSON-serialisable dict."""
    return _numpy_safe(record.to_dict())


def _numpy_safe(obj: Any) -> Any:
    """Recursively convert numpy scalars/arrays to native Python types."""
    if isinstance(obj, dict):
        return {k: _numpy_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_numpy_safe(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


def record_from_dict(d: Dict[str, Any]) -> StepRecord:
    """Reconstruct a StepRecord from a dict produced by :func:`record_to_dict`."""
    order = d.get("order")
    swapped = d.get("swapped")
    return StepRecord(
        step=int(d["step"]),
        kind=StepKind(d["kind"]),
        phase=Phase(d["phase"]),
        order=HeapOrder(order) if order is not None else None,
        narrative=tuple(d["narrative"]),
        heap_boundary=int(d["heap_boundary"]),
        work_queue_snapshot=tuple(d["work_queue_snapshot"]),
        values_snapshot=tuple(d["values_snapshot"]),
        active_indices=frozenset(d.get("active_indices", ())),
        swapped=tuple(swapped) if swapped else None,
    )


# ═══════════════════════════════════════════════════════════════════
# History ↔ JSON
# ═══════════════════════════════════════════════════════════════════

def history_to_json(
    records: Sequence[StepRecord],
    metadata: Optional[Dict[str, Any]] = None,
) -> str:
    """Serialise a run's records to a JSON string."""
    payload = {
        "version": FORMAT_VERSION,
        "n_records": len(records),
        "records": [record_to_dict(r) for r in records],
    }
    if metadata:
        payload["metadata"] = _numpy_safe(metadata)
    return json.dumps(payload, indent=2)


def history_from_json(text: str) -> Tuple[List[StepRecord], Dict[str, Any]]:
    """Deserialise records from a JSON string.

    Returns
    -------
    records : list[StepRecord]
    metadata : dict

    Raises
    ------
    ValueError
        If the payload was written by an unknown format version.
    """
    payload = json.loads(text)
    version = payload.get("version")
    if version != FORMAT_VERSION:
        raise ValueError(
            f"Unsupported history format version {version!r} "
            f"(expected {FORMAT_VERSION})")
    records = [record_from_dict(d) for d in payload["records"]]
    metadata = payload.get("metadata", {})
    return records, metadata
