"""Reference drivers — the callers that decide *when* to step.

The engine never schedules itself.  This module holds the two pacing
policies a front-end usually needs:

* :func:`run_to_completion` — batch mode, steps until Idle.
* :class:`Autoplay` — timed mode, yields one record per tick and
  sleeps ``interval`` seconds between ticks.  The interval can be
  changed while iterating (a speed slider) and :meth:`Autoplay.stop`
  ends the iteration after the current tick.

Manual mode needs no helper: call ``engine.step()`` on demand.

Usage
-----
>>> engine = SiftEngine()
>>> records = run_to_completion(engine, "min")
>>> records[-1].values_snapshot
(10, 9, 8, 7, 6, 5, 4, 3, 2, 1)
>>>
>>> engine.start("max")
>>> player = Autoplay(engine, interval=0.2)
>>> for record in player:
...     print(record.message)
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterator, List, Optional, Union

from .engine import SiftEngine
from .errors import InvariantViolation
from .record import HeapOrder, StepRecord
from .settings import Settings

logger = logging.getLogger(__name__)

__all__ = [
    "run_to_completion",
    "Autoplay",
]


def run_to_completion(
    engine: SiftEngine,
    order: Optional[Union[HeapOrder, str]] = None,
    *,
    max_steps: Optional[int] = None,
) -> List[StepRecord]:
    """Step *engine* until it is Idle.

    Parameters
    ----------
    engine : SiftEngine
    order : HeapOrder or str, optional
        When given, a new run is started first.
    max_steps : int, optional
        Cap on ``step()`` calls.  Defaults to ``settings.max_steps``.

    Returns
    -------
    list[StepRecord]
        Records produced by this call (the ``START`` record included
        when *order* was given).

    Raises
    ------
    InvariantViolation
        If the run has not finished after *max_steps* steps.
    """
    if max_steps is None:
        max_steps = engine.settings.max_steps

    produced: List[StepRecord] = []
    if order is not None:
        produced.append(engine.start(order))

    t0 = time.perf_counter()
    n_steps = 0
    while engine.is_running:
        if n_steps >= max_steps:
            raise InvariantViolation(
                f"Run not finished after {max_steps} steps "
                f"(phase={engine.phase.value}, "
                f"boundary={engine.heap_boundary})"
            )
        produced.append(engine.step())
        n_steps += 1

    logger.info(
        f"Ran {n_steps} steps in {time.perf_counter() - t0:.4f}s"
    )
    return produced


class Autoplay:
    """Timed driver yielding one record per tick.

    Parameters
    ----------
    engine : SiftEngine
        Must already be started; iteration ends when it goes Idle.
    interval : float, optional
        Seconds between ticks, clamped to
        ``[settings.min_interval_s, settings.max_interval_s]``.
        Defaults to ``settings.interval_s``.
    sleep : callable, optional
        Injected for tests; defaults to :func:`time.sleep`.
    settings : Settings, optional
        Defaults to the engine's settings.
    """

    def __init__(
        self,
        engine: SiftEngine,
        *,
        interval: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        settings: Optional[Settings] = None,
    ):
        self.engine = engine
        self.settings = settings or engine.settings
        self._sleep = sleep
        self._stopped = False
        self._interval = 0.0
        self.interval = (
            interval if interval is not None
            else self.settings.interval_s
        )

    @property
    def interval(self) -> float:
        return self._interval

    @interval.setter
    def interval(self, seconds: float) -> None:
        self._interval = self.settings.clamp_interval(seconds)

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        """End iteration before the next tick."""
        self._stopped = True
        logger.info("Autoplay stopped")

    def resume(self) -> None:
        self._stopped = False

    def __iter__(self) -> Iterator[StepRecord]:
        first = True
        while self.engine.is_running and not self._stopped:
            if not first:
                self._sleep(self._interval)
                if self._stopped:
                    break
            first = False
            yield self.engine.step()
