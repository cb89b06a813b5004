"""Tests for the reference drivers (heapstep.driver).

Covers:
1. run_to_completion — start-and-run, resume, step cap
2. Autoplay — pacing, interval clamping, stop/resume
"""

import pytest

from heapstep.driver import Autoplay, run_to_completion
from heapstep.engine import SiftEngine
from heapstep.errors import InvariantViolation
from heapstep.record import Phase, StepKind
from heapstep.settings import DEFAULT_SETTINGS


class FakeSleep:
    """Records requested sleeps instead of blocking."""

    def __init__(self, on_call=None):
        self.calls = []
        self.on_call = on_call

    def __call__(self, seconds):
        self.calls.append(seconds)
        if self.on_call is not None:
            self.on_call(len(self.calls))


# ═══════════════════════════════════════════════════════════════════
# 1. run_to_completion
# ═══════════════════════════════════════════════════════════════════

class TestRunToCompletion:

    def test_start_and_run(self):
        engine = SiftEngine()
        records = run_to_completion(engine, "min")
        assert records[0].kind is StepKind.START
        assert records[-1].kind is StepKind.COMPLETE
        assert tuple(records) == engine.history
        assert engine.phase is Phase.IDLE
        assert engine.values == (10, 9, 8, 7, 6, 5, 4, 3, 2, 1)

    def test_continues_a_started_run(self):
        engine = SiftEngine()
        engine.start("max")
        engine.step()
        records = run_to_completion(engine)
        assert records[0].step == 2
        assert len(engine.history) == 2 + len(records)

    def test_idle_engine_produces_nothing(self):
        assert run_to_completion(SiftEngine()) == []

    def test_step_cap(self):
        engine = SiftEngine()
        with pytest.raises(InvariantViolation, match="not finished after 3"):
            run_to_completion(engine, "max", max_steps=3)
        assert engine.is_running

    def test_cap_from_settings(self):
        settings = DEFAULT_SETTINGS.replace(max_steps=5)
        engine = SiftEngine(settings=settings)
        with pytest.raises(InvariantViolation):
            run_to_completion(engine, "max")


# ═══════════════════════════════════════════════════════════════════
# 2. Autoplay
# ═══════════════════════════════════════════════════════════════════

class TestAutoplay:

    def test_plays_to_completion(self):
        engine = SiftEngine()
        engine.start("max")
        sleep = FakeSleep()
        records = list(Autoplay(engine, interval=0.2, sleep=sleep))
        assert records[-1].kind is StepKind.COMPLETE
        assert len(engine.history) == 1 + len(records)
        assert sleep.calls == [0.2] * (len(records) - 1)

    def test_idle_engine_yields_nothing(self):
        sleep = FakeSleep()
        assert list(Autoplay(SiftEngine(), sleep=sleep)) == []
        assert sleep.calls == []

    @pytest.mark.parametrize("requested, expected", [
        (0.0, 0.05),
        (1.0, 1.0),
        (60.0, 5.0),
    ])
    def test_interval_clamped(self, requested, expected):
        player = Autoplay(SiftEngine(), interval=requested)
        assert player.interval == expected

    def test_interval_change_mid_play(self):
        engine = SiftEngine()
        engine.start("max")
        sleep = FakeSleep()
        player = Autoplay(engine, interval=1.0, sleep=sleep)
        for i, _ in enumerate(player):
            if i == 1:
                player.interval = 0.5
            if i == 3:
                break
        assert sleep.calls == [1.0, 0.5, 0.5]

    def test_stop_during_sleep(self):
        engine = SiftEngine()
        engine.start("max")
        player = Autoplay(engine, interval=0.1)
        player._sleep = FakeSleep(
            on_call=lambda n: player.stop() if n == 2 else None)
        records = list(player)
        assert len(records) == 2
        assert player.stopped
        assert engine.is_running

    def test_resume(self):
        engine = SiftEngine()
        engine.start("min")
        player = Autoplay(engine, sleep=FakeSleep())
        player.stop()
        assert list(player) == []
        player.resume()
        records = list(player)
        assert records[-1].kind is StepKind.COMPLETE
