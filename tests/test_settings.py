"""Tests for heapstep.settings.

Covers:
1. Settings — typed defaults, validation, replace, changed
2. Wiring — engine heap check, driver cap and cadence clamp
"""

import dataclasses

import pytest

from heapstep.driver import Autoplay, run_to_completion
from heapstep.engine import SiftEngine
from heapstep.errors import InvariantViolation
from heapstep.settings import DEFAULT_SETTINGS, Settings


# ═══════════════════════════════════════════════════════════════════
# 1. Settings
# ═══════════════════════════════════════════════════════════════════

class TestSettings:

    def test_typed_defaults(self):
        s = Settings()
        assert s.verify_heap is True
        assert isinstance(s.max_steps, int)
        assert s.min_interval_s <= s.interval_s <= s.max_interval_s
        assert s == DEFAULT_SETTINGS
        assert DEFAULT_SETTINGS.name == "default"

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_SETTINGS.max_steps = 1

    @pytest.mark.parametrize("kwargs", [
        {"min_interval_s": 2.0, "max_interval_s": 1.0},
        {"min_interval_s": -0.1},
        {"max_steps": -1},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            Settings(**kwargs)

    @pytest.mark.parametrize("requested, expected", [
        (-1.0, 0.05), (0.3, 0.3), (9.0, 5.0),
    ])
    def test_clamp_interval(self, requested, expected):
        assert DEFAULT_SETTINGS.clamp_interval(requested) == expected


class TestReplaceAndChanged:

    def test_replace_keeps_original(self):
        fast = DEFAULT_SETTINGS.replace(interval_s=0.1)
        assert fast.interval_s == 0.1
        assert DEFAULT_SETTINGS.interval_s == 0.5
        assert fast.name == "default+"

    def test_replace_custom_name(self):
        assert DEFAULT_SETTINGS.replace(max_steps=9, name="cli").name == "cli"

    def test_replace_unknown_setting(self):
        with pytest.raises(KeyError, match="Unknown setting 'speed'"):
            DEFAULT_SETTINGS.replace(speed=2.0)

    def test_replace_validates(self):
        with pytest.raises(ValueError):
            DEFAULT_SETTINGS.replace(max_interval_s=0.01)

    def test_equality_ignores_name(self):
        assert DEFAULT_SETTINGS.replace(name="other") == DEFAULT_SETTINGS

    def test_changed_against_defaults(self):
        narrate = DEFAULT_SETTINGS.replace(
            min_interval_s=0.0, verify_heap=False)
        assert narrate.changed() == {
            "verify_heap": (False, True),
            "min_interval_s": (0.0, 0.05),
        }
        assert DEFAULT_SETTINGS.changed() == {}

    def test_changed_against_explicit_base(self):
        a = DEFAULT_SETTINGS.replace(max_steps=10)
        b = DEFAULT_SETTINGS.replace(max_steps=20)
        assert a.changed(b) == {"max_steps": (10, 20)}

    def test_to_dict_omits_name(self):
        d = DEFAULT_SETTINGS.to_dict()
        assert "name" not in d
        assert d["max_steps"] == 100_000


# ═══════════════════════════════════════════════════════════════════
# 2. Wiring
# ═══════════════════════════════════════════════════════════════════

class TestWiring:

    def test_engine_uses_default_settings(self):
        assert SiftEngine().settings is DEFAULT_SETTINGS

    def test_verify_heap_flag_reaches_engine(self):
        for verify, raises in ((True, True), (False, False)):
            engine = SiftEngine(
                [1, 2, 3],
                settings=DEFAULT_SETTINGS.replace(verify_heap=verify))
            engine.start("max")
            while engine.work_queue:
                engine.step()
            engine._values[0] = -100
            if raises:
                with pytest.raises(InvariantViolation):
                    engine.step()
            else:
                engine.step()

    def test_max_steps_reaches_driver(self):
        engine = SiftEngine(settings=DEFAULT_SETTINGS.replace(max_steps=2))
        with pytest.raises(InvariantViolation, match="after 2 steps"):
            run_to_completion(engine, "min")

    def test_autoplay_cadence_from_settings(self):
        custom = DEFAULT_SETTINGS.replace(interval_s=1.25, max_interval_s=1.0)
        # interval above the upper bound is clamped on construction
        assert Autoplay(SiftEngine(settings=custom)).interval == 1.0
        relaxed = DEFAULT_SETTINGS.replace(min_interval_s=0.0)
        player = Autoplay(SiftEngine(settings=relaxed), interval=0.0)
        assert player.interval == 0.0
