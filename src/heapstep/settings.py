"""Settings for the engine and the reference drivers.

One frozen :class:`Settings` value carries every knob the package
reads: whether the engine verifies the heap when the build phase ends,
and the pacing and step cap used by :mod:`heapstep.driver`.

The initial element sequence and the heap order are *not* settings:
the former is fixed when a :class:`~heapstep.engine.SiftEngine` is
constructed and the latter is chosen on every ``start()``.

Usage
-----
>>> from heapstep.settings import DEFAULT_SETTINGS
>>> fast = DEFAULT_SETTINGS.replace(interval_s=0.1, name="fast")
>>> fast.clamp_interval(0.0)          # 0.05
>>> fast.changed()                    # {'interval_s': (0.1, 0.5)}
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace as _replace
from typing import Any, Dict, Optional, Tuple

__all__ = [
    "Settings",
    "DEFAULT_SETTINGS",
]


@dataclass(frozen=True)
class Settings:
    """Typed, immutable run settings.

    Attributes
    ----------
    verify_heap : bool
        Check the heap property over the whole array when Building
        ends; a violation raises :class:`~heapstep.errors.InvariantViolation`.
    interval_s : float
        Default autoplay cadence.
    min_interval_s, max_interval_s : float
        Bounds any requested cadence is clamped to (the speed slider).
    max_steps : int
        Cap on ``step()`` calls made by
        :func:`~heapstep.driver.run_to_completion`.
    name : str
        Label only; ignored by equality.
    """

    verify_heap: bool = True
    interval_s: float = 0.5
    min_interval_s: float = 0.05
    max_interval_s: float = 5.0
    max_steps: int = 100_000
    name: str = field(default="default", compare=False)

    def __post_init__(self):
        if not 0.0 <= self.min_interval_s <= self.max_interval_s:
            raise ValueError(
                f"Interval bounds must satisfy 0 <= min <= max, got "
                f"[{self.min_interval_s}, {self.max_interval_s}]")
        if self.max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {self.max_steps}")

    def clamp_interval(self, seconds: float) -> float:
        """Clamp *seconds* to ``[min_interval_s, max_interval_s]``."""
        return min(max(float(seconds), self.min_interval_s),
                   self.max_interval_s)

    def replace(self, *, name: Optional[str] = None, **overrides: Any) -> "Settings":
        """Return a copy with selected fields overridden.

        The new name defaults to ``self.name + "+"``.

        Raises
        ------
        KeyError
            If an override names an unknown setting.
        """
        valid = self._keys()
        for k in overrides:
            if k not in valid:
                raise KeyError(
                    f"Unknown setting {k!r}. Valid settings: {sorted(valid)}")
        return _replace(self, name=name or (self.name + "+"), **overrides)

    def changed(
        self, base: Optional["Settings"] = None,
    ) -> Dict[str, Tuple[Any, Any]]:
        """Return ``{setting: (own_value, base_value)}`` where they differ.

        *base* defaults to :data:`DEFAULT_SETTINGS`.
        """
        base = base if base is not None else DEFAULT_SETTINGS
        return {
            k: (getattr(self, k), getattr(base, k))
            for k in self._keys()
            if getattr(self, k) != getattr(base, k)
        }

    def to_dict(self) -> Dict[str, Any]:
        return {k: getattr(self, k) for k in self._keys()}

    @classmethod
    def _keys(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "name")


DEFAULT_SETTINGS: Settings = Settings()
"""Settings used when none are given."""
