"""Per-animation configuration validated at entry."""
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass

from scramble.constants import DEFAULT_FLICKER, DEFAULT_INTERVAL_MS, DEFAULT_POOL, WHITESPACE
from scramble.errors import RevealConfigError


def _as_number(name: str, value) -> float:
    if isinstance(value, bool):
        raise RevealConfigError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise RevealConfigError(f"{name} must be a number, got {value!r}") from exc
    if math.isnan(number):
        raise RevealConfigError(f"{name} must not be NaN")
    return number


@dataclass(frozen=True, slots=True)
class RevealOptions:
    """Character pool, frame interval (ms) and flicker probability.

    ``interval`` at or below zero means one frame per host tick.
    """

    pool: str = DEFAULT_POOL
    interval: float = DEFAULT_INTERVAL_MS
    flicker: float = DEFAULT_FLICKER

    def __post_init__(self) -> None:
        if not isinstance(self.pool, str) or not self.pool:
            raise RevealConfigError("pool must be a non-empty string of characters")
        if any(ch in WHITESPACE for ch in self.pool):
            raise RevealConfigError("pool must not contain whitespace characters")
        interval = _as_number("interval", self.interval)
        if math.isinf(interval):
            raise RevealConfigError("interval must be finite")
        flicker = _as_number("flicker", self.flicker)
        if not 0.0 <= flicker <= 1.0:
            raise RevealConfigError(f"flicker must be within [0, 1], got {flicker}")
        object.__setattr__(self, "interval", interval)
        object.__setattr__(self, "flicker", flicker)

    def replace(self, **overrides) -> RevealOptions:
        unknown = set(overrides) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise RevealConfigError(f"Unknown reveal options: {', '.join(sorted(unknown))}")
        if not overrides:
            return self
        return dataclasses.replace(self, **overrides)
