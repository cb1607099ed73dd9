from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import InvalidConfiguration
from .grid import GradientGrid
from .noise_2d import sample


@dataclass(frozen=True)
class OctaveParams:
    octave_count: int = 1
    persistence: float = 0.5
    frequency_multiplier: float = 2.0

    def __post_init__(self) -> None:
        count = self.octave_count
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)):
            raise InvalidConfiguration(
                f"octave_count must be an integer, got {count!r}"
            )
        if count < 1:
            raise InvalidConfiguration(f"octave_count must be >= 1, got {count}")

        persistence = _as_float("persistence", self.persistence)
        if not (math.isfinite(persistence) and 0.0 < persistence <= 1.0):
            raise InvalidConfiguration(
                f"persistence must be in (0, 1], got {self.persistence}"
            )

        multiplier = _as_float("frequency_multiplier", self.frequency_multiplier)
        if not (math.isfinite(multiplier) and multiplier > 1.0):
            raise InvalidConfiguration(
                f"frequency_multiplier must be > 1, got {self.frequency_multiplier}"
            )

        object.__setattr__(self, "octave_count", int(count))
        object.__setattr__(self, "persistence", persistence)
        object.__setattr__(self, "frequency_multiplier", multiplier)

    def octaves(self) -> list[tuple[float, float]]:
        """(frequency, amplitude) per octave, lowest frequency first."""
        out: list[tuple[float, float]] = []
        frequency = 1.0
        amplitude = 1.0
        for _ in range(self.octave_count):
            out.append((frequency, amplitude))
            amplitude *= self.persistence
            frequency *= self.frequency_multiplier
        return out

    def amplitude_sum(self) -> float:
        return sum(a for _, a in self.octaves())

    def max_frequency(self) -> float:
        return self.octaves()[-1][0]


def compose_fractal(
    x: np.ndarray,
    y: np.ndarray,
    grid: GradientGrid,
    params: OctaveParams,
) -> np.ndarray:
    """Sum of octaves at rising frequency, normalized back to [-1, 1]."""

    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
    max_value = 0.0
    for frequency, amplitude in params.octaves():
        total += sample(x * frequency, y * frequency, grid) * amplitude
        max_value += amplitude

    return total / max_value


def _as_float(name: str, value: object) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"{name} must be a number, got {value!r}") from exc
