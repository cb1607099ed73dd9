from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import numpy as np

from .core import seed_to_int
from .errors import InvalidConfiguration
from .field import ScalarField, generate_field, grid_dimensions
from .fractal import OctaveParams

# Values used by the reference terrain render.
DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 720
DEFAULT_CELL_SIZE = 40.0
DEFAULT_SEED = 1234
DEFAULT_OCTAVES = 5
DEFAULT_PERSISTENCE = 0.5
DEFAULT_FREQUENCY_MULTIPLIER = 2.0


@dataclass(frozen=True)
class FieldConfig:
    """Everything needed to generate one field, with defaults filled in."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    cell_size: float = DEFAULT_CELL_SIZE
    seed: int | bytes = DEFAULT_SEED
    octaves: OctaveParams = field(
        default_factory=lambda: OctaveParams(
            octave_count=DEFAULT_OCTAVES,
            persistence=DEFAULT_PERSISTENCE,
            frequency_multiplier=DEFAULT_FREQUENCY_MULTIPLIER,
        )
    )

    def __post_init__(self) -> None:
        seed_to_int(self.seed)
        # Validates sizes and cell size the same way generate_field does.
        grid_dimensions(self.width, self.height, self.cell_size, self.octaves)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldConfig:
        known = {
            "width",
            "height",
            "cell_size",
            "seed",
            "octaves",
            "persistence",
            "frequency_multiplier",
        }
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfiguration(f"unknown config keys: {', '.join(unknown)}")

        octaves = OctaveParams(
            octave_count=data.get("octaves", DEFAULT_OCTAVES),
            persistence=data.get("persistence", DEFAULT_PERSISTENCE),
            frequency_multiplier=data.get(
                "frequency_multiplier", DEFAULT_FREQUENCY_MULTIPLIER
            ),
        )
        return cls(
            width=data.get("width", DEFAULT_WIDTH),
            height=data.get("height", DEFAULT_HEIGHT),
            cell_size=data.get("cell_size", DEFAULT_CELL_SIZE),
            seed=data.get("seed", DEFAULT_SEED),
            octaves=octaves,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "cell_size": self.cell_size,
            "seed": self.seed,
            "octaves": self.octaves.octave_count,
            "persistence": self.octaves.persistence,
            "frequency_multiplier": self.octaves.frequency_multiplier,
        }

    def with_overrides(self, **overrides: Any) -> FieldConfig:
        """Return a copy with non-None flat overrides applied (CLI helper)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        merged = self.to_dict()
        merged.update(changes)
        return FieldConfig.from_dict(merged)

    def generate(
        self,
        *,
        workers: int = 1,
        dtype: np.dtype | type[np.floating] = np.float64,
    ) -> ScalarField:
        return generate_field(
            self.width,
            self.height,
            self.cell_size,
            self.seed,
            self.octaves,
            workers=workers,
            dtype=dtype,
        )


def load_config(path: str | Path) -> FieldConfig:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidConfiguration(f"{path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidConfiguration(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"{path}: top-level JSON value must be an object")
    return FieldConfig.from_dict(data)


__all__ = [
    "DEFAULT_CELL_SIZE",
    "DEFAULT_FREQUENCY_MULTIPLIER",
    "DEFAULT_HEIGHT",
    "DEFAULT_OCTAVES",
    "DEFAULT_PERSISTENCE",
    "DEFAULT_SEED",
    "DEFAULT_WIDTH",
    "FieldConfig",
    "load_config",
]
