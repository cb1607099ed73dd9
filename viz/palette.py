from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from gradnoise.field import ScalarField

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class TerrainPalette:
    """Bucketed height -> color lookup.

    ``colors[i]`` is used for values below ``thresholds[i]``; the last color
    covers everything at or above the final threshold.
    """

    thresholds: tuple[float, ...]
    colors: tuple[RGB, ...]
    names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        t = tuple(float(v) for v in self.thresholds)
        c = tuple(tuple(int(ch) for ch in col) for col in self.colors)
        if len(c) != len(t) + 1:
            raise ValueError("palette needs exactly one more color than thresholds")
        if any(b <= a for a, b in zip(t, t[1:])):
            raise ValueError("palette thresholds must be strictly increasing")
        if any(len(col) != 3 or min(col) < 0 or max(col) > 255 for col in c):
            raise ValueError("palette colors must be RGB triples in 0..255")
        if self.names and len(self.names) != len(c):
            raise ValueError("palette names must match colors")
        object.__setattr__(self, "thresholds", t)
        object.__setattr__(self, "colors", c)
        object.__setattr__(self, "names", tuple(str(n) for n in self.names))

    def with_thresholds(self, thresholds: tuple[float, ...]) -> TerrainPalette:
        return TerrainPalette(
            thresholds=tuple(thresholds), colors=self.colors, names=self.names
        )

    def bucket(self, values: np.ndarray) -> np.ndarray:
        v = np.asarray(values, dtype=np.float64)
        return np.searchsorted(np.asarray(self.thresholds), v, side="right")

    def color_of(self, value: float) -> RGB:
        return self.colors[int(self.bucket(np.array(value)))]


FOREST_TERRAIN = TerrainPalette(
    thresholds=(0.3, 0.4, 0.5, 0.65, 0.8),
    colors=(
        (20, 40, 100),
        (60, 100, 100),
        (100, 180, 100),
        (40, 100, 40),
        (100, 80, 50),
        (220, 220, 220),
    ),
    names=("deep lake", "marsh", "grassland", "forest", "rocky hills", "snow"),
)


def _values(field: ScalarField | np.ndarray) -> np.ndarray:
    z = field.values if isinstance(field, ScalarField) else field
    z = np.asarray(z, dtype=np.float64)
    if z.ndim != 2:
        raise ValueError("expected a 2D field")
    return z


def grayscale_u8(field: ScalarField | np.ndarray) -> np.ndarray:
    """round(n * 255) per pixel (halves round up); clipped to [0, 1] first."""
    z = np.clip(_values(field), 0.0, 1.0)
    return np.floor(z * 255.0 + 0.5).astype(np.uint8)


def terrain_rgb_u8(
    field: ScalarField | np.ndarray,
    *,
    palette: TerrainPalette = FOREST_TERRAIN,
) -> np.ndarray:
    z = _values(field)
    lut = np.asarray(palette.colors, dtype=np.uint8)
    return lut[palette.bucket(z)]
