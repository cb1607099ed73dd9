from __future__ import annotations

import math

import numpy as np

from .core import make_rng
from .errors import InvalidDimension, OutOfBounds


class GradientGrid:
    """Unit gradient vectors on integer lattice vertices.

    Vectors are stored flat (``iy * width + ix``) and are read-only once
    built. Use :meth:`build` rather than the constructor.
    """

    def __init__(self, gx: np.ndarray, gy: np.ndarray, *, width: int, height: int):
        gx = np.ascontiguousarray(gx, dtype=np.float64).reshape(-1)
        gy = np.ascontiguousarray(gy, dtype=np.float64).reshape(-1)
        if gx.shape != (width * height,) or gy.shape != gx.shape:
            raise InvalidDimension(
                f"expected {width * height} gradients, got {gx.size}/{gy.size}"
            )
        gx.flags.writeable = False
        gy.flags.writeable = False
        self._gx = gx
        self._gy = gy
        self.width = int(width)
        self.height = int(height)

    @classmethod
    def build(cls, seed: int | bytes, grid_width: int, grid_height: int) -> GradientGrid:
        grid_width = _checked_dimension("grid_width", grid_width)
        grid_height = _checked_dimension("grid_height", grid_height)

        # The generator lives only for this call; vertices are filled
        # row-major (y outer, x inner).
        rng = make_rng(seed)
        theta = rng.uniform(0.0, 2.0 * math.pi, size=grid_width * grid_height)
        return cls(np.cos(theta), np.sin(theta), width=grid_width, height=grid_height)

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    @property
    def vectors(self) -> np.ndarray:
        """Read-only ``(height, width, 2)`` view of the gradients."""
        v = np.stack([self._gx, self._gy], axis=-1).reshape(self.height, self.width, 2)
        v.flags.writeable = False
        return v

    def gradient_at(self, ix: int, iy: int) -> tuple[float, float]:
        for value in (ix, iy):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise OutOfBounds(f"vertex index must be an integer, got {value!r}")
        ix = int(ix)
        iy = int(iy)
        if not (0 <= ix < self.width and 0 <= iy < self.height):
            raise OutOfBounds(
                f"vertex ({ix}, {iy}) outside grid {self.width}x{self.height}"
            )
        i = iy * self.width + ix
        return float(self._gx[i]), float(self._gy[i])

    def gradients_at(
        self, ix: np.ndarray, iy: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray]:
        ix = np.asarray(ix, dtype=np.int64)
        iy = np.asarray(iy, dtype=np.int64)
        if ix.size and (
            int(np.min(ix)) < 0
            or int(np.max(ix)) >= self.width
            or int(np.min(iy)) < 0
            or int(np.max(iy)) >= self.height
        ):
            raise OutOfBounds(
                "vertex index range "
                f"x=[{int(np.min(ix))}, {int(np.max(ix))}] "
                f"y=[{int(np.min(iy))}, {int(np.max(iy))}] "
                f"outside grid {self.width}x{self.height}"
            )
        i = iy * self.width + ix
        return self._gx[i], self._gy[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GradientGrid):
            return NotImplemented
        return (
            self.shape == other.shape
            and np.array_equal(self._gx, other._gx)
            and np.array_equal(self._gy, other._gy)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"GradientGrid(width={self.width}, height={self.height})"


def _checked_dimension(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidDimension(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value < 2:
        raise InvalidDimension(f"{name} must be >= 2, got {value}")
    return value
