from __future__ import annotations

import math

import numpy as np

from .core import Corner2D, fade, lerp
from .errors import OutOfBounds
from .grid import GradientGrid


def dot_grid_gradient(
    ix: np.ndarray,
    iy: np.ndarray,
    x: np.ndarray,
    y: np.ndarray,
    grid: GradientGrid,
) -> np.ndarray:
    """Displacement from vertex (ix, iy) to (x, y), dotted with its gradient."""
    gx, gy = grid.gradients_at(ix, iy)
    dx = np.asarray(x, dtype=np.float64) - ix
    dy = np.asarray(y, dtype=np.float64) - iy
    return dx * gx + dy * gy


def _cell(
    x: np.ndarray, y: np.ndarray, grid: GradientGrid
) -> tuple[np.ndarray, np.ndarray]:
    if not (np.isfinite(x).all() and np.isfinite(y).all()):
        raise OutOfBounds("sample coordinates must be finite")

    x0 = np.floor(x).astype(np.int64)
    y0 = np.floor(y).astype(np.int64)
    if x0.size and (
        int(np.min(x0)) < 0
        or int(np.min(y0)) < 0
        or int(np.max(x0)) + 1 >= grid.width
        or int(np.max(y0)) + 1 >= grid.height
    ):
        raise OutOfBounds(
            f"cell range x0=[{int(np.min(x0))}, {int(np.max(x0))}] "
            f"y0=[{int(np.min(y0))}, {int(np.max(y0))}] "
            f"needs corners outside grid {grid.width}x{grid.height}"
        )
    return x0, y0


def sample(x: np.ndarray, y: np.ndarray, grid: GradientGrid) -> np.ndarray:
    """Gradient noise at grid-space (x, y); nominally in [-1, 1]."""

    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    x, y = np.broadcast_arrays(x, y)

    x0, y0 = _cell(x, y, grid)
    x1 = x0 + 1
    y1 = y0 + 1

    sx = fade(x - x0)
    sy = fade(y - y0)

    n0 = dot_grid_gradient(x0, y0, x, y, grid)
    n1 = dot_grid_gradient(x1, y0, x, y, grid)
    ix0 = lerp(n0, n1, sx)

    n2 = dot_grid_gradient(x0, y1, x, y, grid)
    n3 = dot_grid_gradient(x1, y1, x, y, grid)
    ix1 = lerp(n2, n3, sx)

    return lerp(ix0, ix1, sy)


def debug_point(x: float, y: float, grid: GradientGrid) -> dict:
    # Scalar breakdown for teaching/inspection.
    xf = float(x)
    yf = float(y)
    _cell(np.array(xf), np.array(yf), grid)

    xi0 = int(math.floor(xf))
    yi0 = int(math.floor(yf))
    xi1 = xi0 + 1
    yi1 = yi0 + 1

    xrel = xf - xi0
    yrel = yf - yi0

    u = float(fade(np.array(xrel, dtype=np.float64)))
    v = float(fade(np.array(yrel, dtype=np.float64)))

    def corner(ix: int, iy: int) -> Corner2D:
        gx, gy = grid.gradient_at(ix, iy)
        dx = xf - ix
        dy = yf - iy
        return Corner2D(gx=gx, gy=gy, dx=dx, dy=dy, dot=(dx * gx + dy * gy))

    c00 = corner(xi0, yi0)
    c10 = corner(xi1, yi0)
    c01 = corner(xi0, yi1)
    c11 = corner(xi1, yi1)

    x_lerp0 = lerp(np.array(c00.dot), np.array(c10.dot), np.array(u))
    x_lerp1 = lerp(np.array(c01.dot), np.array(c11.dot), np.array(u))
    n = float(lerp(x_lerp0, x_lerp1, np.array(v)))

    return {
        "grid": {"width": grid.width, "height": grid.height},
        "input": {"x": xf, "y": yf},
        "cell": {"xi0": xi0, "yi0": yi0, "xi1": xi1, "yi1": yi1},
        "relative": {"xf": xrel, "yf": yrel},
        "fade": {"u": u, "v": v},
        "corners": {
            "c00": c00.__dict__,
            "c10": c10.__dict__,
            "c01": c01.__dict__,
            "c11": c11.__dict__,
        },
        "interpolation": {
            "x_lerp0": float(x_lerp0),
            "x_lerp1": float(x_lerp1),
        },
        "noise": n,
    }
