from __future__ import annotations

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from .errors import InvalidConfiguration, OutOfBounds
from .fractal import OctaveParams, compose_fractal
from .grid import GradientGrid
from .noise_2d import sample

logger = logging.getLogger(__name__)

# Largest gradient lattice generate_field will allocate (~128 MiB per float64 array).
MAX_GRID_VERTICES = 2**24


@dataclass(frozen=True)
class ScalarField:
    """Row-major ``(height, width)`` map of normalized values in [0, 1]."""

    values: np.ndarray

    def __post_init__(self) -> None:
        v = np.array(self.values, copy=True)
        if v.ndim != 2:
            raise ValueError("ScalarField values must be a 2D array")
        v.flags.writeable = False
        object.__setattr__(self, "values", v)

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    def at(self, px: int, py: int) -> float:
        px = int(px)
        py = int(py)
        if not (0 <= px < self.width and 0 <= py < self.height):
            raise OutOfBounds(
                f"pixel ({px}, {py}) outside field {self.width}x{self.height}"
            )
        return float(self.values[py, px])


def grid_dimensions(
    output_width: int,
    output_height: int,
    cell_size: float,
    params: OctaveParams,
) -> tuple[int, int]:
    """Gradient grid (width, height) covering every octave's sample range.

    ``ceil(size / cell_size) * max_frequency + 2`` per axis; with the default
    multiplier of 2 this is ``ceil(size / cell_size) * 2**(octaves - 1) + 2``.
    Raises InvalidConfiguration when the lattice would exceed MAX_GRID_VERTICES.
    """

    output_width, output_height = _checked_output_size(output_width, output_height)
    cell_size = _checked_cell_size(cell_size)

    max_freq = params.max_frequency()
    base_w = math.ceil(output_width / cell_size)
    base_h = math.ceil(output_height / cell_size)
    span_w = base_w * max_freq
    span_h = base_h * max_freq
    if not (math.isfinite(span_w) and math.isfinite(span_h)):
        raise InvalidConfiguration(
            f"octave frequencies overflow: max_frequency={max_freq!r}"
        )

    grid_w = math.ceil(span_w) + 2
    grid_h = math.ceil(span_h) + 2
    if grid_w * grid_h > MAX_GRID_VERTICES:
        raise InvalidConfiguration(
            f"gradient grid {grid_w}x{grid_h} ({grid_w * grid_h} vertices) exceeds "
            f"the {MAX_GRID_VERTICES} vertex limit; raise cell_size or lower octaves"
        )
    return grid_w, grid_h


def generate_field(
    output_width: int,
    output_height: int,
    cell_size: float,
    seed: int | bytes,
    params: OctaveParams,
    *,
    workers: int = 1,
    dtype: np.dtype | type[np.floating] = np.float64,
) -> ScalarField:
    """Evaluate (fractal) gradient noise over every output pixel.

    Pixel (px, py) samples grid-space (px / cell_size, py / cell_size). The
    composed value in [-1, 1] is remapped to [0, 1] via (n + 1) / 2. With
    ``workers > 1`` disjoint row bands are evaluated on a thread pool against
    the same read-only grid; output is identical to the serial path.
    """

    if not isinstance(params, OctaveParams):
        raise InvalidConfiguration(
            f"params must be OctaveParams, got {type(params).__name__}"
        )
    if (
        isinstance(workers, bool)
        or not isinstance(workers, (int, np.integer))
        or workers < 1
    ):
        raise InvalidConfiguration(f"workers must be an integer >= 1, got {workers!r}")
    workers = int(workers)
    try:
        out_dtype = np.dtype(dtype)
    except TypeError as exc:
        raise InvalidConfiguration(f"unknown dtype: {dtype!r}") from exc
    if not np.issubdtype(out_dtype, np.floating):
        raise InvalidConfiguration(f"dtype must be floating, got {out_dtype}")

    output_width, output_height = _checked_output_size(output_width, output_height)
    cell_size = _checked_cell_size(cell_size)
    grid_w, grid_h = grid_dimensions(output_width, output_height, cell_size, params)

    t0 = time.perf_counter()
    grid = GradientGrid.build(seed, grid_w, grid_h)
    logger.debug(
        "built %dx%d gradient grid for %dx%d output (cell=%g, octaves=%d)",
        grid_w,
        grid_h,
        output_width,
        output_height,
        cell_size,
        params.octave_count,
    )

    xs = np.arange(output_width, dtype=np.float64) / cell_size
    ys = np.arange(output_height, dtype=np.float64) / cell_size
    out = np.empty((output_height, output_width), dtype=np.float64)

    def fill(rows: np.ndarray) -> None:
        if rows.size == 0:
            return
        xg, yg = np.meshgrid(xs, ys[rows])
        if params.octave_count == 1:
            n = sample(xg, yg, grid)
        else:
            n = compose_fractal(xg, yg, grid, params)
        out[rows[0] : rows[-1] + 1] = np.clip((n + 1.0) * 0.5, 0.0, 1.0)

    bands = np.array_split(np.arange(output_height), min(workers, output_height))
    if len(bands) == 1:
        fill(bands[0])
    else:
        with ThreadPoolExecutor(max_workers=len(bands)) as pool:
            # list() re-raises the first worker exception here.
            list(pool.map(fill, bands))

    logger.debug(
        "generated %dx%d field with %d worker(s) in %.2f ms",
        output_width,
        output_height,
        len(bands),
        (time.perf_counter() - t0) * 1000.0,
    )
    return ScalarField(np.asarray(out, dtype=out_dtype))


def _checked_output_size(width: int, height: int) -> tuple[int, int]:
    for name, value in (("output_width", width), ("output_height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidConfiguration(f"{name} must be > 0, got {value}")
    return int(width), int(height)


def _checked_cell_size(cell_size: float) -> float:
    try:
        cell_size = float(cell_size)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"cell_size must be a number, got {cell_size!r}") from exc
    if not (math.isfinite(cell_size) and cell_size > 0.0):
        raise InvalidConfiguration(f"cell_size must be > 0, got {cell_size}")
    return cell_size
