import logging

import numpy as np
import pytest

from gradnoise.errors import InvalidConfiguration, OutOfBounds
from gradnoise.field import (
    MAX_GRID_VERTICES,
    ScalarField,
    generate_field,
    grid_dimensions,
)
from gradnoise.fractal import OctaveParams, compose_fractal
from gradnoise.grid import GradientGrid


def test_grid_dimensions_single_octave_minimum():
    assert grid_dimensions(40, 40, 40, OctaveParams(octave_count=1)) == (3, 3)


def test_grid_dimensions_reference_render():
    params = OctaveParams(octave_count=5, persistence=0.5)
    assert grid_dimensions(1280, 720, 40, params) == (32 * 16 + 2, 18 * 16 + 2)


def test_grid_dimensions_round_partial_cells_up():
    assert grid_dimensions(41, 39, 40, OctaveParams(octave_count=1)) == (4, 3)


def test_first_pixel_is_half_after_remap():
    field = generate_field(40, 40, 40, 1234, OctaveParams(octave_count=1))
    assert field.width == 40
    assert field.height == 40
    assert field.at(0, 0) == 0.5


def test_every_cell_corner_pixel_is_half():
    field = generate_field(64, 48, 16, 3, OctaveParams(octave_count=1))
    assert np.all(field.values[::16, ::16] == 0.5)


def test_generate_field_deterministic():
    params = OctaveParams(octave_count=5, persistence=0.5)
    a = generate_field(96, 64, 24, 42, params)
    b = generate_field(96, 64, 24, 42, params)
    assert np.array_equal(a.values, b.values)


def test_generate_field_changes_with_seed():
    params = OctaveParams(octave_count=3)
    a = generate_field(64, 64, 16, 1, params)
    b = generate_field(64, 64, 16, 2, params)
    assert not np.allclose(a.values, b.values)


def test_generate_field_matches_composer():
    params = OctaveParams(octave_count=4, persistence=0.6)
    field = generate_field(50, 30, 10.0, 11, params)

    gw, gh = grid_dimensions(50, 30, 10.0, params)
    grid = GradientGrid.build(11, gw, gh)
    xg, yg = np.meshgrid(np.arange(50) / 10.0, np.arange(30) / 10.0)
    expected = (compose_fractal(xg, yg, grid, params) + 1.0) / 2.0
    assert field.values.shape == (30, 50)
    assert np.allclose(field.values, expected)


def test_field_values_in_unit_range():
    field = generate_field(128, 96, 12.5, 5, OctaveParams(octave_count=5))
    assert float(np.min(field.values)) >= 0.0
    assert float(np.max(field.values)) <= 1.0


@pytest.mark.parametrize(
    "w,h,cell,params",
    [
        (1, 1, 1.0, OctaveParams(octave_count=1)),
        (37, 23, 7.0, OctaveParams(octave_count=4)),
        (64, 64, 0.75, OctaveParams(octave_count=2)),
        (50, 20, 13.3, OctaveParams(octave_count=3, frequency_multiplier=3.0)),
        (33, 17, 5.0, OctaveParams(octave_count=4, frequency_multiplier=1.7)),
        (40, 40, 100.0, OctaveParams(octave_count=6, persistence=0.9)),
    ],
)
def test_sizing_never_out_of_bounds(w, h, cell, params):
    field = generate_field(w, h, cell, 99, params)
    assert field.values.shape == (h, w)


def test_workers_do_not_change_output():
    params = OctaveParams(octave_count=5)
    serial = generate_field(80, 61, 16, 8, params)
    parallel = generate_field(80, 61, 16, 8, params, workers=3)
    assert np.array_equal(serial.values, parallel.values)


def test_more_workers_than_rows():
    params = OctaveParams(octave_count=2)
    a = generate_field(10, 3, 4, 8, params)
    b = generate_field(10, 3, 4, 8, params, workers=8)
    assert np.array_equal(a.values, b.values)


def test_float32_output_close_to_float64():
    params = OctaveParams(octave_count=5)
    ref = generate_field(64, 64, 16, 0, params)
    fast = generate_field(64, 64, 16, 0, params, dtype=np.float32)
    assert fast.values.dtype == np.float32
    assert float(np.max(np.abs(ref.values - fast.values))) < 1e-6


def test_field_is_read_only():
    field = generate_field(8, 8, 4, 0, OctaveParams())
    with pytest.raises(ValueError):
        field.values[0, 0] = 1.0


def test_scalar_field_copies_input():
    raw = np.zeros((2, 3))
    field = ScalarField(raw)
    raw[0, 0] = 1.0
    assert field.at(0, 0) == 0.0
    assert (field.width, field.height) == (3, 2)


@pytest.mark.parametrize("px,py", [(-1, 0), (3, 0), (0, 2)])
def test_scalar_field_at_out_of_bounds(px, py):
    with pytest.raises(OutOfBounds):
        ScalarField(np.zeros((2, 3))).at(px, py)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(output_width=0),
        dict(output_height=-4),
        dict(output_width=10.5),
        dict(cell_size=0.0),
        dict(cell_size=-2.0),
        dict(cell_size=float("nan")),
        dict(params=None),
        dict(workers=0),
        dict(dtype=np.int32),
    ],
)
def test_generate_field_rejects_invalid_configuration(kwargs):
    args = dict(
        output_width=16,
        output_height=16,
        cell_size=4.0,
        seed=0,
        params=OctaveParams(),
    )
    opts = {k: kwargs.pop(k) for k in ("workers", "dtype") if k in kwargs}
    args.update(kwargs)
    with pytest.raises(InvalidConfiguration):
        generate_field(**args, **opts)


def test_generate_field_logs_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="gradnoise.field"):
        generate_field(8, 8, 4, 0, OctaveParams())
    assert any("gradient grid" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize(
    "params",
    [
        OctaveParams(octave_count=64),
        OctaveParams(octave_count=2000, frequency_multiplier=4.0),
    ],
)
def test_oversized_grid_is_invalid_configuration(params):
    with pytest.raises(InvalidConfiguration):
        generate_field(8, 8, 4, 0, params)


def test_grid_dimensions_names_size_over_vertex_cap():
    params = OctaveParams(octave_count=8)
    with pytest.raises(InvalidConfiguration, match="40962x23042"):
        grid_dimensions(1280, 720, 4, params)


def test_grid_dimensions_at_vertex_cap():
    # 4094 + 2 vertices square is exactly 2**24.
    params = OctaveParams(octave_count=1)
    assert grid_dimensions(4094, 4094, 1, params) == (4096, 4096)
    assert 4096 * 4096 == MAX_GRID_VERTICES
    with pytest.raises(InvalidConfiguration):
        grid_dimensions(4095, 4094, 1, params)


def test_numpy_integer_workers_accepted():
    params = OctaveParams(octave_count=2)
    a = generate_field(16, 12, 4, 1, params)
    b = generate_field(16, 12, 4, 1, params, workers=np.int64(3))
    assert np.array_equal(a.values, b.values)
