import json

import numpy as np
import pytest

from gradnoise.config import FieldConfig, load_config
from gradnoise.errors import InvalidConfiguration
from gradnoise.field import generate_field


def test_defaults_match_reference_render():
    cfg = FieldConfig()
    assert (cfg.width, cfg.height, cfg.cell_size, cfg.seed) == (1280, 720, 40.0, 1234)
    assert cfg.octaves.octave_count == 5
    assert cfg.octaves.persistence == 0.5
    assert cfg.octaves.frequency_multiplier == 2.0


def test_load_config_from_json(tmp_path):
    path = tmp_path / "field.json"
    path.write_text(
        json.dumps({"width": 64, "height": 32, "cell_size": 8, "seed": 42, "octaves": 3}),
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert (cfg.width, cfg.height, cfg.seed) == (64, 32, 42)
    assert cfg.octaves.octave_count == 3
    assert cfg.octaves.persistence == 0.5


def test_load_config_rejects_unknown_keys(tmp_path):
    path = tmp_path / "field.json"
    path.write_text(json.dumps({"width": 64, "grid_size": 40}), encoding="utf-8")
    with pytest.raises(InvalidConfiguration, match="grid_size"):
        load_config(path)


def test_load_config_rejects_bad_json(tmp_path):
    path = tmp_path / "field.json"
    path.write_text("{width: 64", encoding="utf-8")
    with pytest.raises(InvalidConfiguration):
        load_config(path)


def test_load_config_rejects_non_object(tmp_path):
    path = tmp_path / "field.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(InvalidConfiguration):
        load_config(path)


@pytest.mark.parametrize(
    "data",
    [
        {"width": 0},
        {"cell_size": -1},
        {"seed": -5},
        {"octaves": 0},
        {"persistence": 0},
        {"frequency_multiplier": 1},
    ],
)
def test_from_dict_rejects_invalid_values(data):
    with pytest.raises(InvalidConfiguration):
        FieldConfig.from_dict(data)


def test_with_overrides_ignores_none():
    cfg = FieldConfig(width=32, height=32, cell_size=8)
    assert cfg.with_overrides(seed=None) is cfg
    changed = cfg.with_overrides(seed=7, octaves=2)
    assert changed.seed == 7
    assert changed.octaves.octave_count == 2
    assert changed.width == 32


def test_round_trip_through_dict():
    cfg = FieldConfig(width=48, height=24, cell_size=6, seed=3)
    assert FieldConfig.from_dict(cfg.to_dict()) == cfg


def test_generate_uses_config_values():
    cfg = FieldConfig(width=32, height=16, cell_size=8, seed=11)
    field = cfg.generate()
    expected = generate_field(32, 16, 8, 11, cfg.octaves)
    assert np.array_equal(field.values, expected.values)


def test_load_config_missing_file(tmp_path):
    with pytest.raises(InvalidConfiguration, match="nope.json"):
        load_config(tmp_path / "nope.json")
