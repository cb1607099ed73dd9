import io
import json

import numpy as np
from PIL import Image

from scripts.render_field import main


def test_render_gray_png(tmp_path):
    out = tmp_path / "field.png"
    rc = main(
        [
            "--width", "40", "--height", "40", "--cell-size", "40",
            "--octaves", "1", "--palette", "gray", "--out", str(out),
        ]
    )
    assert rc == 0
    img = Image.open(io.BytesIO(out.read_bytes()))
    assert img.size == (40, 40)
    assert np.array(img)[0, 0] == 128


def test_render_from_config_with_thresholds(tmp_path):
    cfg = tmp_path / "field.json"
    cfg.write_text(json.dumps({"width": 32, "height": 24, "cell_size": 8}), encoding="utf-8")
    out = tmp_path / "terrain.png"
    rc = main(
        [
            "--config", str(cfg), "--thresholds", "0.2,0.4,0.5,0.6,0.9",
            "--workers", "2", "--out", str(out),
        ]
    )
    assert rc == 0
    assert Image.open(out).size == (32, 24)


def test_render_npy(tmp_path):
    out = tmp_path / "field.npy"
    assert main(["--width", "16", "--height", "8", "--cell-size", "4", "--out", str(out)]) == 0
    z = np.load(out)
    assert z.shape == (8, 16)


def test_render_reports_bad_configuration(tmp_path):
    out = tmp_path / "never.png"
    assert main(["--cell-size", "0", "--out", str(out)]) == 2
    assert not out.exists()


def test_render_reports_missing_config(tmp_path):
    out = tmp_path / "never.png"
    assert main(["--config", str(tmp_path / "nope.json"), "--out", str(out)]) == 2
    assert not out.exists()


def test_render_reports_unwritable_output(tmp_path):
    out = tmp_path / "missing_dir" / "field.png"
    args = ["--width", "16", "--height", "8", "--cell-size", "4", "--out", str(out)]
    assert main(args) == 2
