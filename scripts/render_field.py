from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from gradnoise import FieldConfig, GradientNoiseError, load_config
from viz.export import array_to_npy_bytes, field_to_png_bytes
from viz.palette import FOREST_TERRAIN

logger = logging.getLogger("render_field")


def _parse_thresholds(raw: str) -> tuple[float, ...]:
    try:
        return tuple(float(p) for p in raw.split(",") if p.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"bad thresholds: {raw!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Render a deterministic gradient-noise field to PNG (or .npy)."
    )
    p.add_argument("--config", type=Path, help="JSON file with field parameters")
    p.add_argument("--width", type=int)
    p.add_argument("--height", type=int)
    p.add_argument("--cell-size", type=float)
    p.add_argument("--seed", type=int)
    p.add_argument("--octaves", type=int)
    p.add_argument("--persistence", type=float)
    p.add_argument("--frequency-multiplier", type=float)
    p.add_argument("--palette", choices=["terrain", "gray"], default="terrain")
    p.add_argument(
        "--thresholds",
        type=_parse_thresholds,
        help="comma-separated terrain band edges (default 0.3,0.4,0.5,0.65,0.8)",
    )
    p.add_argument("--workers", type=int, default=1)
    p.add_argument("--float32", action="store_true", help="generate in float32")
    p.add_argument("--out", type=Path, default=Path("field.png"))
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = load_config(args.config) if args.config else FieldConfig()
        cfg = cfg.with_overrides(
            width=args.width,
            height=args.height,
            cell_size=args.cell_size,
            seed=args.seed,
            octaves=args.octaves,
            persistence=args.persistence,
            frequency_multiplier=args.frequency_multiplier,
        )
        palette = FOREST_TERRAIN
        if args.thresholds is not None:
            palette = palette.with_thresholds(args.thresholds)

        logger.info("generating field %s", cfg.to_dict())
        field = cfg.generate(
            workers=args.workers,
            dtype=np.float32 if args.float32 else np.float64,
        )
        if args.out.suffix == ".npy":
            data = array_to_npy_bytes(field)
        else:
            data = field_to_png_bytes(field, palette=args.palette, terrain=palette)
        args.out.write_bytes(data)
    except (GradientNoiseError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 2

    logger.info("wrote %s (%dx%d)", args.out, field.width, field.height)
    return 0


if __name__ == "__main__":
    sys.exit(main())
