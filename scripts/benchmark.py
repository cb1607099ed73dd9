from __future__ import annotations

import logging
import time

import numpy as np

from gradnoise import FieldConfig, OctaveParams, generate_field

logger = logging.getLogger("benchmark")


def _timeit(label: str, fn) -> float:
    t0 = time.perf_counter()
    fn()
    t1 = time.perf_counter()
    ms = (t1 - t0) * 1000.0
    logger.info("%s: %.2f ms", label, ms)
    return ms


def main() -> None:
    """Quick CPU benchmark of full-field generation.

    Rough laptop-class targets:
    - 1280x720, 5 octaves, serial: < ~1s
    - same with 4 workers: noticeably faster on multi-core machines
    """

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    cfg = FieldConfig()
    single = OctaveParams(octave_count=1)

    _timeit(
        "1280x720 single octave",
        lambda: generate_field(cfg.width, cfg.height, cfg.cell_size, cfg.seed, single),
    )
    _timeit("1280x720 5 octaves", lambda: cfg.generate())
    _timeit("1280x720 5 octaves (float32 out)", lambda: cfg.generate(dtype=np.float32))
    for workers in (2, 4):
        _timeit(
            f"1280x720 5 octaves ({workers} workers)",
            lambda w=workers: cfg.generate(workers=w),
        )


if __name__ == "__main__":
    main()
