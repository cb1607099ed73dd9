from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import InvalidConfiguration


def fade(t: np.ndarray) -> np.ndarray:
    """Quintic fade curve 6t^5 - 15t^4 + 10t^3 (zero 1st/2nd derivative at 0 and 1)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def seed_to_int(seed: int | bytes) -> int:
    """Fold a seed into the non-negative integer fed to numpy's SeedSequence.

    Byte seeds get a leading 0x01 so that leading zero bytes still matter.
    """

    if isinstance(seed, bool):
        raise InvalidConfiguration(f"seed must be an int or bytes, got {seed!r}")
    if isinstance(seed, (bytes, bytearray)):
        return int.from_bytes(b"\x01" + bytes(seed), "big")
    if isinstance(seed, (int, np.integer)):
        seed = int(seed)
        if seed < 0:
            raise InvalidConfiguration(f"seed must be >= 0, got {seed}")
        return seed
    raise InvalidConfiguration(
        f"seed must be an int or bytes, got {type(seed).__name__}"
    )


def make_rng(seed: int | bytes) -> np.random.Generator:
    return np.random.default_rng(seed_to_int(seed))


@dataclass(frozen=True)
class Corner2D:
    gx: float
    gy: float
    dx: float
    dy: float
    dot: float
