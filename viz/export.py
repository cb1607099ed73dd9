from __future__ import annotations

import io

import numpy as np
from PIL import Image

from gradnoise.field import ScalarField
from viz.palette import FOREST_TERRAIN, TerrainPalette, grayscale_u8, terrain_rgb_u8


def array_to_png_bytes(img: np.ndarray) -> bytes:
    """Encode an 8-bit HxW (grayscale) or HxWx3 (RGB) array as PNG."""

    img = np.asarray(img)
    if img.dtype != np.uint8:
        raise ValueError(f"expected a uint8 image, got {img.dtype}")
    if not (img.ndim == 2 or (img.ndim == 3 and img.shape[2] == 3)):
        raise ValueError("expected an HxW or HxWx3 array")

    out = io.BytesIO()
    Image.fromarray(img).save(out, format="PNG")
    return out.getvalue()


def field_to_png_bytes(
    field: ScalarField,
    *,
    palette: str = "terrain",
    terrain: TerrainPalette = FOREST_TERRAIN,
) -> bytes:
    if palette == "gray":
        return array_to_png_bytes(grayscale_u8(field))
    if palette == "terrain":
        return array_to_png_bytes(terrain_rgb_u8(field, palette=terrain))
    raise ValueError(f"unknown palette: {palette}")


def array_to_npy_bytes(z: np.ndarray | ScalarField) -> bytes:
    if isinstance(z, ScalarField):
        z = z.values
    z = np.asarray(z)
    out = io.BytesIO()
    np.save(out, z)
    return out.getvalue()
