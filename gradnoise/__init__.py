from .config import FieldConfig, load_config
from .core import fade, lerp
from .errors import (
    GradientNoiseError,
    InvalidConfiguration,
    InvalidDimension,
    OutOfBounds,
)
from .field import ScalarField, generate_field, grid_dimensions
from .fractal import OctaveParams, compose_fractal
from .grid import GradientGrid
from .noise_2d import debug_point, dot_grid_gradient, sample

__all__ = [
    "FieldConfig",
    "GradientGrid",
    "GradientNoiseError",
    "InvalidConfiguration",
    "InvalidDimension",
    "OctaveParams",
    "OutOfBounds",
    "ScalarField",
    "compose_fractal",
    "debug_point",
    "dot_grid_gradient",
    "fade",
    "generate_field",
    "grid_dimensions",
    "lerp",
    "load_config",
    "sample",
]
