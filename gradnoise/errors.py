from __future__ import annotations


class GradientNoiseError(Exception):
    """Base class for every error raised by :mod:`gradnoise`."""


class InvalidDimension(GradientNoiseError, ValueError):
    """A gradient grid was requested with fewer than 2 vertices on an axis."""


class InvalidConfiguration(GradientNoiseError, ValueError):
    """Output size, cell size, seed or octave parameters are out of domain."""


class OutOfBounds(GradientNoiseError, IndexError):
    """A vertex or pixel index fell outside its grid.

    During field generation this indicates a sizing defect, not a
    recoverable condition.
    """
