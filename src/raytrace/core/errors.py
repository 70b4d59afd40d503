"""Exception hierarchy for invalid scene data and output failures.

Construction-time violations raise immediately so that a partially valid
scene can never reach the renderer. A ray that misses everything is not an
error: intersection queries return None.
"""


class RaytraceError(Exception):
    """Base class for all ray tracer errors."""


class InvalidColorError(RaytraceError, ValueError):
    """A color channel outside [0, 1] was supplied to a constructor."""


class InvalidGeometryError(RaytraceError, ValueError):
    """A size, distance, intensity, or viewport bound is out of range."""


class CoordinateTagError(RaytraceError, ValueError):
    """A point was supplied where a direction was required, or vice versa."""


class RasterWriteError(RaytraceError, OSError):
    """Writing a rendered image to disk failed."""
