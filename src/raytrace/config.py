"""Rendering constants and Taichi runtime initialization.

All device-side math runs in double precision so that colors and positions
supplied from Python survive the round trip through Taichi fields unchanged.

Example:
    >>> from raytrace.config import init_taichi
    >>> init_taichi("cpu")
"""

import logging

import taichi as ti

logger = logging.getLogger(__name__)

# =============================================================================
# Ray Tracing Constants
# =============================================================================

# t_min and t_max for ray intersection
T_MIN = 1e-4
T_MAX = 1e10

# Offset applied along the surface normal before casting a shadow feeler
SHADOW_BIAS = 1e-4

# =============================================================================
# Device Table Capacities
# =============================================================================

MAX_SPHERES = 1024
MAX_POINT_LIGHTS = 64

# =============================================================================
# Taichi Runtime
# =============================================================================

ARCHES = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
    "opengl": ti.opengl,
}

LOG_LEVELS = {
    "trace": ti.TRACE,
    "debug": ti.DEBUG,
    "info": ti.INFO,
    "warn": ti.WARN,
    "error": ti.ERROR,
}


def init_taichi(arch: str = "cpu", *, debug: bool = False, log_level: str = "warn") -> None:
    """Initialize the Taichi runtime for rendering.

    Must be called once before importing any module that declares Taichi
    fields. Floating point defaults to f64; backends without double support
    (e.g. Metal) will fail to compile the render kernels.

    Args:
        arch: Backend name, one of the keys of ARCHES.
        debug: Enable Taichi debug mode (bounds checking in kernels).
        log_level: Taichi's own log level, one of the keys of LOG_LEVELS.

    Raises:
        ValueError: If arch or log_level is not recognized.
    """
    if arch not in ARCHES:
        raise ValueError(f"Unknown Taichi arch {arch!r}; expected one of {sorted(ARCHES)}")
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"Unknown Taichi log level {log_level!r}; expected one of {sorted(LOG_LEVELS)}"
        )

    ti.init(
        arch=ARCHES[arch],
        default_fp=ti.f64,
        debug=debug,
        log_level=LOG_LEVELS[log_level],
    )
    logger.info("Taichi initialized (arch=%s, debug=%s)", arch, debug)
