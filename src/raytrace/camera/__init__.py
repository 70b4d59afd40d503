"""Camera module for view and ray generation.

Components:
    viewport: Viewport camera with perspective and orthographic projection

Camera responsibilities:
    - Validate eye position, gaze/up directions, and viewport bounds
    - Build the orthonormal (u, v, w) basis from gaze and up
    - Map pixel centers to viewport coordinates and world-space rays

Ray generation uses pixel indices with explicit resolution:
    i in [0, width): left to right across image
    j in [0, height): bottom to top across image

Importing this package declares Taichi fields, so Taichi must be initialized
first (raytrace.config.init_taichi).
"""

from .viewport import (
    Camera,
    get_camera_info,
    get_ray,
    setup_camera,
)

__all__ = [
    "Camera",
    "setup_camera",
    "get_ray",
    "get_camera_info",
]
