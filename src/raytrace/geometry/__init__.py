"""Geometry module for scene objects and ray intersection.

This module provides the scene object interface and its primitives:

Components:
    base: SceneObject interface and the Intersection result type
    sphere: Sphere primitive with ray-sphere intersection

Intersection routines are implemented as Taichi functions (@ti.func) so the
render kernel can test every object in parallel across pixels. The host-side
SceneObject.intersect wraps the same function in a small kernel.

Ray-object intersection follows the pattern:
    rec = hit_shape(ray_origin, ray_direction, shape_data, t_min, t_max)
"""

from .base import Intersection, SceneObject
from .sphere import HitRecord, SceneSphere, Sphere, hit_sphere, make_sphere

__all__ = [
    "Intersection",
    "SceneObject",
    "SceneSphere",
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
]
