"""Shading module: materials, lights, and local illumination.

Components:
    material: Diffuse/specular surface description
    lights: Ambient Light and PointLight value types
    shader: Device light tables and the illumination model (Lambertian +
        ambient, inverse-square falloff, shadow feelers, optional Blinn-Phong)

Shading evaluates, for a hit point p with unit normal n:

    color = clamp(ambient * kd
                  + sum over visible lights of kd * I * max(0, n.l) / dist^2
                  + optional ks * I * max(0, n.h)^shininess / dist^2)
"""

from .lights import Light, PointLight
from .material import Material

# Note: shader is NOT imported here because it declares Taichi fields.
# Import directly from raytrace.shading.shader after Taichi is initialized.

__all__ = [
    "Light",
    "PointLight",
    "Material",
]
