"""Taichi-based Whitted-style ray tracer with local illumination.

This package renders a raster image of a scene of spheres lit by point
lights, using one primary ray per pixel and a Lambertian + ambient shading
model with inverse-square falloff and shadow feelers.

Subpackages:
    core: Homogeneous vectors, colors, rays, errors, and the render kernel
    geometry: Scene objects and ray-sphere intersection
    camera: Viewport camera with perspective and orthographic projection
    shading: Materials, lights, and the illumination model
    scene: Device object tables and the Scene container
    image: Framebuffer and PPM/PNG export

Taichi must be initialized (see raytrace.config.init_taichi) before importing
modules that declare Taichi fields (camera, scene, shading.shader,
core.integrator).
"""

__version__ = "0.1.0"
