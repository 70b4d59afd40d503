"""Scene container and the render entry point.

A Scene holds one camera, one ambient light, a background color, and ordered
lists of objects and point lights. Rendering uploads everything to the device
tables and runs the per-pixel kernel; the result is a new Image, so a render
is a pure function of the scene and the resolution.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raytrace.scene.scene import Scene
    >>> scene = Scene(camera, ambient_light=Light(WHITE, 0.2), background_color=BLACK)
    >>> scene.add_object(SceneSphere(point(0, 0, 0), 1.0, Material.diffuse(WHITE)))
    >>> image = scene.render(320, 240)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable

import numpy as np

from raytrace.camera.viewport import Camera, setup_camera
from raytrace.core.color import Color, as_color
from raytrace.core.integrator import render_pixel, render_pixels, set_background_color
from raytrace.core.ray import ViewingRay
from raytrace.geometry.base import Intersection, SceneObject
from raytrace.image.framebuffer import Image
from raytrace.scene.intersection import load_objects, nearest_hit
from raytrace.shading.lights import Light, PointLight
from raytrace.shading.shader import load_lights

logger = logging.getLogger(__name__)


class Scene:
    """Everything needed to render one image.

    Attributes:
        camera: The viewing camera.
        ambient_light: Positionless light applied uniformly to every surface.
        background_color: Color of pixels whose ray hits nothing.
    """

    def __init__(
        self,
        camera: Camera,
        ambient_light: Light,
        background_color: Color,
        objects: Iterable[SceneObject] = (),
        point_lights: Iterable[PointLight] = (),
    ) -> None:
        """Initialize a scene.

        Raises:
            TypeError: If camera, ambient_light, an object, or a point light
                has the wrong type.
            InvalidColorError: If background_color is not a valid color.
        """
        if not isinstance(camera, Camera):
            raise TypeError(f"camera must be a Camera, got {type(camera).__name__}")
        if not isinstance(ambient_light, Light):
            raise TypeError(f"ambient_light must be a Light, got {type(ambient_light).__name__}")
        self.camera = camera
        self.ambient_light = ambient_light
        self.background_color = as_color(background_color)
        self._objects: list[SceneObject] = []
        self._point_lights: list[PointLight] = []
        for obj in objects:
            self.add_object(obj)
        for light in point_lights:
            self.add_point_light(light)

    @property
    def objects(self) -> tuple[SceneObject, ...]:
        return tuple(self._objects)

    @property
    def point_lights(self) -> tuple[PointLight, ...]:
        return tuple(self._point_lights)

    def add_object(self, obj: SceneObject) -> None:
        """Append an object to the scene."""
        if not isinstance(obj, SceneObject):
            raise TypeError(f"Scene objects must be SceneObject instances, got {type(obj).__name__}")
        self._objects.append(obj)

    def add_point_light(self, light: PointLight) -> None:
        """Append a point light to the scene."""
        if not isinstance(light, PointLight):
            raise TypeError(f"Point lights must be PointLight instances, got {type(light).__name__}")
        self._point_lights.append(light)

    def _load(self) -> None:
        """Upload the camera, objects, lights, and background to the device."""
        num_objects = load_objects(self._objects)
        num_lights = load_lights(self._point_lights, self.ambient_light)
        setup_camera(self.camera)
        set_background_color(self.background_color.as_tuple())
        logger.debug("Loaded %d objects and %d point lights", num_objects, num_lights)

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self, width: int, height: int) -> Image:
        """Render the scene into a new image.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Returns:
            An Image whose pixel (x, y) is the color seen through pixel
            (x, y) of the viewport, y = 0 being the bottom row.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

        self._load()

        start = time.perf_counter()
        pixels = render_pixels(width, height)
        elapsed = time.perf_counter() - start
        logger.info("Rendered %dx%d in %.3fs", width, height, elapsed)

        # Kernel output is indexed [i, j]; images are indexed [y, x]
        return Image.from_array(np.transpose(pixels, (1, 0, 2)))

    def render_pixel(self, pixel_i: int, pixel_j: int, width: int, height: int) -> Color:
        """Render one pixel of the scene at the given resolution."""
        self._load()
        return Color(*render_pixel(pixel_i, pixel_j, width, height))

    def intersect(self, ray: ViewingRay) -> tuple[SceneObject, Intersection] | None:
        """Find the nearest object hit by a ray.

        Every object is tested and the smallest t wins, independent of the
        order objects were added.

        Returns:
            The winning object and its intersection, or None on a miss.
        """
        load_objects(self._objects)
        result = nearest_hit(ray.origin.xyz, ray.direction.xyz)
        if result is None:
            return None
        object_id, hit = result
        return self._objects[object_id], hit

    def __repr__(self) -> str:
        return (
            f"Scene(objects={len(self._objects)}, point_lights={len(self._point_lights)}, "
            f"background_color={self.background_color})"
        )
