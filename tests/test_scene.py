"""Tests for scene-level intersection and rendering.

Tests cover:
- Device object tables (load, capacity)
- Global nearest-hit selection independent of insertion order
- Shadow occlusion queries
- Scene construction and validation
- Scene.render: background, ambient-only, image layout
"""

import numpy as np
import pytest

from raytrace.core.color import BLACK, WHITE, Color
from raytrace.core.ray import ViewingRay
from raytrace.core.vector import direction, point
from raytrace.shading.lights import Light, PointLight
from raytrace.shading.material import Material

RED = Material.diffuse(Color(1.0, 0.0, 0.0))
BLUE = Material.diffuse(Color(0.0, 0.0, 1.0))
BACKGROUND = Color(0.25, 0.5, 0.75)


def make_camera(perspective=True):
    from raytrace.camera.viewport import Camera

    return Camera(
        location=point(0, 0, 5),
        gaze=direction(0, 0, -1),
        up=direction(0, 1, 0),
        l=-1.0,
        r=1.0,
        b=-1.0,
        t=1.0,
        d=1.0,
        perspective=perspective,
    )


def make_scene(objects=(), point_lights=(), ambient=0.2, perspective=True):
    from raytrace.scene.scene import Scene

    return Scene(
        camera=make_camera(perspective),
        ambient_light=Light(WHITE, ambient),
        background_color=BACKGROUND,
        objects=objects,
        point_lights=point_lights,
    )


class TestObjectTables:
    """Tests for the device object tables."""

    def test_load_objects(self):
        from raytrace.geometry.sphere import SceneSphere
        from raytrace.scene.intersection import get_sphere_count, load_objects, sphere_object_ids

        spheres = [SceneSphere(point(i, 0, 0), 0.5, RED) for i in range(4)]
        assert load_objects(spheres) == 4
        assert get_sphere_count() == 4
        assert [sphere_object_ids[i] for i in range(4)] == [0, 1, 2, 3]

    def test_load_replaces_previous_objects(self):
        from raytrace.geometry.sphere import SceneSphere
        from raytrace.scene.intersection import get_sphere_count, load_objects

        load_objects([SceneSphere(point(0, 0, 0), 1.0, RED)] * 3)
        load_objects([SceneSphere(point(0, 0, 0), 1.0, RED)])
        assert get_sphere_count() == 1

    def test_capacity_exceeded(self):
        from raytrace.config import MAX_SPHERES
        from raytrace.scene.intersection import add_sphere

        for i in range(MAX_SPHERES):
            add_sphere((float(i), 0.0, 0.0), 0.5, (1.0, 1.0, 1.0), (0.0, 0.0, 0.0), 0.0, i)
        with pytest.raises(RuntimeError):
            add_sphere((0.0, 0.0, 0.0), 0.5, (1.0, 1.0, 1.0), (0.0, 0.0, 0.0), 0.0, 0)


class TestNearestHit:
    """Tests for global minimum-t selection."""

    @pytest.mark.parametrize("order", [(0, 1), (1, 0)])
    def test_nearest_wins_regardless_of_order(self, order):
        from raytrace.geometry.sphere import SceneSphere

        near = SceneSphere(point(0, 0, 0), 1.0, RED)
        far = SceneSphere(point(0, 0, -5), 1.0, BLUE)
        objects = [(near, far)[k] for k in order]
        scene = make_scene(objects)

        result = scene.intersect(ViewingRay(point(0, 0, 10), direction(0, 0, -1)))

        assert result is not None
        obj, hit = result
        assert obj is near
        assert abs(hit.t - 9.0) < 1e-12

    def test_miss_returns_none(self):
        from raytrace.geometry.sphere import SceneSphere

        scene = make_scene([SceneSphere(point(0, 0, 0), 1.0, RED)])
        assert scene.intersect(ViewingRay(point(0, 5, 10), direction(0, 0, -1))) is None

    def test_matches_per_object_intersect(self):
        from raytrace.geometry.sphere import SceneSphere

        spheres = [
            SceneSphere(point(0.3, 0, -2), 1.0, RED),
            SceneSphere(point(-0.2, 0.1, 1), 0.7, BLUE),
            SceneSphere(point(0, -0.4, 3), 0.5, RED),
        ]
        origin, ray_dir = point(0, 0, 10), direction(0.01, -0.02, -1)
        hits = [(s, s.intersect(origin, ray_dir)) for s in spheres]
        expected_obj, expected_hit = min(
            ((s, h) for s, h in hits if h is not None), key=lambda pair: pair[1].t
        )

        obj, hit = make_scene(spheres).intersect(ViewingRay(origin, ray_dir))

        assert obj is expected_obj
        assert abs(hit.t - expected_hit.t) < 1e-9


class TestOcclusion:
    """Tests for is_occluded."""

    def test_blocked_segment(self):
        from raytrace.geometry.sphere import SceneSphere
        from raytrace.scene.intersection import is_occluded, load_objects

        load_objects([SceneSphere(point(0, 0, 2), 0.5, RED)])
        assert is_occluded((0.0, 0.0, 0.0), (0.0, 0.0, 4.0))

    def test_segment_stops_before_object(self):
        from raytrace.geometry.sphere import SceneSphere
        from raytrace.scene.intersection import is_occluded, load_objects

        load_objects([SceneSphere(point(0, 0, 2), 0.5, RED)])
        assert not is_occluded((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))


class TestSceneConstruction:
    """Tests for Scene validation and mutation."""

    def test_add_object_and_light(self):
        from raytrace.geometry.sphere import SceneSphere

        scene = make_scene()
        sphere = SceneSphere(point(0, 0, 0), 1.0, RED)
        lamp = PointLight(WHITE, 1.0, point(0, 5, 0))
        scene.add_object(sphere)
        scene.add_point_light(lamp)

        assert scene.objects == (sphere,)
        assert scene.point_lights == (lamp,)

    def test_rejects_wrong_types(self):
        scene = make_scene()
        with pytest.raises(TypeError):
            scene.add_object("sphere")
        with pytest.raises(TypeError):
            scene.add_point_light(Light(WHITE, 1.0))

    def test_background_tuple_coerced(self):
        from raytrace.scene.scene import Scene

        scene = Scene(make_camera(), Light(WHITE, 0.2), (0.0, 0.0, 0.0))
        assert scene.background_color == BLACK


class TestRender:
    """Tests for Scene.render."""

    def test_empty_scene_is_background(self):
        image = make_scene().render(5, 4)

        assert image.width == 5
        assert image.height == 4
        for x in range(5):
            for y in range(4):
                assert image.pixel(x, y) == BACKGROUND

    @pytest.mark.parametrize("width, height", [(0, 4), (4, 0), (-1, 3)])
    def test_non_positive_dimensions_rejected(self, width, height):
        with pytest.raises(ValueError):
            make_scene().render(width, height)

    def test_ambient_only_pixel(self):
        """Center ray hits the sphere; without lights the pixel is 0.2 x diffuse."""
        from raytrace.geometry.sphere import SceneSphere

        material = Material.diffuse(Color(0.5, 1.0, 0.25))
        scene = make_scene([SceneSphere(point(0, 0, 0), 1.0, material)], ambient=0.2)

        image = scene.render(3, 3)
        center = image.pixel(1, 1)

        assert abs(center.r - 0.1) < 1e-12
        assert abs(center.g - 0.2) < 1e-12
        assert abs(center.b - 0.05) < 1e-12
        # Corners miss the sphere
        assert image.pixel(0, 0) == BACKGROUND

    def test_image_rows_bottom_up(self):
        """A sphere below the axis shows up in low-y rows only."""
        from raytrace.geometry.sphere import SceneSphere

        sphere = SceneSphere(point(0, -0.6, 0), 0.3, RED)
        image = make_scene([sphere], perspective=False).render(5, 5)

        assert image.pixel(2, 1) != BACKGROUND
        assert image.pixel(2, 3) == BACKGROUND

    def test_render_matches_render_pixel(self):
        from raytrace.geometry.sphere import SceneSphere

        lamp = PointLight(WHITE, 20.0, point(2, 3, 4))
        scene = make_scene([SceneSphere(point(0, 0, 0), 1.0, RED)], [lamp])

        image = scene.render(8, 6)
        for x, y in [(0, 0), (4, 3), (3, 2), (7, 5)]:
            single = scene.render_pixel(x, y, 8, 6)
            np.testing.assert_allclose(single.as_tuple(), image.pixel(x, y).as_tuple(), atol=1e-12)

    def test_render_pixel_out_of_bounds(self):
        with pytest.raises(ValueError):
            make_scene().render_pixel(8, 0, 8, 6)

    def test_shadowed_pixel_keeps_only_ambient(self):
        """A small sphere between the lamp and the hit point removes the lamp."""
        from raytrace.geometry.sphere import SceneSphere

        big = SceneSphere(point(0, 0, 0), 1.0, RED)
        # Center pixel hits (0, 0, 1); the lamp is at distance sqrt(18), cos 1/sqrt(2)
        lamp = PointLight(WHITE, 9.0, point(0, 3, 4))
        blocker = SceneSphere(point(0, 1.5, 2.5), 0.3, BLUE)

        lit = make_scene([big], [lamp]).render(3, 3).pixel(1, 1)
        shadowed = make_scene([big, blocker], [lamp]).render(3, 3).pixel(1, 1)

        assert abs(lit.r - (0.2 + 9.0 * (2 ** -0.5) / 18.0)) < 1e-9
        assert abs(shadowed.r - 0.2) < 1e-12
        assert shadowed.g == 0.0 and shadowed.b == 0.0


class TestRenderPathModules:
    """The device modules must keep runtime annotations for Taichi."""

    @pytest.mark.parametrize(
        "module_name",
        [
            "raytrace.core.ray",
            "raytrace.geometry.sphere",
            "raytrace.camera.viewport",
            "raytrace.scene.intersection",
            "raytrace.shading.shader",
            "raytrace.core.integrator",
        ],
    )
    def test_device_module_annotations_are_evaluated(self, module_name):
        """Postponed (string) annotations break ti.dataclass/ti.func definitions."""
        import __future__
        import importlib

        module = importlib.import_module(module_name)
        assert getattr(module, "annotations", None) is not __future__.annotations

    def test_lit_sphere_end_to_end(self):
        """Import and run the whole render path: camera, hit, shade, image."""
        from raytrace.geometry.sphere import SceneSphere

        lamp = PointLight(WHITE, 4.5, point(0, 0, 4))
        scene = make_scene([SceneSphere(point(0, 0, 0), 1.0, RED)], [lamp])

        image = scene.render(3, 3)
        center = image.pixel(1, 1)

        # 0.2 ambient + 4.5 / 3^2 along the normal
        assert abs(center.r - 0.7) < 1e-12
        assert center.g == 0.0 and center.b == 0.0
        assert image.pixel(0, 0) == BACKGROUND
