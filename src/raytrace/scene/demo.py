"""Sample scene: three spheres on a large ground sphere, lit by two lamps.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raytrace.scene.demo import create_demo_scene
    >>> image = create_demo_scene().render(320, 240)
"""

from raytrace.camera.viewport import Camera
from raytrace.core.color import WHITE, Color, web_color
from raytrace.core.vector import direction, point
from raytrace.geometry.sphere import SceneSphere
from raytrace.scene.scene import Scene
from raytrace.shading.lights import Light, PointLight
from raytrace.shading.material import Material

# Half-extent of the viewport at distance 1; the aspect ratio is 4:3
VIEWPORT_HALF_WIDTH = 0.8
VIEWPORT_HALF_HEIGHT = 0.6

# Orthographic views need a viewport as wide as the scene itself
ORTHO_HALF_WIDTH = 4.0
ORTHO_HALF_HEIGHT = 3.0


def create_demo_scene(perspective: bool = True) -> Scene:
    """Create the sample scene.

    Args:
        perspective: Perspective projection if True, orthographic otherwise.

    Returns:
        A Scene with four spheres, two point lights, and a dim ambient light.
    """
    if perspective:
        half_w, half_h = VIEWPORT_HALF_WIDTH, VIEWPORT_HALF_HEIGHT
    else:
        half_w, half_h = ORTHO_HALF_WIDTH, ORTHO_HALF_HEIGHT

    camera = Camera(
        location=point(0.0, 1.0, 6.0),
        gaze=direction(0.0, 0.0, -1.0),
        up=direction(0.0, 1.0, 0.0),
        l=-half_w,
        r=half_w,
        b=-half_h,
        t=half_h,
        d=1.0,
        perspective=perspective,
    )

    scene = Scene(
        camera=camera,
        ambient_light=Light(color=WHITE, intensity=0.15),
        background_color=web_color(0x1A1A2E),
    )

    # Ground
    scene.add_object(
        SceneSphere(point(0.0, -1000.0, 0.0), 999.0, Material.diffuse(Color(0.6, 0.6, 0.55)))
    )

    scene.add_object(SceneSphere(point(-2.2, 0.0, 0.0), 1.0, Material.diffuse(web_color(0xCC3333))))
    scene.add_object(
        SceneSphere(
            point(0.0, 0.0, -0.5),
            1.0,
            Material(
                diffuse_color=web_color(0x3366CC),
                specular_color=Color(0.8, 0.8, 0.8),
                shininess=64.0,
            ),
        )
    )
    scene.add_object(SceneSphere(point(2.2, 0.0, 0.0), 1.0, Material.diffuse(web_color(0x33AA55))))

    scene.add_point_light(
        PointLight(color=WHITE, intensity=40.0, location=point(-4.0, 6.0, 4.0))
    )
    scene.add_point_light(
        PointLight(color=Color(1.0, 0.9, 0.8), intensity=20.0, location=point(5.0, 3.0, 2.0))
    )

    return scene
