"""Built-in demo scene.

This module provides a factory function for a small scene that exercises
every feature of the tracer:

- A floor made of two triangles (front face pointing up)
- A mirror-like sphere (high shininess) that reflects the rest of the scene
- A red diffuse sphere that casts a shadow on the floor
- A point light with distance attenuation and a directional fill light

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.demo import create_demo_scene
    >>> from whitted.core.renderer import render_frame
    >>>
    >>> scene, camera, max_depth = create_demo_scene()
    >>> frame = render_frame(camera, max_depth=max_depth)
"""

from dataclasses import dataclass

from whitted.camera.pinhole import Camera
from whitted.materials.phong import Material
from whitted.scene.lights import Light
from whitted.scene.manager import SceneManager


@dataclass
class DemoSceneParams:
    """Parameters for configuring the demo scene.

    Attributes:
        image_width: Output width in pixels.
        image_height: Output height in pixels.
        max_depth: Reflection depth budget.
        light_position: Position of the point light.
        mirror_shininess: Shininess of the mirror sphere; also its
            reflection weight relative to the reflectivity constant.
        floor_color: Diffuse colour of the floor.
    """

    image_width: int = 640
    image_height: int = 480
    max_depth: int = 4
    light_position: tuple[float, float, float] = (2.0, 4.0, 3.0)
    mirror_shininess: float = 96.0
    floor_color: tuple[float, float, float] = (0.6, 0.6, 0.6)


FLOOR_Y = -1.0
FLOOR_HALF_SIZE = 4.0


def create_demo_scene(
    params: DemoSceneParams | None = None,
    scene: SceneManager | None = None,
) -> tuple[SceneManager, Camera, int]:
    """Create the demo scene.

    Args:
        params: Scene parameters; defaults to DemoSceneParams().
        scene: Manager to fill (its previous contents are replaced). A new
            one is created when omitted.

    Returns:
        A tuple of (scene, camera, max_depth).
    """
    if params is None:
        params = DemoSceneParams()
    if scene is None:
        scene = SceneManager()
    else:
        scene.clear()

    s = FLOOR_HALF_SIZE
    y = FLOOR_Y
    floor = Material(
        ambient=tuple(0.2 * c for c in params.floor_color),
        diffuse=params.floor_color,
        specular=(0.2, 0.2, 0.2),
        shininess=8.0,
    )
    # Wound counter-clockwise seen from above so the floor faces +y
    scene.add_triangle((-s, y, s), (s, y, s), (s, y, -s), floor)
    scene.add_triangle((-s, y, s), (s, y, -s), (-s, y, -s), floor)

    mirror = Material(
        ambient=(0.02, 0.02, 0.02),
        diffuse=(0.1, 0.1, 0.12),
        specular=(1.0, 1.0, 1.0),
        shininess=params.mirror_shininess,
    )
    scene.add_sphere((-0.6, 0.0, -1.5), 1.0, mirror)

    red = Material(
        ambient=(0.15, 0.02, 0.02),
        diffuse=(0.8, 0.1, 0.1),
        specular=(0.5, 0.5, 0.5),
        shininess=32.0,
    )
    scene.add_sphere((1.2, -0.5, -0.5), 0.5, red)

    scene.add_light(
        Light(
            position=(*params.light_position, 1.0),
            ambient=(0.2, 0.2, 0.2),
            diffuse=(1.0, 1.0, 1.0),
            specular=(1.0, 1.0, 1.0),
            attenuation=(1.0, 0.02, 0.01),
        )
    )
    scene.add_light(
        Light(
            position=(-1.0, -1.0, -0.5, 0.0),
            ambient=(0.1, 0.1, 0.1),
            diffuse=(0.3, 0.3, 0.35),
            specular=(0.2, 0.2, 0.2),
        )
    )

    camera = Camera(
        position=(0.0, 0.5, 4.0),
        look_target=(0.0, -0.2, -1.0),
        global_up=(0.0, 1.0, 0.0),
        fov_y=50.0,
        focal_length=1.0,
        image_width=params.image_width,
        image_height=params.image_height,
    )

    return scene, camera, params.max_depth
