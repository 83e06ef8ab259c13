"""Whitted-style ray tracing kernels.

This module implements local Phong shading with hard shadows and mirror
reflection on top of the scene's nearest-hit query.

For a ray with remaining depth d, the tracer:
    1. Finds the nearest hit; a miss returns the background colour.
    2. For every light, adds the material's ambient term, then casts a shadow
       ray toward the light. If the light is visible, adds the attenuated
       diffuse and specular terms.
    3. If d > 1, adds the radiance along the mirror reflection ray traced
       with depth d - 1, weighted by shininess / reflectivity_constant once
       for every visible light.

Taichi functions are inlined and cannot recurse, so step 3 runs as a loop:
every lit light would trace the same reflection ray, so the reflection is
traced once per bounce and its weight is multiplied by the number of lit
lights. Each iteration of the loop consumes one unit of depth, so a primary
ray makes at most max_depth scene traversals. A depth of zero or less is
treated as 1.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.config import RenderConfig
    >>> from whitted.core.tracer import apply_render_config, trace_single_ray
    >>>
    >>> apply_render_config(RenderConfig())
    >>> color, segments = trace_single_ray((0, 0, 5), (0, 0, -1), max_depth=3)
"""

import logging

import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    get_camera_origin,
    get_ray_centered,
    get_ray_jittered,
    is_camera_ready,
)
from whitted.core.config import T_MAX, RenderConfig
from whitted.core.ray import offset_point, reflect
from whitted.materials.phong import (
    get_phong_material,
    phong_ambient,
    phong_diffuse,
    phong_specular,
)
from whitted.scene.intersection import (
    IntersectionInfo,
    get_object_material_id,
    raycast,
    raycast_any,
)
from whitted.scene.lights import (
    light_ambients,
    light_diffuses,
    light_speculars,
    num_lights,
    sample_light,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Render Configuration Fields
# =============================================================================

_background_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_shadow_bias = ti.field(dtype=ti.f32, shape=())
_reflection_bias = ti.field(dtype=ti.f32, shape=())
_reflectivity_constant = ti.field(dtype=ti.f32, shape=())
_aa_samples = ti.field(dtype=ti.i32, shape=())
_hit_epsilon = ti.field(dtype=ti.f32, shape=())

_active_config: RenderConfig | None = None


def apply_render_config(config: RenderConfig) -> None:
    """Upload a render configuration to the tracer.

    Args:
        config: The constants to use for subsequent renders.
    """
    global _active_config

    _background_color[None] = list(config.background_color)
    _shadow_bias[None] = config.shadow_bias
    _reflection_bias[None] = config.reflection_bias
    _reflectivity_constant[None] = config.reflectivity_constant
    _aa_samples[None] = config.aa_samples
    _hit_epsilon[None] = config.hit_epsilon
    _active_config = config
    logger.debug("Applied %s", config)


def get_render_config() -> RenderConfig:
    """Get the active render configuration, applying defaults if none is set."""
    if _active_config is None:
        apply_render_config(RenderConfig())
    assert _active_config is not None
    return _active_config


# =============================================================================
# Render Target (Radiance Buffer)
# =============================================================================

# Indexed [row, column] with row 0 at the top of the image
_radiance = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

# Single-sample probes used by trace_single_ray() and trace_pixel()
_probe_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_segments = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Shading
# =============================================================================


@ti.func
def shade_local(info: IntersectionInfo):
    """Evaluate ambient, diffuse and specular light at a hit point.

    The ambient term of every light is added unconditionally. Diffuse and
    specular terms are added only for lights whose shadow ray, cast from the
    hit point offset along the normal, reaches the light unobstructed. An
    object beyond a point light does not shadow it.

    Args:
        info: A hit (object_index >= 0) returned by raycast().

    Returns:
        A tuple (color, lit_count) of the unclamped local radiance and the
        number of lights that illuminate the point.
    """
    material = get_phong_material(get_object_material_id(info.object_index))
    point = info.point
    normal = info.normal
    to_viewer = tm.normalize(get_camera_origin() - point)
    shadow_origin = offset_point(point, normal, _shadow_bias[None])
    light_count = num_lights[None]

    color = vec3(0.0, 0.0, 0.0)
    lit_count = 0

    for light_idx in range(light_count):
        light = sample_light(light_idx, point)
        color += phong_ambient(material, light_ambients[light_idx], light_count)

        shadow_t_max = T_MAX
        if light.is_point == 1:
            shadow_t_max = light.distance

        occluded = raycast_any(shadow_origin, light.to_light, _hit_epsilon[None], shadow_t_max)
        if occluded == 0:
            lit_count += 1
            diffuse = phong_diffuse(material, light_diffuses[light_idx], light.to_light, normal)
            specular = phong_specular(
                material, light_speculars[light_idx], light.to_light, normal, to_viewer
            )
            color += (diffuse + specular) * light.attenuation

    return color, lit_count


@ti.func
def trace_ray(origin: vec3, direction: vec3, max_depth: ti.i32):
    """Trace a ray with shadows and mirror reflections.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        max_depth: Depth budget; 1 means local shading only. Values below 1
            behave like 1.

    Returns:
        A tuple (radiance, segments): the unclamped radiance carried back
        along the ray, and the number of scene traversals made (at most
        max(max_depth, 1)).
    """
    depth = ti.max(max_depth, 1)

    radiance = vec3(0.0, 0.0, 0.0)
    weight = 1.0
    segments = 0

    ray_origin = origin
    ray_direction = direction

    # Active flag for loop continuation
    active = 1

    for _bounce in range(depth):
        if active == 1:
            segments += 1
            info = raycast(ray_origin, ray_direction, _hit_epsilon[None], T_MAX)

            if info.object_index < 0:
                radiance += weight * _background_color[None]
                active = 0
            else:
                local, lit_count = shade_local(info)
                radiance += weight * local

                if segments < depth and lit_count > 0:
                    material = get_phong_material(get_object_material_id(info.object_index))
                    weight *= (
                        ti.cast(lit_count, ti.f32)
                        * material.shininess
                        / _reflectivity_constant[None]
                    )
                    ray_origin = offset_point(info.point, info.normal, _reflection_bias[None])
                    ray_direction = reflect(ray_direction, info.normal)
                else:
                    active = 0

    return radiance, segments


@ti.func
def render_pixel_sample(pixel_x: ti.i32, pixel_y: ti.i32, max_depth: ti.i32, antialias: ti.i32) -> vec3:
    """Radiance of one pixel in camera coordinates (row 0 = bottom).

    With antialias == 1, averages aa_samples jittered rays; otherwise traces
    the single ray through the pixel centre.
    """
    color = vec3(0.0, 0.0, 0.0)

    if antialias == 1:
        num_samples = _aa_samples[None]
        for _sample_idx in range(num_samples):
            ray = get_ray_jittered(pixel_x, pixel_y)
            sample, _segments = trace_ray(ray.origin, ray.direction, max_depth)
            color += sample
        color /= ti.cast(num_samples, ti.f32)
    else:
        ray = get_ray_centered(pixel_x, pixel_y)
        sample, _segments = trace_ray(ray.origin, ray.direction, max_depth)
        color = sample

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_row(row: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32, antialias: ti.i32):
    """Render one image row into the radiance buffer.

    Image row 0 is the top of the frame, which is the highest camera row.
    """
    camera_row = height - row - 1
    for x in range(width):
        _radiance[row, x] = render_pixel_sample(x, camera_row, max_depth, antialias)


@ti.kernel
def _trace_probe(
    ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32, max_depth: ti.i32
):
    # Single-iteration outer loop keeps the bounce loop serial
    for _ in range(1):
        color, segments = trace_ray(vec3(ox, oy, oz), tm.normalize(vec3(dx, dy, dz)), max_depth)
        _probe_color[None] = color
        _probe_segments[None] = segments


@ti.kernel
def _render_pixel_probe(pixel_x: ti.i32, pixel_y: ti.i32, max_depth: ti.i32, antialias: ti.i32):
    for _ in range(1):
        _probe_color[None] = render_pixel_sample(pixel_x, pixel_y, max_depth, antialias)


# =============================================================================
# Public Tracing API
# =============================================================================


def _probe_result() -> tuple[float, float, float]:
    color = _probe_color[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def _check_camera_ready() -> None:
    """Raise if no camera has been set up."""
    if not is_camera_ready():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")


def trace_single_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = 1,
) -> tuple[tuple[float, float, float], int]:
    """Trace one ray through the current scene.

    This is a Python-callable function for testing and debugging. The
    specular term still uses the camera position as the viewer.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalised before tracing).
        max_depth: Reflection depth budget.

    Returns:
        Tuple of ((R, G, B), segments), where segments is the number of
        scene traversals the ray made.
    """
    get_render_config()
    _trace_probe(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2], max_depth
    )
    return _probe_result(), int(_probe_segments[None])


def trace_pixel(
    pixel_x: int, pixel_y: int, max_depth: int = 1, antialias: bool = False
) -> tuple[float, float, float]:
    """Compute the unclamped colour of a single pixel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Camera pixel row (0 = bottom).
        max_depth: Reflection depth budget.
        antialias: Average jittered samples instead of the centre ray.

    Returns:
        Tuple of (R, G, B) values.

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    _check_camera_ready()
    get_render_config()
    _render_pixel_probe(pixel_x, pixel_y, max_depth, int(antialias))
    return _probe_result()


def render_row(row: int, width: int, height: int, max_depth: int, antialias: bool) -> None:
    """Render one image row (0 = top) into the radiance buffer.

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    _check_camera_ready()
    _render_row(row, width, height, max_depth, int(antialias))


def get_radiance_numpy(width: int, height: int):
    """Get the active region of the radiance buffer.

    Returns:
        Float32 NumPy array of shape (height, width, 3), row 0 at the top.
    """
    return _radiance.to_numpy()[:height, :width, :]


def clear_radiance() -> None:
    """Reset the radiance buffer to zero."""
    _radiance.fill(0.0)
