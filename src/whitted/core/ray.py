"""Ray type and the ray-construction helpers used by the camera and tracer.

All functions here are Taichi functions, callable from inside kernels.

Example:
    >>> @ti.kernel
    ... def bounce() -> ti.f32:
    ...     ray = make_ray(vec3(0.0), vec3(1.0, -1.0, 0.0))
    ...     return reflect(ray.direction, vec3(0.0, 1.0, 0.0)).y
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A half-line from origin along direction.

    Attributes:
        origin: Start point.
        direction: Unit direction. Intersection routines assume |direction| = 1.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Build a ray, normalizing the (non-zero) direction."""
    return Ray(origin=origin, direction=tm.normalize(direction))


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror an incoming direction about a unit normal.

    The result does not depend on which way the normal points.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def offset_point(point: vec3, normal: vec3, bias: ti.f32) -> vec3:
    """Move a surface point bias units along its normal.

    Secondary rays start from the offset point so they do not immediately
    re-hit the surface they leave.
    """
    return point + bias * normal
