"""Sphere primitive with robust ray-sphere intersection.

This module provides a Sphere dataclass, the HitRecord shared by all
primitives, and the ray-sphere intersection routine.

Rays are assumed to have unit-length directions, which reduces the quadratic
to the half-b form with a = 1:

    m = origin - center
    b = dot(m, direction)
    c = dot(m, m) - radius^2
    discriminant = b^2 - c
    t = -b +/- sqrt(discriminant)

The roots are computed with the cancellation-free formula from Ray Tracing
Gems so that grazing rays do not lose precision.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import Sphere, HitRecord, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The distance along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the primitive.
            Only valid if hit == 1.
        normal: The surface normal at the intersection point (unit length).
            It is the geometric normal of the primitive and is NOT flipped
            to face the incoming ray. Only valid if hit == 1.
        front_face: 1 if the ray arrived against the normal (from outside),
            0 otherwise. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def make_miss() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
    )


@ti.func
def _solve_quadratic_robust(b: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve t^2 + 2*b*t + c = 0 using a numerically stable method.

    Args:
        b: Half of the linear coefficient.
        c: Constant term.
        sqrt_d: Square root of the discriminant (b^2 - c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(b + sign(b) * sqrt(discriminant))
    sign_b = ti.select(b < 0.0, -1.0, 1.0)
    q = -(b + sign_b * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Ray through the center with the origin on the surface
        t0 = -b - sqrt_d
        t1 = -b + sqrt_d
    else:
        t0 = q
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    A negative discriminant is a miss. A zero discriminant gives the single
    tangent root -b. Otherwise the smaller root inside (t_min, t_max) is
    taken; when the smaller root lies behind the origin (the ray starts inside
    the sphere) the larger root is used, and when both are behind it is a
    miss.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test intersection against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit (exclusive).

    Returns:
        A HitRecord containing intersection information. The normal is
        normalize(point - center), pointing away from the center even when
        the ray starts inside the sphere.
    """
    m = ray_origin - sphere.center
    b = tm.dot(m, ray_direction)
    c = tm.dot(m, m) - sphere.radius * sphere.radius
    discriminant = b * b - c

    result = make_miss()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(b, c, sqrt_d)

        t = t0
        valid = (t > t_min) and (t < t_max)

        if not valid:
            t = t1
            valid = (t > t_min) and (t < t_max)

        if valid:
            hit_point = ray_origin + t * ray_direction
            outward_normal = tm.normalize(hit_point - sphere.center)

            is_front_face = 1
            if tm.dot(ray_direction, outward_normal) > 0.0:
                is_front_face = 0

            result = HitRecord(
                hit=1,
                t=t,
                point=hit_point,
                normal=outward_normal,
                front_face=is_front_face,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius within a Taichi kernel."""
    return Sphere(center=center, radius=radius)
