"""Triangle primitive with ray-triangle intersection.

A triangle is defined by three vertices A, B and C. Its geometric normal is
normalize(cross(B - A, C - A)), so the winding order decides which side is
the front.

Intersection uses a Moller-Trumbore style formulation built on the
unnormalized plane normal:

    n = cross(B - A, C - A)
    e = cross(-D, O - A)
    f = dot(-D, n)
    t = dot(O - A, n) / f
    u = dot(C - A, e) / f
    v = -dot(B - A, e) / f

where O and D are the ray origin and direction. The ray hits when
u >= 0, v >= 0 and u + v <= 1.

Triangles are single sided: only rays with f > PARALLEL_EPSILON (arriving
from the side the normal points to) can hit. Rays parallel to the plane and
rays reaching the back face are misses, both for camera rays and for the
shadow and reflection rays cast during shading.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.triangle import Triangle, hit_triangle
    >>> tri = Triangle(
    ...     a=ti.math.vec3(0, 0, 0),
    ...     b=ti.math.vec3(1, 0, 0),
    ...     c=ti.math.vec3(0, 1, 0),
    ... )
    >>> # Use hit_triangle within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord, make_miss

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Denominators at or below this are treated as parallel (or back-facing)
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Triangle:
    """A triangle defined by three vertices.

    Attributes:
        a: First vertex (vec3).
        b: Second vertex (vec3).
        c: Third vertex (vec3).
    """

    a: vec3
    b: vec3
    c: vec3


@ti.func
def triangle_barycentrics(ray_origin: vec3, ray_direction: vec3, tri: Triangle):
    """Compute the plane distance and barycentric coordinates of a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        tri: The triangle to test.

    Returns:
        A tuple (f, t, u, v). f is the orientation denominator; t, u and v
        are only meaningful when f > PARALLEL_EPSILON and are zero otherwise.
    """
    n = tm.cross(tri.b - tri.a, tri.c - tri.a)
    ao = ray_origin - tri.a
    e = tm.cross(-ray_direction, ao)
    f = tm.dot(-ray_direction, n)

    t = 0.0
    u = 0.0
    v = 0.0
    if f > PARALLEL_EPSILON:
        t = tm.dot(ao, n) / f
        u = tm.dot(tri.c - tri.a, e) / f
        v = -tm.dot(tri.b - tri.a, e) / f

    return f, t, u, v


@ti.func
def hit_triangle(
    ray_origin: vec3,
    ray_direction: vec3,
    tri: Triangle,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-triangle intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        tri: The triangle to test intersection against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit (exclusive).

    Returns:
        A HitRecord containing intersection information. The normal is the
        normalized geometric normal of the triangle.
    """
    f, t, u, v = triangle_barycentrics(ray_origin, ray_direction, tri)

    result = make_miss()

    if f > PARALLEL_EPSILON:
        if u >= 0.0 and v >= 0.0 and u + v <= 1.0 and t > t_min and t < t_max:
            result = HitRecord(
                hit=1,
                t=t,
                point=ray_origin + t * ray_direction,
                normal=triangle_normal(tri),
                front_face=1,
            )

    return result


@ti.func
def make_triangle(a: vec3, b: vec3, c: vec3) -> Triangle:
    """Create a triangle from three vertices within a Taichi kernel."""
    return Triangle(a=a, b=b, c=c)


@ti.func
def triangle_normal(tri: Triangle) -> vec3:
    """Compute the unit geometric normal normalize(cross(B - A, C - A))."""
    return tm.normalize(tm.cross(tri.b - tri.a, tri.c - tri.a))

