"""Scene-level nearest-hit resolution.

This module stores every primitive of the scene in one ordered object table
and answers "what does this ray hit first?" for the tracer.

Objects are tagged rows (ObjectKind.SPHERE or ObjectKind.TRIANGLE) kept in
insertion order. A query tests every object; a later object only replaces
the current best when its distance is strictly smaller, so on an exact
distance tie the object added first wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.intersection import (
    ...     add_sphere, add_triangle, raycast, clear_scene, vec3
    ... )
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, -1), 0.5, material_id=0)
    >>> add_triangle(vec3(-1, -1, -2), vec3(1, -1, -2), vec3(0, 1, -2), material_id=0)
    >>> # Use raycast within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from whitted.geometry.sphere import HitRecord, hit_sphere, make_miss, make_sphere
from whitted.geometry.triangle import hit_triangle, make_triangle

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ObjectKind(IntEnum):
    """Primitive type tag of an object table row."""

    SPHERE = 0
    TRIANGLE = 1


@ti.dataclass
class IntersectionInfo:
    """Result of a nearest-hit query.

    Attributes:
        ray_origin: Origin of the ray that was cast.
        ray_direction: Direction of the ray that was cast.
        t: Distance from the ray origin to the hit point.
            Only valid if object_index >= 0.
        object_index: Index of the hit object in the object table, or -1
            when nothing was hit.
        point: The intersection point. Only valid if object_index >= 0.
        normal: The unit geometric normal of the hit object at the point. It
            is not flipped toward the ray, so its sign relative to the ray
            is not fixed. Only valid if object_index >= 0.
    """

    ray_origin: vec3
    ray_direction: vec3
    t: ti.f32
    object_index: ti.i32
    point: vec3
    normal: vec3


# Maximum number of objects supported in the scene
MAX_OBJECTS = 2048

# Object table: Structure of Arrays layout
# Spheres use vertex_a as center and radius; triangles use the three vertices
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_vertex_a = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_vertex_b = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_vertex_c = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_radii = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
object_material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all objects from the scene.

    Resets the object count to zero. The actual field data is not cleared
    but will be overwritten when new objects are added.
    """
    num_objects[None] = 0


def _next_object_index() -> int:
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
    return idx


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Append a sphere to the object table.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        material_id: The material ID to associate with this sphere.

    Returns:
        The object index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    idx = _next_object_index()
    object_kinds[idx] = int(ObjectKind.SPHERE)
    object_vertex_a[idx] = center
    object_vertex_b[idx] = vec3(0.0, 0.0, 0.0)
    object_vertex_c[idx] = vec3(0.0, 0.0, 0.0)
    object_radii[idx] = radius
    object_material_ids[idx] = material_id
    num_objects[None] = idx + 1
    return idx


def add_triangle(a: vec3, b: vec3, c: vec3, material_id: int = 0) -> int:
    """Append a triangle to the object table.

    The winding A -> B -> C decides the visible side (see
    whitted.geometry.triangle).

    Args:
        a: First vertex.
        b: Second vertex.
        c: Third vertex.
        material_id: The material ID to associate with this triangle.

    Returns:
        The object index of the added triangle.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    idx = _next_object_index()
    object_kinds[idx] = int(ObjectKind.TRIANGLE)
    object_vertex_a[idx] = a
    object_vertex_b[idx] = b
    object_vertex_c[idx] = c
    object_radii[idx] = 0.0
    object_material_ids[idx] = material_id
    num_objects[None] = idx + 1
    return idx


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


def get_object_kind(object_index: int) -> ObjectKind:
    """Get the primitive type of an object (Python side)."""
    if not 0 <= object_index < num_objects[None]:
        raise IndexError(f"Object index {object_index} out of range")
    return ObjectKind(int(object_kinds[object_index]))


@ti.func
def get_object_material_id(object_index: ti.i32) -> ti.i32:
    """Get the material ID of an object within a Taichi kernel."""
    return object_material_ids[object_index]


@ti.func
def intersect_object(
    object_index: ti.i32,
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Dispatch a ray test to the primitive stored at object_index."""
    rec = make_miss()
    if object_kinds[object_index] == int(ObjectKind.SPHERE):
        sphere = make_sphere(object_vertex_a[object_index], object_radii[object_index])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
    else:
        tri = make_triangle(
            object_vertex_a[object_index],
            object_vertex_b[object_index],
            object_vertex_c[object_index],
        )
        rec = hit_triangle(ray_origin, ray_direction, tri, t_min, t_max)
    return rec


@ti.func
def _make_miss_info(ray_origin: vec3, ray_direction: vec3) -> IntersectionInfo:
    """Create an IntersectionInfo indicating no intersection."""
    return IntersectionInfo(
        ray_origin=ray_origin,
        ray_direction=ray_direction,
        t=0.0,
        object_index=-1,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def raycast(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> IntersectionInfo:
    """Find the closest object hit by a ray.

    Iterates through the object table in order, passing the closest distance
    found so far as the upper bound for the next test. Because that bound is
    exclusive, an object at exactly the same distance as the current best
    does not replace it.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The IntersectionInfo of the closest hit, or a miss (object_index -1).
    """
    closest_t = t_max
    result = _make_miss_info(ray_origin, ray_direction)

    for i in range(num_objects[None]):
        rec = intersect_object(i, ray_origin, ray_direction, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = IntersectionInfo(
                ray_origin=ray_origin,
                ray_direction=ray_direction,
                t=rec.t,
                object_index=i,
                point=rec.point,
                normal=rec.normal,
            )

    return result


@ti.func
def raycast_any(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> ti.i32:
    """Test if a ray hits any object closer than t_max.

    Stops testing after the first hit; useful when only occlusion matters.

    Returns:
        1 if any object was hit, 0 otherwise.
    """
    hit_any = 0
    for i in range(num_objects[None]):
        if hit_any == 0:
            rec = intersect_object(i, ray_origin, ray_direction, t_min, t_max)
            if rec.hit == 1:
                hit_any = 1
    return hit_any
