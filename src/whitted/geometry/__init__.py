"""Geometry module for shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    sphere: Sphere primitive with ray-sphere intersection
    triangle: Single-sided triangle primitive with ray-triangle intersection

All intersection routines are implemented as Taichi functions (@ti.func)
and share the HitRecord result type:
    rec = hit_shape(ray_origin, ray_direction, shape, t_min, t_max)

There is no acceleration structure; the scene tests every primitive.
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_miss, make_sphere
from .triangle import (
    PARALLEL_EPSILON,
    Triangle,
    hit_triangle,
    make_triangle,
    triangle_barycentrics,
    triangle_normal,
)

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss",
    "make_sphere",
    "Triangle",
    "hit_triangle",
    "make_triangle",
    "triangle_barycentrics",
    "triangle_normal",
    "PARALLEL_EPSILON",
]
