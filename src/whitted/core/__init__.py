"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, reflection and surface offsets
    config: RenderConfig, the immutable render constants
    framebuffer: 8-bit RGB output raster
    tracer: Phong shading, shadow rays and bounded mirror reflection
    renderer: Row-by-row frame assembly with progress reporting

All compute-intensive operations use Taichi kernels.
"""

from .config import T_MAX, RenderConfig
from .framebuffer import FrameBuffer, quantize, to_char
from .ray import Ray, make_ray, offset_point, reflect, vec3

# Note: tracer and renderer are NOT imported here to avoid circular imports.
# Import directly from whitted.core.tracer or whitted.core.renderer when needed.

__all__ = [
    "Ray",
    "make_ray",
    "vec3",
    "reflect",
    "offset_point",
    "RenderConfig",
    "T_MAX",
    "FrameBuffer",
    "quantize",
    "to_char",
]
