"""Taichi-based Whitted-style ray tracer.

This package renders scenes of spheres and triangles lit by point and
directional lights, with support for:
- Phong shading (ambient, diffuse, specular) with distance attenuation
- Hard shadows via shadow rays
- Recursive mirror reflection with a bounded depth
- Stochastic (jittered) anti-aliasing

Subpackages:
    core: Ray utilities, render configuration, tracer kernels, frame assembly
    geometry: Sphere and triangle primitives with intersection routines
    materials: Phong material model and material registry
    scene: Object table, lights, nearest-hit queries, scene loading
    camera: Pinhole camera with look-at positioning
    preview: PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
