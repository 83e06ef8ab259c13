"""Scene manager for coordinating primitives, materials and lights.

This module provides a high-level scene building API on top of the Taichi
field storage in whitted.scene.intersection, whitted.materials.phong and
whitted.scene.lights.

The SceneManager maintains:
- The ordered object table (spheres and triangles, each with its own material)
- The light list
- Python-side records of everything added, for inspection and serialization
- Validation of geometry before it reaches the kernels

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import Material
    >>> from whitted.scene.lights import Light
    >>> from whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = Material((0.1, 0, 0), (0.8, 0, 0), (1, 1, 1), 32.0)
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material=red)
    0
    >>> scene.add_light(Light((2, 2, 2, 1), (0.1,) * 3, (1,) * 3, (1,) * 3))
    0
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

import taichi.math as tm

from whitted.materials.phong import (
    MAX_MATERIALS,
    Material,
    add_phong_material,
    clear_phong_materials,
)
from whitted.scene.intersection import (
    MAX_OBJECTS,
    ObjectKind,
    add_sphere,
    add_triangle,
    clear_scene,
    get_object_count,
)
from whitted.scene.lights import MAX_LIGHTS, Light, add_light, clear_lights, get_light_count

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Twice the area below which a triangle is considered degenerate
DEGENERATE_AREA_EPSILON = 1e-12


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        object_index: The row of the sphere in the object table.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material: The sphere's material.
    """

    object_index: int
    center: tuple[float, float, float]
    radius: float
    material: Material

    @property
    def kind(self) -> ObjectKind:
        return ObjectKind.SPHERE


@dataclass
class TriangleInfo:
    """Information about a triangle in the scene.

    Attributes:
        object_index: The row of the triangle in the object table.
        vertices: The vertices (A, B, C); the winding selects the front face.
        material: The triangle's material.
    """

    object_index: int
    vertices: tuple[
        tuple[float, float, float], tuple[float, float, float], tuple[float, float, float]
    ]
    material: Material

    @property
    def kind(self) -> ObjectKind:
        return ObjectKind.TRIANGLE


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        objects: Object configurations in object-table order.
        lights: Light configurations.
    """

    objects: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


def _as_point(values: Any, name: str) -> tuple[float, float, float]:
    """Convert a 3-component sequence to a float tuple."""
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Scene builder owning the object table, materials and lights.

    Objects keep their insertion order, which decides exact distance ties
    during nearest-hit resolution. The scene must not be modified while a
    render is running.

    Attributes:
        objects: SphereInfo / TriangleInfo records in object-table order.
        lights: Lights in insertion order.

    Example:
        >>> scene = SceneManager()
        >>> mirror = Material((0, 0, 0), (0.1, 0.1, 0.1), (1, 1, 1), 128.0)
        >>> scene.add_triangle((-1, 0, -1), (1, 0, -1), (0, 1, -1), mirror)
        0
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.objects: list[SphereInfo | TriangleInfo] = []
        self.lights: list[Light] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_phong_materials()
        clear_lights()
        self.objects.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (objects, materials and lights)."""
        self._clear_all()
        logger.debug("Scene cleared")

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material: The sphere's material.

        Returns:
            The object index of the added sphere.

        Raises:
            ValueError: If the radius is not positive and finite.
            RuntimeError: If the maximum number of objects or materials is
                exceeded.
        """
        center = _as_point(center, "Sphere center")
        if not (radius > 0.0 and math.isfinite(radius)):
            raise ValueError(f"Sphere radius must be positive, got {radius}")

        material_id = add_phong_material(material)
        object_index = add_sphere(vec3(*center), float(radius), material_id)
        self.objects.append(SphereInfo(object_index, center, float(radius), material))

        logger.debug("Added sphere %d at %s, radius %g", object_index, center, radius)
        return object_index

    def add_triangle(
        self,
        a: tuple[float, float, float],
        b: tuple[float, float, float],
        c: tuple[float, float, float],
        material: Material,
    ) -> int:
        """Add a triangle to the scene.

        Only rays approaching from the side that (B - A) x (C - A) points to
        can hit the triangle.

        Args:
            a: First vertex.
            b: Second vertex.
            c: Third vertex.
            material: The triangle's material.

        Returns:
            The object index of the added triangle.

        Raises:
            ValueError: If the vertices are collinear (zero area).
            RuntimeError: If the maximum number of objects or materials is
                exceeded.
        """
        a = _as_point(a, "Triangle vertex A")
        b = _as_point(b, "Triangle vertex B")
        c = _as_point(c, "Triangle vertex C")

        ab = [b[i] - a[i] for i in range(3)]
        ac = [c[i] - a[i] for i in range(3)]
        nx = ab[1] * ac[2] - ab[2] * ac[1]
        ny = ab[2] * ac[0] - ab[0] * ac[2]
        nz = ab[0] * ac[1] - ab[1] * ac[0]
        if math.sqrt(nx * nx + ny * ny + nz * nz) <= DEGENERATE_AREA_EPSILON:
            raise ValueError(f"Degenerate triangle with vertices {a}, {b}, {c}")

        material_id = add_phong_material(material)
        object_index = add_triangle(vec3(*a), vec3(*b), vec3(*c), material_id)
        self.objects.append(TriangleInfo(object_index, (a, b, c), material))

        logger.debug("Added triangle %d with vertices %s, %s, %s", object_index, a, b, c)
        return object_index

    # =========================================================================
    # Light Management
    # =========================================================================

    def add_light(self, light: Light) -> int:
        """Add a light to the scene.

        Args:
            light: The light to add.

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        light_index = add_light(light)
        self.lights.append(light)
        logger.debug("Added %s light %d", light.light_type.name.lower(), light_index)
        return light_index

    # =========================================================================
    # Queries
    # =========================================================================

    def get_object_count(self) -> int:
        """Get the number of objects in the scene."""
        return get_object_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    def get_object_info(self, object_index: int) -> SphereInfo | TriangleInfo | None:
        """Get the record of an object by index, or None if out of range."""
        if 0 <= object_index < len(self.objects):
            return self.objects[object_index]
        return None

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene as a SceneConfig."""
        config = SceneConfig()
        for info in self.objects:
            if isinstance(info, SphereInfo):
                config.objects.append(
                    {
                        "type": "sphere",
                        "center": list(info.center),
                        "radius": info.radius,
                        "material": info.material.to_dict(),
                    }
                )
            else:
                config.objects.append(
                    {
                        "type": "triangle",
                        "vertices": [list(v) for v in info.vertices],
                        "material": info.material.to_dict(),
                    }
                )
        config.lights = [light.to_dict() for light in self.lights]
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Replace the scene contents with a SceneConfig.

        Args:
            config: The scene description.

        Raises:
            ValueError: If an object type is unknown or any entry is invalid.
        """
        self._clear_all()

        for obj in config.objects:
            obj_type = obj.get("type")
            material = Material.from_dict(obj.get("material", {}))
            if obj_type == "sphere":
                self.add_sphere(
                    _as_point(obj.get("center", [0.0, 0.0, 0.0]), "Sphere center"),
                    float(obj.get("radius", 0.0)),
                    material,
                )
            elif obj_type == "triangle":
                vertices = obj.get("vertices", [])
                if len(vertices) != 3:
                    raise ValueError(f"Triangle needs 3 vertices, got {len(vertices)}")
                self.add_triangle(vertices[0], vertices[1], vertices[2], material)
            else:
                raise ValueError(f"Unknown object type: {obj_type}")

        for light_data in config.lights:
            self.add_light(Light.from_dict(light_data))

        logger.info(
            "Loaded scene with %d objects and %d lights", len(self.objects), len(self.lights)
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene as a JSON-friendly dictionary."""
        config = self.to_config()
        return {"objects": config.objects, "lights": config.lights}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Replace the scene contents with a dictionary from to_dict()."""
        config = SceneConfig(
            objects=data.get("objects", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Limits
    # =========================================================================

    @staticmethod
    def get_max_objects() -> int:
        """Get the maximum number of objects supported."""
        return MAX_OBJECTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    def __repr__(self) -> str:
        return f"SceneManager(objects={len(self.objects)}, lights={len(self.lights)})"
