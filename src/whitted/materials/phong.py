"""Phong material model and material registry.

A Phong material describes how a surface responds to each light:

    ambient  = k_a * I_a / num_lights
    diffuse  = max(0, dot(L, N)) * k_d * I_d
    specular = max(0, dot(reflect(-L, N), V)) ** shininess * k_s * I_s

where L is the unit direction toward the light, N the surface normal and V
the unit direction toward the viewer. All products are component-wise.
Colour components are not clamped here; clamping happens once when the pixel
is written.

The shininess exponent doubles as the mirror reflectivity of the surface:
the tracer weights reflected radiance by shininess / reflectivity_constant.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import Material, add_phong_material
    >>> red = Material(
    ...     ambient=(0.1, 0.0, 0.0),
    ...     diffuse=(0.8, 0.0, 0.0),
    ...     specular=(1.0, 1.0, 1.0),
    ...     shininess=32.0,
    ... )
    >>> material_id = add_phong_material(red)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.ray import reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Material:
    """Surface reflectance properties (Python side).

    Attributes:
        ambient: Ambient reflectance (R, G, B).
        diffuse: Diffuse reflectance (R, G, B).
        specular: Specular reflectance (R, G, B).
        shininess: Specular exponent; also scales mirror reflection.
    """

    ambient: tuple[float, float, float]
    diffuse: tuple[float, float, float]
    specular: tuple[float, float, float]
    shininess: float

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular"):
            value = getattr(self, name)
            if len(value) != 3:
                raise ValueError(f"Material {name} must have 3 components, got {len(value)}")
        if self.shininess < 0.0:
            raise ValueError(f"Material shininess must be non-negative, got {self.shininess}")

    def to_dict(self) -> dict[str, list[float] | float]:
        """Export the material as a JSON-friendly dictionary."""
        return {
            "ambient": list(self.ambient),
            "diffuse": list(self.diffuse),
            "specular": list(self.specular),
            "shininess": self.shininess,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Material":
        """Build a material from a dictionary produced by to_dict()."""
        return cls(
            ambient=_vec3_tuple(data.get("ambient", [0.0, 0.0, 0.0])),
            diffuse=_vec3_tuple(data.get("diffuse", [0.0, 0.0, 0.0])),
            specular=_vec3_tuple(data.get("specular", [0.0, 0.0, 0.0])),
            shininess=float(data.get("shininess", 0.0)),
        )


def _vec3_tuple(values) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


@ti.dataclass
class PhongMaterial:
    """Phong material properties (Taichi side).

    Attributes:
        ambient: Ambient reflectance (RGB).
        diffuse: Diffuse reflectance (RGB).
        specular: Specular reflectance (RGB).
        shininess: Specular exponent.
    """

    ambient: vec3
    diffuse: vec3
    specular: vec3
    shininess: ti.f32


# =============================================================================
# Phong Terms
# =============================================================================


@ti.func
def phong_ambient(material: PhongMaterial, light_ambient: vec3, num_lights: ti.i32) -> vec3:
    """Ambient term, pre-divided by the number of lights in the scene.

    Args:
        material: The surface material.
        light_ambient: The light's ambient intensity (RGB).
        num_lights: Number of lights in the scene (must be positive).

    Returns:
        The ambient contribution of one light.
    """
    return material.ambient * light_ambient / ti.cast(num_lights, ti.f32)


@ti.func
def phong_diffuse(
    material: PhongMaterial, light_diffuse: vec3, to_light: vec3, normal: vec3
) -> vec3:
    """Lambertian diffuse term max(0, L.N) * k_d * I_d."""
    strength = ti.max(0.0, tm.dot(to_light, normal))
    return strength * material.diffuse * light_diffuse


@ti.func
def phong_specular(
    material: PhongMaterial,
    light_specular: vec3,
    to_light: vec3,
    normal: vec3,
    to_viewer: vec3,
) -> vec3:
    """Specular term max(0, R.V) ** shininess * k_s * I_s.

    Args:
        material: The surface material.
        light_specular: The light's specular intensity (RGB).
        to_light: Unit direction from the surface point toward the light.
        normal: Unit surface normal.
        to_viewer: Unit direction from the surface point toward the camera.

    Returns:
        The specular contribution of one light.
    """
    reflected = reflect(-to_light, normal)
    strength = ti.max(0.0, tm.dot(reflected, to_viewer)) ** material.shininess
    return strength * material.specular * light_specular


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 2048

phong_ambients = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
phong_diffuses = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
phong_speculars = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
phong_shininess = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_phong_materials = ti.field(dtype=ti.i32, shape=())


def clear_phong_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_phong_materials[None] = 0


def add_phong_material(material: Material) -> int:
    """Add a material to the registry.

    Args:
        material: The material to register.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_phong_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    phong_ambients[idx] = list(material.ambient)
    phong_diffuses[idx] = list(material.diffuse)
    phong_speculars[idx] = list(material.specular)
    phong_shininess[idx] = material.shininess
    num_phong_materials[None] = idx + 1
    return idx


def get_phong_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_phong_materials[None])


@ti.func
def get_phong_material(material_idx: ti.i32) -> PhongMaterial:
    """Look up a material by index within a Taichi kernel."""
    return PhongMaterial(
        ambient=phong_ambients[material_idx],
        diffuse=phong_diffuses[material_idx],
        specular=phong_speculars[material_idx],
        shininess=phong_shininess[material_idx],
    )
