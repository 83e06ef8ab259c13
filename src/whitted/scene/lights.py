"""Point and directional light sources.

A light's type is encoded in the w component of its 4D position, as in
homogeneous coordinates:

    w == 0: directional light; xyz is the direction the light travels, so the
            direction toward the light is -xyz. No attenuation.
    w == 1: point light at xyz, attenuated by
            1 / (constant + linear * d + quadratic * d^2).

Lights are stored in Taichi fields in insertion order; their order never
affects the rendered result.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.lights import Light, add_light
    >>> sun = Light(
    ...     position=(0.0, -1.0, 0.0, 0.0),
    ...     ambient=(0.1, 0.1, 0.1),
    ...     diffuse=(1.0, 1.0, 1.0),
    ...     specular=(1.0, 1.0, 1.0),
    ... )
    >>> add_light(sun)
    0
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


class LightType(IntEnum):
    """Light kinds, matching the w component of the light position."""

    DIRECTIONAL = 0
    POINT = 1


@dataclass(frozen=True)
class Light:
    """A light source (Python side).

    Attributes:
        position: (x, y, z, w). w == 0 marks a directional light whose
            direction of travel is xyz; w == 1 marks a point light at xyz.
        ambient: Ambient intensity (R, G, B).
        diffuse: Diffuse intensity (R, G, B).
        specular: Specular intensity (R, G, B).
        attenuation: (constant, linear, quadratic) falloff factors, used by
            point lights only.
    """

    position: tuple[float, float, float, float]
    ambient: tuple[float, float, float]
    diffuse: tuple[float, float, float]
    specular: tuple[float, float, float]
    attenuation: tuple[float, float, float] = (1.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        """Validate the light.

        Raises:
            ValueError: If w is not 0 or 1, a directional light has a zero
                direction, a colour does not have 3 components, or an
                attenuation factor is negative.
        """
        if len(self.position) != 4:
            raise ValueError(f"Light position must have 4 components, got {len(self.position)}")
        if self.position[3] not in (0.0, 1.0):
            raise ValueError(
                f"Light position w must be 0 (directional) or 1 (point), got {self.position[3]}"
            )
        if self.light_type == LightType.DIRECTIONAL and all(
            c == 0.0 for c in self.position[:3]
        ):
            raise ValueError("Directional light direction must be non-zero")
        for name in ("ambient", "diffuse", "specular", "attenuation"):
            value = getattr(self, name)
            if len(value) != 3:
                raise ValueError(f"Light {name} must have 3 components, got {len(value)}")
        if any(c < 0.0 for c in self.attenuation):
            raise ValueError(f"Light attenuation factors must be non-negative, got {self.attenuation}")

    @property
    def light_type(self) -> LightType:
        """Whether this is a point or a directional light."""
        return LightType.DIRECTIONAL if self.position[3] == 0.0 else LightType.POINT

    def to_dict(self) -> dict[str, Any]:
        """Export the light as a JSON-friendly dictionary."""
        return {
            "position": list(self.position),
            "ambient": list(self.ambient),
            "diffuse": list(self.diffuse),
            "specular": list(self.specular),
            "attenuation": list(self.attenuation),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Light":
        """Build a light from a dictionary produced by to_dict()."""
        position = data.get("position", [0.0, 0.0, 0.0, 1.0])
        if len(position) != 4:
            raise ValueError(f"Light position must have 4 components, got {len(position)}")
        return cls(
            position=(
                float(position[0]),
                float(position[1]),
                float(position[2]),
                float(position[3]),
            ),
            ambient=tuple(float(c) for c in data.get("ambient", [0.0, 0.0, 0.0])),
            diffuse=tuple(float(c) for c in data.get("diffuse", [0.0, 0.0, 0.0])),
            specular=tuple(float(c) for c in data.get("specular", [0.0, 0.0, 0.0])),
            attenuation=tuple(float(c) for c in data.get("attenuation", [1.0, 0.0, 0.0])),
        )


@ti.dataclass
class LightSample:
    """A light as seen from one surface point.

    Attributes:
        to_light: Unit direction from the point toward the light.
        distance: Distance to the light (0 for directional lights).
        attenuation: Intensity scale in (0, 1] for point lights, 1 otherwise.
        is_point: 1 for point lights, 0 for directional lights.
    """

    to_light: vec3
    distance: ti.f32
    attenuation: ti.f32
    is_point: ti.i32


# =============================================================================
# Light Field Storage
# =============================================================================

MAX_LIGHTS = 64

light_positions = ti.Vector.field(4, dtype=ti.f32, shape=MAX_LIGHTS)
light_ambients = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_diffuses = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_speculars = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_attenuations = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def add_light(light: Light) -> int:
    """Add a light to the scene.

    Args:
        light: The light to add.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_positions[idx] = list(light.position)
    light_ambients[idx] = list(light.ambient)
    light_diffuses[idx] = list(light.diffuse)
    light_speculars[idx] = list(light.specular)
    light_attenuations[idx] = list(light.attenuation)
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def sample_light(light_idx: ti.i32, point: vec3) -> LightSample:
    """Compute direction, distance and attenuation of a light at a point.

    Args:
        light_idx: Index of the light.
        point: The surface point being shaded.

    Returns:
        A LightSample for the light as seen from the point. A non-positive
        attenuation denominator is treated as no attenuation.
    """
    position = light_positions[light_idx]
    xyz = vec3(position.x, position.y, position.z)

    to_light = tm.normalize(-xyz)
    distance = 0.0
    attenuation = 1.0
    is_point = 0

    if position.w != 0.0:
        is_point = 1
        offset = xyz - point
        distance = tm.length(offset)
        to_light = tm.normalize(offset)
        k = light_attenuations[light_idx]
        denom = k.x + k.y * distance + k.z * distance * distance
        if denom > 1e-8:
            attenuation = 1.0 / denom

    return LightSample(
        to_light=to_light,
        distance=distance,
        attenuation=attenuation,
        is_point=is_point,
    )
