"""Render configuration.

The tracer's tunable constants (background colour, ray offsets, reflection
weighting, anti-aliasing sample count) live in a single frozen dataclass that
is handed to the render entry point, rather than in module-level globals.

Example:
    >>> from whitted.core.config import RenderConfig
    >>> config = RenderConfig(background_color=(0.0, 0.0, 0.0), aa_samples=4)
    >>> config.shadow_bias
    0.0001
"""

from dataclasses import dataclass

# Defaults
DEFAULT_BACKGROUND_COLOR = (0.0, 0.5, 0.5)
DEFAULT_SHADOW_BIAS = 1e-4
DEFAULT_REFLECTION_BIAS = 1e-4
DEFAULT_REFLECTIVITY_CONSTANT = 128.0
DEFAULT_AA_SAMPLES = 16
DEFAULT_HIT_EPSILON = 1e-5

# Far clip for scene queries
T_MAX = 1e10


@dataclass(frozen=True)
class RenderConfig:
    """Immutable rendering constants.

    Attributes:
        background_color: RGB colour returned for rays that hit nothing.
        shadow_bias: Offset along the surface normal applied to shadow ray
            origins.
        reflection_bias: Offset along the surface normal applied to
            reflection ray origins.
        reflectivity_constant: The reflection contribution of a surface is
            weighted by shininess / reflectivity_constant.
        aa_samples: Number of jittered samples per pixel when anti-aliasing
            is enabled.
        hit_epsilon: Smallest ray parameter accepted as an intersection.
    """

    background_color: tuple[float, float, float] = DEFAULT_BACKGROUND_COLOR
    shadow_bias: float = DEFAULT_SHADOW_BIAS
    reflection_bias: float = DEFAULT_REFLECTION_BIAS
    reflectivity_constant: float = DEFAULT_REFLECTIVITY_CONSTANT
    aa_samples: int = DEFAULT_AA_SAMPLES
    hit_epsilon: float = DEFAULT_HIT_EPSILON

    def __post_init__(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If any field is out of range.
        """
        if len(self.background_color) != 3:
            raise ValueError(
                f"background_color must have 3 components, got {len(self.background_color)}"
            )
        if self.shadow_bias < 0.0:
            raise ValueError(f"shadow_bias must be non-negative, got {self.shadow_bias}")
        if self.reflection_bias < 0.0:
            raise ValueError(
                f"reflection_bias must be non-negative, got {self.reflection_bias}"
            )
        if self.reflectivity_constant <= 0.0:
            raise ValueError(
                f"reflectivity_constant must be positive, got {self.reflectivity_constant}"
            )
        if self.aa_samples < 1:
            raise ValueError(f"aa_samples must be at least 1, got {self.aa_samples}")
        if self.hit_epsilon <= 0.0:
            raise ValueError(f"hit_epsilon must be positive, got {self.hit_epsilon}")
