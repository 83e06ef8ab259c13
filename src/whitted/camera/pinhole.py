"""Pinhole camera model for perspective projection ray generation.

This module implements a pinhole camera that generates primary rays for
rendering. The camera supports:
- Look-at positioning (position, look_target, global_up)
- Vertical field of view and focal length
- Image-sized viewports with arbitrary aspect ratios
- Centred and jittered sub-pixel sampling for anti-aliasing

The camera builds an orthonormal basis from the view parameters:
- look: points from the camera toward the look target
- u: points right in the image plane (look x up)
- v: points up in the image plane (u x look)

The viewport sits at focal_length along the look direction and has
height 2 * focal_length * tan(fov_y / 2). Pixel coordinates grow rightward
(x) and upward (y) from the viewport's lower-left corner.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import Camera, setup_camera, get_ray_centered
    >>>
    >>> camera = Camera(
    ...     position=(0.0, 0.0, 3.0),
    ...     look_target=(0.0, 0.0, 0.0),
    ...     global_up=(0.0, 1.0, 0.0),
    ...     fov_y=45.0,
    ...     focal_length=1.0,
    ...     image_width=640,
    ...     image_height=480,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray_centered(320, 240)
"""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np
import taichi as ti

from whitted.core.ray import Ray, make_ray, vec3

# Maximum supported image dimensions (render buffers are preallocated)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# |look x up| below this means the look direction is parallel to up
PARALLEL_TOLERANCE = 1e-6

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        look_target: Point the camera is looking at in world space (x, y, z).
        global_up: Up direction used to orient the camera (typically (0, 1, 0)).
        fov_y: Vertical field of view in degrees, in (0, 180).
        focal_length: Distance from the camera to the viewport (positive).
        image_width: Output image width in pixels.
        image_height: Output image height in pixels.
    """

    position: tuple[float, float, float]
    look_target: tuple[float, float, float]
    global_up: tuple[float, float, float]
    fov_y: float
    focal_length: float
    image_width: int
    image_height: int

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height of the output image."""
        return self.image_width / self.image_height

    def validate(self) -> None:
        """Check that the camera can produce finite rays.

        Raises:
            ValueError: If the image size is not positive or exceeds the
                supported maximum, the field of view is outside (0, 180),
                the focal length is not positive, the look target coincides
                with the position, or the look direction is parallel to the
                global up vector.
        """
        if self.image_width <= 0 or self.image_height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.image_width}x{self.image_height}"
            )
        if self.image_width > MAX_IMAGE_WIDTH or self.image_height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.image_width}x{self.image_height}) exceed maximum "
                f"supported ({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if not 0.0 < self.fov_y < 180.0:
            raise ValueError(f"Vertical field of view must be in (0, 180) degrees, got {self.fov_y}")
        if self.focal_length <= 0.0:
            raise ValueError(f"Focal length must be positive, got {self.focal_length}")

        look = np.array(self.look_target, dtype=np.float64) - np.array(
            self.position, dtype=np.float64
        )
        look_len = np.linalg.norm(look)
        if look_len == 0.0:
            raise ValueError(f"Look target {self.look_target} coincides with camera position")

        up = np.array(self.global_up, dtype=np.float64)
        up_len = np.linalg.norm(up)
        if up_len == 0.0:
            raise ValueError("Global up vector must be non-zero")

        side = np.cross(look / look_len, up / up_len)
        if np.linalg.norm(side) < PARALLEL_TOLERANCE:
            raise ValueError(
                f"Look direction {tuple(look / look_len)} is parallel to global up "
                f"{self.global_up}; the camera orientation is undefined"
            )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_ready = ti.field(dtype=ti.i32, shape=())

# Camera origin (position)
_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_look = ti.Vector.field(3, dtype=ti.f32, shape=())  # Forward

# Viewport geometry
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_width = ti.field(dtype=ti.f32, shape=())  # Viewport width / image width
_pixel_height = ti.field(dtype=ti.f32, shape=())  # Viewport height / image height


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: Camera) -> None:
    """Validate the camera and upload its basis and viewport to Taichi fields.

    This must be called before rendering.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the camera configuration is invalid (see Camera.validate).
    """
    camera.validate()

    viewport_height = 2.0 * camera.focal_length * math.tan(math.radians(camera.fov_y) / 2.0)
    viewport_width = viewport_height * camera.aspect_ratio

    position = np.array(camera.position, dtype=np.float64)
    look = np.array(camera.look_target, dtype=np.float64) - position
    look = look / np.linalg.norm(look)
    up = np.array(camera.global_up, dtype=np.float64)

    u = np.cross(look, up)
    u = u / np.linalg.norm(u)
    v = np.cross(u, look)
    v = v / np.linalg.norm(v)

    lower_left = (
        position
        + look * camera.focal_length
        - u * (viewport_width / 2.0)
        - v * (viewport_height / 2.0)
    )

    _camera_origin[None] = position.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_look[None] = look.tolist()
    _lower_left_corner[None] = lower_left.tolist()
    _pixel_width[None] = viewport_width / camera.image_width
    _pixel_height[None] = viewport_height / camera.image_height
    _camera_ready[None] = 1


def clear_camera() -> None:
    """Mark the camera as not configured."""
    _camera_ready[None] = 0


def is_camera_ready() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_ready[None])


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(pixel_x: ti.f32, pixel_y: ti.f32, offset_x: ti.f32, offset_y: ti.f32) -> Ray:
    """Generate a ray through a sample point of a pixel.

    Pixel (0, 0) is the lower-left pixel of the viewport. The offsets select
    the sample position inside the pixel, each in [0, 1).

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = bottom).
        offset_x: Horizontal sub-pixel offset.
        offset_y: Vertical sub-pixel offset.

    Returns:
        A Ray with origin at the camera position and unit direction toward
        the sample point on the viewport.
    """
    s = (pixel_x + offset_x) * _pixel_width[None]
    t = (pixel_y + offset_y) * _pixel_height[None]
    sample = _lower_left_corner[None] + s * _camera_u[None] + t * _camera_v[None]

    origin = _camera_origin[None]
    return make_ray(origin, sample - origin)


@ti.func
def get_ray_centered(pixel_x: ti.i32, pixel_y: ti.i32) -> Ray:
    """Generate the ray through the center of a pixel."""
    return get_ray(ti.cast(pixel_x, ti.f32), ti.cast(pixel_y, ti.f32), 0.5, 0.5)


@ti.func
def get_ray_jittered(pixel_x: ti.i32, pixel_y: ti.i32) -> Ray:
    """Generate a ray through a uniformly random point of a pixel.

    Averaging many jittered rays per pixel produces anti-aliased edges.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = bottom).

    Returns:
        A Ray with a random sub-pixel offset in [0, 1)^2.
    """
    jitter_x = ti.random(ti.f32)
    jitter_y = ti.random(ti.f32)
    return get_ray(ti.cast(pixel_x, ti.f32), ti.cast(pixel_y, ti.f32), jitter_x, jitter_y)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position in world space."""
    return _camera_origin[None]


@ti.func
def get_camera_basis():
    """Get the camera's orthonormal basis vectors.

    Returns:
        A tuple (u, v, look) of right, up and forward directions.
    """
    return _camera_u[None], _camera_v[None], _camera_look[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, Any]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, u, v, look, lower_left (3-tuples) and
        pixel_width, pixel_height (viewport size of one pixel).
    """

    def _as_tuple(field: Any) -> tuple[float, float, float]:
        value = field[None]
        return (float(value[0]), float(value[1]), float(value[2]))

    return {
        "origin": _as_tuple(_camera_origin),
        "u": _as_tuple(_camera_u),
        "v": _as_tuple(_camera_v),
        "look": _as_tuple(_camera_look),
        "lower_left": _as_tuple(_lower_left_corner),
        "pixel_width": float(_pixel_width[None]),
        "pixel_height": float(_pixel_height[None]),
    }
