"""Camera module for view and ray generation.

Components:
    pinhole: Pinhole (perspective) camera with look-at positioning

Camera responsibilities:
    - Validate the viewing parameters before any ray is generated
    - Transform pixel coordinates (plus a sub-pixel offset) to world-space rays
    - Provide centred samples, or jittered samples for anti-aliasing

Pixel coordinates run left to right (x) and bottom to top (y) across the
viewport; frame assembly flips rows so that image row 0 is the top.
"""

from .pinhole import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    Camera,
    clear_camera,
    get_camera_basis,
    get_camera_info,
    get_camera_origin,
    get_ray,
    get_ray_centered,
    get_ray_jittered,
    is_camera_ready,
    setup_camera,
)

__all__ = [
    "Camera",
    "setup_camera",
    "clear_camera",
    "is_camera_ready",
    "get_ray",
    "get_ray_centered",
    "get_ray_jittered",
    "get_camera_origin",
    "get_camera_basis",
    "get_camera_info",
    "MAX_IMAGE_WIDTH",
    "MAX_IMAGE_HEIGHT",
]
