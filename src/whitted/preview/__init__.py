"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview and comparison windows
    export: PNG export and FrameBuffer/Pillow conversion

Example:
    >>> from whitted.preview import show_preview, save_png
    >>> frame = renderer.render(max_depth=3)
    >>> save_png(frame, "scene.png")
    >>> show_preview(frame)
"""

from whitted.preview.display import (
    difference_image,
    frame_to_display,
    show_comparison,
    show_preview,
)
from whitted.preview.export import (
    compute_rmse,
    frame_from_image,
    frame_from_radiance,
    frame_to_image,
    load_png,
    save_png,
)

__all__ = [
    # Display functions
    "show_preview",
    "show_comparison",
    "frame_to_display",
    "difference_image",
    # Export functions
    "save_png",
    "load_png",
    "frame_to_image",
    "frame_from_image",
    "frame_from_radiance",
    "compute_rmse",
]
