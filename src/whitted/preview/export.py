"""Image export utilities for rendered frames.

This module converts FrameBuffers to and from Pillow images and writes them
as 8-bit RGB PNG files. Frames are already clamped and quantized, so no tone
mapping or gamma correction is applied on export.

Example:
    >>> from whitted.preview.export import save_png
    >>> from whitted.core.renderer import render_frame
    >>>
    >>> frame = render_frame(camera, max_depth=3)
    >>> save_png(frame, "scene.png")
"""

from __future__ import annotations

import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from whitted.core.framebuffer import FrameBuffer, quantize

logger = logging.getLogger(__name__)


def frame_to_image(frame: FrameBuffer) -> PILImage.Image:
    """Wrap a FrameBuffer as an RGB Pillow image (row 0 at the top)."""
    return PILImage.fromarray(frame.as_array())


def frame_from_image(image: PILImage.Image) -> FrameBuffer:
    """Convert a Pillow image to a FrameBuffer, dropping any alpha channel."""
    return FrameBuffer.from_array(np.asarray(image.convert("RGB"), dtype=np.uint8))


def frame_from_radiance(radiance: npt.NDArray[np.floating]) -> FrameBuffer:
    """Quantize an (H, W, 3) linear radiance array into a FrameBuffer."""
    return FrameBuffer.from_array(quantize(radiance))


def save_png(frame: FrameBuffer, filepath: str | os.PathLike[str]) -> None:
    """Save a frame as a PNG file.

    Args:
        frame: The rendered frame.
        filepath: Output file path (should end in .png).

    Raises:
        OSError: If the file cannot be written.
    """
    frame_to_image(frame).save(filepath, format="PNG")
    logger.info("Saved %dx%d image to %s", frame.width, frame.height, filepath)


def load_png(filepath: str | os.PathLike[str]) -> FrameBuffer:
    """Read an image file into a FrameBuffer.

    Raises:
        OSError: If the file cannot be read or decoded.
    """
    with PILImage.open(filepath) as image:
        return frame_from_image(image)


def compute_rmse(
    image_a: FrameBuffer | npt.NDArray[np.number],
    image_b: FrameBuffer | npt.NDArray[np.number],
) -> float:
    """Compute root mean squared error between two images.

    FrameBuffers are compared in 8-bit units; arrays in their own units.

    Args:
        image_a: First frame or image array.
        image_b: Second frame or image array (must have the same shape).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    a = image_a.as_array() if isinstance(image_a, FrameBuffer) else image_a
    b = image_b.as_array() if isinstance(image_b, FrameBuffer) else image_b

    if a.shape != b.shape:
        raise ValueError(f"Image shapes must match: {a.shape} vs {b.shape}")

    diff = a.astype(np.float64) - b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
