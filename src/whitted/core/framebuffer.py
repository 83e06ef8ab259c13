"""Output raster for rendered frames.

A FrameBuffer is a contiguous, row-major buffer of 8-bit RGB samples. Row 0
is the top of the image. Pixel (x, y) lives at linear index (y * width + x) * 3.

Example:
    >>> from whitted.core.framebuffer import FrameBuffer
    >>> frame = FrameBuffer.allocate(4, 2)
    >>> frame.set_color(1, 0, (1.0, 0.5, 2.0))
    >>> frame.get_pixel(1, 0)
    (255, 127, 255)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt


def to_char(c: float) -> int:
    """Convert a colour channel from [0, 1] to [0, 255].

    Values outside [0, 1] are clamped first; the scaled value is truncated.

    Args:
        c: Linear colour channel value (may be out of range).

    Returns:
        The 8-bit channel value.
    """
    c = min(max(c, 0.0), 1.0)
    return int(c * 255)


def quantize(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Clamp a float image to [0, 1], scale by 255 and truncate to uint8."""
    return (np.clip(image, 0.0, 1.0) * 255).astype(np.uint8)


@dataclass
class FrameBuffer:
    """Row-major 3-channel 8-bit raster.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        data: Flat uint8 array of length width * height * 3.
    """

    width: int
    height: int
    data: npt.NDArray[np.uint8]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Frame dimensions must be positive, got {self.width}x{self.height}"
            )
        expected = self.width * self.height * 3
        if self.data.shape != (expected,):
            raise ValueError(
                f"Frame data must be a flat array of {expected} samples, "
                f"got shape {self.data.shape}"
            )

    @classmethod
    def allocate(cls, width: int, height: int) -> FrameBuffer:
        """Create a black frame of the given size."""
        return cls(width, height, np.zeros(width * height * 3, dtype=np.uint8))

    @classmethod
    def from_array(cls, image: npt.NDArray[np.uint8]) -> FrameBuffer:
        """Wrap an (H, W, 3) uint8 array as a frame (copying it)."""
        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError(f"Expected an (H, W, 3) array, got shape {image.shape}")
        height, width = image.shape[:2]
        data = np.ascontiguousarray(image, dtype=np.uint8).reshape(-1).copy()
        return cls(width, height, data)

    def index(self, x: int, y: int) -> int:
        """Linear index of the red sample of pixel (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return (y * self.width + x) * 3

    def set_color(self, x: int, y: int, color: tuple[float, float, float]) -> None:
        """Store a linear colour at pixel (x, y), clamped and quantized."""
        i = self.index(x, y)
        self.data[i] = to_char(color[0])
        self.data[i + 1] = to_char(color[1])
        self.data[i + 2] = to_char(color[2])

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """Read the 8-bit RGB value at pixel (x, y)."""
        i = self.index(x, y)
        return int(self.data[i]), int(self.data[i + 1]), int(self.data[i + 2])

    def as_array(self) -> npt.NDArray[np.uint8]:
        """View the samples as an (H, W, 3) array (no copy)."""
        return self.data.reshape(self.height, self.width, 3)

    def __repr__(self) -> str:
        return f"FrameBuffer(width={self.width}, height={self.height})"
