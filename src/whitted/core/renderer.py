"""Frame assembly for the Whitted tracer.

This module wraps the tracer kernels in a convenient interface that supports:
- Row-by-row rendering with progress callbacks
- A generator form for iterative processing
- Conversion of the radiance buffer to an 8-bit FrameBuffer

Each image row is rendered by one kernel launch, in which Taichi processes the
row's pixels in parallel. Image row 0 is the top of the frame and uses the
highest camera pixel row.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.renderer import render_frame
    >>> from whitted.scene.demo import create_demo_scene
    >>>
    >>> scene, camera, max_depth = create_demo_scene()
    >>> frame = render_frame(camera, max_depth=max_depth, antialias=False)
"""

import logging
import time
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from whitted.camera.pinhole import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, Camera, setup_camera
from whitted.core.config import RenderConfig
from whitted.core.framebuffer import FrameBuffer, quantize
from whitted.core.tracer import (
    apply_render_config,
    clear_radiance,
    get_radiance_numpy,
    get_render_config,
    render_row,
)

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the current scene into a FrameBuffer, one row at a time.

    The renderer owns the image size and render configuration; the scene and
    camera live in the module-level Taichi fields written by SceneManager and
    setup_camera().

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        config: Render constants uploaded to the tracer before every render.
    """

    def __init__(self, width: int, height: int, config: RenderConfig | None = None) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            config: Render constants; defaults to RenderConfig().

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum
                supported size.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({width}x{height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        self._width = width
        self._height = height
        self._config = config if config is not None else RenderConfig()
        self._rows_done = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def config(self) -> RenderConfig:
        """Get the render configuration."""
        return self._config

    @property
    def rows_done(self) -> int:
        """Number of rows completed by the current or last render."""
        return self._rows_done

    def render(
        self,
        max_depth: int = 1,
        antialias: bool = False,
        callback: ProgressCallback | None = None,
    ) -> FrameBuffer:
        """Render the full frame.

        Args:
            max_depth: Reflection depth budget (1 = no reflections; values
                below 1 behave like 1).
            antialias: Average config.aa_samples jittered rays per pixel.
            callback: Optional callback called after each row. Receives
                (rows_done, total_rows).

        Returns:
            The rendered FrameBuffer.

        Raises:
            RuntimeError: If the camera has not been set up.

        Example:
            >>> def progress(done, total):
            ...     print(f"Row: {done} / {total}")
            >>> frame = renderer.render(max_depth=3, callback=progress)
        """
        for rows_done, total_rows in self.render_rows(max_depth, antialias):
            if callback is not None:
                callback(rows_done, total_rows)
        return self.get_frame()

    def render_rows(
        self,
        max_depth: int = 1,
        antialias: bool = False,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the frame, yielding progress after each row.

        This is a generator-based alternative to render() with callbacks.

        Args:
            max_depth: Reflection depth budget.
            antialias: Average jittered rays per pixel.

        Yields:
            Tuple of (rows_done, total_rows).
        """
        apply_render_config(self._config)
        clear_radiance()
        self._rows_done = 0

        logger.info(
            "Rendering %dx%d, max_depth=%d, antialias=%s",
            self._width,
            self._height,
            max_depth,
            antialias,
        )
        start = time.perf_counter()

        for row in range(self._height):
            render_row(row, self._width, self._height, max_depth, antialias)
            self._rows_done = row + 1
            yield (self._rows_done, self._height)

        logger.info("Rendered %d rows in %.2fs", self._height, time.perf_counter() - start)

    def get_radiance_numpy(self) -> npt.NDArray[np.float32]:
        """Get the unclamped radiance of the last render.

        Returns:
            NumPy array of shape (height, width, 3), row 0 at the top.
        """
        return get_radiance_numpy(self._width, self._height)

    def get_frame(self) -> FrameBuffer:
        """Quantize the radiance buffer into an 8-bit FrameBuffer."""
        return FrameBuffer.from_array(quantize(self.get_radiance_numpy()))

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"rows_done={self.rows_done})"
        )


def render_frame(
    camera: Camera,
    max_depth: int = 1,
    antialias: bool = False,
    config: RenderConfig | None = None,
    progress: ProgressCallback | None = None,
) -> FrameBuffer:
    """Render the current scene as seen by a camera.

    Args:
        camera: The camera; validated and uploaded before rendering.
        max_depth: Reflection depth budget.
        antialias: Average jittered rays per pixel.
        config: Render constants; defaults to the active configuration.
        progress: Optional per-row progress callback.

    Returns:
        The rendered FrameBuffer of camera.image_width x camera.image_height.

    Raises:
        ValueError: If the camera is invalid.
    """
    setup_camera(camera)
    if config is None:
        config = get_render_config()
    renderer = Renderer(camera.image_width, camera.image_height, config)
    return renderer.render(max_depth=max_depth, antialias=antialias, callback=progress)
