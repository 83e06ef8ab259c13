"""Matplotlib-based preview display for rendered frames.

Features:
    - Preview window for a single frame
    - Side-by-side comparison of two frames with an amplified difference view

Matplotlib is imported lazily so that rendering and export never require a
display backend.

Example:
    >>> from whitted.preview.display import show_preview
    >>> frame = renderer.render(max_depth=3)
    >>> show_preview(frame, title="Demo scene")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from whitted.core.framebuffer import FrameBuffer


def frame_to_display(frame: FrameBuffer) -> npt.NDArray[np.float32]:
    """Convert a frame to a float (H, W, 3) array in [0, 1] for imshow."""
    return frame.as_array().astype(np.float32) / 255.0


def difference_image(
    frame_a: FrameBuffer,
    frame_b: FrameBuffer,
    diff_scale: float = 10.0,
) -> tuple[npt.NDArray[np.float32], float]:
    """Compute an amplified absolute difference image and the RMSE.

    Args:
        frame_a: First frame.
        frame_b: Second frame (same size).
        diff_scale: Amplification factor for the difference view.

    Returns:
        Tuple of (difference image in [0, 1], RMSE in [0, 1] display units).

    Raises:
        ValueError: If the frames differ in size.
    """
    a = frame_to_display(frame_a).astype(np.float64)
    b = frame_to_display(frame_b).astype(np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Frame shapes must match: {a.shape} vs {b.shape}")

    diff = a - b
    rmse = float(np.sqrt(np.mean(diff**2)))
    amplified = np.clip(np.abs(diff) * diff_scale, 0.0, 1.0)
    return amplified.astype(np.float32), rmse


def show_preview(
    frame: FrameBuffer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a frame as a Matplotlib figure.

    Args:
        frame: The rendered frame.
        title: Custom title (default shows the frame size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(frame_to_display(frame))
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render Preview - {frame.width}x{frame.height}")

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    frame_a: FrameBuffer,
    frame_b: FrameBuffer,
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display side-by-side comparison of two frames with difference view.

    Args:
        frame_a: First frame.
        frame_b: Second frame.
        labels: Labels for the two frames.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until the figure is closed.

    Returns:
        RMSE between the two frames in [0, 1] display units.
    """
    import matplotlib.pyplot as plt

    diff, rmse = difference_image(frame_a, frame_b, diff_scale)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(frame_to_display(frame_a))
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(frame_to_display(frame_b))
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
