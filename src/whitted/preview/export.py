"""Image export utilities for rendered images.

Rendered colors are already clamped to [0, 1]; export scales them by 255
and truncates to 8 bits. No tone mapping or gamma correction is applied.

Example:
    >>> from src.whitted.preview.export import save_png
    >>> from src.whitted.core.renderer import WhittedRenderer
    >>>
    >>> renderer = WhittedRenderer(512, 512)
    >>> renderer.render()
    >>> save_png(renderer, "render.png")
    True
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from src.whitted.core.renderer import WhittedRenderer

logger = logging.getLogger(__name__)


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8.

    Values are clamped first; each channel becomes int(c * 255).

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    clipped = np.clip(np.asarray(image, dtype=np.float32), 0.0, 1.0)
    return (clipped * 255.0).astype(np.uint8)


def save_png_from_array(image: npt.NDArray[np.floating], filepath: str | Path) -> bool:
    """Save a float image as an 8-bit RGB PNG.

    Args:
        image: Image array of shape (H, W, 3) with values in [0, 1].
        filepath: Output file path.

    Returns:
        True on success, False if the image could not be written.
    """
    try:
        pil_image = PILImage.fromarray(image_to_uint8(image))
        pil_image.save(filepath, format="PNG")
    except (OSError, ValueError) as e:
        logger.error("Failed to write image %s: %s", filepath, e)
        return False

    logger.info("Wrote %s (%dx%d)", filepath, image.shape[1], image.shape[0])
    return True


def save_png(renderer: WhittedRenderer, filepath: str | Path) -> bool:
    """Save the renderer's current image as a PNG file.

    Returns:
        True on success, False if the image could not be written.
    """
    return save_png_from_array(renderer.get_image_numpy(), filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
