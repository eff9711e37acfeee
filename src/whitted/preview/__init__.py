"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview window
    export: 8-bit PNG export via Pillow

Example:
    >>> from src.whitted.preview import show_preview, save_png
    >>> renderer = WhittedRenderer(512, 512)
    >>> renderer.render()
    >>> show_preview(renderer)
    >>> save_png(renderer, "render.png")
"""

from src.whitted.preview.display import show_preview
from src.whitted.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    "show_preview",
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
