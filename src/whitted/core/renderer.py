"""Renderer object wrapping the Whitted integrator.

The WhittedRenderer class owns the image dimensions and tracer settings and
delegates to the module-level integrator buffers (which are Taichi fields).
It supports rendering in one pass or in batches of rows with progress
reporting, which is useful for large images.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.renderer import WhittedRenderer
    >>> from src.whitted.scene.loader import load_scene_file
    >>> from src.whitted.scene.manager import SceneManager
    >>>
    >>> SceneManager().load_description(load_scene_file("scene1.txt"))
    >>> renderer = WhittedRenderer(1000, 1000)
    >>> renderer.render()
    >>> renderer.save_image("render.png")
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from src.whitted.core.integrator import (
    TracerConfig,
    clear_render_target,
    configure_tracer,
    get_image_uint8,
    get_normalized_image_numpy,
    get_tracer_config,
    render_image,
    render_row_range,
    setup_render_target,
)
from src.whitted.core.integrator import save_image as _save_image

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class WhittedRenderer:
    """A deterministic one-ray-per-pixel renderer.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        config: The tracer settings applied by this renderer.
    """

    def __init__(self, width: int, height: int, config: TracerConfig | None = None) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            config: Tracer settings; defaults to TracerConfig().

        Raises:
            ValueError: If the dimensions or settings are invalid.
        """
        self._config = config if config is not None else TracerConfig()
        configure_tracer(self._config)
        self._width = width
        self._height = height
        self._rendered = False
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def config(self) -> TracerConfig:
        """Get the tracer settings."""
        return self._config

    @property
    def rendered(self) -> bool:
        """Whether a full image has been rendered since the last reset."""
        return self._rendered

    def set_config(self, config: TracerConfig) -> None:
        """Replace the tracer settings and clear the image.

        Raises:
            ValueError: If the settings are invalid.
        """
        configure_tracer(config)
        self._config = config
        self.reset()

    def reset(self) -> None:
        """Clear the image buffer without changing dimensions."""
        clear_render_target()
        self._rendered = False

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and clear it.

        Raises:
            ValueError: If dimensions exceed maximum supported size.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height
        self._rendered = False

    def _apply_config(self) -> None:
        # Another renderer (or a test) may have changed the shared settings
        if get_tracer_config() != self._config:
            configure_tracer(self._config)

    def render(
        self,
        callback: ProgressCallback | None = None,
        batch_size: int | None = None,
    ) -> None:
        """Render the whole image.

        Args:
            callback: Optional function called after each batch of rows with
                (rows_done, total_rows).
            batch_size: Rows per batch when a callback is given. Defaults to
                the full height (one batch).
        """
        if callback is None:
            self._apply_config()
            render_image()
            self._rendered = True
            return

        for done, total in self.render_rows(batch_size or self._height):
            callback(done, total)

    def render_rows(self, batch_size: int = 64) -> Generator[tuple[int, int], None, None]:
        """Render the image in batches of rows, yielding progress.

        Args:
            batch_size: Number of rows rendered per step.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self._apply_config()
        row = 0
        while row < self._height:
            end = min(row + batch_size, self._height)
            render_row_range(row, end)
            row = end
            yield (row, self._height)

        self._rendered = True

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the image as float32 (height, width, 3), top row first, in [0, 1]."""
        return get_normalized_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the image as uint8 (height, width, 3)."""
        return get_image_uint8()

    def save_image(self, filepath: str) -> None:
        """Save the rendered image to a file.

        Raises:
            OSError: If the file cannot be written.
        """
        _save_image(filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"WhittedRenderer(width={self.width}, height={self.height}, "
            f"max_depth={self._config.max_depth}, rendered={self._rendered})"
        )
