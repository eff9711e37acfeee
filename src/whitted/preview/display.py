"""Matplotlib-based preview display for rendered images.

Example:
    >>> from src.whitted.preview.display import show_preview
    >>> renderer = WhittedRenderer(512, 512)
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.whitted.core.renderer import WhittedRenderer


def show_preview(
    renderer: WhittedRenderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the current render as a Matplotlib figure.

    Args:
        renderer: The renderer whose image is shown.
        title: Custom title (default shows the image size and depth limit).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    image = renderer.get_image_numpy()

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image)
    ax.axis("off")

    if title is None:
        title = (
            f"Render Preview - {renderer.width}x{renderer.height}, "
            f"max depth {renderer.config.max_depth}"
        )
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
