"""Matplotlib-based preview display for rendered images.

Example:
    >>> from pathtracer.preview.display import show_preview
    >>> from pathtracer.core.renderer import Renderer
    >>>
    >>> renderer = Renderer()
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathtracer.core.renderer import Renderer


def show_preview(
    renderer: Renderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display the rendered image as a Matplotlib figure.

    Args:
        renderer: The Renderer instance to display. Must have rendered.
        title: Custom title (default shows resolution and sample count).
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
            f"{renderer.settings.samples_per_pixel} SPP"
        )
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
