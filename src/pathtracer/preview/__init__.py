"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG image export utilities

Example:
    >>> from pathtracer.preview import show_preview, save_png
    >>> from pathtracer.core.renderer import Renderer
    >>>
    >>> renderer = Renderer()
    >>> renderer.render()
    >>> show_preview(renderer)
    >>> save_png(renderer, "render.png")
"""

from pathtracer.preview.display import show_preview
from pathtracer.preview.export import (
    compute_rmse,
    save_png,
    save_png_from_array,
)

__all__ = [
    "show_preview",
    "save_png",
    "save_png_from_array",
    "compute_rmse",
]
