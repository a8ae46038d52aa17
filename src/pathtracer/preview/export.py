"""Image export utilities for rendered images.

Rendered images are already display-ready 8-bit RGB (gamma corrected and
quantized by the render kernel), so export only validates the buffer and
hands it to Pillow.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from pathtracer.preview.export import save_png
    >>> from pathtracer.core.renderer import Renderer
    >>>
    >>> renderer = Renderer()
    >>> renderer.render()
    >>> save_png(renderer, "render.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from pathtracer.core.renderer import Renderer

logger = logging.getLogger(__name__)


def save_png(renderer: Renderer, filepath: str | Path) -> None:
    """Save the rendered image as a PNG file.

    Args:
        renderer: The Renderer instance to save. Must have rendered.
        filepath: Output file path (should end in .png).

    Raises:
        RuntimeError: If the renderer has not rendered yet.
        OSError: If the file cannot be written.
    """
    save_png_from_array(renderer.get_image_numpy(), filepath)


def save_png_from_array(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB array as a PNG file.

    Args:
        image: Image array of shape (H, W, 3) with dtype uint8, row 0 at the top.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array is not an (H, W, 3) uint8 image.
        OSError: If the file cannot be written.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 image, got dtype {image.dtype}")

    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    pil_image.save(filepath, format="PNG")
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
