"""Render driver: turns the current scene and camera into an 8-bit image.

Every pixel is an independent task. For each sample the pixel's image
coordinate is jittered within its footprint, a camera ray is traced with
``ray_color`` and the result accumulated. The sum is then averaged, gamma
corrected and converted to display values, and written once to the image
buffer at the vertically flipped row (buffer row 0 is the top of the
image, world +y is up).

Each pixel owns a random stream seeded from (seed, x, y), so a given seed
produces the same image however Taichi schedules the pixel tasks and
however the rows are batched.

Rows are rendered in bands of ``rows_per_batch`` so progress can be
reported between kernel launches.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.camera.camera import Camera, setup_camera
    >>> from pathtracer.core.renderer import Renderer, RenderSettings
    >>> from pathtracer.scene.default import create_default_scene
    >>>
    >>> scene = create_default_scene()
    >>> settings = RenderSettings(image_width=320, samples_per_pixel=8)
    >>> setup_camera(Camera(aspect_ratio=settings.aspect_ratio))
    >>> renderer = Renderer(settings)
    >>> renderer.render()
    >>> renderer.save_image("render.png")
"""

import hashlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.camera.camera import get_ray
from pathtracer.core.color import desample, gamma_correct, to_display
from pathtracer.core.integrator import MAX_DEPTH, ray_color
from pathtracer.core.rng import next_float, seed_rng

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# =============================================================================
# Render Settings
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048


@dataclass
class RenderSettings:
    """Values consumed by the render driver. Fixed for a render run.

    Attributes:
        image_width: Image width in pixels.
        aspect_ratio: Width divided by height. The height is derived by
            truncating image_width / aspect_ratio.
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Maximum number of surface interactions per camera ray.
        seed: Seed for the per-pixel random streams.
        rows_per_batch: Number of rows rendered per kernel launch.
    """

    image_width: int = 640
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 16
    max_depth: int = MAX_DEPTH
    seed: int = 0
    rows_per_batch: int = 16

    def __post_init__(self) -> None:
        if self.image_width <= 0:
            raise ValueError(f"Image width must be positive, got {self.image_width}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"Samples per pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"Max depth must not be negative, got {self.max_depth}")
        if self.rows_per_batch <= 0:
            raise ValueError(f"Rows per batch must be positive, got {self.rows_per_batch}")
        if self.seed < 0 or self.seed > 0xFFFFFFFF:
            raise ValueError(f"Seed must fit in 32 unsigned bits, got {self.seed}")

        height = self.image_height
        if height <= 0:
            raise ValueError(
                f"Image height derived from width {self.image_width} and aspect ratio "
                f"{self.aspect_ratio} is {height}; it must be positive"
            )
        if self.image_width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.image_width}x{height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )

    @property
    def image_height(self) -> int:
        """Image height in pixels, truncated from width / aspect ratio."""
        return int(self.image_width / self.aspect_ratio)


# =============================================================================
# Image Buffer
# =============================================================================

# 8-bit RGB image indexed (x, y) with y growing downward
_image = ti.Vector.field(3, dtype=ti.u8, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))


@ti.kernel
def _render_rows(
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
):
    """Render rows [row_start, row_end) counted from the bottom of the image."""
    for j, i in ti.ndrange((row_start, row_end), width):
        rng = seed_rng(seed, i, j)
        color = vec3(0.0, 0.0, 0.0)

        for _ in range(samples):
            jitter_u, rng = next_float(rng)
            jitter_v, rng = next_float(rng)
            u = (ti.cast(i, ti.f32) + jitter_u) / ti.cast(width, ti.f32)
            v = (ti.cast(j, ti.f32) + jitter_v) / ti.cast(height, ti.f32)

            ray = get_ray(u, v)
            sample_color, rng = ray_color(ray, max_depth, rng)
            color += sample_color

        display = to_display(gamma_correct(desample(color, samples)))
        _image[i, height - 1 - j] = ti.cast(display, ti.u8)


# =============================================================================
# Renderer
# =============================================================================


class Renderer:
    """Drives the per-pixel render kernel over the whole image.

    The scene and camera must be set up before calling render(); both are
    read-only while the kernel runs.

    Attributes:
        settings: The render settings for this run.
        render_seconds: Wall-clock duration of the last render, or None.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        """Initialize the renderer.

        Args:
            settings: Render settings. Defaults to RenderSettings().
        """
        self.settings = settings if settings is not None else RenderSettings()
        self.render_seconds: float | None = None
        self._rendered = False

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.settings.image_width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.settings.image_height

    def render(self, callback: ProgressCallback | None = None) -> None:
        """Render the full image.

        Args:
            callback: Optional callback function called after each row band.
                Receives (rows_done, total_rows).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(callback=progress)
        """
        settings = self.settings
        width, height = self.width, self.height

        logger.info(
            "Rendering %dx%d at %d samples per pixel (max depth %d, seed %d)",
            width,
            height,
            settings.samples_per_pixel,
            settings.max_depth,
            settings.seed,
        )
        start_time = time.perf_counter()

        rows_done = 0
        while rows_done < height:
            row_end = min(rows_done + settings.rows_per_batch, height)
            logger.debug("Rendering line %d/%d", rows_done, height)
            _render_rows(
                rows_done,
                row_end,
                width,
                height,
                settings.samples_per_pixel,
                settings.max_depth,
                settings.seed,
            )
            rows_done = row_end

            if callback is not None:
                callback(rows_done, height)

        # Kernel launches are asynchronous on GPU backends
        ti.sync()
        self.render_seconds = time.perf_counter() - start_time
        self._rendered = True
        logger.info("Rendering time: %.3fs", self.render_seconds)

    def get_image_numpy(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as a NumPy array.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8, row 0
            at the top of the image.

        Raises:
            RuntimeError: If render() has not completed.
        """
        if not self._rendered:
            raise RuntimeError("Nothing rendered yet. Call render() first.")

        full_image = _image.to_numpy()
        image = full_image[: self.width, : self.height, :]

        # Transpose from (width, height, 3) to (height, width, 3) for standard image format
        return np.ascontiguousarray(np.transpose(image, (1, 0, 2)))

    def checksum(self) -> str:
        """SHA-256 hex digest of the rendered image."""
        return image_checksum(self.get_image_numpy())

    def save_image(self, filepath: str) -> None:
        """Save the rendered image to a PNG file.

        Args:
            filepath: Path to save the image (e.g., "render.png").
        """
        from pathtracer.preview.export import save_png_from_array

        save_png_from_array(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.settings.samples_per_pixel}, rendered={self._rendered})"
        )


def image_checksum(image: npt.NDArray[np.uint8]) -> str:
    """Compute the SHA-256 hex digest of an 8-bit image.

    The digest covers the shape and the pixel bytes in row-major order, so
    two images match only if every channel of every pixel matches.
    """
    image = np.ascontiguousarray(image, dtype=np.uint8)
    digest = hashlib.sha256()
    digest.update(repr(image.shape).encode("ascii"))
    digest.update(image.tobytes())
    return digest.hexdigest()
