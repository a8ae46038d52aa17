"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- PNG export from arrays and from a renderer
- Export validation
- RMSE computation
- Matplotlib preview on a non-interactive backend
"""

import numpy as np
import pytest
from PIL import Image as PILImage


class TestSavePng:
    """Test PNG export."""

    def test_save_png_from_array(self, tmp_path):
        """Test an array is written losslessly with row 0 at the top."""
        from pathtracer.preview.export import save_png_from_array

        image = np.zeros((4, 6, 3), dtype=np.uint8)
        image[0, :, :] = [255, 0, 0]
        image[-1, :, :] = [0, 0, 255]
        filepath = tmp_path / "test.png"

        save_png_from_array(image, filepath)

        with PILImage.open(filepath) as img:
            assert img.format == "PNG"
            assert img.mode == "RGB"
            assert img.size == (6, 4)
            loaded = np.array(img)
        assert np.array_equal(loaded, image)

    @pytest.mark.parametrize(
        "image",
        [
            np.zeros((4, 6), dtype=np.uint8),
            np.zeros((4, 6, 4), dtype=np.uint8),
            np.zeros((4, 6, 3), dtype=np.float32),
        ],
    )
    def test_invalid_arrays_rejected(self, image, tmp_path):
        """Test non-RGB or non-uint8 arrays raise ValueError."""
        from pathtracer.preview.export import save_png_from_array

        filepath = tmp_path / "bad.png"
        with pytest.raises(ValueError):
            save_png_from_array(image, filepath)
        assert not filepath.exists()

    def test_save_png_from_renderer(self, tmp_path):
        """Test a rendered image is written at the render resolution."""
        from pathtracer.camera.camera import Camera, setup_camera
        from pathtracer.core.renderer import Renderer, RenderSettings
        from pathtracer.preview.export import save_png

        setup_camera(Camera())
        renderer = Renderer(RenderSettings(image_width=16, samples_per_pixel=1, max_depth=2))
        renderer.render()

        filepath = tmp_path / "render.png"
        save_png(renderer, filepath)

        with PILImage.open(filepath) as img:
            assert img.size == (16, 9)
            loaded = np.array(img)
        assert np.array_equal(loaded, renderer.get_image_numpy())

    def test_save_png_before_render_raises(self, tmp_path):
        """Test exporting an unrendered image raises RuntimeError."""
        from pathtracer.core.renderer import Renderer
        from pathtracer.preview.export import save_png

        with pytest.raises(RuntimeError):
            save_png(Renderer(), tmp_path / "render.png")


class TestComputeRMSE:
    """Test RMSE computation."""

    def test_rmse_identical_images(self):
        """Test that identical images have RMSE of 0."""
        from pathtracer.preview.export import compute_rmse

        image = np.full((10, 10, 3), 128, dtype=np.uint8)
        assert compute_rmse(image, image) == 0.0

    def test_rmse_different_images(self):
        """Test RMSE of uniformly offset images equals the offset."""
        from pathtracer.preview.export import compute_rmse

        image_a = np.zeros((10, 10, 3), dtype=np.uint8)
        image_b = np.full((10, 10, 3), 10, dtype=np.uint8)
        # No uint8 wraparound
        assert compute_rmse(image_a, image_b) == pytest.approx(10.0)
        assert compute_rmse(image_b, image_a) == pytest.approx(10.0)

    def test_rmse_shape_mismatch_raises(self):
        """Test that mismatched shapes raise ValueError."""
        from pathtracer.preview.export import compute_rmse

        with pytest.raises(ValueError, match="shapes must match"):
            compute_rmse(np.zeros((10, 10, 3)), np.zeros((5, 5, 3)))


class TestShowPreview:
    """Test the Matplotlib preview."""

    def test_show_preview_non_blocking(self):
        """Test the preview draws the image with the default title."""
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from pathtracer.camera.camera import Camera, setup_camera
        from pathtracer.core.renderer import Renderer, RenderSettings
        from pathtracer.preview.display import show_preview

        setup_camera(Camera())
        renderer = Renderer(RenderSettings(image_width=16, samples_per_pixel=3, max_depth=2))
        renderer.render()

        show_preview(renderer, block=False)
        try:
            ax = plt.gcf().axes[0]
            assert ax.get_title() == "Render Preview - 16x9, 3 SPP"
            assert ax.images[0].get_array().shape == (9, 16, 3)
        finally:
            plt.close("all")


class TestModuleExports:
    """Test the package exports."""

    def test_preview_exports(self):
        """Test that the preview package exports the public functions."""
        from pathtracer import preview

        assert callable(preview.show_preview)
        assert callable(preview.save_png)
        assert callable(preview.save_png_from_array)
        assert callable(preview.compute_rmse)
