"""Unit tests for the preview module.

Tests cover:
- Float to uint8 conversion
- PNG export from arrays and from a FrameRenderer
- RMSE computation
- Matplotlib preview and comparison figures (non-interactive backend)
- Module exports
"""

import os
import tempfile

import matplotlib
import numpy as np
import pytest
from PIL import Image as PILImage

matplotlib.use("Agg")


class TestImageToUint8:
    """Test float to 8-bit conversion."""

    def test_image_to_uint8_output_type(self):
        from meshtracer.preview.export import image_to_uint8

        image = np.random.default_rng(0).random((4, 4, 3)).astype(np.float32)
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        assert result.shape == (4, 4, 3)

    def test_image_to_uint8_black_and_white(self):
        from meshtracer.preview.export import image_to_uint8

        image = np.zeros((2, 2, 3), dtype=np.float32)
        image[1] = 1.0
        result = image_to_uint8(image)
        assert np.all(result[0] == 0)
        assert np.all(result[1] == 255)

    def test_image_to_uint8_clamps(self):
        from meshtracer.preview.export import image_to_uint8

        image = np.array([[[-0.5, 1.5, 0.5]]], dtype=np.float32)
        assert tuple(image_to_uint8(image)[0, 0]) == (0, 255, 128)

    def test_texel_values_round_trip_exactly(self):
        """Test every byte read as c / 255 in float32 is written back as c."""
        from meshtracer.preview.export import image_to_uint8

        values = np.arange(256, dtype=np.float32) / np.float32(255.0)
        image = np.repeat(values[None, :, None], 3, axis=2)
        np.testing.assert_array_equal(image_to_uint8(image)[0, :, 0], np.arange(256))


class TestSavePngFromArray:
    """Test PNG export from NumPy array."""

    def test_save_png_from_array(self):
        from meshtracer.preview.export import save_png_from_array

        image = np.zeros((5, 7, 3), dtype=np.float32)
        image[0, 0] = (1.0, 0.0, 0.0)

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            filepath = f.name

        try:
            save_png_from_array(image, filepath)

            assert os.path.exists(filepath)
            with PILImage.open(filepath) as img:
                assert img.size == (7, 5)
                assert img.mode == "RGB"
                assert img.getpixel((0, 0)) == (255, 0, 0)
        finally:
            if os.path.exists(filepath):
                os.remove(filepath)

    @pytest.mark.parametrize("shape", [(4, 4), (4, 4, 4)])
    def test_save_png_from_array_rejects_bad_shape(self, shape, tmp_path):
        from meshtracer.preview.export import save_png_from_array

        with pytest.raises(ValueError, match="shape"):
            save_png_from_array(np.zeros(shape, dtype=np.float32), tmp_path / "bad.png")


class TestSavePng:
    """Test PNG export from a renderer."""

    def test_save_png_creates_file(self, tmp_path):
        from meshtracer.camera.pinhole import PinholeCamera, setup_camera
        from meshtracer.core.frame import FrameRenderer
        from meshtracer.preview.export import save_png

        setup_camera(PinholeCamera())
        renderer = FrameRenderer(12, 8)
        renderer.render()

        filepath = tmp_path / "frame.png"
        save_png(renderer, filepath)

        with PILImage.open(filepath) as img:
            assert img.size == (12, 8)
            assert img.mode == "RGB"


class TestComputeRmse:
    """Test RMSE computation."""

    def test_rmse_identical_images(self):
        from meshtracer.preview.export import compute_rmse

        image = np.random.default_rng(1).random((8, 8, 3))
        assert compute_rmse(image, image) == 0.0

    def test_rmse_different_images(self):
        from meshtracer.preview.export import compute_rmse

        image_a = np.zeros((4, 4, 3))
        image_b = np.full((4, 4, 3), 0.5)
        assert abs(compute_rmse(image_a, image_b) - 0.5) < 1e-12

    def test_rmse_shape_mismatch_raises(self):
        from meshtracer.preview.export import compute_rmse

        with pytest.raises(ValueError, match="shapes must match"):
            compute_rmse(np.zeros((4, 4, 3)), np.zeros((4, 5, 3)))


class TestDisplay:
    """Test Matplotlib figures without opening a window."""

    def test_show_preview(self, monkeypatch):
        import matplotlib.pyplot as plt

        from meshtracer.camera.pinhole import PinholeCamera, setup_camera
        from meshtracer.core.frame import FrameRenderer
        from meshtracer.preview.display import show_preview

        shown = []
        monkeypatch.setattr(plt, "show", lambda block=True: shown.append(block))

        setup_camera(PinholeCamera())
        renderer = FrameRenderer(8, 6)
        renderer.render()
        show_preview(renderer, block=False)

        assert shown == [False]
        title = plt.gcf().axes[0].get_title()
        assert title == "Render Preview - 8x6 (6/6 rows)"
        plt.close("all")

    def test_show_comparison_returns_rmse(self, monkeypatch):
        import matplotlib.pyplot as plt

        from meshtracer.preview.display import show_comparison

        monkeypatch.setattr(plt, "show", lambda block=True: None)

        image_a = np.zeros((4, 4, 3), dtype=np.float32)
        image_b = np.full((4, 4, 3), 0.25, dtype=np.float32)
        rmse = show_comparison(image_a, image_b, labels=("left", "right"), block=False)

        assert abs(rmse - 0.25) < 1e-6
        assert len(plt.gcf().axes) == 3
        plt.close("all")


class TestModuleExports:
    """Test that all expected symbols are exported from the module."""

    def test_preview_exports(self):
        from meshtracer.preview import (
            compute_rmse,
            image_to_uint8,
            save_png,
            save_png_from_array,
            show_comparison,
            show_preview,
        )

        assert callable(show_preview)
        assert callable(show_comparison)
        assert callable(save_png)
        assert callable(save_png_from_array)
        assert callable(image_to_uint8)
        assert callable(compute_rmse)
