"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- 8-bit conversion (clamp and truncate, no gamma)
- PNG export
- RMSE computation
- Matplotlib preview on a non-interactive backend
"""

import logging
import os
import tempfile

import numpy as np
import pytest
from PIL import Image as PILImage


def _setup_simple_scene():
    """Helper to set up a simple test scene."""
    from src.whitted.materials.material import Material
    from src.whitted.scene.manager import SceneManager

    scene = SceneManager()
    scene.set_ambient((1.0, 1.0, 1.0))
    mat_id = scene.add_material(Material(ambient=(0.2, 0.4, 0.6)))
    scene.add_sphere((0, 0, -3), 1.0, mat_id)


class TestImageToUint8:
    """Test float to 8-bit conversion."""

    def test_image_to_uint8_output_type(self):
        """Test that output is uint8 with the same shape."""
        from src.whitted.preview.export import image_to_uint8

        image = np.random.rand(10, 10, 3).astype(np.float32)
        result = image_to_uint8(image)

        assert result.dtype == np.uint8
        assert result.shape == (10, 10, 3)

    def test_image_to_uint8_black_and_white(self):
        """Test that black maps to 0 and white to 255."""
        from src.whitted.preview.export import image_to_uint8

        assert np.all(image_to_uint8(np.zeros((2, 2, 3))) == 0)
        assert np.all(image_to_uint8(np.ones((2, 2, 3))) == 255)

    def test_image_to_uint8_truncates(self):
        """Test that values are truncated, not rounded, and no gamma is applied."""
        from src.whitted.preview.export import image_to_uint8

        image = np.full((1, 1, 3), 0.5, dtype=np.float32)
        assert np.all(image_to_uint8(image) == 127)

    def test_image_to_uint8_clamps(self):
        """Test that out-of-range values are clamped."""
        from src.whitted.preview.export import image_to_uint8

        image = np.array([[[-1.0, 2.0, 0.0]]], dtype=np.float32)
        assert tuple(image_to_uint8(image)[0, 0]) == (0, 255, 0)


class TestSavePng:
    """Test PNG export from a renderer."""

    def test_save_png_creates_file(self):
        """Test that save_png creates a valid PNG file."""
        from src.whitted.core.renderer import WhittedRenderer
        from src.whitted.preview.export import save_png

        _setup_simple_scene()

        renderer = WhittedRenderer(32, 24)
        renderer.render()

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            filepath = f.name

        try:
            assert save_png(renderer, filepath) is True

            # Verify file exists and is valid
            assert os.path.exists(filepath)

            img = PILImage.open(filepath)
            assert img.size == (32, 24)
            assert img.mode == "RGB"

            # Center pixel shows the sphere's ambient color
            pixels = np.asarray(img)
            assert tuple(pixels[12, 16]) == (51, 102, 153)
        finally:
            if os.path.exists(filepath):
                os.remove(filepath)

    def test_save_png_from_array(self, tmp_path):
        """Test saving a NumPy array directly."""
        from src.whitted.preview.export import save_png_from_array

        image = np.zeros((5, 7, 3), dtype=np.float32)
        image[0, 0] = (1.0, 0.0, 0.0)
        filepath = tmp_path / "array.png"

        assert save_png_from_array(image, filepath) is True

        img = PILImage.open(filepath)
        assert img.size == (7, 5)
        assert tuple(np.asarray(img)[0, 0]) == (255, 0, 0)

    def test_save_png_bad_path_returns_false(self, tmp_path, caplog):
        """Test that write failures are logged rather than raised."""
        from src.whitted.preview.export import save_png_from_array

        filepath = tmp_path / "missing_dir" / "out.png"
        image = np.zeros((2, 2, 3), dtype=np.float32)

        with caplog.at_level(logging.ERROR, logger="src.whitted.preview.export"):
            assert save_png_from_array(image, filepath) is False

        assert "Failed to write image" in caplog.text


class TestComputeRmse:
    """Test RMSE computation."""

    def test_rmse_identical_images(self):
        """Test that RMSE is zero for identical images."""
        from src.whitted.preview.export import compute_rmse

        image = np.random.rand(10, 10, 3).astype(np.float32)
        assert compute_rmse(image, image) == pytest.approx(0.0)

    def test_rmse_different_images(self):
        """Test RMSE for a uniform difference."""
        from src.whitted.preview.export import compute_rmse

        image_a = np.zeros((10, 10, 3), dtype=np.float32)
        image_b = np.full((10, 10, 3), 0.5, dtype=np.float32)

        assert compute_rmse(image_a, image_b) == pytest.approx(0.5)

    def test_rmse_shape_mismatch_raises(self):
        """Test that mismatched shapes raise ValueError."""
        from src.whitted.preview.export import compute_rmse

        image_a = np.zeros((10, 10, 3), dtype=np.float32)
        image_b = np.zeros((5, 5, 3), dtype=np.float32)

        with pytest.raises(ValueError, match="shapes must match"):
            compute_rmse(image_a, image_b)


class TestShowPreview:
    """Tests for show_preview on the Agg backend."""

    @pytest.fixture
    def shown(self, monkeypatch):
        """Collect plt.show calls instead of opening a window."""
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        calls = []
        monkeypatch.setattr(plt, "show", lambda **kwargs: calls.append(kwargs))
        yield calls
        plt.close("all")

    def test_default_title(self, shown):
        """Test that the default title mentions size and depth."""
        import matplotlib.pyplot as plt

        from src.whitted.core.renderer import WhittedRenderer
        from src.whitted.preview.display import show_preview

        _setup_simple_scene()
        renderer = WhittedRenderer(16, 8)
        renderer.render()

        show_preview(renderer, block=False)

        assert shown == [{"block": False}]
        ax = plt.gcf().axes[0]
        assert ax.get_title() == "Render Preview - 16x8, max depth 5"
        assert ax.get_images()[0].get_array().shape == (8, 16, 3)

    def test_custom_title(self, shown):
        """Test that a custom title is used."""
        import matplotlib.pyplot as plt

        from src.whitted.core.renderer import WhittedRenderer
        from src.whitted.preview.display import show_preview

        renderer = WhittedRenderer(8, 8)
        show_preview(renderer, title="scene1")

        assert shown == [{"block": True}]
        assert plt.gcf().axes[0].get_title() == "scene1"


class TestModuleExports:
    """Test that all expected symbols are exported from the module."""

    def test_preview_exports(self):
        """Test that display and export functions are exported."""
        from src.whitted.preview import (
            compute_rmse,
            image_to_uint8,
            save_png,
            save_png_from_array,
            show_preview,
        )

        assert callable(show_preview)
        assert callable(save_png)
        assert callable(save_png_from_array)
        assert callable(image_to_uint8)
        assert callable(compute_rmse)
