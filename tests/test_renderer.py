"""Tests for row-by-row frame assembly."""

import numpy as np
import pytest


def _background_green():
    return int(0.5 * 255)


class TestRendererInit:
    """Tests for Renderer construction."""

    def test_properties(self):
        """Test that the renderer exposes its size and config."""
        from whitted.core.config import RenderConfig
        from whitted.core.renderer import Renderer

        config = RenderConfig(aa_samples=4)
        renderer = Renderer(32, 24, config)

        assert renderer.width == 32
        assert renderer.height == 24
        assert renderer.config is config
        assert renderer.rows_done == 0
        assert "32" in repr(renderer)

    def test_default_config(self):
        """Test that a missing config falls back to the defaults."""
        from whitted.core.config import RenderConfig
        from whitted.core.renderer import Renderer

        assert Renderer(4, 4).config == RenderConfig()

    @pytest.mark.parametrize("size", [(0, 4), (4, -1), (4096, 4), (4, 4096)])
    def test_invalid_dimensions(self, size):
        """Test that bad image sizes raise ValueError."""
        from whitted.core.renderer import Renderer

        with pytest.raises(ValueError):
            Renderer(*size)

    def test_render_without_camera(self):
        """Test that rendering before setup_camera raises RuntimeError."""
        from whitted.core.renderer import Renderer

        with pytest.raises(RuntimeError, match="Camera not set up"):
            Renderer(4, 4).render()


class TestRendering:
    """Tests for full-frame rendering."""

    def test_empty_scene_is_background(self, front_camera):
        """Test that every pixel of an empty scene is the background colour."""
        from whitted.camera.pinhole import setup_camera
        from whitted.core.renderer import Renderer

        setup_camera(front_camera)
        frame = Renderer(16, 16).render()

        image = frame.as_array()
        assert (frame.width, frame.height) == (16, 16)
        assert (image[..., 0] == 0).all()
        assert (image[..., 1] == _background_green()).all()
        assert (image[..., 2] == _background_green()).all()

    def test_progress_callback(self, front_camera):
        """Test that the callback is called once per row in order."""
        from whitted.camera.pinhole import setup_camera
        from whitted.core.renderer import Renderer

        setup_camera(front_camera)
        calls = []
        renderer = Renderer(16, 16)
        renderer.render(callback=lambda done, total: calls.append((done, total)))

        assert calls == [(row, 16) for row in range(1, 17)]
        assert renderer.rows_done == 16

    def test_render_rows_generator(self, front_camera):
        """Test the generator form of the row loop."""
        from whitted.camera.pinhole import setup_camera
        from whitted.core.renderer import Renderer

        setup_camera(front_camera)
        renderer = Renderer(16, 16)
        progress = list(renderer.render_rows())

        assert progress[0] == (1, 16)
        assert progress[-1] == (16, 16)
        assert renderer.get_radiance_numpy().shape == (16, 16, 3)
        assert renderer.get_frame().width == 16

    def test_top_of_scene_is_first_row(self, front_camera, white_material):
        """Test that objects above the look direction appear in low image rows."""
        from whitted.camera.pinhole import setup_camera
        from whitted.core.renderer import Renderer
        from whitted.scene.manager import SceneManager

        setup_camera(front_camera)
        scene = SceneManager()
        # No lights, so the sphere renders black against the background
        scene.add_sphere((0.0, 1.0, 0.0), 0.4, white_material)

        image = Renderer(16, 16).render().as_array()
        rows, _cols = np.nonzero(image[..., 1] == 0)

        assert len(rows) > 0
        assert rows.max() < 8

    def test_radiance_is_unclamped(self, front_camera, white_material):
        """Test that the radiance buffer keeps values above 1 while the frame clamps."""
        from whitted.camera.pinhole import setup_camera
        from whitted.core.renderer import Renderer
        from whitted.scene.lights import Light
        from whitted.scene.manager import SceneManager

        setup_camera(front_camera)
        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, white_material)
        scene.add_light(Light((0.0, 0.0, 10.0, 1.0), (1.0,) * 3, (2.0,) * 3, (0.0,) * 3))

        renderer = Renderer(16, 16)
        frame = renderer.render()

        assert renderer.get_radiance_numpy()[8, 8, 0] > 1.0
        assert frame.get_pixel(8, 8) == (255, 255, 255)


class TestAntialiasing:
    """Tests for jittered supersampling."""

    def test_uniform_region_unchanged(self, front_camera):
        """Test that averaging identical samples leaves the colour unchanged."""
        from whitted.camera.pinhole import setup_camera
        from whitted.core.config import RenderConfig
        from whitted.core.renderer import Renderer

        setup_camera(front_camera)
        frame = Renderer(16, 16, RenderConfig(aa_samples=4)).render(antialias=True)

        assert (frame.as_array()[..., 1] == _background_green()).all()

    def test_edges_are_blended(self, front_camera, white_material):
        """Test that pixels on a silhouette mix object and background."""
        from whitted.camera.pinhole import setup_camera
        from whitted.core.renderer import Renderer
        from whitted.scene.manager import SceneManager

        setup_camera(front_camera)
        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, white_material)

        renderer = Renderer(16, 16)
        hard = renderer.render(antialias=False).as_array()[..., 1]
        soft = renderer.render(antialias=True).as_array()[..., 1]

        assert set(np.unique(hard).tolist()) == {0, _background_green()}
        blended = (soft > 0) & (soft < _background_green())
        assert blended.any()


class TestRenderFrame:
    """Tests for the render_frame convenience function."""

    def test_render_frame_sets_up_camera(self, front_camera):
        """Test that render_frame uploads the camera and returns its image size."""
        from whitted.camera.pinhole import is_camera_ready
        from whitted.core.renderer import render_frame

        rows = []
        frame = render_frame(front_camera, progress=lambda done, total: rows.append(done))

        assert is_camera_ready()
        assert (frame.width, frame.height) == (16, 16)
        assert rows[-1] == 16

    def test_render_frame_uses_active_config(self, front_camera):
        """Test that render_frame keeps the active config when none is given."""
        from whitted.core.config import RenderConfig
        from whitted.core.renderer import render_frame
        from whitted.core.tracer import apply_render_config

        apply_render_config(RenderConfig(background_color=(1.0, 0.0, 0.0)))
        frame = render_frame(front_camera)

        assert frame.get_pixel(0, 0) == (255, 0, 0)

    def test_render_frame_rejects_bad_camera(self, front_camera):
        """Test that an invalid camera raises ValueError."""
        import dataclasses

        from whitted.core.renderer import render_frame

        with pytest.raises(ValueError):
            render_frame(dataclasses.replace(front_camera, focal_length=-1.0))
