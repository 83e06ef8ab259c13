"""Pytest configuration for whitted tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Reset scene, lights, materials, camera and render config around each test."""
    # Import here so that Taichi is initialized first
    from whitted.camera.pinhole import clear_camera
    from whitted.core.config import RenderConfig
    from whitted.core.tracer import apply_render_config, clear_radiance
    from whitted.materials.phong import clear_phong_materials
    from whitted.scene.intersection import clear_scene
    from whitted.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_phong_materials()
        clear_lights()
        clear_camera()
        clear_radiance()
        apply_render_config(RenderConfig())

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def white_material():
    """A plain white material with no specular highlight or reflection."""
    from whitted.materials.phong import Material

    return Material(
        ambient=(0.1, 0.1, 0.1),
        diffuse=(1.0, 1.0, 1.0),
        specular=(0.0, 0.0, 0.0),
        shininess=0.0,
    )


@pytest.fixture
def front_camera():
    """A 16x16 camera at z=5 looking down -z."""
    from whitted.camera.pinhole import Camera

    return Camera(
        position=(0.0, 0.0, 5.0),
        look_target=(0.0, 0.0, 0.0),
        global_up=(0.0, 1.0, 0.0),
        fov_y=45.0,
        focal_length=1.0,
        image_width=16,
        image_height=16,
    )
