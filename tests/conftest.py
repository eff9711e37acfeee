"""Pytest configuration for ray tracer tests.

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
    """Reset the scene, camera, tracer settings and image before each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized first
    from src.whitted.camera.pinhole import CameraParams, setup_camera
    from src.whitted.core.integrator import (
        TracerConfig,
        clear_render_target,
        configure_tracer,
    )
    from src.whitted.materials.material import clear_materials
    from src.whitted.scene.intersection import clear_primitives
    from src.whitted.scene.lights import clear_lights

    def _clear_all():
        clear_primitives()
        clear_materials()
        clear_lights()
        setup_camera(CameraParams())
        configure_tracer(TracerConfig())
        clear_render_target()

    _clear_all()

    yield

    _clear_all()
