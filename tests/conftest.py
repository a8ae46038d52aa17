"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field declared by already imported modules.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene and material data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so field declarations happen after Taichi is initialized
    from pathtracer.scene.manager import clear_scene_data

    clear_scene_data()
    yield
    clear_scene_data()


@pytest.fixture
def default_camera():
    """Set up the default 16:9 camera and return its configuration."""
    from pathtracer.camera.camera import Camera, setup_camera

    camera = Camera()
    setup_camera(camera)
    return camera
