"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest

from raytrace.config import init_taichi


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field created by previously imported modules.
    """
    init_taichi("cpu")
    yield


@pytest.fixture(autouse=True)
def clear_device_tables():
    """Clear object and light tables before and after each test."""
    # Import here so the fields are created after Taichi is initialized
    from raytrace.scene.intersection import clear_scene
    from raytrace.shading.shader import clear_lights

    clear_scene()
    clear_lights()

    yield

    clear_scene()
    clear_lights()
