"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Double precision
    keeps the device backend in step with the host backend.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_device_scene():
    """Clear the device primitive table before and after each test."""
    # Import here so Taichi is initialized before fields are declared
    from whitted.scene.intersection import clear_scene

    clear_scene()
    yield
    clear_scene()


@pytest.fixture
def white_material():
    from whitted.materials.material import Material

    return Material.from_rgb(1.0, 1.0, 1.0)


@pytest.fixture
def down_light():
    """White light shining straight down."""
    from whitted.core.vector import Vector3
    from whitted.scene.light import DirectionalLight

    return DirectionalLight(Vector3(0.0, -1.0, 0.0))
