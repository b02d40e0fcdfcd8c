"""Pytest configuration for path tracer core tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Modules under src.pathcore allocate Taichi fields at import time, so
    tests import them inside the test body, after this fixture has run.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_material_registry():
    """Clear the material registry before and after each test."""
    from src.pathcore.materials.material import clear_materials

    clear_materials()
    yield
    clear_materials()
