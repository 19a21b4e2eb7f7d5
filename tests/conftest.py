"""
Pytest configuration and shared fixtures for Deform Map Painter tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

from datetime import datetime

import numpy as np
import pytest

from DM_Libs.PaintLib.pixel_buffer import PixelBuffer


@pytest.fixture
def black_buffer():
    """
    Provide a 4x4 opaque black buffer.

    Returns:
        PixelBuffer filled with (0, 0, 0, 255)
    """
    return PixelBuffer.create(4, 4, (0, 0, 0, 255))


@pytest.fixture
def random_buffer():
    """
    Provide a 7x5 buffer of seeded random RGBA noise.

    Returns:
        PixelBuffer with every channel in use, including alpha
    """
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(5, 7, 4), dtype=np.uint8))


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 0),        # Transparent black
        (128, 128, 0, 255),  # Neutral deform
    ]


@pytest.fixture
def fixed_clock():
    """Clock that always returns 2026-03-04 05:06:07."""
    return lambda: datetime(2026, 3, 4, 5, 6, 7)
