"""
Shared fixtures for the kernel viewer test suite: small rasters with known
values, image files on disk and configuration files.
"""
import logging

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest
import yaml
from PIL import Image


@pytest.fixture
def scenario_raster():
    """4x4 raster with values 10, 20, ..., 160 in row-major order."""
    return np.arange(10, 170, 10, dtype=np.uint8).reshape(4, 4)


@pytest.fixture
def random_raster():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(37, 53), dtype=np.uint8)


@pytest.fixture
def full_range_raster():
    """Raster whose samples span the whole [0, 255] range."""
    rng = np.random.default_rng(7)
    arr = rng.integers(0, 256, size=(12, 9), dtype=np.uint8)
    arr[0, 0] = 0
    arr[-1, -1] = 255
    return arr


@pytest.fixture
def rgb_image_file(tmp_path):
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, size=(20, 30, 3), dtype=np.uint8)
    path = tmp_path / "source.png"
    Image.fromarray(pixels).save(path)
    return path


@pytest.fixture
def sample_config(rgb_image_file, tmp_path):
    return {
        'input': {'path': str(rgb_image_file)},
        'kernel': {'area_size': 3, 'weights': None, 'preset': None, 'max_area_size': 8},
        'parallel': {'n_jobs': 1, 'block_rows': None, 'prefer': 'threads'},
        'output': {'path': str(tmp_path / "side_by_side.png")},
        'logging': {'level': 'DEBUG', 'log_to_file': False, 'log_file': str(tmp_path / "test.log")},
    }


@pytest.fixture
def sample_config_file(tmp_path, sample_config):
    path = tmp_path / "config.yaml"
    with open(path, 'w') as f:
        yaml.dump(sample_config, f)
    return path


@pytest.fixture
def restore_root_logger():
    """Undo handler and level changes made by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
