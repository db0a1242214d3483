#!/usr/bin/env python3
"""
Load source images as 8-bit grayscale rasters.
"""
import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError


class LoadError(Exception):
    """The source image is missing, unsupported or corrupt."""


def load(path):
    """
    Decode the image at `path` into a read-only (H, W) uint8 array.

    Color images are converted with Pillow's "L" mode (ITU-R 601-2 luma).
    """
    path = Path(path)
    if not path.is_file():
        raise LoadError(f"Image not found: {path}")

    try:
        with Image.open(path) as img:
            arr = np.array(img.convert("L"), dtype=np.uint8)
    except UnidentifiedImageError as e:
        raise LoadError(f"Unsupported image format: {path}") from e
    except Image.DecompressionBombError as e:
        raise LoadError(f"Image too large to decode safely: {path}") from e
    except (OSError, SyntaxError, ValueError) as e:
        raise LoadError(f"Failed to decode {path}: {e}") from e

    # the original raster is shared by every recomputation
    arr.flags.writeable = False
    logging.info(f"Loaded {path} as {arr.shape[1]}x{arr.shape[0]} grayscale")
    return arr


def to_image(raster):
    """Wrap a raster as a Pillow image for saving or display."""
    return Image.fromarray(np.ascontiguousarray(raster, dtype=np.uint8))
