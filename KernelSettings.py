#!/usr/bin/env python3
"""
Kernel settings snapshot: area size plus a flat, row-major weight matrix.
"""
import math
from dataclasses import dataclass
import numpy as np

MAX_AREA_SIZE = 8
DEFAULT_AREA_SIZE = 2


class KernelTooLargeError(ValueError):
    """Raised when the kernel does not fit inside the source raster."""

    def __init__(self, area_size, width, height):
        self.area_size = area_size
        self.width = width
        self.height = height
        super().__init__(
            f"Kernel area {area_size} does not fit in a {width}x{height} image"
        )



class KernelOverflowError(ValueError):
    """Raised when the weighted sums leave the finite float64 range."""

@dataclass(frozen=True)
class KernelSettings:
    """Immutable (area_size, weights) pair, compared by value."""
    area_size: int
    weights: tuple

    def __post_init__(self):
        if int(self.area_size) != self.area_size or self.area_size < 1:
            raise ValueError(f"area_size must be a positive integer, got {self.area_size!r}")
        object.__setattr__(self, "area_size", int(self.area_size))
        object.__setattr__(self, "weights", tuple(float(w) for w in self.weights))
        expected = self.area_size * self.area_size
        if len(self.weights) != expected:
            raise ValueError(
                f"Expected {expected} weights for area size {self.area_size}, got {len(self.weights)}"
            )
        if not all(math.isfinite(w) for w in self.weights):
            raise ValueError(f"Kernel weights must be finite, got {self.weights}")

    @classmethod
    def ones(cls, area_size=DEFAULT_AREA_SIZE):
        return cls(area_size, (1.0,) * (area_size * area_size))

    @classmethod
    def from_matrix(cls, matrix):
        """Build settings from a square 2D array."""
        matrix = np.asarray(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Kernel matrix must be square, got shape {matrix.shape}")
        return cls(matrix.shape[0], tuple(matrix.ravel()))

    def resize(self, area_size):
        """Changing the size always starts over from an all-ones grid."""
        if area_size == self.area_size:
            return self
        return KernelSettings.ones(area_size)

    def with_weight(self, y, x, value):
        if not (0 <= y < self.area_size and 0 <= x < self.area_size):
            raise IndexError(f"Cell ({y}, {x}) outside a {self.area_size}x{self.area_size} kernel")
        weights = list(self.weights)
        weights[y * self.area_size + x] = value
        return KernelSettings(self.area_size, weights)

    def matrix(self):
        return np.array(self.weights, dtype=np.float64).reshape(self.area_size, self.area_size)

    def output_shape(self, height, width):
        """Valid-mode output shape (out_h, out_w) for a height x width source."""
        check_fits(self.area_size, height, width)
        return height - self.area_size + 1, width - self.area_size + 1


def check_fits(area_size, height, width):
    if area_size > width or area_size > height:
        raise KernelTooLargeError(area_size, width, height)


# Kernel presets
KERNEL_BLUR = KernelSettings.from_matrix([[1,1,1],[1,1,1],[1,1,1]])
KERNEL_SHARPEN = KernelSettings.from_matrix([[0,-1,0],[-1,5,-1],[0,-1,0]])
KERNEL_EDGE = KernelSettings.from_matrix([[-1,-1,-1],[-1,8,-1],[-1,-1,-1]])
KERNEL_EMBOSS = KernelSettings.from_matrix([[-2,-1,0],[-1,1,1],[0,1,2]])
KERNEL_GAUSSIAN = KernelSettings.from_matrix([[1,2,1],[2,4,2],[1,2,1]])
KERNEL_GAUSSIAN_5x5 = KernelSettings.from_matrix([
    [1,  4,  6,  4, 1],
    [4, 16, 24, 16, 4],
    [6, 24, 36, 24, 6],
    [4, 16, 24, 16, 4],
    [1,  4,  6,  4, 1]
])

PRESETS = {
    "blur": KERNEL_BLUR,
    "sharpen": KERNEL_SHARPEN,
    "edge": KERNEL_EDGE,
    "emboss": KERNEL_EMBOSS,
    "gaussian": KERNEL_GAUSSIAN,
    "gaussian5": KERNEL_GAUSSIAN_5x5,
}
