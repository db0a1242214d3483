#!/usr/bin/env python3
"""
Sequential grayscale convolution: valid-mode windowed sum, clamp at zero,
then min/max rescale of the whole output into [0, 255].
"""
import logging
import sys

import numpy as np

from KernelSettings import KernelSettings, KernelOverflowError


def prepare(source, area_size, weights):
    """
    Validate inputs and return the source raster, the (N, N) float64 kernel
    and the (out_h, out_w) output shape.
    """
    source = np.asarray(source)
    if source.ndim != 2 or source.dtype != np.uint8:
        raise ValueError(
            f"Source must be a 2D uint8 raster, got shape {source.shape} and dtype {source.dtype}"
        )
    settings = KernelSettings(area_size, weights)
    out_shape = settings.output_shape(source.shape[0], source.shape[1])
    return source, settings.matrix(), out_shape


def windowed_sum(region, kernel):
    """Weighted sum of every kernel-sized window of `region` (no kernel flip)."""
    kh, kw = kernel.shape
    windows = np.lib.stride_tricks.sliding_window_view(region.astype(np.float64), (kh, kw))
    # windows: (out_h, out_w, kh, kw)
    with np.errstate(over="ignore", invalid="ignore"):
        return np.einsum('ijkl,kl->ij', windows, kernel)


def windowed_sum_loops(region, kernel):
    """Same as windowed_sum using classic nested loops."""
    kh, kw = kernel.shape
    out_h = region.shape[0] - kh + 1
    out_w = region.shape[1] - kw + 1
    out = np.zeros((out_h, out_w), dtype=np.float64)
    for i in range(out_h):
        for j in range(out_w):
            out[i, j] = np.sum(region[i:i+kh, j:j+kw] * kernel)
    return out


def clamp(raw):
    return np.maximum(raw, 0.0)


def value_range(values):
    return float(values.min()), float(values.max())


def check_finite_range(lo, hi):
    if not (np.isfinite(lo) and np.isfinite(hi)):
        raise KernelOverflowError(f"Kernel sums overflow the float64 range ({lo}, {hi})")


def merge_ranges(a, b):
    return min(a[0], b[0]), max(a[1], b[1])


def rescale(values, lo, hi):
    """Map [lo, hi] linearly onto [0, 255]; a flat range maps to 0."""
    if hi == lo:
        return np.zeros(values.shape, dtype=np.uint8)
    scaled = np.rint((values - lo) * 255.0 / (hi - lo))
    return np.clip(scaled, 0, 255).astype(np.uint8)


def apply_convolution(source, area_size, weights):
    source, kernel, _ = prepare(source, area_size, weights)
    clamped = clamp(windowed_sum(source, kernel))
    lo, hi = value_range(clamped)
    check_finite_range(lo, hi)
    if hi == lo:
        logging.debug(f"Flat convolution result ({lo}), output is uniform")
    return rescale(clamped, lo, hi)


if __name__ == "__main__":
    from ImageLoader import load, to_image
    from KernelSettings import KERNEL_EDGE

    # Configuration
    input_path = sys.argv[1] if len(sys.argv) > 1 else "input.jpg"
    output_path = "output.png"
    kernel = KERNEL_EDGE

    arr = load(input_path)
    result = apply_convolution(arr, kernel.area_size, kernel.weights)

    to_image(result).save(output_path)
    print(f"Saved: {output_path}")
