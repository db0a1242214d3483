#!/usr/bin/env python3
"""
Parallel grayscale convolution using joblib.

Fork-join over blocks of output rows: a parallel map computes the clamped
windowed sums and each block's min/max, the block extrema are reduced to the
global range, and a second parallel map rescales every block into [0, 255].
"""
import logging
import sys
from functools import reduce

import numpy as np
from joblib import Parallel, delayed, cpu_count

from ConvSeq import (
    prepare, windowed_sum, clamp, value_range, merge_ranges, check_finite_range, rescale,
)


def make_blocks(out_h, block_rows):
    """Split output rows [0, out_h) into (start, end) ranges of at most block_rows."""
    if block_rows < 1:
        raise ValueError(f"block_rows must be positive, got {block_rows}")
    blocks = []
    for i in range(0, out_h, block_rows):
        blocks.append((i, min(i + block_rows, out_h)))
    return blocks


def auto_block_rows(out_h, n_jobs):
    n_cores = cpu_count() if n_jobs is None or n_jobs < 0 else n_jobs
    # Aim for ~4 blocks per core for better load balancing
    total_blocks = max(1, n_cores * 4)
    return max(16, -(-out_h // total_blocks))


def process_block(region, kernel, start_i, end_i):
    """Clamped windowed sums for output rows [start_i, end_i) and their range."""
    clamped = clamp(windowed_sum(region, kernel))
    return start_i, end_i, clamped, value_range(clamped)


def rescale_block(clamped, start_i, end_i, lo, hi):
    return start_i, end_i, rescale(clamped, lo, hi)


def convolve(source, area_size, weights, n_jobs=-1, block_rows=None, prefer="threads"):
    source, kernel, (out_h, out_w) = prepare(source, area_size, weights)

    kh, kw = kernel.shape
    h, w = source.shape

    if block_rows is None:
        block_rows = auto_block_rows(out_h, n_jobs)
    blocks = make_blocks(out_h, block_rows)
    logging.debug(f"Convolving {w}x{h} with {kw}x{kh} kernel in {len(blocks)} blocks")

    with Parallel(n_jobs=n_jobs, prefer=prefer) as parallel:
        # Each block only needs its rows plus the kernel overlap
        results = parallel(
            delayed(process_block)(source[start_i:end_i + kh - 1], kernel, start_i, end_i)
            for start_i, end_i in blocks
        )

        block_ranges = [block_range for _, _, _, block_range in results]
        for block_lo, block_hi in block_ranges:
            check_finite_range(block_lo, block_hi)
        lo, hi = reduce(merge_ranges, block_ranges)

        mapped = parallel(
            delayed(rescale_block)(clamped, start_i, end_i, lo, hi)
            for start_i, end_i, clamped, _ in results
        )

    out = np.empty((out_h, out_w), dtype=np.uint8)
    for start_i, end_i, block in mapped:
        out[start_i:end_i] = block

    return out


if __name__ == "__main__":
    from ImageLoader import load, to_image
    from KernelSettings import KERNEL_EDGE

    # Configuration
    input_path = sys.argv[1] if len(sys.argv) > 1 else "input.jpg"
    output_path = "output_parallel.png"
    kernel = KERNEL_EDGE
    n_jobs = -1  # -1 uses all available cores
    block_rows = None  # None = automatic

    arr = load(input_path)
    print(f"Processing image: {arr.shape[1]}x{arr.shape[0]} pixels")
    print(f"CPU cores: {cpu_count()}")

    result = convolve(arr, kernel.area_size, kernel.weights, n_jobs=n_jobs, block_rows=block_rows)

    to_image(result).save(output_path)
    print(f"Saved: {output_path}")
