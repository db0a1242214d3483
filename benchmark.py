#!/usr/bin/env python3
"""
Benchmark script to compare sequential vs parallel convolution versions.
"""
import sys
import time

import numpy as np
from joblib import cpu_count

import ConvSeq
import ConvParallel
from ImageLoader import load
from KernelSettings import KERNEL_GAUSSIAN_5x5


def time_runs(fn, n_runs):
    times = []
    result = None
    for i in range(n_runs):
        start = time.perf_counter()
        result = fn()
        elapsed = time.perf_counter() - start
        times.append(elapsed)
        print(f"Run {i+1}: {elapsed:.4f} seconds")
    print(f"Average: {np.mean(times):.4f} ± {np.std(times):.4f} seconds")
    return result, float(np.mean(times))


def benchmark_convolution(source, settings, n_runs=3, n_jobs=-1):
    """Run benchmark comparing both versions."""
    print(f"Image size: {source.shape[1]}x{source.shape[0]} pixels")
    print(f"Kernel size: {settings.area_size}x{settings.area_size}")
    print(f"Number of runs: {n_runs}")
    print(f"CPU cores: {cpu_count()}")
    print("=" * 70)

    results = {}

    print("\n1. SEQUENTIAL VERSION")
    print("-" * 70)
    results['sequential'] = time_runs(
        lambda: ConvSeq.apply_convolution(source, settings.area_size, settings.weights), n_runs)

    print("\n2. PARALLEL VERSION (row blocks)")
    print("-" * 70)
    results['parallel'] = time_runs(
        lambda: ConvParallel.convolve(source, settings.area_size, settings.weights, n_jobs=n_jobs), n_runs)

    avg_seq = results['sequential'][1]
    avg_par = results['parallel'][1]
    speedup = avg_seq / avg_par if avg_par > 0 else float('inf')

    print("\n" + "=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Sequential:          {avg_seq:.4f}s  (1.00x)")
    print(f"Parallel (blocks):   {avg_par:.4f}s  ({speedup:.2f}x speedup)")

    print("\n" + "=" * 70)
    print("VERIFICATION")
    print("=" * 70)
    diff = np.abs(results['sequential'][0].astype(int) - results['parallel'][0].astype(int)).max()
    print(f"Max difference (Sequential vs Parallel):  {diff}")
    if diff == 0:
        print("✓ Results are identical!")
    else:
        print("⚠ Results differ slightly (floating point precision)")

    results['max_difference'] = int(diff)
    results['speedup'] = speedup
    return results


if __name__ == "__main__":
    # Configuration
    input_path = sys.argv[1] if len(sys.argv) > 1 else "input.jpg"
    settings = KERNEL_GAUSSIAN_5x5
    n_runs = 3

    print("=" * 70)
    print("CONVOLUTION BENCHMARK: Sequential vs Parallel")
    print("=" * 70)

    benchmark_convolution(load(input_path), settings, n_runs)
