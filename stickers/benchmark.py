"""
Runtime analysis for the component scan.
Measures scan time at different atlas sizes and fits a linear model to
verify O(N) behaviour in the number of pixels.
"""

import argparse
import csv
import os
import time
from typing import List, Sequence, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from scipy.optimize import curve_fit

from stickers.config import SliceConfig
from stickers.evaluate import evaluate_regions
from stickers.raster import Raster
from stickers.scanner import scan
from stickers.shaper import shape
from stickers.synthetic import generate_synthetic_atlas

FIELDNAMES = ['width', 'height', 'pixels', 'time_ms', 'num_regions', 'f1']


def measure_runtime(width: int, height: int, num_runs: int = 3,
                    seed: int = 0) -> Tuple[float, int, float]:
    """
    Measure average scan time on a synthetic atlas.

    Args:
        width: Atlas width
        height: Atlas height
        num_runs: Number of runs to average
        seed: Generator seed

    Returns:
        Tuple of (avg_time_ms, num_regions, f1 against ground truth)
    """
    count = max(1, (width * height) // 5000)
    img, truth = generate_synthetic_atlas(width, height, count=count, seed=seed)
    raster = Raster(img)
    config = SliceConfig(alpha_threshold=1, min_dimension=0, padding=0)

    times = []
    components = []
    for _ in range(num_runs):
        start_time = time.perf_counter()
        components = scan(raster, config.alpha_threshold)
        times.append((time.perf_counter() - start_time) * 1000)

    regions = [shape(c, config, width, height) for c in components]
    scores = evaluate_regions(regions, truth, iou_thr=0.99)

    return float(np.mean(times)), len(regions), scores["f1"]


def run_runtime_experiments(sizes: Sequence[Tuple[int, int]],
                            output_csv: str = "experiments/runtime_data.csv",
                            num_runs: int = 3) -> List[dict]:
    """
    Run runtime experiments at multiple atlas sizes and save a CSV.

    Args:
        sizes: List of (width, height) pairs
        output_csv: Output CSV file path
        num_runs: Runs per size
    """
    print("=" * 70)
    print("RUNTIME ANALYSIS EXPERIMENTS")
    print("=" * 70)
    print(f"\nSizes: {list(sizes)}")
    print(f"Runs per size: {num_runs} (for averaging)")

    results = []

    for i, (w, h) in enumerate(sizes):
        print(f"\n[{i+1}/{len(sizes)}] Testing {w} x {h}...")

        avg_time, num_regions, f1 = measure_runtime(w, h, num_runs=num_runs, seed=i)
        result = {
            'width': w,
            'height': h,
            'pixels': w * h,
            'time_ms': avg_time,
            'num_regions': num_regions,
            'f1': f1
        }
        results.append(result)

        print(f"  Pixels: {w * h:,}")
        print(f"  Time: {avg_time:.2f} ms")
        print(f"  Regions: {num_regions} (F1 {f1:.3f})")

    parent = os.path.dirname(output_csv)
    if parent:
        os.makedirs(parent, exist_ok=True)

    with open(output_csv, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(results)

    print(f"\n✓ Results saved to {output_csv}")

    return results


def load_runtime_data(csv_path: str):
    """Load runtime data from CSV."""
    pixels = []
    times = []

    with open(csv_path, 'r') as f:
        reader = csv.DictReader(f)
        for row in reader:
            pixels.append(int(row['pixels']))
            times.append(float(row['time_ms']))

    return np.array(pixels, dtype=float), np.array(times, dtype=float)


def fit_linear(pixels, times):
    """
    Fit a linear curve to runtime data.

    Model: T(N) = a * N + b

    Returns:
        Tuple of (a, b, r_squared, model)
    """
    def model(N, a, b):
        return a * N + b

    params, _ = curve_fit(model, pixels, times, p0=[1e-4, 0.0])
    a, b = params

    residuals = times - model(pixels, a, b)
    ss_res = np.sum(residuals**2)
    ss_tot = np.sum((times - np.mean(times))**2)
    r_squared = 1 - (ss_res / ss_tot) if ss_tot > 0 else 1.0

    return float(a), float(b), float(r_squared), model


def plot_runtime_vs_pixels(pixels, times, output_path: str) -> float:
    """
    Plot runtime vs pixels with the linear fit.

    Returns:
        R-squared of the fit
    """
    a, b, r_squared, model = fit_linear(pixels, times)

    pixels_smooth = np.linspace(pixels.min(), pixels.max(), 100)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.scatter(pixels, times, color='tab:blue', label='Measured')
    ax.plot(pixels_smooth, model(pixels_smooth, a, b), color='tab:red',
            label=f'Fit: {a:.2e}·N + {b:.2f} (R²={r_squared:.3f})')
    ax.set_xlabel('Pixels (N)')
    ax.set_ylabel('Scan time (ms)')
    ax.set_title('Component scan runtime vs atlas size')
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()

    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)

    print(f"✓ Saved runtime plot to {output_path}")

    return r_squared


def main():
    parser = argparse.ArgumentParser(description="Measure component scan runtime.")
    parser.add_argument("--output_dir", type=str, default="experiments")
    parser.add_argument("--runs", type=int, default=3)
    args = parser.parse_args()

    sizes = [(200, 150), (400, 300), (600, 450), (800, 600), (1000, 750), (1200, 900)]
    csv_path = os.path.join(args.output_dir, "runtime_data.csv")

    run_runtime_experiments(sizes, csv_path, num_runs=args.runs)
    pixels, times = load_runtime_data(csv_path)
    plot_runtime_vs_pixels(pixels, times, os.path.join(args.output_dir, "runtime_vs_pixels.png"))


if __name__ == "__main__":
    main()
