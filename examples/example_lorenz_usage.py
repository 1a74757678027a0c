#!/usr/bin/env python3
"""
Example usage of the boxed correlation sum in boxcorr.

This script estimates the correlation dimension of the Lorenz attractor and
compares the boxed sum against the brute-force sum on a small subsample.
"""

import time

import numpy as np
from boxcorr import (
    boxed_correlationsum,
    boxed_correlation_dimension,
    correlationsum,
    estimate_r0_buenoorovio,
    estimate_r0_theiler,
    lorenz_trajectory,
)


def main():
    print("Boxed Correlation Sum Example")
    print("=" * 50)

    print("Integrating the Lorenz system...")
    X = lorenz_trajectory(n_points=10000, dt=0.05)
    print(f"Dataset shape: {X.shape}")

    # Box size heuristics
    print("\nEstimating box sizes...")
    r0_t, eps0_t = estimate_r0_theiler(X, rng=1)
    r0_b, eps0_b = estimate_r0_buenoorovio(X, rng=1)
    print(f"Theiler:      r0 = {r0_t:.4f}, eps0 = {eps0_t:.4g}")
    print(f"Bueno-Orovio: r0 = {r0_b:.4f}, eps0 = {eps0_b:.4g}")

    # Automatic radii
    print("\nBoxed correlation sum with automatic radii...")
    start = time.time()
    eps, Cs = boxed_correlationsum(X, rng=1, show_progress=True)
    print(f"Computed {len(eps)} radii in {time.time() - start:.2f}s")
    for e, c in zip(eps, Cs):
        print(f"  eps = {e:10.4g}   C(eps) = {c:.4e}")

    # Dimension from a scaling range of our own
    print("\nCorrelation dimension from radii in the scaling range...")
    result = boxed_correlation_dimension(X, np.geomspace(0.5, 5.0, 12), w=10)
    print(f"D2 = {result['D']:.3f} (expected about 2.05)")
    print(f"Linear region: {result['region']}, R² = {result['R2']:.5f}")

    # Cross-check against the brute-force sum
    print("\nChecking against the brute-force correlation sum...")
    sub = X[:1500]
    radii = np.geomspace(0.5, 5.0, 8)
    boxed = boxed_correlationsum(sub, radii)
    brute = correlationsum(sub, radii)
    print(f"Max abs difference: {np.max(np.abs(boxed - brute)):.3e}")


if __name__ == "__main__":
    main()
