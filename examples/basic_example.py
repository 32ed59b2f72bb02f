"""
Mldecomp Basic Example

This script demonstrates HOSVD truncation and the CP rank search on a
tensor with known multilinear and CP structure.
"""

import time

import matplotlib.pyplot as plt
import numpy as np

import mldecomp as md

# Set random seed for reproducibility
np.random.seed(42)


def main():
    # Build a rank-3 CP tensor plus a little noise
    print("Creating test tensor...")
    shape = (10, 8, 6)
    rank = 3
    vectors = [np.random.rand(rank, n) for n in shape]
    clean = np.einsum("ri,rj,rk->ijk", *vectors)
    noisy = clean + 1e-4 * np.random.randn(*shape)
    tensor = md.NArray(noisy, ["x", "y", "t"])
    print(f"Tensor shape: {tensor.shape}, index names: {tensor.names}")

    # HOSVD with the singular values of every mode
    print("\nComputing HOSVD...")
    start_time = time.time()
    factors, rank_info = md.hosvd_full(tensor)
    print(f"HOSVD time: {time.time() - start_time:.4f} seconds")
    for name, (mode_rank, s) in zip(tensor.names, rank_info):
        print(f"Mode {name}: numerical rank {mode_rank}, leading singular values {s[:4]}")

    # Truncated to the CP rank in every mode
    truncated = md.truncate_factors([rank] * tensor.order, factors)
    rel_error = (tensor - md.product(truncated)).frob() / tensor.frob()
    print(f"Relative error of the rank-{rank} truncation: {rel_error:.3e}")

    # CP rank search
    print("\nSearching for the CP rank...")
    params = md.default_parameters().replace(epsilon=1e-3, delta=1e-3, n_max=100)
    start_time = time.time()
    cp, errs, found = md.cp_auto_info(
        lambda k: md.cp_init_svd(factors, k), params, tensor, verbose=True
    )
    print(f"CP time: {time.time() - start_time:.4f} seconds")
    print(f"Accepted rank {found} after {len(errs)} iterations, error {errs[-1]:.3e}")
    weights = [cp[0].data[(r,) * cp[0].order] for r in range(found)]
    print(f"Component weights: {np.round(weights, 4)}")

    plt.figure(figsize=(10, 4))

    plt.subplot(1, 2, 1)
    for name, (_, s) in zip(tensor.names, rank_info):
        plt.semilogy(s, marker="o", label=f"mode {name}")
    plt.title("Mode singular values")
    plt.legend()

    plt.subplot(1, 2, 2)
    plt.semilogy(range(1, len(errs) + 1), errs, marker="o")
    plt.axhline(params.epsilon, color="k", linestyle="--")
    plt.title(f"ALS error history (rank {found})")
    plt.xlabel("Iteration")

    plt.tight_layout()
    plt.savefig("mldecomp_results.png")
    plt.close()

    print("\nResults visualization saved as 'mldecomp_results.png'")


if __name__ == "__main__":
    main()
