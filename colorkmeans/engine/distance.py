"""
Root-mean-square color distance.
"""

import numpy as np


def rmse(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    RMS distance over the last (channel) axis.

        rmse(A, B) = sqrt(mean_c((A.c - B.c)^2))

    Broadcasts like numpy arithmetic, so rmse(pixels, color) with pixels of
    shape (N, 3) and color of shape (3,) returns shape (N,).

    Args:
        a: Colors, shape (..., 3)
        b: Colors, shape (..., 3)

    Returns:
        distance: Non-negative distances, shape of the broadcast minus the
                  channel axis (a float for two single colors)
    """
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return np.sqrt(np.mean(diff * diff, axis=-1))


def aggregate_rmse(previous: np.ndarray, updated: np.ndarray) -> float:
    """
    RMSE of the per-cluster RMSEs, scaled by 100.

        100 * sqrt(mean_i(rmse(previous[i], updated[i])^2))

    Args:
        previous: Cluster colors before the update, shape (K, 3)
        updated: Cluster colors after the update, shape (K, 3)
    """
    per_cluster = rmse(previous, updated)
    return float(100.0 * np.sqrt(np.mean(per_cluster * per_cluster)))
