"""
K-Means Iteration Steps

The assignment, mean update, convergence and rendering steps, written as
pure functions over flat (N, 3) pixel arrays so they can run per chunk.
"""

from typing import Iterable, Tuple
import numpy as np

from .distance import aggregate_rmse, rmse


# ============================================================================
# Assignment
# ============================================================================

def assign_nearest(pixels: np.ndarray, colors: np.ndarray) -> np.ndarray:
    """
    Assign every pixel to its nearest cluster color.

    Clusters are visited in increasing index order and the current best is
    replaced only on a strictly smaller distance, so ties always go to the
    lowest index.

    Args:
        pixels: Pixel colors, shape (N, 3)
        colors: Cluster colors, shape (K, 3)

    Returns:
        labels: Cluster index per pixel, shape (N,)
    """
    labels = np.zeros(len(pixels), dtype=np.intp)
    best = rmse(pixels, colors[0])

    for k in range(1, len(colors)):
        distance = rmse(pixels, colors[k])
        closer = distance < best
        labels[closer] = k
        best = np.where(closer, distance, best)

    return labels


# ============================================================================
# Mean update
# ============================================================================

def partial_sums(
    pixels: np.ndarray,
    labels: np.ndarray,
    colors: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Per-cluster channel sums and pixel counts for one chunk.

    Sums are of (pixel - cluster color), i.e. shifted by the color the
    pixels were assigned against.

    Args:
        pixels: Pixel colors, shape (N, 3)
        labels: Cluster index per pixel, shape (N,)
        colors: Cluster colors the labels refer to, shape (K, 3)

    Returns:
        sums: Shifted channel sums, shape (K, 3)
        counts: Pixels per cluster, shape (K,)
    """
    n_clusters = len(colors)
    counts = np.bincount(labels, minlength=n_clusters)
    shifted = pixels - colors[labels]
    sums = np.stack(
        [np.bincount(labels, weights=shifted[:, c], minlength=n_clusters) for c in range(3)],
        axis=1
    )
    return sums, counts


def combine_means(
    colors: np.ndarray,
    partials: Iterable[Tuple[np.ndarray, np.ndarray]]
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Reduce chunk partial sums into updated cluster colors.

    A cluster with no pixels keeps its previous color. A cluster whose
    pixels all equal its color reproduces that color exactly.

    Args:
        colors: Previous cluster colors, shape (K, 3)
        partials: (sums, counts) pairs from partial_sums, in chunk order

    Returns:
        updated: New cluster colors, shape (K, 3), clipped to [0, 1]
        counts: Pixels per cluster, shape (K,)
    """
    sums = np.zeros_like(colors, dtype=np.float64)
    counts = np.zeros(len(colors), dtype=np.int64)
    for chunk_sums, chunk_counts in partials:
        sums += chunk_sums
        counts += chunk_counts

    updated = np.array(colors, dtype=np.float64, copy=True)
    filled = counts > 0
    updated[filled] += sums[filled] / counts[filled, None]
    return np.clip(updated, 0.0, 1.0), counts


def update_means(
    pixels: np.ndarray,
    labels: np.ndarray,
    colors: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """Single-chunk mean update; see partial_sums and combine_means."""
    return combine_means(colors, [partial_sums(pixels, labels, colors)])


# ============================================================================
# Convergence
# ============================================================================

def has_converged(previous: np.ndarray, updated: np.ndarray, threshold: float) -> Tuple[bool, float]:
    """
    Decide whether to stop iterating.

    Stops when 100 * aggregate RMSE is strictly below threshold, or when
    no cluster color moved at all.

    Returns:
        stop: True to stop
        value: The 100 * aggregate RMSE
    """
    value = aggregate_rmse(previous, updated)
    return (value < threshold or value == 0.0), value


# ============================================================================
# Rendering
# ============================================================================

def render_labels(labels: np.ndarray, colors: np.ndarray, shape: Tuple[int, int]) -> np.ndarray:
    """
    Paint each pixel with its cluster's color.

    Args:
        labels: Cluster index per pixel, shape (H*W,)
        colors: Cluster colors, shape (K, 3)
        shape: (H, W) output dimensions

    Returns:
        image: Rendered colors, shape (H, W, 3)
    """
    h, w = shape
    if len(labels) != h * w:
        raise ValueError(
            f"Image shape {shape} doesn't match labels ({len(labels)} pixels)"
        )
    return np.asarray(colors, dtype=np.float64)[labels].reshape(h, w, 3)
