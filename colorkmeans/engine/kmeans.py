"""
K-Means Color Clustering Engine

Runs the assignment / mean update / convergence loop over a PixelBuffer,
starting from a given list of seed colors.

Objective: J = Σ_k Σ_{x in cluster k} rmse(x, v_k)^2
"""

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple
import logging
import threading
import numpy as np

from ..buffer import PixelBuffer
from ..config import KMeansColorConfig
from .steps import assign_nearest, combine_means, has_converged, partial_sums, render_labels

logger = logging.getLogger(__name__)


# ============================================================================
# State and results
# ============================================================================

class ClusteringStatus(Enum):
    """Iteration state machine."""
    SEEDED = "seeded"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAXITERS_REACHED = "maxiters_reached"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            ClusteringStatus.CONVERGED,
            ClusteringStatus.MAXITERS_REACHED,
            ClusteringStatus.CANCELLED
        )


@dataclass
class IterationState:
    """
    One completed iteration of the loop.
    """
    iteration: int
    """1-based iteration counter."""

    previous_colors: np.ndarray
    """Cluster colors the pixels were assigned against, shape (K, 3)."""

    updated_colors: np.ndarray
    """Cluster means after the update, shape (K, 3)."""

    rmse: float
    """100 * aggregate RMSE between previous and updated colors."""

    counts: np.ndarray
    """Pixels assigned to each cluster, shape (K,)."""


@dataclass
class ClusteringResult:
    """
    Final state of a clustering run.
    """
    labels: np.ndarray
    """Cluster index per pixel, shape (H*W,)."""

    colors: np.ndarray
    """Final cluster colors, shape (K, 3)."""

    seeds: np.ndarray
    """Initial cluster colors, shape (K, 3)."""

    counts: np.ndarray
    """Pixels per cluster for the final assignment, shape (K,)."""

    status: ClusteringStatus
    """Terminal state: CONVERGED, MAXITERS_REACHED or CANCELLED."""

    shape: Tuple[int, int]
    """(H, W) of the clustered image."""

    history: List[IterationState] = field(default_factory=list)
    """Every completed iteration, in order."""

    @property
    def n_clusters(self) -> int:
        return len(self.colors)

    @property
    def n_iter(self) -> int:
        """Number of completed iterations."""
        return len(self.history)

    @property
    def converged(self) -> bool:
        return self.status is ClusteringStatus.CONVERGED

    @property
    def final_rmse(self) -> Optional[float]:
        return self.history[-1].rmse if self.history else None

    def reshape_labels(self) -> np.ndarray:
        """Labels as an (H, W) array."""
        return self.labels.reshape(self.shape)

    def render(self, buffer: PixelBuffer) -> PixelBuffer:
        """
        Segmented image: every pixel painted with its cluster's final color.

        The result holds at most n_clusters distinct colors and is expressed
        in the same colorspace as buffer.
        """
        if buffer.shape != self.shape:
            raise ValueError(
                f"Buffer shape {buffer.shape} doesn't match clustered shape {self.shape}"
            )
        return PixelBuffer(render_labels(self.labels, self.colors, self.shape), buffer.colorspace)


class _Cancelled(Exception):
    """Internal signal: the cancel event was set during an iteration."""


# ============================================================================
# Engine
# ============================================================================

class KMeansColorClusterer:
    """
    K-means clustering of pixel colors from explicit seeds.

    Example:
        >>> clusterer = KMeansColorClusterer(KMeansColorConfig(maxiters=10))
        >>> result = clusterer.fit(buffer, seeds)
        >>> segmented = result.render(buffer)
        >>> print(f"{result.status.value} after {result.n_iter} iterations")
    """

    def __init__(
        self,
        config: Optional[KMeansColorConfig] = None,
        on_iteration: Optional[Callable[[IterationState], None]] = None,
        cancel_event: Optional[threading.Event] = None
    ):
        """
        Args:
            config: Configuration parameters. If None, uses defaults.
            on_iteration: Called with each completed IterationState
            cancel_event: When set, the loop stops and renders from the
                          last completed iteration
        """
        self.config = config or KMeansColorConfig()
        self.on_iteration = on_iteration
        self.cancel_event = cancel_event
        self.status = ClusteringStatus.SEEDED

    def fit(self, buffer: PixelBuffer, seeds: np.ndarray) -> ClusteringResult:
        """
        Cluster the buffer's pixels starting from seeds.

        Args:
            buffer: Pixels in the working colorspace
            seeds: Initial cluster colors, shape (K, 3) with K >= 2

        Returns:
            result: ClusteringResult in a terminal state
        """
        seeds = np.array(seeds, dtype=np.float64)
        if seeds.ndim != 2 or seeds.shape[1] != 3:
            raise ValueError(f"seeds must have shape (K, 3), got {seeds.shape}")
        if len(seeds) < 2:
            raise ValueError(f"At least 2 seeds required, got {len(seeds)}")

        pixels = buffer.pixels
        self.status = ClusteringStatus.SEEDED
        logger.info(
            "Clustering %dx%d pixels into %d clusters (maxiters=%d, convergence=%g)",
            buffer.width, buffer.height, len(seeds),
            self.config.maxiters, self.config.convergence
        )

        if self.config.n_jobs > 1:
            with ThreadPoolExecutor(max_workers=self.config.n_jobs) as executor:
                return self._iterate(buffer, pixels, seeds, executor)
        return self._iterate(buffer, pixels, seeds, None)

    def _iterate(
        self,
        buffer: PixelBuffer,
        pixels: np.ndarray,
        seeds: np.ndarray,
        executor: Optional[Executor]
    ) -> ClusteringResult:
        colors = seeds
        labels = None
        counts = None
        history: List[IterationState] = []

        for iteration in range(1, self.config.maxiters + 1):
            self.status = ClusteringStatus.ITERATING
            try:
                self._check_cancelled()
                new_labels = self._assign(pixels, colors, executor)
                self._check_cancelled()
                updated, new_counts = self._update(pixels, new_labels, colors, executor)
            except _Cancelled:
                self.status = ClusteringStatus.CANCELLED
                break

            stop, value = has_converged(colors, updated, self.config.convergence)
            state = IterationState(iteration, colors, updated, value, new_counts)
            history.append(state)
            labels, colors, counts = new_labels, updated, new_counts

            logger.debug(
                "iteration=%d 100*rmse=%.6f empty_clusters=%d",
                iteration, value, int(np.sum(new_counts == 0))
            )
            if self.on_iteration is not None:
                self.on_iteration(state)

            if stop:
                self.status = ClusteringStatus.CONVERGED
                break
        else:
            self.status = ClusteringStatus.MAXITERS_REACHED

        if labels is None:
            # cancelled before any iteration completed
            labels = assign_nearest(pixels, colors)
            counts = np.bincount(labels, minlength=len(colors))

        logger.info(
            "Clustering %s after %d iteration(s)%s",
            self.status.value, len(history),
            f", 100*rmse={history[-1].rmse:.6f}" if history else ""
        )

        return ClusteringResult(
            labels=labels,
            colors=colors,
            seeds=seeds,
            counts=counts,
            status=self.status,
            shape=buffer.shape,
            history=history
        )

    def _check_cancelled(self):
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise _Cancelled()

    def _chunks(self, n_pixels: int) -> Iterator[slice]:
        size = self.config.chunk_size
        for start in range(0, n_pixels, size):
            yield slice(start, min(start + size, n_pixels))

    def _map_chunks(self, func, n_pixels: int, executor: Optional[Executor]) -> list:
        """Apply func to every chunk slice; results are in chunk order."""
        def run(chunk: slice):
            self._check_cancelled()
            return func(chunk)

        chunks = list(self._chunks(n_pixels))
        if executor is None or len(chunks) == 1:
            return [run(chunk) for chunk in chunks]
        return list(executor.map(run, chunks))

    def _assign(self, pixels: np.ndarray, colors: np.ndarray, executor: Optional[Executor]) -> np.ndarray:
        parts = self._map_chunks(
            lambda chunk: assign_nearest(pixels[chunk], colors),
            len(pixels), executor
        )
        return np.concatenate(parts)

    def _update(
        self,
        pixels: np.ndarray,
        labels: np.ndarray,
        colors: np.ndarray,
        executor: Optional[Executor]
    ) -> Tuple[np.ndarray, np.ndarray]:
        partials = self._map_chunks(
            lambda chunk: partial_sums(pixels[chunk], labels[chunk], colors),
            len(pixels), executor
        )
        return combine_means(colors, partials)
