"""
Seed Initialization

Strategies that produce the ordered list of initial cluster colors.

Three strategies are provided:
1. Explicit: user-supplied color list, in the order given
2. Median cut: weighted median-cut palette of the image (default)
3. K-means++: scikit-learn's kmeans++ sampling over the image's colors

Automatic strategies may return fewer colors than requested for images with
few distinct colors.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Union
import logging
import numpy as np
from sklearn.cluster import kmeans_plusplus

from ..buffer import PixelBuffer
from ..color import parse_seed_colors, to_hex
from ..config import KMeansColorConfig, SeedingMethod

logger = logging.getLogger(__name__)


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class BaseSeedingStrategy(ABC):
    """
    Interface for seed color selection.

    Implementations must be deterministic for a fixed image and color count,
    and return colors in the working colorspace of the buffer.
    """

    @abstractmethod
    def select(self, buffer: PixelBuffer, n_colors: int) -> np.ndarray:
        """
        Choose seed colors for buffer.

        Args:
            buffer: Image in the working colorspace
            n_colors: Requested number of colors

        Returns:
            seeds: Colors of shape (M, 3), M <= n_colors for automatic
                   strategies, in discovery order
        """
        pass


# ============================================================================
# Implementations
# ============================================================================

class ExplicitSeeds(BaseSeedingStrategy):
    """Seeds taken from a list of color specifications."""

    def __init__(self, seedcolors: Union[str, Sequence[str]]):
        self.seedcolors = seedcolors

    def select(self, buffer: PixelBuffer, n_colors: Optional[int] = None) -> np.ndarray:
        # n_colors is implied by the list itself
        return parse_seed_colors(self.seedcolors, buffer.colorspace)


class MedianCutSeeds(BaseSeedingStrategy):
    """
    Weighted median-cut quantization.

    Starts from one box holding every distinct color. The box with the
    widest single-channel range is split at the pixel-weighted median of
    that channel, until n_colors boxes exist or no box holds more than one
    color. Each seed is the pixel-weighted mean of a box; seeds follow box
    creation order.
    """

    def select(self, buffer: PixelBuffer, n_colors: int) -> np.ndarray:
        colors, counts = buffer.unique_colors()
        boxes: List[np.ndarray] = [np.arange(len(colors))]

        while len(boxes) < n_colors:
            target = self._widest_box(colors, boxes)
            if target is None:
                break
            lower, upper = self._split(colors, counts, boxes[target])
            boxes[target] = lower
            boxes.append(upper)

        return np.array([
            np.average(colors[idx], axis=0, weights=counts[idx]) for idx in boxes
        ])

    @staticmethod
    def _widest_box(colors: np.ndarray, boxes: List[np.ndarray]) -> Optional[int]:
        """Index of the splittable box with the widest channel range (lowest index on ties)."""
        target, widest = None, 0.0
        for i, idx in enumerate(boxes):
            if len(idx) < 2:
                continue
            box = colors[idx]
            spread = float(np.max(box.max(axis=0) - box.min(axis=0)))
            if spread > widest:
                target, widest = i, spread
        return target

    @staticmethod
    def _split(colors: np.ndarray, counts: np.ndarray, idx: np.ndarray):
        box = colors[idx]
        channel = int(np.argmax(box.max(axis=0) - box.min(axis=0)))
        order = idx[np.argsort(box[:, channel], kind='stable')]

        cumulative = np.cumsum(counts[order])
        cut = int(np.searchsorted(cumulative, cumulative[-1] / 2.0, side='left')) + 1
        cut = min(max(cut, 1), len(order) - 1)
        return order[:cut], order[cut:]


class KMeansPlusPlusSeeds(BaseSeedingStrategy):
    """
    Seeds sampled with kmeans++ over the image's distinct colors, weighted
    by pixel count. Deterministic for a fixed random_state.
    """

    def __init__(self, random_state: int = 42):
        self.random_state = random_state

    def select(self, buffer: PixelBuffer, n_colors: int) -> np.ndarray:
        colors, counts = buffer.unique_colors()
        if len(colors) <= n_colors:
            return colors

        centers, _ = kmeans_plusplus(
            colors,
            n_clusters=n_colors,
            sample_weight=counts.astype(np.float64),
            random_state=self.random_state
        )
        return np.asarray(centers, dtype=np.float64)


# ============================================================================
# Factory and initialization
# ============================================================================

def create_seeding_strategy(config: KMeansColorConfig) -> BaseSeedingStrategy:
    """
    Strategy for a configuration: explicit seeds when seedcolors is set,
    otherwise the configured automatic method.
    """
    if config.seedcolors is not None:
        return ExplicitSeeds(config.seedcolors)
    if config.seeding is SeedingMethod.KMEANS_PLUSPLUS:
        return KMeansPlusPlusSeeds(config.random_state)
    return MedianCutSeeds()


def initialize_seeds(
    buffer: PixelBuffer,
    config: KMeansColorConfig,
    strategy: Optional[BaseSeedingStrategy] = None
) -> np.ndarray:
    """
    Initial cluster colors for buffer.

    If an automatic strategy finds fewer colors than config.numcolors the
    cluster count is reduced to match. A single color is repeated so that
    at least two clusters exist; the duplicate loses every tie and stays
    empty.

    Args:
        buffer: Image in the working colorspace
        config: Clustering configuration
        strategy: Override for create_seeding_strategy(config)

    Returns:
        seeds: Colors of shape (K, 3), K >= 2
    """
    strategy = strategy or create_seeding_strategy(config)
    seeds = np.asarray(strategy.select(buffer, config.numcolors), dtype=np.float64)

    if len(seeds) < config.numcolors:
        logger.info(
            "Image has only %d distinct seed color(s); reducing numcolors from %d",
            len(seeds), config.numcolors
        )
    if len(seeds) == 1:
        seeds = np.vstack([seeds, seeds])

    logger.debug("Seed colors: %s", ' '.join(to_hex(color) for color in seeds))
    return seeds
