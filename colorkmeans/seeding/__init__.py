"""
Seed color selection for the clustering engine.
"""

from .strategies import (
    BaseSeedingStrategy,
    ExplicitSeeds,
    MedianCutSeeds,
    KMeansPlusPlusSeeds,
    create_seeding_strategy,
    initialize_seeds
)

__all__ = [
    'BaseSeedingStrategy',
    'ExplicitSeeds',
    'MedianCutSeeds',
    'KMeansPlusPlusSeeds',
    'create_seeding_strategy',
    'initialize_seeds',
]
