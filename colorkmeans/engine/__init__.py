"""
K-means clustering engine for pixel colors.
"""

from .distance import rmse, aggregate_rmse
from .steps import (
    assign_nearest,
    partial_sums,
    combine_means,
    update_means,
    has_converged,
    render_labels
)
from .kmeans import (
    ClusteringStatus,
    IterationState,
    ClusteringResult,
    KMeansColorClusterer
)

__all__ = [
    'rmse',
    'aggregate_rmse',
    'assign_nearest',
    'partial_sums',
    'combine_means',
    'update_means',
    'has_converged',
    'render_labels',
    'ClusteringStatus',
    'IterationState',
    'ClusteringResult',
    'KMeansColorClusterer',
]
