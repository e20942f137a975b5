"""
colorkmeans - K-Means Color Clustering for Image Segmentation.

Partitions the pixels of an image into K clusters by color similarity in a
configurable working colorspace and renders each pixel with its cluster's
mean color.

Example:
    >>> from colorkmeans import KMeansColorConfig, segment_image
    >>> config = KMeansColorConfig(numcolors=6, colorspace='LAB')
    >>> result = segment_image('photo.jpg', 'photo_6.png', config)
    >>> print(result.status.value, result.n_iter)
"""

from .buffer import PixelBuffer
from .color import Colorspace
from .config import KMeansColorConfig, SeedingMethod, ViewMode
from .engine import ClusteringResult, ClusteringStatus, IterationState, KMeansColorClusterer
from .errors import (
    KMeansColorError,
    InvalidOption,
    InvalidSeedColor,
    ColorspaceUnsupported,
    MissingInputFile,
    MissingOutputFile,
    UnreadableInput,
    CodecFailure
)
from .pipeline import segment_buffer, segment_image

__version__ = "0.1.0"

__all__ = [
    'PixelBuffer',
    'Colorspace',
    'KMeansColorConfig',
    'SeedingMethod',
    'ViewMode',
    'ClusteringResult',
    'ClusteringStatus',
    'IterationState',
    'KMeansColorClusterer',
    'KMeansColorError',
    'InvalidOption',
    'InvalidSeedColor',
    'ColorspaceUnsupported',
    'MissingInputFile',
    'MissingOutputFile',
    'UnreadableInput',
    'CodecFailure',
    'segment_buffer',
    'segment_image',
]
