"""
Diagnostic views: hex color listings, progress lines and swatch previews.
"""

from .swatches import plot_swatches, save_swatches
from .reporter import ViewReporter, format_progress

__all__ = ['plot_swatches', 'save_swatches', 'ViewReporter', 'format_progress']
