"""
Pixel Buffer

In-memory image of color vectors in a given colorspace; the substrate every
clustering step operates on.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np

from .color import Colorspace, srgb_to_working, working_to_srgb


@dataclass(frozen=True)
class PixelBuffer:
    """
    Dense (H, W, 3) array of colors with channels in [0, 1].

    Example:
        >>> rgb = np.zeros((2, 2, 3))
        >>> buf = PixelBuffer.from_srgb(rgb, Colorspace.LAB)
        >>> buf.pixels.shape
        (4, 3)
    """
    data: np.ndarray
    """Color values, shape (H, W, 3), float64."""

    colorspace: Colorspace = Colorspace.SRGB
    """Colorspace the values are expressed in."""

    def __post_init__(self):
        """Validate shape and freeze the array."""
        data = np.asarray(self.data, dtype=np.float64)
        if data.ndim != 3 or data.shape[2] != 3:
            raise ValueError(f"data must have shape (H, W, 3), got {data.shape}")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError(f"image must not be empty, got shape {data.shape}")
        data = data.copy()
        data.flags.writeable = False
        object.__setattr__(self, 'data', data)

    @classmethod
    def from_srgb(cls, rgb: np.ndarray, colorspace: Colorspace = Colorspace.SRGB) -> 'PixelBuffer':
        """Build a buffer from sRGB values in [0, 1], converting to colorspace."""
        return cls(srgb_to_working(rgb, colorspace), colorspace)

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        """(H, W) dimensions."""
        return self.data.shape[:2]

    @property
    def n_pixels(self) -> int:
        return self.height * self.width

    @property
    def pixels(self) -> np.ndarray:
        """Flat read-only view of the colors, shape (H*W, 3)."""
        return self.data.reshape(-1, 3)

    def unique_colors(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Distinct colors and their pixel counts.

        Returns:
            colors: Unique colors, shape (U, 3), lexicographically sorted
            counts: Number of pixels holding each color, shape (U,)
        """
        colors, counts = np.unique(self.pixels, axis=0, return_counts=True)
        return colors, counts

    def to_srgb(self) -> np.ndarray:
        """sRGB values in [0, 1], shape (H, W, 3)."""
        return working_to_srgb(self.data, self.colorspace)
