"""
Color swatch previews.

Renders a row of color patches labelled with their working colorspace hex
values, for inspecting seed and final cluster colors.
"""

from pathlib import Path
from typing import Optional, Sequence, Tuple, Union
import numpy as np
import matplotlib.pyplot as plt

from ..color import Colorspace, to_hex, working_to_srgb


def plot_swatches(
    colors: np.ndarray,
    colorspace: Colorspace = Colorspace.SRGB,
    title: Optional[str] = None,
    counts: Optional[Sequence[int]] = None,
    swatch_size: Tuple[float, float] = (1.2, 1.4)
) -> plt.Figure:
    """
    Create a single-row swatch figure.

    Patches are drawn in sRGB so they display correctly; labels show the
    working colorspace hex value (and pixel count when given).

    Args:
        colors: Colors in colorspace, shape (K, 3)
        colorspace: Colorspace of colors
        title: Figure title
        counts: Optional pixel count per color
        swatch_size: (width, height) in inches of each swatch

    Returns:
        fig: Matplotlib figure with one patch per color
    """
    colors = np.asarray(colors, dtype=np.float64).reshape(-1, 3)
    srgb = working_to_srgb(colors, colorspace)
    n_colors = len(colors)

    fig, axes = plt.subplots(
        1, n_colors,
        figsize=(swatch_size[0] * n_colors, swatch_size[1]),
        squeeze=False
    )

    for idx, ax in enumerate(axes[0]):
        ax.imshow(np.ones((1, 1, 3)) * srgb[idx])
        ax.axis('off')
        label = to_hex(colors[idx])
        if counts is not None:
            label += f"\n{int(counts[idx])} px"
        ax.set_title(label, fontsize=9)

    if title:
        fig.suptitle(title, fontsize=11)
    fig.tight_layout()

    return fig


def save_swatches(
    colors: np.ndarray,
    path: Union[str, Path],
    colorspace: Colorspace = Colorspace.SRGB,
    title: Optional[str] = None,
    counts: Optional[Sequence[int]] = None
) -> Path:
    """Render swatches to an image file and release the figure."""
    fig = plot_swatches(colors, colorspace, title=title, counts=counts)
    try:
        fig.savefig(path, dpi=100)
    finally:
        plt.close(fig)
    return Path(path)
