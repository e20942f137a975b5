"""
Color specification parsing and hex formatting.
"""

from typing import Iterable, List, Sequence, Tuple, Union
import numpy as np
from PIL import ImageColor

from ..errors import InvalidSeedColor
from .colorspace import Colorspace, srgb_to_working

Color = Tuple[float, float, float]


def parse_color(spec: str) -> Color:
    """
    Parse one opaque color specification into sRGB values in [0, 1].

    Accepts everything Pillow's ImageColor understands: names ('red'),
    '#rgb', '#rrggbb', 'rgb(255,0,0)', 'hsl(0,100%,50%)', ...

    Args:
        spec: Color specification without internal spaces

    Returns:
        color: (r, g, b) floats in [0, 1]

    Raises:
        InvalidSeedColor: If the spec is not a valid opaque color
                          or a channel lies outside 0..255
    """
    try:
        values = ImageColor.getrgb(spec)
    except (ValueError, AttributeError) as exc:
        raise InvalidSeedColor(f"Invalid seed color '{spec}': {exc}") from exc

    if len(values) == 4 and values[3] != 255:
        raise InvalidSeedColor(f"Seed color '{spec}' is not opaque")

    r, g, b = values[:3]
    if not all(0 <= c <= 255 for c in (r, g, b)):
        raise InvalidSeedColor(f"Seed color '{spec}' has channels outside 0..255")
    return (r / 255.0, g / 255.0, b / 255.0)


def split_seed_colors(seedcolors: Union[str, Sequence[str]]) -> List[str]:
    """Split a space-separated seed list; sequences pass through unchanged."""
    if isinstance(seedcolors, str):
        return seedcolors.split()
    return [str(entry) for entry in seedcolors]


def parse_seed_colors(
    seedcolors: Union[str, Sequence[str]],
    space: Colorspace = Colorspace.SRGB
) -> np.ndarray:
    """
    Parse seed color specifications into working colorspace colors.

    Args:
        seedcolors: Space-separated string or sequence of color specs
        space: Working colorspace

    Returns:
        seeds: Array of shape (K, 3), in specification order

    Raises:
        InvalidSeedColor: If any entry is invalid
    """
    entries = split_seed_colors(seedcolors)
    srgb = np.array([parse_color(entry) for entry in entries], dtype=np.float64)
    if srgb.size == 0:
        return np.zeros((0, 3))
    return srgb_to_working(srgb, space)


def to_hex(color: Iterable[float]) -> str:
    """
    Format a [0, 1] color as '#RRGGBB'.

    No colorspace conversion is applied; working colorspace values are
    written as they are.
    """
    channels = np.clip(np.asarray(list(color), dtype=np.float64), 0.0, 1.0)
    return '#' + ''.join(f"{int(round(c * 255)):02X}" for c in channels)
