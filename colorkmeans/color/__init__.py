"""
Color utilities: colorspace conversion, color parsing and hex formatting.
"""

from .colorspace import Colorspace, srgb_to_working, working_to_srgb
from .parse import Color, parse_color, parse_seed_colors, split_seed_colors, to_hex

__all__ = [
    'Colorspace',
    'srgb_to_working',
    'working_to_srgb',
    'Color',
    'parse_color',
    'parse_seed_colors',
    'split_seed_colors',
    'to_hex',
]
