"""
Image file loading and saving.

Decodes files with Pillow into PixelBuffers in the working colorspace, and
encodes rendered buffers back to sRGB files. Codec and filesystem problems
are raised as colorkmeans errors.
"""

from pathlib import Path
from typing import Optional, Union
import logging
import os
import numpy as np
from PIL import Image, UnidentifiedImageError

from ..buffer import PixelBuffer
from ..color import Colorspace
from ..errors import CodecFailure, MissingInputFile, MissingOutputFile, UnreadableInput

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def check_input_path(path: Optional[PathLike]) -> Path:
    """
    Validate an input path before decoding.

    Raises:
        MissingInputFile: If no path was supplied
        UnreadableInput: If the file is absent, unreadable or zero-size
    """
    if path is None or str(path) == '':
        raise MissingInputFile("No input file specified")

    path = Path(path)
    if not path.is_file():
        raise UnreadableInput(f"Input file does not exist: {path}")
    if not os.access(path, os.R_OK):
        raise UnreadableInput(f"Input file is not readable: {path}")
    if path.stat().st_size == 0:
        raise UnreadableInput(f"Input file is empty: {path}")
    return path


def check_output_path(path: Optional[PathLike]) -> Path:
    """
    Raises:
        MissingOutputFile: If no path was supplied
    """
    if path is None or str(path) == '':
        raise MissingOutputFile("No output file specified")
    return Path(path)


def load_image(path: Optional[PathLike], colorspace: Colorspace = Colorspace.SRGB) -> PixelBuffer:
    """
    Load an image file as an opaque PixelBuffer.

    Any alpha channel is dropped; palette and grayscale images are expanded
    to RGB.

    Args:
        path: Image file path
        colorspace: Working colorspace for the returned buffer

    Returns:
        buffer: Pixels in colorspace, channels in [0, 1]

    Raises:
        MissingInputFile: If no path was supplied
        UnreadableInput: If the file is absent, unreadable or empty
        CodecFailure: If Pillow cannot decode the file
    """
    path = check_input_path(path)

    try:
        with Image.open(path) as img:
            rgb = np.asarray(img.convert('RGB'), dtype=np.float64) / 255.0
    except UnidentifiedImageError as exc:
        raise CodecFailure(f"Cannot identify image file: {path}") from exc
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise CodecFailure(f"Failed to decode {path}: {exc}") from exc

    logger.info("Loaded %s (%dx%d)", path, rgb.shape[1], rgb.shape[0])
    return PixelBuffer.from_srgb(rgb, colorspace)


def to_uint8(buffer: PixelBuffer) -> np.ndarray:
    """sRGB 8-bit array of shape (H, W, 3) for a buffer in any colorspace."""
    return np.round(buffer.to_srgb() * 255.0).astype(np.uint8)


def save_image(buffer: PixelBuffer, path: Optional[PathLike]) -> Path:
    """
    Write a buffer to an image file, converting back to sRGB.

    The format is taken from the file extension.

    Raises:
        MissingOutputFile: If no path was supplied
        CodecFailure: If Pillow cannot encode or write the file
    """
    path = check_output_path(path)

    try:
        Image.fromarray(to_uint8(buffer)).save(path)
    except (OSError, ValueError, KeyError) as exc:
        # Pillow raises KeyError/ValueError for unknown extensions
        raise CodecFailure(f"Failed to write {path}: {exc}") from exc

    logger.info("Saved %s", path)
    return path
