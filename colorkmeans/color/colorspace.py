"""
Colorspace Conversion

Converts pixel arrays between sRGB and the working colorspace used for
distance computation. Every working colorspace is normalized so that each
channel lies in [0, 1]:

    sRGB   R, G, B                       (identity)
    RGB    linear-light R, G, B          (sRGB transfer curve removed)
    YCbCr  Y, Cb, Cr                     (ITU-R BT.601, chroma offset 0.5)
    LAB    L/100, (a+128)/255, (b+128)/255
    HSV    H/360, S, V
    HSL    H/360, S, L

Conversions other than the transfer curve go through OpenCV's cvtColor.

Hue is scaled linearly, so wrap-around is not handled: hues 0.99 and 0.01
are treated as far apart in HSV and HSL.
"""

from enum import Enum
from typing import Union
import numpy as np
import cv2

from ..errors import ColorspaceUnsupported


class Colorspace(Enum):
    """Supported working colorspaces."""
    SRGB = "sRGB"
    RGB = "RGB"
    YCBCR = "YCbCr"
    LAB = "LAB"
    HSV = "HSV"
    HSL = "HSL"

    @classmethod
    def from_name(cls, name: Union[str, 'Colorspace']) -> 'Colorspace':
        """
        Look up a colorspace by name, ignoring case.

        Raises:
            ColorspaceUnsupported: If the name is not a supported colorspace
        """
        if isinstance(name, cls):
            return name
        for space in cls:
            if str(name).strip().lower() == space.value.lower():
                return space
        supported = ', '.join(space.value for space in cls)
        raise ColorspaceUnsupported(
            f"Unsupported colorspace '{name}', expected one of: {supported}"
        )


# cv2 channel orders differ from the names above
_YCRCB_TO_YCBCR = [0, 2, 1]
_HLS_TO_HSL = [0, 2, 1]


def _cvt(colors: np.ndarray, code: int) -> np.ndarray:
    """Run cvtColor on an (..., 3) array of any leading shape."""
    shape = colors.shape
    flat = np.ascontiguousarray(colors.reshape(-1, 1, 3), dtype=np.float32)
    converted = cv2.cvtColor(flat, code)
    return converted.reshape(shape).astype(np.float64)


def _srgb_to_linear(colors: np.ndarray) -> np.ndarray:
    return np.where(
        colors <= 0.04045,
        colors / 12.92,
        ((colors + 0.055) / 1.055) ** 2.4
    )


def _linear_to_srgb(colors: np.ndarray) -> np.ndarray:
    return np.where(
        colors <= 0.0031308,
        colors * 12.92,
        1.055 * np.power(np.clip(colors, 0.0, None), 1.0 / 2.4) - 0.055
    )


def srgb_to_working(colors: np.ndarray, space: Colorspace) -> np.ndarray:
    """
    Convert sRGB colors to the working colorspace.

    Args:
        colors: sRGB values in [0, 1], shape (..., 3)
        space: Target working colorspace

    Returns:
        converted: Working colorspace values in [0, 1], same shape, float64
    """
    colors = np.asarray(colors, dtype=np.float64)
    if colors.shape[-1] != 3:
        raise ValueError(f"colors must have 3 channels, got shape {colors.shape}")

    if space is Colorspace.SRGB:
        return np.clip(colors, 0.0, 1.0)

    if space is Colorspace.RGB:
        converted = _srgb_to_linear(colors)
    elif space is Colorspace.YCBCR:
        converted = _cvt(colors, cv2.COLOR_RGB2YCrCb)[..., _YCRCB_TO_YCBCR]
    elif space is Colorspace.LAB:
        lab = _cvt(colors, cv2.COLOR_RGB2Lab)
        converted = np.empty_like(lab)
        converted[..., 0] = lab[..., 0] / 100.0
        converted[..., 1:] = (lab[..., 1:] + 128.0) / 255.0
    elif space is Colorspace.HSV:
        converted = _cvt(colors, cv2.COLOR_RGB2HSV)
        converted[..., 0] /= 360.0
    elif space is Colorspace.HSL:
        converted = _cvt(colors, cv2.COLOR_RGB2HLS)[..., _HLS_TO_HSL]
        converted[..., 0] /= 360.0
    else:
        raise ColorspaceUnsupported(f"No conversion for colorspace {space}")

    return np.clip(converted, 0.0, 1.0)


def working_to_srgb(colors: np.ndarray, space: Colorspace) -> np.ndarray:
    """
    Convert working colorspace values back to sRGB.

    Args:
        colors: Working colorspace values in [0, 1], shape (..., 3)
        space: Colorspace the values are expressed in

    Returns:
        srgb: sRGB values clipped to [0, 1], same shape, float64
    """
    colors = np.asarray(colors, dtype=np.float64)
    if colors.shape[-1] != 3:
        raise ValueError(f"colors must have 3 channels, got shape {colors.shape}")

    if space is Colorspace.SRGB:
        return np.clip(colors, 0.0, 1.0)

    if space is Colorspace.RGB:
        srgb = _linear_to_srgb(colors)
    elif space is Colorspace.YCBCR:
        srgb = _cvt(colors[..., _YCRCB_TO_YCBCR], cv2.COLOR_YCrCb2RGB)
    elif space is Colorspace.LAB:
        lab = np.empty_like(colors)
        lab[..., 0] = colors[..., 0] * 100.0
        lab[..., 1:] = colors[..., 1:] * 255.0 - 128.0
        srgb = _cvt(lab, cv2.COLOR_Lab2RGB)
    elif space is Colorspace.HSV:
        hsv = colors.copy()
        hsv[..., 0] *= 360.0
        srgb = _cvt(hsv, cv2.COLOR_HSV2RGB)
    elif space is Colorspace.HSL:
        hls = colors[..., _HLS_TO_HSL].copy()
        hls[..., 0] *= 360.0
        srgb = _cvt(hls, cv2.COLOR_HLS2RGB)
    else:
        raise ColorspaceUnsupported(f"No conversion for colorspace {space}")

    return np.clip(srgb, 0.0, 1.0)
