import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest
from PIL import Image

from colorkmeans import Colorspace, PixelBuffer

RED = (1.0, 0.0, 0.0)
BLUE = (0.0, 0.0, 1.0)


def make_image(path, rgb, mode="RGB"):
    """Write an (H, W, 3) uint8 array (or a fill color with size) as an image file."""
    Image.fromarray(np.asarray(rgb, dtype=np.uint8)).convert(mode).save(path)
    return path


@pytest.fixture
def red_blue_buffer():
    return PixelBuffer(np.array([[RED, RED], [BLUE, BLUE]]), Colorspace.SRGB)


@pytest.fixture
def random_rgb():
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(24, 32, 3)).astype(np.float64) / 255.0


@pytest.fixture
def random_buffer(random_rgb):
    return PixelBuffer(random_rgb, Colorspace.SRGB)
