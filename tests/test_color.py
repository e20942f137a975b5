import numpy as np
import pytest

from colorkmeans import ColorspaceUnsupported
from colorkmeans.color import Colorspace, parse_color, srgb_to_working, to_hex, working_to_srgb


def test_parse_color_forms():
    assert parse_color("red") == (1.0, 0.0, 0.0)
    assert parse_color("#00f") == (0.0, 0.0, 1.0)
    assert parse_color("rgb(255,255,255)") == (1.0, 1.0, 1.0)


def test_to_hex():
    assert to_hex((1.0, 0.0, 0.0)) == "#FF0000"
    assert to_hex((0.0, 0.5, 1.0)) == "#0080FF"
    assert to_hex((1.2, -0.1, 0.0)) == "#FF0000"


def test_colorspace_names_are_case_insensitive():
    assert Colorspace.from_name("ycbcr") is Colorspace.YCBCR
    assert Colorspace.from_name("Lab") is Colorspace.LAB
    assert Colorspace.from_name(Colorspace.HSL) is Colorspace.HSL
    with pytest.raises(ColorspaceUnsupported):
        Colorspace.from_name("XYZ")


def test_srgb_is_identity(random_rgb):
    assert np.array_equal(srgb_to_working(random_rgb, Colorspace.SRGB), random_rgb)
    assert np.array_equal(working_to_srgb(random_rgb, Colorspace.SRGB), random_rgb)


@pytest.mark.parametrize("space", [s for s in Colorspace if s is not Colorspace.SRGB])
def test_round_trip(space, random_rgb):
    working = srgb_to_working(random_rgb, space)
    assert working.shape == random_rgb.shape
    assert working.min() >= 0.0 and working.max() <= 1.0
    assert np.allclose(working_to_srgb(working, space), random_rgb, atol=2e-3)


def test_known_working_values():
    gray = np.array([0.5, 0.5, 0.5])
    assert np.allclose(srgb_to_working(gray, Colorspace.YCBCR), [0.5, 0.5, 0.5], atol=1e-4)
    assert np.allclose(srgb_to_working((1.0, 1.0, 1.0), Colorspace.LAB), [1.0, 128 / 255, 128 / 255], atol=2e-3)
    assert np.allclose(srgb_to_working((1.0, 0.0, 0.0), Colorspace.HSV), [0.0, 1.0, 1.0], atol=1e-6)
    assert np.allclose(srgb_to_working((0.0, 0.0, 1.0), Colorspace.HSL), [240 / 360, 1.0, 0.5], atol=1e-6)
    assert np.allclose(srgb_to_working((0.5, 0.5, 0.5), Colorspace.RGB), [0.2140] * 3, atol=1e-4)


def test_srgb_values_are_clipped():
    clipped = srgb_to_working(np.array([1.2, -0.1, 0.5]), Colorspace.SRGB)
    assert clipped.tolist() == [1.0, 0.0, 0.5]
