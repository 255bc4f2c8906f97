"""Tests for the cartoon effect stages."""

import numpy as np
import pytest

from cartoonizer.config import CartoonConfig
from cartoonizer.errors import ExternalOperationError, InvalidInputError
from cartoonizer.stylize import Cartoonizer


@pytest.fixture
def engine():
    return Cartoonizer()


def test_lab_round_trip_shape(engine):
    image = np.full((12, 16, 3), (200, 120, 40), dtype=np.uint8)
    lab = engine.rgb_to_lab(image)
    back = engine.lab_to_rgb(lab)
    assert lab.shape == back.shape == image.shape
    assert np.abs(back.astype(int) - image.astype(int)).max() <= 3


def test_color_stages_reject_gray(engine):
    gray = np.zeros((10, 10), dtype=np.uint8)
    with pytest.raises(InvalidInputError):
        engine.rgb_to_lab(gray)
    with pytest.raises(InvalidInputError):
        engine.segment_colors(gray)


def test_segment_uniform_image_is_unchanged(engine):
    lab = np.full((20, 20, 3), (150, 128, 128), dtype=np.uint8)
    assert np.array_equal(engine.segment_colors(lab), lab)


def test_segment_reports_opencv_failure(engine):
    """Mean-shift filtering only accepts 8-bit 3-channel images."""
    lab = np.zeros((10, 10, 3), dtype=np.float64)
    with pytest.raises(ExternalOperationError) as excinfo:
        engine.segment_colors(lab)
    assert excinfo.value.operation == "pyrMeanShiftFiltering"


def test_anisotropic_blur_shape(engine):
    rng = np.random.default_rng(0)
    lab = rng.integers(0, 256, size=(16, 20, 3), dtype=np.uint8)
    out = engine.anisotropic_blur(lab)
    assert out.shape == lab.shape
    assert out.dtype == np.uint8


def test_gray_from_lab_takes_lightness(engine):
    lab = np.zeros((5, 6, 3), dtype=np.uint8)
    lab[..., 0] = 77
    lab[..., 1] = 128
    gray = engine.gray_from_lab(lab)
    assert gray.shape == (5, 6)
    assert (gray == 77).all()


def test_flat_image_has_no_edges(engine):
    gray = np.full((20, 20), 120, dtype=np.uint8)
    edges = engine.get_edges(gray)
    assert (edges == 255).all()


def test_dark_band_becomes_outline(engine):
    gray = np.full((32, 32), 200, dtype=np.uint8)
    gray[:, 14:19] = 0
    edges = engine.get_edges(gray)
    assert (edges[:, 16] == 0).all()
    assert (edges[:, :13] == 255).all()


def test_get_edges_without_dilation():
    engine = Cartoonizer(CartoonConfig(dilate_iterations=0))
    gray = np.full((32, 32), 200, dtype=np.uint8)
    gray[:, 16] = 0
    edges = engine.get_edges(gray)
    assert (edges[:, 16] == 0).all()


def test_combine_masks_outline_pixels(engine):
    image = np.full((8, 8, 3), 90, dtype=np.uint8)
    edges = np.full((8, 8), 255, dtype=np.uint8)
    edges[2, 3] = 0
    out = engine.combine_image_and_edges(image, edges)
    assert (out[2, 3] == 0).all()
    assert (out[0, 0] == 90).all()
    assert engine.edge_coverage(edges) == pytest.approx(1 / 64)


def test_combine_rejects_mismatched_mask(engine):
    with pytest.raises(InvalidInputError):
        engine.combine_image_and_edges(
            np.zeros((8, 8, 3), dtype=np.uint8), np.zeros((4, 4), dtype=np.uint8)
        )


def test_invalid_config_rejected():
    with pytest.raises(ValueError):
        Cartoonizer(CartoonConfig(threshold_block_size=8))
