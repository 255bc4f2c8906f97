"""Tests for cartoon metrics."""

import numpy as np
import pytest

from cartoonizer.metrics import compute_metrics, edge_coverage


def test_identical_images():
    rng = np.random.default_rng(3)
    image = rng.integers(0, 256, size=(32, 32, 3), dtype=np.uint8)
    metrics = compute_metrics(image, image.copy())
    assert metrics["SSIM (Structure)"] == pytest.approx(1.0)
    assert metrics["Color Corr"] == pytest.approx(1.0)


def test_color_corr_drops_for_different_palette():
    """A recolored output correlates less than an unchanged one."""
    rng = np.random.default_rng(6)
    image = rng.integers(0, 128, size=(32, 32, 3), dtype=np.uint8)
    metrics = compute_metrics(image, (255 - image).astype(np.uint8))
    assert metrics["Color Corr"] < 0.5


def test_edge_coverage_counts_mask_zeros():
    edges = np.full((8, 8), 255, dtype=np.uint8)
    edges[0, :4] = 0
    assert edge_coverage(edges) == pytest.approx(4 / 64)


def test_edge_coverage_ignores_black_output_pixels():
    """Dark pixels in the output are not outline unless the mask says so."""
    rng = np.random.default_rng(4)
    image = rng.integers(1, 256, size=(16, 16, 3), dtype=np.uint8)
    edges = np.full((16, 16), 255, dtype=np.uint8)
    metrics = compute_metrics(image, np.zeros_like(image), edges)
    assert metrics["Edge Coverage"] == 0.0

    edges[:] = 0
    metrics = compute_metrics(image, np.zeros_like(image), edges)
    assert metrics["Edge Coverage"] == 1.0


def test_edge_coverage_needs_mask():
    rng = np.random.default_rng(7)
    image = rng.integers(0, 256, size=(16, 16, 3), dtype=np.uint8)
    assert "Edge Coverage" not in compute_metrics(image, image.copy())


def test_size_mismatch_is_aligned():
    rng = np.random.default_rng(5)
    original = rng.integers(0, 256, size=(40, 40, 3), dtype=np.uint8)
    output = rng.integers(0, 256, size=(20, 20, 3), dtype=np.uint8)
    edges = np.full((20, 20), 255, dtype=np.uint8)
    metrics = compute_metrics(original, output, edges)
    assert set(metrics) == {"SSIM (Structure)", "Color Corr", "Edge Coverage"}
