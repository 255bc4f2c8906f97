# cartoonizer/metrics.py
import cv2
import numpy as np
from skimage.metrics import structural_similarity as ssim


def _match_size(src, target):
    """
    Resize src image to match target spatial dimensions.
    """
    return cv2.resize(src, (target.shape[1], target.shape[0]))


def edge_coverage(edges):
    """Fraction of pixels an outline mask draws as outline (value 0)."""
    return float(np.count_nonzero(edges == 0)) / max(edges.size, 1)


def compute_metrics(original, output, edges=None):
    """
    Compute quantitative metrics for a cartoon rendering.

    Both images are uint8 RGB.
    The original is internally resized to match output resolution.
    "Edge Coverage" is only reported when the outline mask is given.
    """

    # ======================
    # Align spatial sizes
    # ======================
    if original.shape != output.shape:
        original = _match_size(original, output)

    # ======================
    # SSIM (structure preservation)
    # ======================
    gray_i = cv2.cvtColor(original, cv2.COLOR_RGB2GRAY)
    gray_o = cv2.cvtColor(output, cv2.COLOR_RGB2GRAY)

    # SSIM window must fit inside the image and be odd
    win_size = min(7, min(gray_o.shape))
    if win_size % 2 == 0:
        win_size -= 1

    if win_size >= 3:
        ssim_score = ssim(gray_i, gray_o, data_range=255, win_size=win_size)
    else:
        ssim_score = float("nan")

    # ======================
    # Color histogram similarity
    # ======================
    hist_in = cv2.calcHist(
        [original],
        [0, 1, 2],
        None,
        [8, 8, 8],
        [0, 256, 0, 256, 0, 256]
    )
    hist_out = cv2.calcHist(
        [output],
        [0, 1, 2],
        None,
        [8, 8, 8],
        [0, 256, 0, 256, 0, 256]
    )

    # compareHist expects flat histograms
    hist_in = hist_in.reshape(-1, 1)
    hist_out = hist_out.reshape(-1, 1)

    cv2.normalize(hist_in, hist_in)
    cv2.normalize(hist_out, hist_out)

    hist_score = cv2.compareHist(
        hist_in,
        hist_out,
        cv2.HISTCMP_CORREL
    )

    metrics = {
        "SSIM (Structure)": round(float(ssim_score), 4),
        "Color Corr": round(float(hist_score), 4)
    }

    # ======================
    # Outline coverage
    # ======================
    if edges is not None:
        metrics["Edge Coverage"] = round(edge_coverage(edges), 4)

    return metrics
