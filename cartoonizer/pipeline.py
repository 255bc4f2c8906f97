# cartoonizer/pipeline.py
import logging
import time

import cv2
import numpy as np

from .config import CartoonConfig
from .errors import InvalidInputError, opencv_call
from .halftone import halftone
from .metrics import compute_metrics
from .stylize import Cartoonizer

logger = logging.getLogger(__name__)


def _resize_max(img, max_size):
    """
    Resize image while preserving aspect ratio, only ever shrinking.
    """
    h, w = img.shape[:2]
    if max(h, w) <= max_size:
        return img
    scale = max_size / max(h, w)
    new_w = max(1, int(w * scale))
    new_h = max(1, int(h * scale))
    with opencv_call("resize (max_size)"):
        return cv2.resize(img, (new_w, new_h), interpolation=cv2.INTER_AREA)


def run_cartoon(image, config=None, *, use_halftone=None):
    """
    Runs the cartoon pipeline and returns:
      - output image (uint8 RGB)
      - evaluation metrics (dict)

    Args:
        image: HxWx3 uint8 RGB image
        config: CartoonConfig, defaults if None
        use_halftone: overrides config.use_halftone when not None
    """
    config = config or CartoonConfig()
    config.validate()
    if use_halftone is None:
        use_halftone = config.use_halftone

    # ======================
    # 1. Validate
    # ======================
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] != 3:
        raise InvalidInputError(f"Expected an HxWx3 RGB image, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise InvalidInputError(f"Expected a uint8 image, got {image.dtype}")

    t0 = time.time()

    # ======================
    # 2. Resize (aspect-ratio preserved)
    # ======================
    if config.max_size is not None:
        image = _resize_max(image, config.max_size)

    h, w = image.shape[:2]
    logger.info("Cartoonizing %dx%d image (halftone=%s)", w, h, use_halftone)

    engine = Cartoonizer(config)

    # ======================
    # 3. Color regions
    # ======================
    lab = engine.rgb_to_lab(image)
    segmented = engine.segment_colors(lab)
    logger.info("Segmented colors")

    # ======================
    # 4. Outlines
    # ======================
    blurred = engine.anisotropic_blur(lab)
    gray = engine.gray_from_lab(blurred)
    edges = engine.get_edges(gray)
    logger.info("Extracted edges (%.1f%% of pixels)", 100.0 * engine.edge_coverage(edges))

    # ======================
    # 5. Halftone (optional)
    # ======================
    colored = engine.lab_to_rgb(segmented)
    if use_halftone:
        colored = halftone(colored, config.halftone)

    # ======================
    # 6. Combine
    # ======================
    output = engine.combine_image_and_edges(colored, edges)

    # ======================
    # 7. Metrics
    # ======================
    metrics = compute_metrics(image, output, edges)
    logger.info("Finished in %.2fs: %s", time.time() - t0, metrics)

    return output, metrics
