"""
Per-channel halftone screens.

Each color channel is median-filtered, upsampled, and redrawn as a grid of
dots whose radius and brightness follow the local channel intensity. Every
channel gets its own screen angle so the three dot patterns do not line up,
which keeps moire between channels low. The rendered planes are merged back
into one image.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple

import cv2
import numpy as np

from .config import HalftoneConfig
from .errors import InvalidInputError, OutOfRangeError, opencv_call
from .grid import Angle, GridPositionIterator

logger = logging.getLogger(__name__)

MAX_SAMPLE = 255.0

# Fractional bits for sub-pixel circle centres and radii
_SHIFT = 4


def dot_for_sample(sample, max_radius: float = 7.5, strict: bool = True) -> Tuple[float, int]:
    """
    Map one 8-bit sample to a dot radius and dot brightness.

    Radius grows linearly with intensity. Brightness is ``255 * sqrt(intensity)``
    so faint regions still get a visible, if small, dot.

    Args:
        sample: Channel value in [0, 255].
        max_radius: Radius of a dot at full intensity.
        strict: Raise on out-of-range values instead of clamping them.

    Returns:
        (radius, color) tuple.

    Raises:
        OutOfRangeError: If strict and the intensity or radius is out of range.
    """
    intensity = float(sample) / MAX_SAMPLE
    if not 0.0 <= intensity <= 1.0:
        if strict:
            raise OutOfRangeError(f"Intensity {intensity:.4f} from sample {sample} is outside [0, 1]")
        logger.warning("Clamping intensity %.4f from sample %s into [0, 1]", intensity, sample)
        intensity = min(max(intensity, 0.0), 1.0)

    radius = intensity * max_radius
    if not 0.0 <= radius <= max_radius:
        if strict:
            raise OutOfRangeError(f"Dot radius {radius:.4f} is outside [0, {max_radius}]")
        logger.warning("Clamping dot radius %.4f into [0, %s]", radius, max_radius)
        radius = min(max(radius, 0.0), max_radius)

    color = int(round(MAX_SAMPLE * math.sqrt(intensity)))
    return radius, color


def rasterize_dots(
    plane: np.ndarray,
    angle: Angle,
    config: Optional[HalftoneConfig] = None,
    channel_index: Optional[int] = None,
) -> np.ndarray:
    """
    Draw one dot per rotated grid point onto a black canvas of the plane's size.

    Args:
        plane: 2D uint8 intensity plane (already upsampled).
        angle: Screen angle of the grid.
        config: Halftone parameters, defaults if None.
        channel_index: Only used for error context.

    Returns:
        uint8 canvas with the rendered dots.
    """
    config = config or HalftoneConfig()
    rows, cols = plane.shape[:2]
    canvas = np.zeros((rows, cols), dtype=np.uint8)

    grid = GridPositionIterator(rows, cols, config.spacing, config.offset, angle)
    scale = 1 << _SHIFT
    drawn = 0

    with opencv_call("circle", channel_index):
        for point in grid:
            # The grid filters too, but rounding can land a point on the border
            if not (0 <= point.x < rows and 0 <= point.y < cols):
                continue

            try:
                radius, color = dot_for_sample(
                    plane[point.x, point.y], config.max_radius, config.strict
                )
            except OutOfRangeError as e:
                raise OutOfRangeError(f"Channel {channel_index} at {tuple(point)}: {e}") from e

            # cv2 takes centres as (column, row)
            center = (point.y * scale, point.x * scale)
            cv2.circle(
                canvas,
                center,
                int(round(radius * scale)),
                color,
                thickness=cv2.FILLED,
                lineType=cv2.LINE_AA,
                shift=_SHIFT,
            )
            drawn += 1

    logger.debug("Drew %d dots on a %dx%d canvas (%s)", drawn, rows, cols, grid)
    return canvas


def render_channel(
    plane: np.ndarray,
    channel_index: int,
    angle: Optional[Angle] = None,
    config: Optional[HalftoneConfig] = None,
) -> np.ndarray:
    """
    Halftone a single intensity plane.

    Steps: median denoise, nearest-neighbour upsample, dot rasterization on a
    rotated grid, cubic downsample back to the input size.

    Args:
        plane: 2D uint8 channel plane.
        channel_index: Channel position (0, 1 or 2).
        angle: Screen angle; taken from config.screen_angles if None.
        config: Halftone parameters, defaults if None.

    Returns:
        uint8 plane of the same shape as ``plane``.
    """
    config = config or HalftoneConfig()
    if angle is None:
        if not 0 <= channel_index < len(config.screen_angles):
            raise InvalidInputError(f"No screen angle configured for channel {channel_index}")
        angle = Angle.from_degrees(config.screen_angles[channel_index])

    if plane.ndim != 2:
        raise InvalidInputError(
            f"Channel {channel_index}: expected a 2D plane, got shape {plane.shape}"
        )

    rows, cols = plane.shape
    factor = int(config.upsample_factor)

    logger.debug(
        "Rendering channel %d (%dx%d) at %.1f deg",
        channel_index, rows, cols, angle.degrees()
    )

    # ======================
    # 1. Denoise
    # ======================
    with opencv_call("medianBlur", channel_index):
        filtered = cv2.medianBlur(plane, config.median_kernel_size)

    # ======================
    # 2. Upsample (sub-pixel dot placement)
    # ======================
    with opencv_call("resize (upsample)", channel_index):
        upsampled = cv2.resize(
            filtered,
            (cols * factor, rows * factor),
            interpolation=cv2.INTER_NEAREST
        )

    # ======================
    # 3. Grid walk + dots
    # ======================
    canvas = rasterize_dots(upsampled, angle, config, channel_index)

    # ======================
    # 4. Downsample
    # ======================
    with opencv_call("resize (downsample)", channel_index):
        rendered = cv2.resize(canvas, (cols, rows), interpolation=cv2.INTER_CUBIC)

    return rendered


def halftone(image: np.ndarray, config: Optional[HalftoneConfig] = None) -> np.ndarray:
    """
    Apply a halftone screen to every channel of a 3-channel image.

    Channels are rendered independently, each at its own screen angle, and
    merged back in the original order.

    Args:
        image: HxWx3 uint8 image.
        config: Halftone parameters, defaults if None.

    Returns:
        HxWx3 uint8 halftoned image.

    Raises:
        InvalidInputError: If the image is not 3-channel or planes disagree in size.
        ExternalOperationError: If any OpenCV call fails.
    """
    config = config or HalftoneConfig()
    config.validate()

    if image.ndim != 3 or image.shape[2] != 3:
        raise InvalidInputError(f"Halftone needs a 3-channel image, got shape {image.shape}")

    with opencv_call("split"):
        channels = cv2.split(image)

    angles = [Angle.from_degrees(a) for a in config.screen_angles]

    def render(k):
        # Private copy per worker
        return render_channel(channels[k].copy(), k, angles[k], config)

    if config.parallel:
        with ThreadPoolExecutor(max_workers=3) as pool:
            rendered = list(pool.map(render, range(3)))
    else:
        rendered = [render(k) for k in range(3)]

    shapes = {plane.shape for plane in rendered}
    if len(shapes) != 1:
        raise InvalidInputError(f"Rendered planes disagree in size: {sorted(shapes)}")

    with opencv_call("merge"):
        merged = cv2.merge(rendered)

    logger.info(
        "Halftoned %dx%d image at screen angles %s",
        image.shape[1], image.shape[0], tuple(config.screen_angles)
    )
    return merged
