"""
I/O utilities for the cartoon pipeline.

Images are handled as uint8 RGB arrays of shape (H, W, 3):
- grayscale inputs are expanded to three channels
- alpha channels are dropped
- float images in [0, 1] are converted to uint8 on save
"""

import os

import cv2
import numpy as np
from skimage import io as skio


def load_image(path):
    """
    Load an image from the given path as uint8 RGB.

    Args:
        path (str): Path to the image file.

    Returns:
        np.ndarray: HxWx3 uint8 array.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds an unsupported array shape.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Image file not found: {path}")

    image = skio.imread(path)
    return to_rgb8(image)


def to_rgb8(image):
    """Normalize any loaded image array to uint8 RGB."""
    image = np.asarray(image)

    if image.dtype == np.uint16:
        image = (image // 257).astype(np.uint8)
    elif image.dtype != np.uint8:
        if np.issubdtype(image.dtype, np.floating) and image.max(initial=0) <= 1.0:
            image = image * 255.0
        image = np.clip(image, 0, 255).astype(np.uint8)

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    if image.ndim == 3 and image.shape[2] == 4:
        return np.ascontiguousarray(image[..., :3])
    if image.ndim == 3 and image.shape[2] == 3:
        return image
    if image.ndim == 3 and image.shape[2] == 1:
        return np.repeat(image, 3, axis=2)

    raise ValueError(f"Unsupported image shape: {image.shape}")


def save_image(path, image):
    """
    Save an image to the given path, converting it to uint8 format.

    Args:
        path (str): Path to save the image.
        image (np.ndarray): Image array (uint8, or float in [0, 1]).
    """
    image = np.asarray(image)
    if np.issubdtype(image.dtype, np.floating):
        image = (image * 255).clip(0, 255).astype(np.uint8)
    skio.imsave(path, image, check_contrast=False)
