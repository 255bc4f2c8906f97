import logging

import cv2

from .config import CartoonConfig
from .errors import InvalidInputError, opencv_call
from .metrics import edge_coverage

logger = logging.getLogger(__name__)


class Cartoonizer:
    """
    Cartoon effect stages: flat color regions from mean-shift segmentation,
    dark outlines from an adaptive threshold on the smoothed lightness.

    All images are uint8. Color images are RGB or Lab, HxWx3.
    """

    def __init__(self, config=None):
        config = config or CartoonConfig()
        config.validate()

        self.spatial_radius = config.spatial_radius
        self.color_radius = config.color_radius
        self.max_pyramid_level = config.max_pyramid_level
        self.diffusion_alpha = config.diffusion_alpha
        self.diffusion_k = config.diffusion_k
        self.diffusion_iterations = config.diffusion_iterations
        self.threshold_block_size = config.threshold_block_size
        self.threshold_c = config.threshold_c
        self.dilate_kernel_size = config.dilate_kernel_size
        self.dilate_iterations = config.dilate_iterations

    @staticmethod
    def _require_color(image, stage):
        if image.ndim != 3 or image.shape[2] != 3:
            raise InvalidInputError(f"{stage} needs a 3-channel image, got shape {image.shape}")

    def rgb_to_lab(self, image):
        """Converts an RGB image to Lab."""
        self._require_color(image, "rgb_to_lab")
        with opencv_call("cvtColor (RGB to Lab)"):
            return cv2.cvtColor(image, cv2.COLOR_RGB2Lab)

    def lab_to_rgb(self, image):
        """Converts a Lab image back to RGB."""
        self._require_color(image, "lab_to_rgb")
        with opencv_call("cvtColor (Lab to RGB)"):
            return cv2.cvtColor(image, cv2.COLOR_Lab2RGB)

    def segment_colors(self, lab_image):
        """
        Flatten the colors of a Lab image into uniform regions.

        Args:
            lab_image: HxWx3 uint8 Lab image

        Returns:
            Segmented Lab image
        """
        self._require_color(lab_image, "segment_colors")
        with opencv_call("pyrMeanShiftFiltering"):
            return cv2.pyrMeanShiftFiltering(
                lab_image,
                self.spatial_radius,
                self.color_radius,
                maxLevel=self.max_pyramid_level
            )

    def anisotropic_blur(self, lab_image):
        """Edge-preserving smoothing of a Lab image."""
        self._require_color(lab_image, "anisotropic_blur")
        with opencv_call("anisotropicDiffusion"):
            return cv2.ximgproc.anisotropicDiffusion(
                lab_image,
                self.diffusion_alpha,
                self.diffusion_k,
                self.diffusion_iterations
            )

    def gray_from_lab(self, lab_image):
        """Extracts the lightness channel (index 0) from a Lab image."""
        self._require_color(lab_image, "gray_from_lab")
        with opencv_call("split"):
            return cv2.split(lab_image)[0].copy()

    def get_edges(self, gray):
        """
        Obtain an outline mask from a grayscale image.

        Edge pixels are 0, everything else 255. The mask is dilated, which
        grows the white area and so thins the dark strokes.

        Args:
            gray: HxW uint8 image

        Returns:
            HxW uint8 mask
        """
        if gray.ndim != 2:
            raise InvalidInputError(f"get_edges needs a single-channel image, got shape {gray.shape}")

        with opencv_call("adaptiveThreshold"):
            edges = cv2.adaptiveThreshold(
                gray,
                255,
                cv2.ADAPTIVE_THRESH_MEAN_C,
                cv2.THRESH_BINARY,
                self.threshold_block_size,
                self.threshold_c
            )

        if self.dilate_iterations == 0:
            return edges

        with opencv_call("dilate"):
            kernel = cv2.getStructuringElement(
                cv2.MORPH_RECT,
                (self.dilate_kernel_size, self.dilate_kernel_size)
            )
            return cv2.dilate(
                edges,
                kernel,
                iterations=self.dilate_iterations,
                borderType=cv2.BORDER_REFLECT
            )

    def combine_image_and_edges(self, image, edges):
        """Applies the outline mask to the image as brush strokes."""
        self._require_color(image, "combine_image_and_edges")
        if edges.shape != image.shape[:2]:
            raise InvalidInputError(
                f"Edge mask {edges.shape} does not match image {image.shape[:2]}"
            )
        with opencv_call("bitwise_and"):
            return cv2.bitwise_and(image, image, mask=edges)

    def edge_coverage(self, edges):
        """Fraction of pixels drawn as outline."""
        return edge_coverage(edges)
