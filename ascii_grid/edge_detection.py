#!/usr/bin/env python3
"""
Image to ASCII Grid Converter - Edge Detection
==============================================
This module contains the EdgeProcessor class for outlining images before
they are converted.

The filter is loosely based on canny edge detection: blur, Sobel gradient
magnitude and an optional single pass of double threshold hysteresis.
There is no non-maximum suppression, edges stay several pixels wide.
"""

import logging
import math
import time
from typing import Callable

import numpy as np
from PIL import Image
from scipy import ndimage

from ascii_grid.constants import (
    BLUR_SIGMA,
    LOWER_THRESHOLD,
    SOBEL_AMPLIFICATION,
    UPPER_THRESHOLD,
)
from ascii_grid.exceptions import ConfigurationError
from ascii_grid.parallel import run_row_chunks
from ascii_grid.pixel import luminosity

logger = logging.getLogger(__name__)


class EdgeProcessor:
    """Blur, Sobel and hysteresis filters working on PIL images."""

    # Sobel kernels, indexed [y][x]
    SOBEL_X = np.array([[1, 0, -1], [2, 0, -2], [1, 0, -1]], dtype=np.float64)
    SOBEL_Y = np.array([[1, 2, 1], [0, 0, 0], [-1, -2, -1]], dtype=np.float64)

    @staticmethod
    def create_gauss_kernel(sigma: float) -> np.ndarray:
        """
        Create a normalized 3x3 gaussian kernel.

        Args:
            sigma: Standard deviation, has to be positive

        Returns:
            3x3 array summing to 1

        Raises:
            ConfigurationError: if sigma is zero or negative
        """
        if sigma <= 0:
            raise ConfigurationError(f"The given sigma {sigma} was smaller or equal to zero")

        s = 2.0 * sigma * sigma
        kernel = np.zeros((3, 3), dtype=np.float64)
        for x in range(-1, 2):
            for y in range(-1, 2):
                r = math.sqrt(x * x + y * y)
                kernel[x + 1, y + 1] = math.exp(-(r * r) / s) / (math.pi * s)

        return kernel / kernel.sum()

    @staticmethod
    def _correlate_rows(arr: np.ndarray, kernel: np.ndarray,
                        start: int, end: int) -> np.ndarray:
        """
        Correlate the rows [start, end) of a 2D array with a 3x3 kernel.

        One extra row is read above and below the range so the result equals
        correlating the whole array; image borders are clamped.
        """
        lo = max(start - 1, 0)
        hi = min(end + 1, arr.shape[0])
        result = ndimage.correlate(arr[lo:hi], kernel, mode='nearest')
        return result[start - lo:start - lo + (end - start)]

    @staticmethod
    def _filter_rows(height: int, threads: int, stage: str,
                     worker: Callable[[int, int], np.ndarray]) -> np.ndarray:
        slabs = run_row_chunks(worker, height, threads, stage)
        return np.concatenate(slabs, axis=0)

    @classmethod
    def blur(cls, image: Image.Image, sigma: float = BLUR_SIGMA, threads: int = 1) -> Image.Image:
        """
        Blur an image with a 3x3 gaussian kernel.

        Args:
            image: Input image
            sigma: Gaussian sigma
            threads: Number of worker threads

        Returns:
            New RGB image of the same size
        """
        logger.info("Blurring image")
        started = time.perf_counter()

        kernel = cls.create_gauss_kernel(sigma)
        arr = np.asarray(image.convert('RGB'), dtype=np.float64)

        def worker(start: int, end: int) -> np.ndarray:
            channels = [cls._correlate_rows(arr[:, :, c], kernel, start, end) for c in range(3)]
            return np.stack(channels, axis=-1)

        blurred = cls._filter_rows(arr.shape[0], threads, "blur", worker)
        # truncate like an integer cast, float error must not turn 255 into 254
        blurred = np.clip(np.floor(blurred + 1e-9), 0, 255).astype(np.uint8)

        logger.info("Successfully blurred image in %d ms", (time.perf_counter() - started) * 1000)
        return Image.fromarray(blurred)

    @classmethod
    def sobel(cls, image: Image.Image, threads: int = 1) -> Image.Image:
        """
        Detect edges using the Sobel operators.

        The gradient magnitude is rounded and amplified, saturating at 255.

        Args:
            image: Input image
            threads: Number of worker threads

        Returns:
            New grayscale image with the edges in white
        """
        logger.info("Creating outline image")
        started = time.perf_counter()

        rgb = np.asarray(image.convert('RGB'), dtype=np.float64)
        gray = luminosity(rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2])

        def worker(start: int, end: int) -> np.ndarray:
            gx = cls._correlate_rows(gray, cls.SOBEL_X, start, end)
            gy = cls._correlate_rows(gray, cls.SOBEL_Y, start, end)
            magnitude = np.floor(np.sqrt(gx ** 2 + gy ** 2) + 0.5)
            return np.minimum(magnitude * SOBEL_AMPLIFICATION, 255)

        magnitude = cls._filter_rows(gray.shape[0], threads, "sobel", worker)

        logger.info("Successfully outlined image in %d ms", (time.perf_counter() - started) * 1000)
        return Image.fromarray(magnitude.astype(np.uint8))

    @staticmethod
    def edge_tracking(image: Image.Image) -> Image.Image:
        """
        Apply double threshold and hysteresis.

        Strong pixels are kept, weak pixels are kept only if one of their
        8 neighbors is strong, everything else is removed. This is a single
        pass, weak pixels do not promote each other.

        Args:
            image: Edge image, usually the result of `sobel`

        Returns:
            New binary grayscale image (0 or 255)
        """
        started = time.perf_counter()
        logger.debug("Upper threshold: %s, lower threshold: %s", UPPER_THRESHOLD, LOWER_THRESHOLD)

        rgb = np.asarray(image.convert('RGB'), dtype=np.float64)
        gray = luminosity(rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2])

        strong = gray >= UPPER_THRESHOLD
        weak = (gray >= LOWER_THRESHOLD) & ~strong
        near_strong = ndimage.binary_dilation(strong, structure=np.ones((3, 3), dtype=bool))

        result = strong | (weak & near_strong)

        logger.info("Successfully applied hysteresis in %d ms", (time.perf_counter() - started) * 1000)
        return Image.fromarray(np.where(result, 255, 0).astype(np.uint8))

    @classmethod
    def detect(cls, image: Image.Image, threads: int = 1, hysteresis: bool = False) -> Image.Image:
        """Run the full outline filter: blur, Sobel and optional hysteresis."""
        blurred = cls.blur(image, BLUR_SIGMA, threads)
        edges = cls.sobel(blurred, threads)
        if hysteresis:
            return cls.edge_tracking(edges)
        return edges


def edge_detection_filter(image: Image.Image, threads: int = 1, hysteresis: bool = False) -> Image.Image:
    """
    Outline an image.

    Args:
        image: Input image
        threads: Number of worker threads for blur and Sobel
        hysteresis: Thin the edges with a double threshold

    Returns:
        Grayscale image with white edges on black
    """
    return EdgeProcessor.detect(image, threads, hysteresis)
