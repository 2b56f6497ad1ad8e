"""
Raster utilities for sticker extraction.
Handles image loading, BGRA normalization, and the per-scan visited mask.
"""

import os

import cv2
import numpy as np


def to_bgra(image: np.ndarray) -> np.ndarray:
    """
    Convert a decoded image to 8-bit BGRA.

    Images without an alpha channel become fully opaque.

    Args:
        image: Grayscale, BGR or BGRA image (8 or 16 bit)

    Returns:
        BGRA image (uint8)
    """
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise ValueError(f"Unsupported image dtype: {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)

    channels = image.shape[2]
    if channels == 4:
        return image
    elif channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    elif channels == 1:
        return cv2.cvtColor(np.ascontiguousarray(image[:, :, 0]), cv2.COLOR_GRAY2BGRA)
    else:
        raise ValueError(f"Unexpected number of channels: {channels}")


class Raster:
    """
    Read-only view over a BGRA pixel buffer.

    The alpha plane drives segmentation; the full samples are kept so that
    regions can be cropped for encoding.
    """

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Raster expects an HxWx4 array, got shape {pixels.shape}")

        self._pixels = np.array(pixels, dtype=np.uint8, copy=True)
        self._pixels.setflags(write=False)

    @classmethod
    def from_alpha(cls, alpha: np.ndarray) -> 'Raster':
        """Build a raster from a bare alpha plane (color channels are black)."""
        alpha = np.asarray(alpha, dtype=np.uint8)
        if alpha.ndim != 2:
            raise ValueError(f"Alpha plane must be 2-D, got shape {alpha.shape}")

        pixels = np.zeros(alpha.shape + (4,), dtype=np.uint8)
        pixels[:, :, 3] = alpha
        return cls(pixels)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def pixels(self) -> np.ndarray:
        """BGRA samples (read-only)."""
        return self._pixels

    @property
    def alpha_plane(self) -> np.ndarray:
        """HxW alpha channel (read-only)."""
        return self._pixels[:, :, 3]

    def alpha(self, x: int, y: int) -> int:
        """Alpha value at (x, y)."""
        return int(self._pixels[y, x, 3])

    def __repr__(self) -> str:
        return f"Raster(width={self.width}, height={self.height})"


class VisitedMask:
    """
    One flag per pixel, stored flat and indexed by ``y * width + x``.

    Created zeroed for a single scan and discarded afterwards.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.flags = bytearray(width * height)


def load_raster(image_path: str) -> Raster:
    """
    Load an image file as a raster.

    Args:
        image_path: Path to the image file

    Returns:
        Raster with BGRA samples

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If image cannot be decoded
    """
    if not os.path.exists(image_path):
        raise FileNotFoundError(image_path)

    image = cv2.imread(image_path, cv2.IMREAD_UNCHANGED)

    if image is None:
        raise ValueError(f"Failed to load image from {image_path}")

    raster = Raster(to_bgra(image))
    print(f"Image loaded: {raster.width} x {raster.height} (W x H)")

    return raster


def decode_raster(data: bytes) -> Raster:
    """
    Decode an in-memory image (e.g. an uploaded file) as a raster.

    Raises:
        ValueError: If the bytes are not a decodable image
    """
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED) if buffer.size else None

    if image is None:
        raise ValueError("Failed to decode image data")

    return Raster(to_bgra(image))


def get_opaque_density(raster: Raster, threshold: int) -> float:
    """
    Fraction of pixels whose alpha is at or above threshold.

    Returns 0.0 for an empty raster.
    """
    alpha = raster.alpha_plane
    if alpha.size == 0:
        return 0.0

    return float(np.count_nonzero(alpha >= threshold)) / alpha.size
