"""
Colour quantization (lossy image compression) with k-means.

Each pixel is treated as a C-dimensional point. After clustering, every
pixel is replaced by its cluster's centroid colour and the image is rebuilt
in the original pixel order. Channel semantics (RGB, Lab, ...) are up to the
caller; decoding and encoding image files is out of scope.
"""

from dataclasses import dataclass
from typing import Union
import math
import numpy as np
from torch import Tensor

from .base.data_structures import ClusterResult
from .algorithms.kmeans import KMeans


@dataclass
class QuantizedImage:
    """Result of quantizing an image.

    Attributes:
        image: Rebuilt image, same shape and dtype as the input
        palette: (n_colors, C) centroid colours as float64
        labels: Palette index per pixel, shape (H, W) or (P,)
        result: Underlying ClusterResult
    """
    image: np.ndarray
    palette: np.ndarray
    labels: np.ndarray
    result: ClusterResult

    @property
    def n_colors(self) -> int:
        return self.palette.shape[0]

    def compression_ratio(self) -> float:
        """Size of the raw pixels over the size of palette plus indices."""
        n_pixels = self.labels.size
        n_channels = self.palette.shape[1]
        bits_per_channel = self.image.dtype.itemsize * 8

        original_bits = n_pixels * n_channels * bits_per_channel
        index_bits = max(1, math.ceil(math.log2(self.n_colors)))
        compressed_bits = n_pixels * index_bits + self.n_colors * n_channels * bits_per_channel
        return original_bits / compressed_bits


def _as_numpy(image: Union[np.ndarray, Tensor]) -> np.ndarray:
    if isinstance(image, Tensor):
        return image.detach().cpu().numpy()
    return np.asarray(image)


def quantize_image(image: Union[np.ndarray, Tensor], n_colors: int,
                   grayscale: bool = False, **options) -> QuantizedImage:
    """Reduce an image to ``n_colors`` colours.

    Args:
        image: (H, W, C) image or (P, C) pixel array. With ``grayscale``,
            an (H, W) single-channel image instead.
        n_colors: Palette size (number of clusters)
        grayscale: Read a 2D input as (H, W) intensities rather than as
            (P, C) pixels
        **options: Further KMeansConfig options (seed, n_starts, ...)

    Returns:
        QuantizedImage. Integer images are rounded and clipped to the range
        of their dtype.
    """
    pixels_in = _as_numpy(image)
    if grayscale:
        if pixels_in.ndim != 2:
            raise ValueError(f"Expected (H, W) grayscale image, got shape {pixels_in.shape}")
        pixels = pixels_in.reshape(-1, 1)
        label_shape = pixels_in.shape
    else:
        if pixels_in.ndim not in (2, 3):
            raise ValueError(f"Expected (H, W, C) or (P, C) image, got shape {pixels_in.shape}")
        pixels = pixels_in.reshape(-1, pixels_in.shape[-1])
        label_shape = pixels_in.shape[:-1]

    model = KMeans(k=n_colors, **options).fit(pixels)
    result = model.result_

    palette = result.centroids.detach().cpu().numpy().astype(np.float64)
    labels = result.labels.detach().cpu().numpy()
    rebuilt = palette[labels]

    if np.issubdtype(pixels_in.dtype, np.integer):
        info = np.iinfo(pixels_in.dtype)
        rebuilt = np.clip(np.rint(rebuilt), info.min, info.max)
    elif pixels_in.dtype == np.bool_:
        rebuilt = rebuilt >= 0.5

    return QuantizedImage(
        image=rebuilt.astype(pixels_in.dtype).reshape(pixels_in.shape),
        palette=palette,
        labels=labels.reshape(label_shape),
        result=result
    )
