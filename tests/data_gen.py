# tests/data_gen.py
"""
Tiny synthetic-data generators reused across the kcluster test suite.

    >>> X, y = make_blobs([[0, 0], [5, 5]], n_per=50, seed=0)
    >>> X.shape, y.shape
    ((100, 2), (100,))
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

NDArray = np.ndarray


def make_four_corners() -> NDArray:
    """The two-pair dataset {(0,0), (0,1), (10,0), (10,1)} as float32."""
    return np.array([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]], dtype=np.float32)


def make_blobs(
    centers: Sequence[Sequence[float]],
    n_per: int = 100,
    scale: float = 0.3,
    seed: Optional[int] = None,
) -> Tuple[NDArray, NDArray]:
    """
    Isotropic Gaussian blobs around the given centers.

    Parameters
    ----------
    centers : (K, d) sequence
        Blob centers.
    n_per : int, default=100
        Points per blob (total points = K * n_per).
    scale : float, default=0.3
        Standard deviation of the isotropic noise.
    seed : int or None
        RNG seed for reproducibility.

    Returns
    -------
    X : (K*n_per, d) ndarray, float32
        Points grouped by blob, blob 0 first.
    y : (K*n_per,) ndarray, int64
        Ground-truth blob index of every point.
    """
    rng = np.random.default_rng(seed)
    centers = np.asarray(centers, dtype=np.float64)
    K, d = centers.shape

    parts = [centers[k] + scale * rng.normal(size=(n_per, d)) for k in range(K)]
    X = np.vstack(parts).astype(np.float32)
    y = np.repeat(np.arange(K, dtype=np.int64), n_per)
    return X, y


def make_palette_image(
    height: int = 24,
    width: int = 32,
    palette: Optional[Sequence[Sequence[int]]] = None,
    noise: float = 4.0,
    seed: Optional[int] = None,
) -> Tuple[NDArray, NDArray]:
    """
    A uint8 RGB image made of vertical colour bands plus small noise.

    Returns
    -------
    image : (height, width, 3) ndarray, uint8
    band : (height, width) ndarray, int64
        Index of the palette colour each pixel was drawn from.
    """
    rng = np.random.default_rng(seed)
    if palette is None:
        palette = [[220, 30, 30], [30, 200, 40], [20, 40, 210], [240, 240, 240]]
    palette = np.asarray(palette, dtype=np.float64)
    n_colors = palette.shape[0]

    band_of_column = (np.arange(width) * n_colors) // width
    band = np.tile(band_of_column, (height, 1)).astype(np.int64)

    image = palette[band] + noise * rng.normal(size=(height, width, 3))
    image = np.clip(np.rint(image), 0, 255).astype(np.uint8)
    return image, band
