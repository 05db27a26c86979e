"""Distance metrics for clustering algorithms."""

from .euclidean import EuclideanDistance, squared_euclidean

__all__ = [
    'EuclideanDistance',
    'squared_euclidean'
]
