"""
Euclidean distance metric for clustering.

The only metric k-means needs. Distances are computed from explicit
coordinate differences rather than the ||x||² + ||c||² - 2<x, c> expansion,
so two centroids at the same distance from a point compare exactly equal
and the lowest-index tie-break stays deterministic.
"""

from typing import Sequence, Union
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric
from ..exceptions import DimensionMismatch


def squared_euclidean(a: Union[Tensor, Sequence[float]],
                      b: Union[Tensor, Sequence[float]]) -> float:
    """Squared Euclidean distance between two points.

    Args:
        a: First point
        b: Second point

    Returns:
        Sum over all coordinates of the squared difference

    Raises:
        DimensionMismatch: If the points have different dimensionality
    """
    a = torch.as_tensor(a, dtype=torch.float64).reshape(-1)
    b = torch.as_tensor(b, dtype=torch.float64, device=a.device).reshape(-1)

    if a.shape[0] != b.shape[0]:
        raise DimensionMismatch(f"Cannot compare points of dimension {a.shape[0]} and {b.shape[0]}")

    diff = a - b
    return torch.sum(diff * diff).item()


class EuclideanDistance(DistanceMetric):
    """Squared Euclidean distance metric.

    Computes ||x - μ||² for every point x and centroid μ.
    """

    def __init__(self, squared: bool = True):
        """
        Args:
            squared: If True, return squared distances (default).
                    If False, return actual Euclidean distances.
        """
        self.squared = squared

    def compute(self, points: Tensor, centroids: Tensor, **kwargs) -> Tensor:
        """Compute distances from points to every centroid.

        Args:
            points: (n, d) tensor of points
            centroids: (K, d) tensor of centroids

        Returns:
            (n, K) tensor of distances
        """
        if points.dim() != 2 or centroids.dim() != 2:
            raise ValueError("Expected 2D tensors for points and centroids")
        if points.shape[1] != centroids.shape[1]:
            raise DimensionMismatch(
                f"Points have dimension {points.shape[1]}, "
                f"centroids have dimension {centroids.shape[1]}"
            )

        # (n, 1, d) - (1, K, d) -> (n, K, d)
        diff = points.unsqueeze(1) - centroids.unsqueeze(0)
        squared_distances = torch.sum(diff * diff, dim=2)

        if self.squared:
            return squared_distances
        else:
            return torch.sqrt(squared_distances)
