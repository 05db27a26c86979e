"""
Random initialization strategy for clustering algorithms.

Selects random points from the dataset as initial cluster centers.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..utils.validation import check_n_clusters


class RandomInit(InitializationStrategy):
    """Random initialization by selecting points from the dataset.

    Selects n_clusters distinct point indices uniformly at random (without
    replacement) and copies those points as initial centers. The permutation
    is drawn on the CPU from the supplied generator, so results do not depend
    on the device the data lives on.
    """

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Initialize clusters with random points.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: Seeded random source

        Returns:
            (n_clusters, d) tensor of initial centers

        Raises:
            InvalidClusterCount: If n_clusters is outside [1, n]
        """
        n_points = points.shape[0]
        check_n_clusters(n_clusters, n_points)

        # Select random indices without replacement
        indices = torch.randperm(n_points, generator=generator)[:n_clusters]

        return points[indices.to(points.device)].clone()
