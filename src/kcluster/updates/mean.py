"""
Mean update strategy for centroid-based clustering.
"""

import torch
from torch import Tensor

from ..base.interfaces import ParameterUpdater


class MeanUpdater(ParameterUpdater):
    """Updates each centroid to the mean of the points assigned to it.

    Empty clusters keep their previous centroid. This is a deliberate policy,
    as opposed to reseeding an empty cluster from a random point: it keeps a
    run deterministic given its initialization and avoids centroids jumping
    around between iterations. An empty cluster can still pick up points in
    a later iteration once the other centroids move away from it.
    """

    def update(self, points: Tensor, labels: Tensor, centroids: Tensor,
               **kwargs) -> Tensor:
        """Recompute centroids.

        Args:
            points: (n, d) data points
            labels: (n,) cluster index of every point
            centroids: (K, d) previous centroids
            **kwargs: Ignored

        Returns:
            (K, d) new centroids
        """
        new_centroids = centroids.clone()

        for k in range(centroids.shape[0]):
            mask = labels == k
            if mask.any():
                new_centroids[k] = points[mask].mean(dim=0)

        return new_centroids
