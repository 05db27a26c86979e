"""
Hard assignment strategy for clustering algorithms.

Assigns each point to its nearest cluster based on the distance metric.
"""

from typing import Optional, Tuple
import torch
from torch import Tensor

from ..base.interfaces import AssignmentStrategy, DistanceMetric
from ..distances.euclidean import EuclideanDistance


class HardAssignment(AssignmentStrategy):
    """Hard (discrete) assignment to nearest centroid.

    Each point is assigned to exactly one cluster based on minimum distance.
    When several centroids are at exactly the same distance, the point goes
    to the lowest-indexed one (torch.argmin returns the first minimum).

    Points are processed in chunks. A chunk holds at most ``chunk_size`` rows
    and at most ``max_elements`` entries of the (chunk, K, d) difference
    tensor, so its memory stays bounded as K and d grow.
    """

    def __init__(self, metric: Optional[DistanceMetric] = None,
                 chunk_size: Optional[int] = 65536,
                 max_elements: int = 2 ** 24):
        """
        Args:
            metric: Distance metric (squared Euclidean by default)
            chunk_size: Maximum rows per chunk, or None for no row limit
            max_elements: Maximum entries of the (rows, K, d) difference
                tensor built for one chunk
        """
        super().__init__()
        if chunk_size is not None and chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if max_elements < 1:
            raise ValueError(f"max_elements must be positive, got {max_elements}")
        self.metric = metric if metric is not None else EuclideanDistance()
        self.chunk_size = chunk_size
        self.max_elements = max_elements

    def rows_per_chunk(self, n_points: int, n_clusters: int, dimension: int) -> int:
        """Number of points assigned per chunk for the given problem shape."""
        rows = max(1, self.max_elements // max(1, n_clusters * dimension))
        if self.chunk_size is not None:
            rows = min(rows, self.chunk_size)
        return max(1, min(rows, n_points))

    def compute_assignments(self, points: Tensor, centroids: Tensor,
                            **kwargs) -> Tuple[Tensor, Tensor]:
        """Assign each point to nearest centroid.

        Args:
            points: (n, d) data points
            centroids: (K, d) centroids
            **kwargs: Ignored for basic hard assignment

        Returns:
            labels: (n,) tensor of cluster indices
            min_distances: (n,) distance of each point to its centroid
        """
        n_points = points.shape[0]
        chunk_size = self.rows_per_chunk(n_points, centroids.shape[0], points.shape[1])

        labels = torch.empty(n_points, dtype=torch.long, device=points.device)
        min_distances = torch.empty(n_points, dtype=points.dtype, device=points.device)

        for start in range(0, n_points, chunk_size):
            stop = min(start + chunk_size, n_points)
            distances = self.metric.compute(points[start:stop], centroids)
            chunk_labels = torch.argmin(distances, dim=1)
            chunk_min = torch.gather(distances, 1, chunk_labels.unsqueeze(1)).squeeze(1)
            labels[start:stop] = chunk_labels
            min_distances[start:stop] = chunk_min

        return labels, min_distances
