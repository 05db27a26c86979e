"""
Clustering evaluation helpers.

Only the raw quantities are provided here: per-point squared distances and
their sums. Analyses built on top of them (elbow curves, silhouette scores)
are left to the caller.
"""

import torch
from torch import Tensor

from ..exceptions import DimensionMismatch


def point_distances(X: Tensor, labels: Tensor, centers: Tensor) -> Tensor:
    """Squared distance from every point to the center it is assigned to.

    Args:
        X: (n, d) data points
        labels: (n,) cluster labels
        centers: (k, d) cluster centers

    Returns:
        (n,) tensor of squared distances
    """
    if X.shape[1] != centers.shape[1]:
        raise DimensionMismatch(f"Points have dimension {X.shape[1]}, "
                                f"centers have dimension {centers.shape[1]}")
    diff = X - centers[labels]
    return torch.sum(diff * diff, dim=1)


def inertia(X: Tensor, labels: Tensor, centers: Tensor) -> float:
    """Compute sum of squared distances to assigned centers (inertia / SSE).

    Args:
        X: (n, d) data points
        labels: (n,) cluster labels
        centers: (k, d) cluster centers

    Returns:
        Total inertia (lower is better)
    """
    return point_distances(X, labels, centers).sum().item()
