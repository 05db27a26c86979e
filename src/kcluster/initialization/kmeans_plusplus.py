"""
K-means++ initialization strategy.

Selects initial cluster centers using the K-means++ algorithm, which chooses
centers that are far apart to improve convergence speed and quality.
"""

from typing import Optional
import math
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..utils.validation import check_n_clusters


class KMeansPlusPlusInit(InitializationStrategy):
    """K-means++ initialization for better starting positions.

    Algorithm:
    1. Choose first center uniformly at random
    2. For each remaining center:
       - Compute distance from each point to nearest existing center
       - Sample candidates with probability proportional to squared distance
       - Keep the candidate that most reduces the total squared distance
    """

    def __init__(self, n_local_trials: Optional[int] = None):
        """
        Args:
            n_local_trials: Number of candidates to try for each center.
                           If None, uses 2 + log(k) as in sklearn
        """
        self.n_local_trials = n_local_trials

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Initialize cluster centers using K-means++.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: Seeded CPU random source

        Returns:
            (n_clusters, d) tensor of initial centers
        """
        n_points = points.shape[0]
        check_n_clusters(n_clusters, n_points)

        if self.n_local_trials is None:
            n_local_trials = 2 + int(math.log(n_clusters))
        else:
            n_local_trials = self.n_local_trials

        # Sampling happens on the CPU generator; distances stay on points.device
        first_idx = int(torch.randint(n_points, (1,), generator=generator).item())
        center_indices = [first_idx]

        distances = torch.sum((points - points[first_idx].unsqueeze(0)) ** 2, dim=1)

        for _ in range(1, n_clusters):
            total = distances.sum()
            if total <= 0:
                # Every point coincides with a chosen center; fall back to uniform
                probabilities = torch.ones(n_points, dtype=torch.float64)
            else:
                probabilities = (distances / total).to(device='cpu', dtype=torch.float64)

            candidates = torch.multinomial(probabilities, n_local_trials,
                                           replacement=True, generator=generator)

            best_potential = float('inf')
            best_candidate = None
            best_distances = None

            for idx in candidates.tolist():
                candidate_distances = torch.sum((points - points[idx].unsqueeze(0)) ** 2, dim=1)
                new_distances = torch.minimum(distances, candidate_distances)
                potential = new_distances.sum().item()

                if potential < best_potential:
                    best_potential = potential
                    best_candidate = idx
                    best_distances = new_distances

            center_indices.append(best_candidate)
            distances = best_distances

        index = torch.tensor(center_indices, device=points.device)
        return points[index].clone()
