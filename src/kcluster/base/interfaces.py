"""
Core interfaces for the clustering engine.

This module defines the abstract base classes that each step of a k-means run
implements, so that the run controller can be driven with alternative
initializers, metrics or convergence policies.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple, Dict, Any
import torch
from torch import Tensor


class DistanceMetric(ABC):
    """Abstract base class for point-to-centroid distance computations."""

    @abstractmethod
    def compute(self, points: Tensor, centroids: Tensor, **kwargs) -> Tensor:
        """Compute distances from every point to every centroid.

        Args:
            points: (n, d) tensor of points
            centroids: (K, d) tensor of centroids
            **kwargs: Metric-specific parameters

        Returns:
            (n, K) tensor of distances
        """
        pass


class InitializationStrategy(ABC):
    """Abstract base class for centroid initialization strategies."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Choose initial centroids.

        Args:
            points: (n, d) tensor of data points
            n_clusters: Number of clusters to initialize
            generator: Seeded random source; identical seeds must yield
                identical centroids for identical data
            **kwargs: Strategy-specific parameters

        Returns:
            (K, d) tensor of initial centroids
        """
        pass


class AssignmentStrategy(ABC):
    """Abstract base class for point-to-cluster assignment strategies."""

    @abstractmethod
    def compute_assignments(self, points: Tensor, centroids: Tensor,
                            **kwargs) -> Tuple[Tensor, Tensor]:
        """Assign every point to a cluster.

        Args:
            points: (n, d) tensor of data points
            centroids: (K, d) tensor of centroids

        Returns:
            labels: (n,) long tensor of cluster indices
            min_distances: (n,) distance of each point to its assigned centroid
        """
        pass


class ParameterUpdater(ABC):
    """Abstract base class for centroid update strategies."""

    @abstractmethod
    def update(self, points: Tensor, labels: Tensor, centroids: Tensor,
               **kwargs) -> Tensor:
        """Recompute centroids from the current assignment.

        Args:
            points: (n, d) tensor of all data points
            labels: (n,) current assignment
            centroids: (K, d) centroids from the previous iteration

        Returns:
            (K, d) tensor of new centroids. The input is not modified.
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the run has converged.

        Args:
            current_state: Dictionary containing current run state
                ('iteration', 'assignments', 'centroids', 'previous_centroids')

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []
