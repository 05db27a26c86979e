"""
Core data structures for the clustering engine.

This module provides the validated input container (Dataset), the result of a
single run (ClusterResult), the states of the run state machine and the
per-iteration history record.
"""

from typing import Optional, List, Dict, Any, Union, Sequence
from dataclasses import dataclass, field
from enum import Enum
import numpy as np
import torch
from torch import Tensor

from ..exceptions import DimensionMismatch, EmptyDataset


class RunState(Enum):
    """States of a single k-means run."""

    INITIALIZING = 'initializing'
    ASSIGNING = 'assigning'
    UPDATING = 'updating'
    CHECKING_CONVERGENCE = 'checking_convergence'
    CONVERGED = 'converged'
    MAX_ITERATIONS_REACHED = 'max_iterations_reached'

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.CONVERGED, RunState.MAX_ITERATIONS_REACHED)


class RunStatus(Enum):
    """How a finished run terminated. Both values carry a usable result."""

    CONVERGED = 'converged'
    MAX_ITERATIONS_REACHED = 'max_iterations_reached'


class Dataset:
    """Immutable, validated (n, d) point set.

    Accepts a torch tensor, a NumPy array or a sequence of equal-length
    sequences. The input is copied, so mutating the caller's array after
    construction does not affect a running clustering.

    A 1D input is treated as n points of dimension 1.
    """

    def __init__(self, points: Union[Tensor, np.ndarray, Sequence],
                 dtype: torch.dtype = torch.float32,
                 device: Optional[torch.device] = None):
        if isinstance(points, Dataset):
            tensor = points.points
        elif isinstance(points, Tensor):
            tensor = points.detach()
        elif isinstance(points, np.ndarray):
            if points.dtype == object:
                raise DimensionMismatch("Points have inconsistent dimensionality")
            if points.dtype.kind == 'u' and points.dtype.itemsize > 1:
                # torch.from_numpy rejects uint16/32/64 before torch 2.3
                points = points.astype(np.float64)
            tensor = torch.from_numpy(np.ascontiguousarray(points))
        elif isinstance(points, (list, tuple)):
            tensor = self._from_sequence(points)
        else:
            raise TypeError(f"Cannot build a dataset from {type(points)}")

        if tensor.dim() == 1:
            tensor = tensor.unsqueeze(1)
        elif tensor.dim() != 2:
            raise ValueError(f"Expected 2D data, got {tensor.dim()}D")

        if tensor.shape[0] == 0:
            raise EmptyDataset("Dataset contains no points")
        if tensor.shape[1] == 0:
            raise DimensionMismatch("Points must have at least one coordinate")

        tensor = tensor.to(dtype=dtype, device=device).clone()
        if torch.isnan(tensor).any():
            raise ValueError("Input contains NaN values")
        if torch.isinf(tensor).any():
            raise ValueError("Input contains infinite values")

        self._points = tensor

    @staticmethod
    def _from_sequence(points: Sequence) -> Tensor:
        if len(points) == 0:
            raise EmptyDataset("Dataset contains no points")

        # Scalars: n points in one dimension
        if not isinstance(points[0], (list, tuple, np.ndarray, Tensor)):
            return torch.tensor(points, dtype=torch.float64)

        rows = [torch.as_tensor(p, dtype=torch.float64).reshape(-1) for p in points]
        dimension = rows[0].shape[0]
        for i, row in enumerate(rows):
            if row.shape[0] != dimension:
                raise DimensionMismatch(
                    f"Point {i} has dimension {row.shape[0]}, expected {dimension}"
                )
        return torch.stack(rows)

    @property
    def points(self) -> Tensor:
        """(n, d) tensor of points. Treat as read-only."""
        return self._points

    @property
    def n_samples(self) -> int:
        return self._points.shape[0]

    @property
    def dimension(self) -> int:
        return self._points.shape[1]

    @property
    def device(self) -> torch.device:
        return self._points.device

    @property
    def dtype(self) -> torch.dtype:
        return self._points.dtype

    def __len__(self) -> int:
        return self.n_samples

    def __getitem__(self, index: int) -> Tensor:
        return self._points[index].clone()

    def __repr__(self) -> str:
        return f"Dataset(n_samples={self.n_samples}, dimension={self.dimension})"


@dataclass
class IterationRecord:
    """Bookkeeping for a single assign/update iteration."""

    iteration: int
    sse: float
    n_changed: Optional[int]
    max_centroid_shift: float
    elapsed: float


@dataclass
class ClusterResult:
    """Output of one k-means run.

    ``sse`` equals ``distances.sum()``, and ``distances[i]`` is the squared
    distance from point i to ``centroids[labels[i]]``.
    """

    centroids: Tensor  # (K, d)
    labels: Tensor     # (n,) long
    sse: float
    status: RunStatus
    n_iter: int
    distances: Tensor  # (n,)
    seed: Optional[int] = None
    history: List[IterationRecord] = field(default_factory=list)

    @property
    def n_clusters(self) -> int:
        return self.centroids.shape[0]

    @property
    def converged(self) -> bool:
        return self.status is RunStatus.CONVERGED

    @property
    def cluster_sizes(self) -> Tensor:
        """(K,) number of points assigned to each cluster."""
        return torch.bincount(self.labels, minlength=self.n_clusters)

    @property
    def cluster_sse(self) -> Tensor:
        """(K,) sum of squared distances within each cluster."""
        totals = torch.zeros(self.n_clusters, dtype=self.distances.dtype,
                             device=self.distances.device)
        return totals.index_add_(0, self.labels, self.distances)

    def to_numpy(self) -> Dict[str, Any]:
        """Plain NumPy view for consumers that do not use torch."""
        return {
            'centroids': self.centroids.detach().cpu().numpy(),
            'labels': self.labels.detach().cpu().numpy(),
            'distances': self.distances.detach().cpu().numpy(),
            'sse': self.sse,
            'status': self.status.value,
            'n_iter': self.n_iter,
        }

    def __repr__(self) -> str:
        return (f"ClusterResult(n_clusters={self.n_clusters}, sse={self.sse:.6g}, "
                f"status={self.status.value}, n_iter={self.n_iter})")
