"""
kcluster: seeded, multi-start k-means clustering.

This package implements k-means from its individual steps, each of which can
be used and tested on its own:
- Squared Euclidean distance
- Random (or k-means++) centroid initialization
- Nearest-centroid assignment with lowest-index tie-break
- Mean update that leaves empty clusters in place
- Assignment- or centroid-shift-based convergence
- A step-wise run controller and a multi-start selector

Example usage:
    >>> import torch
    >>> from kcluster import KMeans
    >>>
    >>> # Generate sample data
    >>> X = torch.randn(1000, 10)
    >>>
    >>> # Fit K-means with 5 restarts
    >>> kmeans = KMeans(k=5, n_starts=5, seed=0, verbose=1)
    >>> kmeans.fit(X)
    >>>
    >>> # Get cluster assignments
    >>> labels = kmeans.predict(X)
"""

__version__ = '0.1.0'

from .exceptions import (
    ClusteringError,
    InvalidClusterCount,
    DimensionMismatch,
    EmptyDataset,
    RunCancelled,
    ConvergenceWarning
)

from .base import (
    Dataset,
    ClusterResult,
    RunState,
    RunStatus
)

from .config import KMeansConfig
from .algorithms import KMeans, MultiStartSelector, RunController, CancellationToken
from .distances import squared_euclidean
from .quantization import quantize_image, QuantizedImage

__all__ = [
    # Algorithms
    'KMeans',
    'MultiStartSelector',
    'RunController',
    'CancellationToken',
    'KMeansConfig',

    # Core data structures
    'Dataset',
    'ClusterResult',
    'RunState',
    'RunStatus',
    'squared_euclidean',

    # Image quantization
    'quantize_image',
    'QuantizedImage',

    # Errors
    'ClusteringError',
    'InvalidClusterCount',
    'DimensionMismatch',
    'EmptyDataset',
    'RunCancelled',
    'ConvergenceWarning',

    # Version
    '__version__'
]
