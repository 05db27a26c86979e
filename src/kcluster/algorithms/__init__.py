"""Clustering algorithm implementations."""

from .run_controller import RunController, CancellationToken
from .multistart import MultiStartSelector
from .kmeans import KMeans

__all__ = [
    'RunController',
    'CancellationToken',
    'MultiStartSelector',
    'KMeans'
]
