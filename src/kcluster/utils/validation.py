"""
Input validation utilities.

Provides functions for validating data, cluster counts and random sources
before a run starts, so that structural problems surface eagerly instead of
mid-iteration.
"""

from typing import Optional, Union, List
import torch
from torch import Tensor
import numpy as np

from ..base.data_structures import Dataset
from ..exceptions import InvalidClusterCount, DimensionMismatch

# Seeds are drawn from the non-negative int64 range accepted by manual_seed.
_MAX_SEED = 2 ** 62


def validate_data(X: Union[Dataset, Tensor, np.ndarray, list],
                  dtype: torch.dtype = torch.float32,
                  device: Optional[torch.device] = None) -> Dataset:
    """Validate and convert input data to a Dataset.

    Args:
        X: Input data (Dataset, tensor, numpy array, or list of points)
        dtype: Target data type
        device: Target device

    Returns:
        Validated Dataset. An existing Dataset already matching dtype and
        device is returned as-is.

    Raises:
        EmptyDataset: If X contains no points
        DimensionMismatch: If points have inconsistent dimensionality
        ValueError: If X contains NaN or infinite values
    """
    if isinstance(X, Dataset):
        if X.dtype == dtype and (device is None or X.device == device):
            return X
        return Dataset(X.points, dtype=dtype, device=device)
    return Dataset(X, dtype=dtype, device=device)


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of clusters.

    Args:
        n_clusters: Number of clusters
        n_samples: Number of samples

    Raises:
        TypeError: If n_clusters is not an integer
        InvalidClusterCount: If n_clusters is outside [1, n_samples]
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters < 1:
        raise InvalidClusterCount(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_samples:
        raise InvalidClusterCount(f"n_clusters ({n_clusters}) cannot be larger than "
                                  f"n_samples ({n_samples})")


def check_centers(centers: Tensor, n_clusters: int, dimension: int) -> None:
    """Validate user-supplied initial centers against the data shape."""
    if centers.dim() != 2:
        raise ValueError(f"Initial centers must be 2D, got {centers.dim()}D")
    if centers.shape[0] != n_clusters:
        raise InvalidClusterCount(f"Initial centers has {centers.shape[0]} clusters, "
                                  f"but n_clusters={n_clusters}")
    if centers.shape[1] != dimension:
        raise DimensionMismatch(f"Initial centers has dimension {centers.shape[1]}, "
                                f"but data has dimension {dimension}")


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> torch.Generator:
    """Create generator from random state.

    Args:
        random_state: Seed, generator, or None for a nondeterministic seed

    Returns:
        CPU generator. A passed-in generator is returned as-is.
    """
    if random_state is None:
        generator = torch.Generator()
        generator.seed()
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")


def derive_seeds(random_state: Optional[Union[int, torch.Generator]], n_seeds: int) -> List[int]:
    """Draw independent per-run seeds from a top-level random state.

    The same top-level seed always yields the same list, so a whole
    multi-start run is reproducible from one integer.
    """
    if n_seeds < 1:
        raise ValueError(f"n_seeds must be positive, got {n_seeds}")
    generator = check_random_state(random_state)
    seeds = torch.randint(0, _MAX_SEED, (n_seeds,), generator=generator, dtype=torch.int64)
    return [int(s) for s in seeds]
