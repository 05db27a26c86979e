"""
Configuration for k-means clustering.
"""

from dataclasses import dataclass, fields, replace
from typing import Optional, Union, Any, Mapping
import numpy as np
import torch
from torch import Tensor

from .exceptions import InvalidClusterCount
from .utils.convergence import CONVERGENCE_MODES, ASSIGNMENT

INIT_METHODS = ('random', 'k-means++')


@dataclass(frozen=True)
class KMeansConfig:
    """
    Configuration for k-means clustering.

    Attributes:
        k: Number of clusters (required)
        max_iterations: Iteration cap for each run
        n_starts: Number of independent starts; the lowest-SSE run is kept
        convergence_mode: 'assignment' (stop when no point changes cluster)
            or 'centroid-epsilon' (stop when every centroid moves < epsilon)
        epsilon: Shift threshold, only used in 'centroid-epsilon' mode
        seed: Top-level random seed; None draws a fresh one
        init: 'random', 'k-means++', or an array of initial centers
        n_jobs: Starts executed concurrently (-1 for all CPUs)
        chunk_size: Rows per chunk in the assignment step (None = no chunking)
        device: Torch device or device string; None means CPU
        dtype: Floating point type used for computation
        verbose: 0 silent, 1 summaries, 2 every iteration
    """
    k: int
    max_iterations: int = 100
    n_starts: int = 1
    convergence_mode: str = ASSIGNMENT
    epsilon: float = 1e-4
    seed: Optional[int] = None
    init: Union[str, Tensor, np.ndarray, list] = 'random'
    n_jobs: int = 1
    chunk_size: Optional[int] = 65536
    device: Optional[Union[str, torch.device]] = None
    dtype: torch.dtype = torch.float32
    verbose: int = 0

    def __post_init__(self):
        """Validate configuration parameters."""
        if isinstance(self.k, bool) or not isinstance(self.k, (int, np.integer)):
            raise TypeError(f"k must be int, got {type(self.k)}")
        if self.k < 1:
            raise InvalidClusterCount(f"k must be >= 1, got {self.k}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.n_starts < 1:
            raise ValueError(f"n_starts must be >= 1, got {self.n_starts}")
        if self.convergence_mode not in CONVERGENCE_MODES:
            raise ValueError(f"convergence_mode must be one of {CONVERGENCE_MODES}, "
                             f"got '{self.convergence_mode}'")
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be > 0, got {self.epsilon}")
        if isinstance(self.init, str) and self.init not in INIT_METHODS:
            raise ValueError(f"init must be one of {INIT_METHODS} or an array, got '{self.init}'")
        if self.n_jobs == 0:
            raise ValueError("n_jobs must be nonzero")
        if self.chunk_size is not None and self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if not self.dtype.is_floating_point:
            raise ValueError(f"dtype must be a floating point type, got {self.dtype}")

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> 'KMeansConfig':
        """Build a config from a plain mapping (e.g. parsed JSON/YAML).

        ``dtype`` may be given as a string such as 'float64'. Unknown keys
        raise ValueError.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise ValueError(f"Unknown configuration options: {sorted(unknown)}")

        values = dict(options)
        if isinstance(values.get('dtype'), str):
            dtype = getattr(torch, values['dtype'], None)
            if not isinstance(dtype, torch.dtype):
                raise ValueError(f"Unknown dtype: {values['dtype']}")
            values['dtype'] = dtype
        return cls(**values)

    def replace(self, **changes) -> 'KMeansConfig':
        """Copy of this config with some options changed (and re-validated)."""
        return replace(self, **changes)
