"""
Initialization from previous solution or custom centers.

Useful for warm starts or when you have good initial guesses.
"""

from typing import Optional, Union, Sequence
import numpy as np
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..base.data_structures import ClusterResult
from ..utils.validation import check_n_clusters, check_centers


class FromPreviousInit(InitializationStrategy):
    """Initialize from previous cluster centers or custom starting points.

    Accepts either:
    - An array-like of shape (n_clusters, dimension) with initial centers
    - A ClusterResult from a previous run

    The generator is ignored: the starting point is fully determined.
    """

    def __init__(self, initial_state: Union[Tensor, np.ndarray, Sequence, ClusterResult]):
        """
        Args:
            initial_state: Previous solution to use for initialization
        """
        if isinstance(initial_state, ClusterResult):
            centers = initial_state.centroids
        elif isinstance(initial_state, Tensor):
            centers = initial_state.detach()
        elif isinstance(initial_state, (np.ndarray, list, tuple)):
            centers = torch.as_tensor(np.asarray(initial_state, dtype=np.float64))
        else:
            raise TypeError(f"Unknown initial_state type: {type(initial_state)}")

        self.centers = centers.clone()

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Initialize from previous state.

        Args:
            points: (n, d) data points (used for validation)
            n_clusters: Expected number of clusters

        Returns:
            (n_clusters, d) copy of the stored centers
        """
        check_n_clusters(n_clusters, points.shape[0])
        check_centers(self.centers, n_clusters, points.shape[1])

        return self.centers.to(device=points.device, dtype=points.dtype).clone()
