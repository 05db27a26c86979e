"""
Multi-start selection over independent k-means runs.
"""

from typing import Optional, Union, List
from concurrent.futures import ThreadPoolExecutor
import os
import torch
from torch import Tensor
import numpy as np

from ..base.interfaces import InitializationStrategy
from ..base.data_structures import Dataset, ClusterResult
from ..assignments.hard import HardAssignment
from ..updates.mean import MeanUpdater
from ..initialization import RandomInit, KMeansPlusPlusInit, FromPreviousInit
from ..utils.convergence import make_convergence_criterion, ASSIGNMENT
from ..utils.validation import validate_data, check_n_clusters, check_centers, derive_seeds
from .run_controller import RunController, CancellationToken


class MultiStartSelector:
    """Runs k-means several times and keeps the lowest-SSE result.

    K-means only finds a local optimum, and which one depends on the
    initial centroids. Restarting from several independent initializations
    and keeping the best result makes a poor local optimum less likely, but
    does not guarantee the globally minimal SSE partition.

    Per-run seeds are derived from one top-level random state, so the whole
    multi-start is reproducible from a single integer. When several runs
    reach the same SSE, the run with the lowest start index wins; this does
    not depend on which thread finished first when ``n_jobs > 1``.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    n_starts : int, default=1
        Number of independent runs
    max_iterations : int, default=100
        Iteration cap for each run
    init : str or array-like, default='random'
        'random', 'k-means++', or an array of initial centers
    convergence_mode : str, default='assignment'
        'assignment' or 'centroid-epsilon'
    epsilon : float, default=1e-4
        Centroid shift threshold for 'centroid-epsilon' mode
    chunk_size : int, optional
        Rows per chunk in the assignment step
    n_jobs : int, default=1
        Number of runs executed concurrently; -1 uses all CPUs
    verbose : int, default=0
        Verbosity level

    Attributes
    ----------
    results_ : list of ClusterResult
        Every run's result, in start order
    best_index_ : int
        Index of the selected run in ``results_``
    """

    def __init__(self,
                 n_clusters: int,
                 n_starts: int = 1,
                 max_iterations: int = 100,
                 init: Union[str, Tensor, np.ndarray, list] = 'random',
                 convergence_mode: str = ASSIGNMENT,
                 epsilon: float = 1e-4,
                 chunk_size: Optional[int] = 65536,
                 n_jobs: int = 1,
                 verbose: int = 0):
        if n_starts < 1:
            raise ValueError(f"n_starts must be positive, got {n_starts}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        if n_jobs == 0:
            raise ValueError("n_jobs must be nonzero")

        # Fail fast on an unknown mode rather than inside the first run
        make_convergence_criterion(convergence_mode, epsilon)

        self.n_clusters = n_clusters
        self.n_starts = n_starts
        self.max_iterations = max_iterations
        self.init = init
        self.convergence_mode = convergence_mode
        self.epsilon = epsilon
        self.chunk_size = chunk_size
        self.n_jobs = n_jobs
        self.verbose = verbose

        self.results_: List[ClusterResult] = []
        self.best_index_: Optional[int] = None

    def _make_initializer(self) -> InitializationStrategy:
        if isinstance(self.init, str):
            if self.init == 'random':
                return RandomInit()
            elif self.init == 'k-means++':
                return KMeansPlusPlusInit()
            else:
                raise ValueError(f"Unknown init method: {self.init}")
        return FromPreviousInit(self.init)

    def _n_workers(self) -> int:
        n_jobs = self.n_jobs
        if n_jobs < 0:
            n_jobs = os.cpu_count() or 1
        return max(1, min(n_jobs, self.n_starts))

    def run(self, dataset: Union[Dataset, Tensor, np.ndarray, list],
            random_state: Optional[Union[int, torch.Generator]] = None,
            cancel_token: Optional[CancellationToken] = None) -> ClusterResult:
        """Execute all starts and return the best result.

        Args:
            dataset: Points to cluster
            random_state: Top-level seed or generator
            cancel_token: Cancels every pending run when set

        Returns:
            ClusterResult with the lowest SSE

        Raises:
            InvalidClusterCount, DimensionMismatch, EmptyDataset: Before any
                run starts
            RunCancelled: If the token was cancelled; no partial result is
                returned
        """
        self.results_ = []
        self.best_index_ = None
        dataset = validate_data(dataset) if not isinstance(dataset, Dataset) else dataset

        # Structural errors are identical for every start: detect them once
        check_n_clusters(self.n_clusters, dataset.n_samples)
        initializer = self._make_initializer()
        if isinstance(initializer, FromPreviousInit):
            check_centers(initializer.centers, self.n_clusters, dataset.dimension)

        seeds = derive_seeds(random_state, self.n_starts)
        abort = CancellationToken(parent=cancel_token)

        controllers = [
            RunController(
                dataset,
                self.n_clusters,
                max_iterations=self.max_iterations,
                initialization=initializer,
                assignment=HardAssignment(chunk_size=self.chunk_size),
                updater=MeanUpdater(),
                convergence_criterion=make_convergence_criterion(self.convergence_mode, self.epsilon),
                random_state=seed,
                cancel_token=abort,
                verbose=self.verbose
            )
            for seed in seeds
        ]

        n_workers = self._n_workers()
        if n_workers == 1:
            results = [controller.run() for controller in controllers]
        else:
            with ThreadPoolExecutor(max_workers=n_workers) as executor:
                futures = [executor.submit(controller.run) for controller in controllers]
                try:
                    results = [future.result() for future in futures]
                except BaseException:
                    abort.cancel()
                    raise

        best_index = 0
        for i, result in enumerate(results):
            if result.sse < results[best_index].sse:
                best_index = i

        self.results_ = results
        self.best_index_ = best_index

        if self.verbose:
            best = results[best_index]
            print(f"Selected start {best_index + 1}/{self.n_starts}: sse = {best.sse:.6f} "
                  f"({best.status.value}, {best.n_iter} iterations)")

        return results[best_index]
