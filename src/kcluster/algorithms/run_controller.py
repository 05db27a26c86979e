"""
Single k-means run as an explicit state machine.

A run moves through

    INITIALIZING -> ASSIGNING -> UPDATING -> CHECKING_CONVERGENCE
        -> ASSIGNING | CONVERGED | MAX_ITERATIONS_REACHED

one state per call to ``step()``, so every intermediate centroid set and
assignment can be inspected. ``run()`` steps until a terminal state and
returns the ClusterResult.
"""

from typing import Optional, Union, List
import threading
import time
import torch
from torch import Tensor
import numpy as np

from ..base.interfaces import (
    InitializationStrategy, AssignmentStrategy, ParameterUpdater, ConvergenceCriterion
)
from ..base.data_structures import (
    Dataset, ClusterResult, IterationRecord, RunState, RunStatus
)
from ..assignments.hard import HardAssignment
from ..updates.mean import MeanUpdater
from ..initialization.random import RandomInit
from ..utils.convergence import AssignmentUnchanged
from ..utils.metrics import point_distances
from ..utils.validation import validate_data, check_random_state
from ..exceptions import RunCancelled


class CancellationToken:
    """Cooperative cancellation flag shared between runs.

    A token created with a parent also reports cancelled when the parent is
    cancelled, so a multi-start can abort its own runs without touching the
    caller's token.
    """

    def __init__(self, parent: Optional['CancellationToken'] = None):
        self._event = threading.Event()
        self._parent = parent

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RunCancelled("Run cancelled")


class RunController:
    """Drives one k-means run from initialization to a terminal state.

    Each iteration assigns every point to its nearest centroid, recomputes
    centroids as cluster means and then consults the convergence criterion.
    The run ends as CONVERGED when the criterion is met, or as
    MAX_ITERATIONS_REACHED after ``max_iterations`` iterations; both produce
    a valid ClusterResult.

    Parameters
    ----------
    dataset : Dataset or array-like of shape (n_samples, n_features)
        Points to cluster. Never modified.
    n_clusters : int
        Number of clusters K, 1 <= K <= n_samples
    max_iterations : int, default=100
        Iteration cap
    initialization : InitializationStrategy, optional
        Defaults to uniform sampling without replacement (RandomInit)
    assignment : AssignmentStrategy, optional
        Defaults to HardAssignment
    updater : ParameterUpdater, optional
        Defaults to MeanUpdater
    convergence_criterion : ConvergenceCriterion, optional
        Defaults to AssignmentUnchanged. Must not be shared with another run.
    random_state : int or torch.Generator, optional
        Random source for the initializer
    cancel_token : CancellationToken, optional
        Checked at the start of every ASSIGNING state
    verbose : int, default=0
        Verbosity level (0=silent, 1=summary, 2=every iteration)
    """

    def __init__(self,
                 dataset: Union[Dataset, Tensor, np.ndarray, list],
                 n_clusters: int,
                 max_iterations: int = 100,
                 initialization: Optional[InitializationStrategy] = None,
                 assignment: Optional[AssignmentStrategy] = None,
                 updater: Optional[ParameterUpdater] = None,
                 convergence_criterion: Optional[ConvergenceCriterion] = None,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 cancel_token: Optional[CancellationToken] = None,
                 verbose: int = 0):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")

        self.dataset = validate_data(dataset) if not isinstance(dataset, Dataset) else dataset
        self.n_clusters = n_clusters
        self.max_iterations = max_iterations
        self.initialization = initialization or RandomInit()
        self.assignment = assignment or HardAssignment()
        self.updater = updater or MeanUpdater()
        self.convergence_criterion = convergence_criterion or AssignmentUnchanged()
        self.seed = int(random_state) if isinstance(random_state, (int, np.integer)) else None
        self.generator = check_random_state(random_state)
        self.cancel_token = cancel_token
        self.verbose = verbose

        self.state = RunState.INITIALIZING
        self.iteration = 0
        self.centroids: Optional[Tensor] = None
        self.labels: Optional[Tensor] = None
        self.history: List[IterationRecord] = []

        self._previous_centroids: Optional[Tensor] = None
        self._iteration_sse = float('nan')
        self._iteration_start = 0.0
        self._result: Optional[ClusterResult] = None

    @property
    def is_finished(self) -> bool:
        return self.state.is_terminal

    @property
    def result(self) -> ClusterResult:
        """Result of a finished run."""
        if self._result is None:
            raise RuntimeError(f"Run has not finished (state: {self.state.value})")
        return self._result

    def step(self) -> RunState:
        """Advance the state machine by one state and return the new state."""
        if self.state is RunState.INITIALIZING:
            self._initialize()
        elif self.state is RunState.ASSIGNING:
            self._assign()
        elif self.state is RunState.UPDATING:
            self._update()
        elif self.state is RunState.CHECKING_CONVERGENCE:
            self._check_convergence()
        else:
            raise RuntimeError(f"Run already finished (state: {self.state.value})")
        return self.state

    def run(self) -> ClusterResult:
        """Step until a terminal state and return the result."""
        while not self.state.is_terminal:
            self.step()
        return self.result

    def _initialize(self) -> None:
        if self.verbose:
            seed_info = f" (seed {self.seed})" if self.seed is not None else ""
            print(f"Initializing {self.n_clusters} clusters{seed_info}...")

        points = self.dataset.points
        centroids = self.initialization.initialize(points, self.n_clusters,
                                                   generator=self.generator)
        self.centroids = centroids.to(device=points.device, dtype=points.dtype)
        self.convergence_criterion.reset()
        self.state = RunState.ASSIGNING

    def _assign(self) -> None:
        if self.cancel_token is not None:
            self.cancel_token.raise_if_cancelled()

        self.iteration += 1
        self._iteration_start = time.time()

        labels, min_distances = self.assignment.compute_assignments(
            self.dataset.points, self.centroids
        )
        self.labels = labels
        self._iteration_sse = min_distances.sum().item()
        self.state = RunState.UPDATING

    def _update(self) -> None:
        self._previous_centroids = self.centroids
        self.centroids = self.updater.update(
            self.dataset.points, self.labels, self.centroids
        )
        self.state = RunState.CHECKING_CONVERGENCE

    def _check_convergence(self) -> None:
        converged = self.convergence_criterion.check({
            'iteration': self.iteration,
            'assignments': self.labels,
            'centroids': self.centroids,
            'previous_centroids': self._previous_centroids
        })

        shift = torch.sqrt(torch.sum((self.centroids - self._previous_centroids) ** 2, dim=1))
        n_changed = None
        if self.convergence_criterion.history:
            n_changed = self.convergence_criterion.history[-1].get('n_changed')

        record = IterationRecord(
            iteration=self.iteration,
            sse=self._iteration_sse,
            n_changed=n_changed,
            max_centroid_shift=shift.max().item(),
            elapsed=time.time() - self._iteration_start
        )
        self.history.append(record)

        if self.verbose >= 2:
            print(f"Iteration {record.iteration:3d}: sse = {record.sse:.6f} "
                  f"↓ ({record.elapsed:.3f}s)")

        if converged:
            self.state = RunState.CONVERGED
            if self.verbose:
                print(f"Converged at iteration {self.iteration}")
        elif self.iteration >= self.max_iterations:
            self.state = RunState.MAX_ITERATIONS_REACHED
            if self.verbose:
                print(f"Stopped after {self.max_iterations} iterations without converging")
        else:
            self.state = RunState.ASSIGNING
            return

        self._finalize()

    def _finalize(self) -> None:
        # Distances are taken against the final centroids so that the result
        # stays self-consistent even when the last update moved them.
        distances = point_distances(self.dataset.points, self.labels, self.centroids)

        if self.state is RunState.CONVERGED:
            status = RunStatus.CONVERGED
        else:
            status = RunStatus.MAX_ITERATIONS_REACHED

        self._result = ClusterResult(
            centroids=self.centroids.clone(),
            labels=self.labels.clone(),
            sse=distances.sum().item(),
            status=status,
            n_iter=self.iteration,
            distances=distances,
            seed=self.seed,
            history=list(self.history)
        )
