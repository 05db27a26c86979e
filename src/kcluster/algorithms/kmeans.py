"""
K-means clustering algorithm.

Estimator-style facade over the multi-start selector.
"""

from typing import Optional, Union, Dict, Any
import warnings
import torch
from torch import Tensor
import numpy as np

from ..base.data_structures import Dataset, ClusterResult, RunStatus
from ..assignments.hard import HardAssignment
from ..distances.euclidean import EuclideanDistance
from ..config import KMeansConfig
from ..exceptions import ConvergenceWarning
from ..utils.device import parse_device
from ..utils.metrics import inertia
from ..utils.validation import validate_data
from .multistart import MultiStartSelector
from .run_controller import CancellationToken


class KMeans:
    """K-means clustering algorithm.

    Classic K-means that partitions data into K clusters by minimizing
    within-cluster sum of squared distances, with seeded multi-start.

    Parameters
    ----------
    config : KMeansConfig, optional
        Full configuration. Keyword options override its fields.
    **options
        KMeansConfig fields (k, max_iterations, n_starts, convergence_mode,
        epsilon, seed, init, n_jobs, chunk_size, device, dtype, verbose)

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Cluster centroids
    labels_ : Tensor of shape (n_samples,)
        Cluster assignments for training data
    inertia_ : float
        Sum of squared distances to assigned cluster centers (SSE)
    n_iter_ : int
        Number of iterations of the selected run
    status_ : RunStatus
        Whether the selected run converged or hit the iteration cap
    result_ : ClusterResult
        Full result of the selected run

    Examples
    --------
    >>> km = KMeans(k=2, n_starts=5, seed=0)
    >>> labels = km.fit_predict([[0, 0], [0, 1], [10, 0], [10, 1]])
    """

    def __init__(self, config: Optional[KMeansConfig] = None, **options):
        if config is None:
            config = KMeansConfig(**options)
        elif options:
            config = config.replace(**options)
        self.config = config
        self.device = parse_device(config.device)

        self.result_: Optional[ClusterResult] = None
        self.fitted_ = False
        self.selector_: Optional[MultiStartSelector] = None

    def _validate(self, X) -> Dataset:
        return validate_data(X, dtype=self.config.dtype, device=self.device)

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")

    def fit(self, X: Union[Dataset, Tensor, np.ndarray, list], y: Optional[Any] = None,
            cancel_token: Optional[CancellationToken] = None) -> 'KMeans':
        """Fit K-means clustering.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training data
        y : Ignored
            Not used, present for API consistency
        cancel_token : CancellationToken, optional
            Cooperative cancellation for long fits

        Returns
        -------
        self : KMeans
            Fitted estimator
        """
        config = self.config
        dataset = self._validate(X)

        self.selector_ = MultiStartSelector(
            n_clusters=config.k,
            n_starts=config.n_starts,
            max_iterations=config.max_iterations,
            init=config.init,
            convergence_mode=config.convergence_mode,
            epsilon=config.epsilon,
            chunk_size=config.chunk_size,
            n_jobs=config.n_jobs,
            verbose=config.verbose
        )
        self.result_ = self.selector_.run(dataset, random_state=config.seed,
                                          cancel_token=cancel_token)
        self.fitted_ = True

        if config.verbose and self.result_.status is RunStatus.MAX_ITERATIONS_REACHED:
            warnings.warn(f"Failed to converge after {config.max_iterations} iterations",
                          ConvergenceWarning)

        return self

    def fit_predict(self, X: Union[Dataset, Tensor, np.ndarray, list],
                    y: Optional[Any] = None) -> Tensor:
        """Fit and return labels of the training data."""
        self.fit(X, y)
        return self.labels_

    def predict(self, X: Union[Dataset, Tensor, np.ndarray, list]) -> Tensor:
        """Predict the nearest fitted centroid for each point.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            New data to predict

        Returns
        -------
        labels : Tensor of shape (n_samples,)
            Cluster labels (ties go to the lowest index)
        """
        self._check_fitted()
        dataset = self._validate(X)
        assignment = HardAssignment(chunk_size=self.config.chunk_size)
        labels, _ = assignment.compute_assignments(dataset.points, self.cluster_centers_)
        return labels

    def transform(self, X: Union[Dataset, Tensor, np.ndarray, list]) -> Tensor:
        """Euclidean distance from every point to every fitted centroid.

        Returns
        -------
        distances : Tensor of shape (n_samples, n_clusters)
        """
        self._check_fitted()
        dataset = self._validate(X)
        return EuclideanDistance(squared=False).compute(dataset.points, self.cluster_centers_)

    def score(self, X: Union[Dataset, Tensor, np.ndarray, list], y: Optional[Any] = None) -> float:
        """Opposite of the value of X on the K-means objective.

        Returns
        -------
        score : float
            Negative of sum of squared distances to nearest centers
        """
        dataset = self._validate(X)
        labels = self.predict(dataset)
        return -inertia(dataset.points, labels, self.cluster_centers_)

    @property
    def cluster_centers_(self) -> Tensor:
        self._check_fitted()
        return self.result_.centroids

    @property
    def labels_(self) -> Tensor:
        self._check_fitted()
        return self.result_.labels

    @property
    def inertia_(self) -> float:
        self._check_fitted()
        return self.result_.sse

    @property
    def n_iter_(self) -> int:
        self._check_fitted()
        return self.result_.n_iter

    @property
    def status_(self) -> RunStatus:
        self._check_fitted()
        return self.result_.status

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get configuration options as a dictionary."""
        return {name: getattr(self.config, name) for name in self.config.__dataclass_fields__}

    def set_params(self, **params) -> 'KMeans':
        """Set configuration options. Clears any fitted state."""
        self.config = self.config.replace(**params)
        self.device = parse_device(self.config.device)
        self.result_ = None
        self.fitted_ = False
        return self

    def __repr__(self) -> str:
        return (f"KMeans(k={self.config.k}, n_starts={self.config.n_starts}, "
                f"convergence_mode='{self.config.convergence_mode}')")
