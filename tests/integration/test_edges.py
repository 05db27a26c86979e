import numpy as np
import pytest
import torch

from kcluster import KMeans, RunStatus
from kcluster.exceptions import EmptyDataset, DimensionMismatch, InvalidClusterCount
from utils import time_block, recompute_sse
from data_gen import make_blobs

pytestmark = pytest.mark.integration


def _resolved_seed(val, default=1337) -> int:
    return int(val) if isinstance(val, (int, np.integer)) else int(default)


def _assert_consistent(result, X) -> None:
    """SSE, per-point distances and labels all describe the same partition."""
    assert np.isfinite(result.sse)
    assert result.sse == pytest.approx(recompute_sse(X, result.labels, result.centroids),
                                       rel=1e-5, abs=1e-6)
    assert int(result.cluster_sizes.sum()) == X.shape[0]
    assert 1 <= result.n_iter


def test_k_equals_n_with_duplicates(seed_all):
    """
    K = N where two points coincide: the duplicate centroids tie, the lower
    index takes both points and the other cluster stays empty. SSE is 0.
    """
    X = np.array([[0.0, 0.0], [0.0, 0.0], [1.0, 1.0], [2.0, 2.0]], dtype=np.float32)
    km = KMeans(k=4, seed=_resolved_seed(seed_all)).fit(X)

    assert km.inertia_ == 0.0
    assert km.status_ is RunStatus.CONVERGED
    assert km.labels_[0] == km.labels_[1]
    assert sorted(km.result_.cluster_sizes.tolist()) == [0, 1, 1, 2]


def test_identical_points(seed_all):
    X = np.ones((5, 3), dtype=np.float32)
    result = KMeans(k=2, seed=_resolved_seed(seed_all)).fit(X).result_
    assert result.sse == 0.0
    assert result.labels.tolist() == [0] * 5
    assert result.cluster_sizes.tolist() == [5, 0]
    assert result.status is RunStatus.CONVERGED


def test_k_one_is_global_mean(seed_all):
    seed = _resolved_seed(seed_all)
    X, _ = make_blobs([[0, 0, 0], [4, 4, 4]], n_per=50, scale=1.0, seed=seed)
    km = KMeans(k=1, seed=seed, dtype=torch.float64).fit(X)

    expected = X.astype(np.float64).mean(axis=0)
    assert np.allclose(km.cluster_centers_[0].numpy(), expected, atol=1e-12)
    assert km.n_iter_ == 2
    _assert_consistent(km.result_, X)


def test_single_point():
    km = KMeans(k=1, seed=0).fit([[3.0, -1.0]])
    assert km.cluster_centers_.tolist() == [[3.0, -1.0]]
    assert km.inertia_ == 0.0


def test_one_dimensional_input():
    km = KMeans(k=2, init=[[0.0], [10.0]]).fit([0.0, 1.0, 9.0, 10.0])
    assert km.labels_.tolist() == [0, 0, 1, 1]
    assert km.cluster_centers_.flatten().tolist() == [0.5, 9.5]
    assert km.inertia_ == pytest.approx(1.0)


def test_high_dim_low_n(seed_all, rng):
    """Few points in many dimensions: fit completes with a consistent result."""
    X = rng.normal(size=(8, 64)).astype(np.float32)
    with time_block("edges-high-dim", meta={"n": 8, "d": 64, "K": 3}):
        km = KMeans(k=3, n_starts=3, seed=_resolved_seed(seed_all)).fit(X)
    assert km.cluster_centers_.shape == (3, 64)
    _assert_consistent(km.result_, X)


def test_centroid_epsilon_mode_consistent(seed_all):
    seed = _resolved_seed(seed_all)
    X, _ = make_blobs([[0, 0], [6, 0], [3, 5]], n_per=80, scale=1.0, seed=seed)
    km = KMeans(k=3, n_starts=3, convergence_mode="centroid-epsilon", epsilon=1e-5,
                seed=seed).fit(X)
    assert km.status_ is RunStatus.CONVERGED
    assert km.result_.history[-1].max_centroid_shift < 1e-5
    _assert_consistent(km.result_, X)


def test_capped_result_is_consistent(seed_all):
    seed = _resolved_seed(seed_all)
    X, _ = make_blobs([[0, 0], [2, 0], [1, 2], [3, 3]], n_per=60, scale=1.0, seed=seed)
    km = KMeans(k=4, max_iterations=2, seed=seed).fit(X)
    assert km.n_iter_ <= 2
    _assert_consistent(km.result_, X)


def test_chunked_assignment_matches_unchunked(seed_all):
    seed = _resolved_seed(seed_all)
    X, _ = make_blobs([[0, 0], [5, 5], [0, 5]], n_per=100, seed=seed)
    a = KMeans(k=3, seed=seed, chunk_size=7).fit(X).result_
    b = KMeans(k=3, seed=seed, chunk_size=None).fit(X).result_
    assert torch.equal(a.labels, b.labels)
    assert torch.equal(a.centroids, b.centroids)


@pytest.mark.parametrize("X,error", [
    (np.empty((0, 2)), EmptyDataset),
    ([], EmptyDataset),
    ([[0.0, 1.0], [2.0]], DimensionMismatch),
    (np.empty((3, 0)), DimensionMismatch),
    ([[0.0, np.nan], [1.0, 1.0]], ValueError),
])
def test_bad_datasets(X, error):
    with pytest.raises(error):
        KMeans(k=1, seed=0).fit(X)


def test_more_clusters_than_points():
    with pytest.raises(InvalidClusterCount):
        KMeans(k=3, seed=0).fit([[0.0], [1.0]])
