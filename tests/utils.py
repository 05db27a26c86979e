# tests/utils.py
"""
Small, reusable helpers used across the kcluster test suite.

Functions:
- to_numpy(x): convert a tensor or array-like to a numpy array.
- labels_equal_up_to_perm(y1, y2, K): True if two labelings differ only by cluster renaming.
- perm_invariant_accuracy(y_pred, split_index): best accuracy over label swap for 2-way splits.
- centers_match(A, B, atol): True if two center sets agree up to row order.
- recompute_sse(X, labels, centers): brute-force SSE in float64.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import itertools
import json
import time
from contextlib import contextmanager
from typing import Any, Dict

import numpy as np
import torch


def to_numpy(x: Any) -> np.ndarray:
    if isinstance(x, torch.Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def labels_equal_up_to_perm(y1: Any, y2: Any, K: int) -> bool:
    """Return True if y2 can be relabelled to equal y1 exactly."""
    y1 = to_numpy(y1)
    y2 = to_numpy(y2)
    if y1.shape != y2.shape:
        return False
    for perm in itertools.permutations(range(K)):
        mapping = np.array(perm)
        if np.array_equal(y1, mapping[y2]):
            return True
    return False


def perm_invariant_accuracy(y_pred: Any, split_index: int) -> float:
    """
    Best accuracy over label swaps for 2-way synthetic datasets where the
    first `split_index` points belong to class 0 and the rest to class 1.
    """
    y_pred = to_numpy(y_pred)
    if y_pred.ndim != 1:
        raise ValueError(f"y_pred must be 1D, got shape {y_pred.shape}")
    n = y_pred.size
    if not (0 <= split_index <= n):
        raise ValueError(f"split_index must be in [0, {n}], got {split_index}")

    first = y_pred[:split_index]
    second = y_pred[split_index:]

    acc_a = (np.sum(first == 0) + np.sum(second == 1)) / max(1, n)
    acc_b = (np.sum(first == 1) + np.sum(second == 0)) / max(1, n)

    return float(max(acc_a, acc_b))


def centers_match(A: Any, B: Any, atol: float = 1e-6) -> bool:
    """True if the rows of A equal a permutation of the rows of B within atol."""
    A = to_numpy(A).astype(np.float64)
    B = to_numpy(B).astype(np.float64)
    if A.shape != B.shape:
        return False
    for perm in itertools.permutations(range(A.shape[0])):
        if np.allclose(A, B[list(perm)], atol=atol):
            return True
    return False


def recompute_sse(X: Any, labels: Any, centers: Any) -> float:
    """Brute-force sum of squared distances to assigned centers, in float64."""
    X = to_numpy(X).astype(np.float64)
    labels = to_numpy(labels)
    centers = to_numpy(centers).astype(np.float64)
    total = 0.0
    for i in range(X.shape[0]):
        diff = X[i] - centers[labels[i]]
        total += float(np.dot(diff, diff))
    return total


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Example
    -------
    >>> with time_block("fit", {"n": 400, "d": 3, "K": 2}):
    ...     model.fit(X)

    Output
    ------
    [timing] fit {"n":400,"d":3,"K":2} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"), default=str)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
