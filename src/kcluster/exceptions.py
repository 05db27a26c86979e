"""
Exceptions and warnings raised by the clustering engine.

Structural errors subclass ValueError so callers that already guard
against bad input with ``except ValueError`` keep working.
"""


class ClusteringError(ValueError):
    """Base class for caller-contract violations detected before a run starts."""


class InvalidClusterCount(ClusteringError):
    """Requested number of clusters is outside [1, n_samples]."""


class DimensionMismatch(ClusteringError):
    """Points (or a point and a centroid) do not share a dimensionality."""


class EmptyDataset(ClusteringError):
    """Dataset contains no points."""


class RunCancelled(RuntimeError):
    """A run was cancelled between iterations; no result was produced."""


class ConvergenceWarning(UserWarning):
    """The selected run stopped at the iteration cap instead of converging."""
