"""Base classes, interfaces and data structures for the clustering engine."""

from .interfaces import (
    DistanceMetric,
    InitializationStrategy,
    AssignmentStrategy,
    ParameterUpdater,
    ConvergenceCriterion
)

from .data_structures import (
    Dataset,
    ClusterResult,
    IterationRecord,
    RunState,
    RunStatus
)

__all__ = [
    # Interfaces
    'DistanceMetric',
    'InitializationStrategy',
    'AssignmentStrategy',
    'ParameterUpdater',
    'ConvergenceCriterion',

    # Data structures
    'Dataset',
    'ClusterResult',
    'IterationRecord',
    'RunState',
    'RunStatus'
]
