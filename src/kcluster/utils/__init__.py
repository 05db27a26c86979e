"""Utility functions for the clustering engine."""

from .convergence import (
    AssignmentUnchanged,
    CentroidShift,
    make_convergence_criterion,
    CONVERGENCE_MODES
)

from .metrics import (
    point_distances,
    inertia
)

from .validation import (
    validate_data,
    check_n_clusters,
    check_centers,
    check_random_state,
    derive_seeds
)

from .device import (
    get_default_device,
    parse_device
)

__all__ = [
    # Convergence criteria
    'AssignmentUnchanged',
    'CentroidShift',
    'make_convergence_criterion',
    'CONVERGENCE_MODES',

    # Metrics
    'point_distances',
    'inertia',

    # Validation
    'validate_data',
    'check_n_clusters',
    'check_centers',
    'check_random_state',
    'derive_seeds',

    # Device management
    'get_default_device',
    'parse_device'
]
