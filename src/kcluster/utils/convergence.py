"""
Convergence criteria for k-means runs.

Two policies are available:
- No point changed cluster since the previous iteration (default)
- Every centroid moved by less than a fixed epsilon

The iteration cap is not a convergence criterion; the run controller
enforces it and reports it as a separate terminal status.
"""

from typing import Dict, Any
import torch

from ..base.interfaces import ConvergenceCriterion

ASSIGNMENT = 'assignment'
CENTROID_EPSILON = 'centroid-epsilon'
CONVERGENCE_MODES = (ASSIGNMENT, CENTROID_EPSILON)


class AssignmentUnchanged(ConvergenceCriterion):
    """Converged once an iteration leaves every point in the same cluster."""

    def __init__(self):
        super().__init__()
        self._prev_assignments = None

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if assignments are identical to the previous iteration."""
        current_assignments = current_state['assignments']

        if self._prev_assignments is None:
            self._prev_assignments = current_assignments.clone()
            self.history.append({
                'iteration': current_state.get('iteration', len(self.history)),
                'n_changed': None
            })
            return False

        n_changed = int((current_assignments != self._prev_assignments).sum().item())

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed
        })

        self._prev_assignments = current_assignments.clone()

        return n_changed == 0

    def reset(self):
        super().reset()
        self._prev_assignments = None


class CentroidShift(ConvergenceCriterion):
    """Converged once every centroid moved less than ``epsilon``.

    Useful for data with floating-point noise where assignments can flip
    back and forth between near-equidistant centroids without ever repeating
    exactly.
    """

    def __init__(self, epsilon: float = 1e-4):
        """
        Args:
            epsilon: Maximum Euclidean shift of any centroid between two
                iterations for the run to count as converged
        """
        super().__init__()
        if epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {epsilon}")
        self.epsilon = epsilon

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if centroids have stopped moving."""
        centroids = current_state['centroids']
        previous = current_state['previous_centroids']

        shifts = torch.sqrt(torch.sum((centroids - previous) ** 2, dim=1))
        max_shift = shifts.max().item()

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'max_shift': max_shift
        })

        return max_shift < self.epsilon


def make_convergence_criterion(mode: str = ASSIGNMENT,
                               epsilon: float = 1e-4) -> ConvergenceCriterion:
    """Build a fresh criterion for one run.

    Args:
        mode: 'assignment' or 'centroid-epsilon'
        epsilon: Shift threshold, used only in 'centroid-epsilon' mode

    Returns:
        New ConvergenceCriterion instance
    """
    if mode == ASSIGNMENT:
        return AssignmentUnchanged()
    elif mode == CENTROID_EPSILON:
        return CentroidShift(epsilon=epsilon)
    else:
        raise ValueError(f"Unknown convergence mode: {mode!r}, "
                         f"expected one of {CONVERGENCE_MODES}")
