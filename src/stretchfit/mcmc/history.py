"""
Chain history storage and burn-in/thinning extraction.

The history is a host-side (n_steps, n_walkers, n_params) float64 buffer.
Row 0 holds the initial walker positions and every completed step appends
exactly one row. The buffer is preallocated when the step budget is known and
grows geometrically otherwise. Callers only ever see read-only views.
"""

from typing import Optional

import numpy as np

from ..error_handling import DegenerateChainError, PreconditionError


# Initial capacity when no step budget is known
_MIN_CAPACITY = 1024


class ChainHistory:
    """Append-only record of every walker position at every step."""

    def __init__(self, num_walkers: int, num_params: int, capacity: Optional[int] = None):
        capacity = max(1, capacity if capacity is not None else _MIN_CAPACITY)
        self._buffer = np.empty((capacity, num_walkers, num_params), dtype=np.float64)
        self._n_steps = 0

    def __len__(self) -> int:
        return self._n_steps

    @property
    def num_walkers(self) -> int:
        return self._buffer.shape[1]

    @property
    def num_params(self) -> int:
        return self._buffer.shape[2]

    def append(self, positions) -> None:
        """Record the positions of all walkers after one step."""
        if self._n_steps == self._buffer.shape[0]:
            grown = np.empty((2 * self._buffer.shape[0],) + self._buffer.shape[1:],
                             dtype=np.float64)
            grown[:self._n_steps] = self._buffer[:self._n_steps]
            self._buffer = grown
        self._buffer[self._n_steps] = np.asarray(positions, dtype=np.float64)
        self._n_steps += 1

    def view(self) -> np.ndarray:
        """Read-only view of the recorded steps."""
        out = self._buffer[:self._n_steps]
        out.flags.writeable = False
        return out

    def group(self, group: int) -> np.ndarray:
        """Read-only view of one walker group (n_steps, walkers_per_group, n_params)."""
        if group not in (0, 1):
            raise PreconditionError(f"group must be 0 or 1, got {group}")
        half = self.num_walkers // 2
        return self.view()[:, group * half:(group + 1) * half, :]


def apply_burnin_and_thin(group_history: np.ndarray, burn_in: int, skip: int) -> np.ndarray:
    """
    Drop the first burn_in steps, keep every skip-th step after that and
    flatten walkers into samples.

    Args:
        group_history: One walker group (n_steps, n_walkers, n_params)
        burn_in: Number of leading steps to discard
        skip: Thinning interval (>= 1)

    Returns:
        samples: (n_params, n_samples), ordered by step and then by walker

    Raises:
        DegenerateChainError: If no step survives burn-in
    """
    if skip < 1:
        raise PreconditionError(f"skip must be >= 1, got {skip}")

    n_steps, n_walkers, n_params = group_history.shape
    kept = group_history[burn_in::skip]
    if kept.shape[0] == 0:
        raise DegenerateChainError(
            f"No samples left after burn-in: chain has {n_steps} steps but burn-in is "
            f"{burn_in} (skip={skip}). Run more steps."
        )

    return kept.reshape(-1, n_params).T.copy()
