"""
Stopping rules for the ensemble sampler.

A Terminator inspects the chain history after every completed step and
decides whether the run is over. A run stops as soon as ANY of its
terminators returns True. The sampler refuses to run without at least one.

To add a new stopping rule, subclass Terminator and implement stop(). Set
step_budget when the rule knows an upper bound on the number of steps, so
the sampler can size its history buffer up front.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .error_handling import PreconditionError


class Terminator:
    """Base class for stopping rules."""

    # Upper bound on completed steps, or None if unknown
    step_budget: Optional[int] = None

    def stop(self, history: np.ndarray) -> bool:
        """
        Args:
            history: Read-only step history (n_steps, n_walkers, n_params).
                     Row 0 is the initial walker positions.

        Returns:
            True if sampling should end now
        """
        raise NotImplementedError


@dataclass(frozen=True)
class StepsTerminator(Terminator):
    """Stop once n steps have been completed (history holds n + 1 rows)."""
    n: int

    def __post_init__(self):
        if self.n < 0:
            raise PreconditionError(f"StepsTerminator needs n >= 0, got {self.n}")

    @property
    def step_budget(self) -> int:
        return self.n

    def stop(self, history: np.ndarray) -> bool:
        return len(history) > self.n


def steps(n: int) -> StepsTerminator:
    """Terminator that fires after n completed steps."""
    return StepsTerminator(int(n))


def should_stop(terminators: Sequence[Terminator], history: np.ndarray) -> bool:
    """True if any terminator fires for this history."""
    return any(t.stop(history) for t in terminators)


def step_budget(terminators: Sequence[Terminator]) -> Optional[int]:
    """Smallest known step budget across terminators, or None."""
    budgets = [t.step_budget for t in terminators if t.step_budget is not None]
    return min(budgets) if budgets else None
