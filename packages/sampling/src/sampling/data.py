"""Observed Bernoulli data."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .errors import InvalidArgument


@dataclass(frozen=True, eq=False)
class ObservedData:
    """A sequence of binary outcomes from Bernoulli trials.

    The likelihood only depends on the number of successes `z` and the number
    of trials `n`, not on the order of the outcomes.

    Parameters
    ----------
    outcomes : ndarray, shape (n,)
        Outcomes of the trials, each 0 or 1.

    Raises
    ------
    InvalidArgument
        If the outcomes are not one-dimensional or contain values other than 0 and 1.
    """

    outcomes: np.ndarray

    def __post_init__(self) -> None:
        outcomes = np.asarray(self.outcomes)
        if outcomes.size == 0:
            outcomes = outcomes.reshape(0)
        _validate_outcomes(outcomes)
        outcomes = outcomes.astype(np.int64)
        outcomes.flags.writeable = False
        object.__setattr__(self, "outcomes", outcomes)

    @classmethod
    def from_counts(cls, z: int, n: int) -> ObservedData:
        """Build data with `z` successes out of `n` trials.

        The failures come first, followed by the successes.
        """
        if n < 0 or not 0 <= z <= n:
            raise InvalidArgument(f"Need 0 <= z <= n, got z={z} and n={n}.")
        return cls(np.concatenate([np.zeros(n - z), np.ones(z)]))

    @property
    def z(self) -> int:
        """Number of successes."""
        return int(self.outcomes.sum())

    @property
    def n(self) -> int:
        """Number of trials."""
        return int(self.outcomes.size)

    def __len__(self) -> int:
        return self.n

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObservedData):
            return NotImplemented
        return np.array_equal(self.outcomes, other.outcomes)

    def __hash__(self) -> int:
        return hash(self.outcomes.tobytes())


def as_observed_data(data: ObservedData | Sequence[int] | np.ndarray) -> ObservedData:
    """Coerce a sequence of 0/1 outcomes to `ObservedData`."""
    if isinstance(data, ObservedData):
        return data
    return ObservedData(np.asarray(data))


def _validate_outcomes(outcomes: np.ndarray) -> None:
    if outcomes.ndim != 1:
        raise InvalidArgument("Observed data must be one-dimensional.")
    if not np.all((outcomes == 0) | (outcomes == 1)):
        raise InvalidArgument("Observed data must only contain 0 and 1.")
