"""Common Prior Protocols."""

from typing import Protocol

import numpy as np


class DensityFunction(Protocol):
    """Protocol for prior density functions.

    Densities must evaluate to exactly 0 outside their support so that the
    Metropolis acceptance rule rejects every proposal that leaves it.
    """

    def __call__(self, theta: float | np.ndarray) -> float | np.ndarray:
        """Calculate the prior density at theta.

        Parameters
        ----------
        theta : float | ndarray
            Parameter value(s).

        Returns
        -------
        density : float | ndarray
            Prior density value(s). Returns a float for scalar input.
        """

    def sample(self, num_samples: int, rng: np.random.Generator) -> np.ndarray:
        """Sample from the prior.

        Parameters
        ----------
        num_samples : int
            Number of samples to draw.
        rng : np.random.Generator
            Random number generator.

        Returns
        -------
        samples : ndarray, shape (num_samples,)
            Samples drawn from the prior.
        """
