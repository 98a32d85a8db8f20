"""Uniform Prior."""

import numpy as np

from ..errors import InvalidArgument


class UniformPrior:
    """Class representing a Uniform prior on a single parameter.

    Parameters
    ----------
    lower : float, optional
        Lower bound of the support. Default is 0.
    upper : float, optional
        Upper bound of the support. Default is 1.

    Raises
    ------
    InvalidArgument
        If `lower` is not less than `upper`, or either bound is not finite.
    """

    def __init__(self, lower: float = 0.0, upper: float = 1.0) -> None:
        if not (np.isfinite(lower) and np.isfinite(upper)):
            raise InvalidArgument("Bounds of the uniform prior must be finite.")
        if lower >= upper:
            raise InvalidArgument("Lower bound must be less than the upper bound.")
        self.lower = float(lower)
        self.upper = float(upper)
        self._density = 1.0 / (self.upper - self.lower)

    def __call__(self, theta: float | np.ndarray) -> float | np.ndarray:
        """Uniform prior density.

        Parameters
        ----------
        theta : float | ndarray
            Parameter value(s).

        Returns
        -------
        float or ndarray
            1 / (upper - lower) inside the bounds (inclusive), 0 outside.
        """
        theta = np.asarray(theta, dtype=float)
        in_bounds = (theta >= self.lower) & (theta <= self.upper)
        density = np.where(in_bounds, self._density, 0.0)
        return float(density) if density.ndim == 0 else density

    def sample(self, num_samples: int, rng: np.random.Generator) -> np.ndarray:
        """Sample from the Uniform prior.

        Parameters
        ----------
        num_samples : int
            Number of samples to draw.
        rng : np.random.Generator
            Random number generator.

        Returns
        -------
        samples : ndarray, shape (num_samples,)
            Samples drawn from the Uniform prior.
        """
        return rng.uniform(low=self.lower, high=self.upper, size=num_samples)

    @property
    def width(self) -> float:
        """Width of the support."""
        return self.upper - self.lower
