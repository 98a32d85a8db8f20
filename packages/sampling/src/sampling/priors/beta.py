"""Beta Prior."""

import numpy as np
from scipy.stats import beta

from ..errors import InvalidArgument


class BetaPrior:
    """Class representing a Beta(a, b) prior on a probability.

    The density is exactly 0 outside [0, 1].

    Parameters
    ----------
    a : float
        First shape parameter, must be positive.
    b : float
        Second shape parameter, must be positive.

    Raises
    ------
    InvalidArgument
        If either shape parameter is not positive.
    """

    def __init__(self, a: float = 1.0, b: float = 1.0) -> None:
        if a <= 0 or b <= 0:
            raise InvalidArgument("Beta shape parameters must be positive.")
        self.a = float(a)
        self.b = float(b)
        self._dist = beta(self.a, self.b)

    def __call__(self, theta: float | np.ndarray) -> float | np.ndarray:
        """Beta prior density."""
        density = np.asarray(self._dist.pdf(theta))
        return float(density) if density.ndim == 0 else density

    def sample(self, num_samples: int, rng: np.random.Generator) -> np.ndarray:
        """Sample from the Beta prior."""
        return self._dist.rvs(size=num_samples, random_state=rng)

    @property
    def mean(self) -> float:
        """Mean of the Beta prior."""
        return self.a / (self.a + self.b)

    def updated(self, z: int, n: int) -> "BetaPrior":
        """Conjugate posterior after observing `z` successes in `n` Bernoulli trials."""
        return BetaPrior(self.a + z, self.b + n - z)
