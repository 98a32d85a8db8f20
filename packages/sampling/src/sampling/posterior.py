"""Unnormalised target density for Metropolis sampling."""

from collections.abc import Callable
from typing import Any

import numpy as np


class TargetSpecification:
    """
    Represents the unnormalised posterior targeted by the Metropolis sampler.

    The target combines a likelihood function and a prior density to evaluate
    likelihood(theta, data) * prior(theta). Both must return exactly 0 outside
    the valid support of theta.
    """

    def __init__(
        self,
        likelihood_fn: Callable[[Any, Any], float | np.ndarray],
        prior_fn: Callable[[Any], float | np.ndarray],
    ) -> None:
        """
        Initialize the TargetSpecification.

        Parameters
        ----------
        likelihood_fn : Callable[[float, data], float]
            Likelihood function that takes a parameter value and the observed data
            and returns a nonnegative density.
        prior_fn : Callable[[float], float]
            Prior function that takes a parameter value and returns a nonnegative density.
        """
        self.likelihood_fn = likelihood_fn
        self.prior_fn = prior_fn

    def relative_probability(self, theta: float | np.ndarray, data: Any) -> float | np.ndarray:
        """
        Evaluate the unnormalised target density.

        Parameters
        ----------
        theta : float | ndarray
            Parameter value(s) at which to evaluate the target.
        data : Any
            Observed data passed through to the likelihood.

        Returns
        -------
        relative_probability : float | ndarray
            likelihood(theta, data) * prior(theta).
        """
        prior = self.prior_fn(theta)
        # Skip the likelihood outside the prior's support
        if np.ndim(prior) == 0 and prior == 0:
            return 0.0
        return self.likelihood_fn(theta, data) * prior

    __call__ = relative_probability
