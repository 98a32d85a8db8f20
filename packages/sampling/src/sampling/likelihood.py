"""Bernoulli likelihood shared by the grid updater and the Metropolis sampler."""

from collections.abc import Sequence
from typing import TypeAlias

import numpy as np
import scipy.special as sp

from .data import ObservedData, as_observed_data

DataLike: TypeAlias = ObservedData | Sequence[int] | np.ndarray


class BernoulliLikelihood:
    """
    Represents the Bernoulli likelihood of a success probability theta.

    Instances can be pickled and sent to worker processes.
    """

    def __call__(self, theta: float | np.ndarray, data: DataLike) -> float | np.ndarray:
        """
        Evaluate the likelihood of theta given the observed data.

        Parameters
        ----------
        theta : float | ndarray
            Value(s) of the success probability.
        data : ObservedData | sequence of int
            Observed outcomes.

        Returns
        -------
        likelihood : float | ndarray
            The likelihood value(s). Returns a float if theta was a scalar.
        """
        likelihood = bernoulli_likelihood(theta, data)
        return float(likelihood) if likelihood.ndim == 0 else likelihood


def bernoulli_likelihood(theta_values: float | np.ndarray, data: DataLike) -> np.ndarray:
    """Evaluate theta^z (1 - theta)^(N - z) elementwise.

    Values of theta outside [0, 1] evaluate to exactly 0.
    The convention 0^0 = 1 applies at the boundaries, so theta = 0 has likelihood 1
    when there are no successes and theta = 1 has likelihood 1 when there are no failures.

    Parameters
    ----------
    theta_values : float | ndarray
        Values of the success probability.
    data : ObservedData | sequence of int
        Observed outcomes.

    Returns
    -------
    density_values : ndarray
        Likelihood at each theta, same shape as `theta_values`.
    """
    return np.exp(bernoulli_log_likelihood(theta_values, data))


def bernoulli_log_likelihood(
    theta_values: float | np.ndarray, data: DataLike
) -> np.ndarray:
    """Evaluate z log(theta) + (N - z) log(1 - theta) elementwise.

    Returns -inf wherever the likelihood is exactly 0, including outside [0, 1].
    Working in log-space avoids underflow for N in the hundreds.
    """
    data = as_observed_data(data)
    theta = np.asarray(theta_values, dtype=float)
    z = data.z
    n_failures = data.n - z

    in_support = (theta >= 0.0) & (theta <= 1.0)
    # Outside the support the log terms are undefined, so evaluate on a safe value and mask
    safe_theta = np.where(in_support, theta, 0.5)
    # xlogy(0, 0) == 0 gives the 0^0 = 1 convention
    with np.errstate(divide="ignore"):
        log_likelihood = sp.xlogy(z, safe_theta) + sp.xlog1py(n_failures, -safe_theta)
    return np.where(in_support, log_likelihood, -np.inf)
