"""Discretised Bayes' rule for a Bernoulli likelihood on a grid of parameter values."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
import scipy.special as sp
from numpy.typing import NDArray
from sampling.data import ObservedData, as_observed_data
from sampling.errors import DegeneratePosterior, InvalidArgument
from sampling.likelihood import bernoulli_log_likelihood

from .hdi import GridHDI, hdi_of_grid

NDArrayFloat: TypeAlias = NDArray[np.float64]

_ARRAY_FIELDS = ("grid", "prior", "likelihood", "posterior")


@dataclass(frozen=True, eq=False)
class PosteriorResult:
    """Posterior mass on a grid of parameter values.

    All arrays are aligned with `grid` and read-only.

    Parameters
    ----------
    grid : ndarray, shape (n,)
        Parameter values.
    prior : ndarray, shape (n,)
        Prior mass, normalised to sum to 1.
    likelihood : ndarray, shape (n,)
        Likelihood of the data at each grid value.
    posterior : ndarray, shape (n,)
        Posterior mass, sums to 1.
    evidence : float
        Marginal likelihood sum(prior * likelihood). May underflow to 0 for large
        datasets even though the posterior is well defined; use `log_evidence` then.
    log_evidence : float
        Natural log of the evidence.
    """

    grid: NDArrayFloat
    prior: NDArrayFloat
    likelihood: NDArrayFloat
    posterior: NDArrayFloat
    evidence: float
    log_evidence: float

    def __post_init__(self) -> None:
        for name in _ARRAY_FIELDS:
            values = np.array(getattr(self, name), dtype=float)
            values.flags.writeable = False
            object.__setattr__(self, name, values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PosteriorResult):
            return NotImplemented
        return (
            all(np.array_equal(getattr(self, name), getattr(other, name)) for name in _ARRAY_FIELDS)
            and self.evidence == other.evidence
            and self.log_evidence == other.log_evidence
        )

    def __hash__(self) -> int:
        return hash(
            tuple(getattr(self, name).tobytes() for name in _ARRAY_FIELDS)
            + (self.evidence, self.log_evidence)
        )

    @property
    def mean(self) -> float:
        """Posterior mean of the parameter."""
        return float(np.sum(self.grid * self.posterior))

    @property
    def mode(self) -> float:
        """Grid value holding the most posterior mass."""
        return float(self.grid[np.argmax(self.posterior)])

    def hdi(self, cred_mass: float = 0.95) -> GridHDI:
        """Highest density region of the posterior mass."""
        return hdi_of_grid(self.posterior, cred_mass)

    def hdi_limits(self, cred_mass: float = 0.95) -> tuple[float, float]:
        """Smallest and largest grid values inside the highest density region.

        For a multimodal posterior the region may have gaps between these limits.
        """
        indices = self.hdi(cred_mass).indices
        return float(self.grid[indices[0]]), float(self.grid[indices[-1]])


def compute_posterior(
    grid: NDArrayFloat | Sequence[float],
    prior_mass: NDArrayFloat | Sequence[float],
    data: ObservedData | Sequence[int] | np.ndarray,
) -> PosteriorResult:
    """Compute the posterior over a grid of parameter values given Bernoulli data.

    The prior mass is normalised by its sum first, then multiplied by the likelihood
    theta^z (1 - theta)^(N - z) and renormalised by the evidence. Products are formed
    in log-space so that grids with many points and datasets with hundreds of trials
    do not underflow.

    Parameters
    ----------
    grid : ndarray, shape (n,)
        Strictly increasing parameter values, n >= 1.
    prior_mass : ndarray, shape (n,)
        Nonnegative prior weights aligned with `grid`. Need not be normalised,
        but must have a positive sum.
    data : ObservedData | sequence of int
        Observed 0/1 outcomes. May be empty, in which case the posterior is the normalised prior.

    Returns
    -------
    result : PosteriorResult
        Normalised posterior and evidence.

    Raises
    ------
    InvalidArgument
        If the grid or prior mass are malformed, or the data are not binary.
    DegeneratePosterior
        If the evidence is zero, i.e. the likelihood vanishes wherever the prior has mass.
    """
    grid = _validate_grid(grid)
    prior_mass = _validate_prior_mass(prior_mass, grid.size)
    data = as_observed_data(data)

    # Scale by the largest weight first so the sum cannot overflow
    scaled = prior_mass / prior_mass.max()
    p_theta = scaled / scaled.sum()
    log_likelihood = bernoulli_log_likelihood(grid, data)
    with np.errstate(divide="ignore"):
        log_products = np.log(p_theta) + log_likelihood

    if np.all(np.isneginf(log_products)):
        raise DegeneratePosterior(
            f"Evidence is zero for z={data.z}, N={data.n}: the likelihood vanishes wherever the prior has mass."
        )

    log_evidence = float(sp.logsumexp(log_products))
    return PosteriorResult(
        grid=grid,
        prior=p_theta,
        likelihood=np.exp(log_likelihood),
        posterior=np.exp(log_products - log_evidence),
        evidence=float(np.exp(log_evidence)),
        log_evidence=log_evidence,
    )


def _validate_grid(grid: NDArrayFloat | Sequence[float]) -> NDArrayFloat:
    """
    Validate a grid of parameter values.

    Raises
    ------
    InvalidArgument
        If the grid is not a non-empty one-dimensional array of finite, strictly increasing values.
    """
    grid = np.asarray(grid, dtype=float)
    if grid.ndim != 1:
        raise InvalidArgument("Grid must be one-dimensional.")
    if grid.size == 0:
        raise InvalidArgument("Grid must contain at least one value.")
    if not np.all(np.isfinite(grid)):
        raise InvalidArgument("Grid values must be finite.")
    if np.any(np.diff(grid) <= 0):
        raise InvalidArgument("Grid values must be strictly increasing.")
    return grid


def _validate_prior_mass(
    prior_mass: NDArrayFloat | Sequence[float], n: int
) -> NDArrayFloat:
    """
    Validate prior weights against a grid of length `n`.

    Raises
    ------
    InvalidArgument
        If the prior mass has the wrong shape, negative or non-finite entries, or sums to zero.
    """
    prior_mass = np.asarray(prior_mass, dtype=float)
    if prior_mass.shape != (n,):
        raise InvalidArgument(
            f"Prior mass must have the same length as the grid ({n}), got shape {prior_mass.shape}."
        )
    if not np.all(np.isfinite(prior_mass)):
        raise InvalidArgument("Prior mass must be finite.")
    if np.any(prior_mass < 0):
        raise InvalidArgument("Prior mass must be nonnegative.")
    if prior_mass.sum() <= 0:
        raise InvalidArgument("Prior mass must have a positive sum.")
    return prior_mass
