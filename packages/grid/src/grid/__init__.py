"""Grid approximation of the posterior of a single parameter."""

from .hdi import GridHDI, hdi_of_grid
from .priors import beta_prior_mass, triangular_prior_mass, uniform_prior_mass
from .updater import PosteriorResult, compute_posterior

__all__ = [
    "GridHDI",
    "PosteriorResult",
    "beta_prior_mass",
    "compute_posterior",
    "hdi_of_grid",
    "triangular_prior_mass",
    "uniform_prior_mass",
]
